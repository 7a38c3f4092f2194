from sqlalchemy.engine import Engine

from feedback_app.db.base import Base
# Imported for their side effect of registering tables on Base.metadata
from feedback_app.models import form, form_response, user  # noqa: F401

def init_db(bind: Engine) -> None:
    """Create the users, forms and form_responses tables if they don't exist"""
    Base.metadata.create_all(bind=bind)
