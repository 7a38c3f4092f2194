from sqlalchemy import Column, String, DateTime
from sqlalchemy.orm import relationship

from feedback_app.db.base import Base
from feedback_app.utils.helpers import generate_object_id, get_utc_now

class User(Base):
    __tablename__ = "users"
    id = Column(String(24), primary_key=True, default=generate_object_id)
    name = Column(String, nullable=False)
    email = Column(String, nullable=False, unique=True, index=True)
    hashed_password = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=get_utc_now)

    forms = relationship("Form", back_populates="creator", cascade="all, delete-orphan")
