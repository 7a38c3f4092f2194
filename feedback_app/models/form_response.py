from sqlalchemy import Column, Integer, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from feedback_app.db.base import Base
from feedback_app.utils.helpers import get_utc_now

class FormResponse(Base):
    __tablename__ = "form_responses"

    # Autoincrement id gives the submission order
    id = Column(Integer, primary_key=True, autoincrement=True)
    form_id = Column(String(24), ForeignKey("forms.id"), nullable=False, index=True)
    answers = Column(JSON, nullable=False)  # list of {"questionIndex", "answer"}
    submitted_at = Column(DateTime(timezone=True), default=get_utc_now)

    form = relationship("Form", back_populates="responses")
