from sqlalchemy import Column, String, DateTime, ForeignKey, JSON
from sqlalchemy.orm import relationship

from feedback_app.db.base import Base
from feedback_app.utils.helpers import generate_object_id, generate_public_id, get_utc_now

QUESTION_TYPES = ("text", "multiple-choice")
MIN_QUESTIONS = 3
MAX_QUESTIONS = 5

class Form(Base):
    __tablename__ = "forms"
    id = Column(String(24), primary_key=True, default=generate_object_id)
    public_id = Column(String(36), nullable=False, unique=True, index=True, default=generate_public_id)
    title = Column(String, nullable=False)
    # List of {"questionText", "type", "options"}; position is the question index
    questions = Column(JSON, nullable=False)
    created_by = Column(String(24), ForeignKey("users.id"), nullable=False, index=True)
    created_at = Column(DateTime(timezone=True), default=get_utc_now)
    updated_at = Column(DateTime(timezone=True), default=get_utc_now, onupdate=get_utc_now)

    creator = relationship("User", back_populates="forms")
    responses = relationship(
        "FormResponse",
        back_populates="form",
        order_by="FormResponse.id",
        cascade="all, delete-orphan",
    )
