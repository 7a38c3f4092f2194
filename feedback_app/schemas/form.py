from datetime import datetime
from typing import Dict, List, Literal, Optional, Union

from pydantic import BaseModel, Field

class Question(BaseModel):
    questionText: str
    type: Literal["text", "multiple-choice"]
    options: List[str] = Field(default_factory=list)

class Answer(BaseModel):
    questionIndex: int
    answer: str

class ResponseOut(BaseModel):
    answers: List[Answer]
    submittedAt: Optional[datetime] = None

class FormOut(BaseModel):
    """A form as seen by its owner, without the response list"""
    id: str
    publicId: str
    title: str
    questions: List[Question]
    createdBy: str
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None
    responseCount: int = 0

class PublicFormOut(BaseModel):
    """The shareable view of a form; ``id`` is the public identifier"""
    id: str
    title: str
    questions: List[Question]
    responseCount: int

class MultipleChoiceStats(BaseModel):
    questionText: str
    type: Literal["multiple-choice"]
    options: List[str]
    counts: Dict[str, int]

class TextStats(BaseModel):
    questionText: str
    type: Literal["text"]
    responseCount: int

class FormSummary(BaseModel):
    id: str
    title: str
    questions: List[Question]
    responseCount: int
    questionStats: List[Union[MultipleChoiceStats, TextStats]]

class TopForm(BaseModel):
    publicId: str
    title: str
    questionCount: int
    responseCount: int

class OwnerAnalytics(BaseModel):
    totalForms: int
    totalResponses: int
    totalQuestions: int
    averageResponses: float
    thisMonthResponses: int
    thisWeekResponses: int
    topForms: List[TopForm]
