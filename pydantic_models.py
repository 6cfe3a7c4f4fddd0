from enum import Enum
from typing import Dict, List, Optional, Tuple

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


class Severity(str, Enum):
    MILD = "mild"
    MODERATE = "moderate"
    SERIOUS = "serious"
    EMERGENCY = "emergency"


class SymptomAdvice(BaseModel):
    """Advice record returned to the quiz, chat and results views."""
    model_config = ConfigDict(frozen=True, alias_generator=to_camel, populate_by_name=True)

    severity: Severity
    recommendations: Tuple[str, ...] = Field(min_length=1)
    explanation: str
    doctor_reasons: Tuple[str, ...] = Field(min_length=1)
    follow_up_questions: Optional[Tuple[str, ...]] = None
    safety_notes: Optional[str] = None

    def to_json(self) -> dict:
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


class SymptomAdviceRequest(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    symptom_description: Optional[str] = None
    image_data: Optional[str] = None

    @property
    def has_image(self) -> bool:
        return bool(self.image_data)


class AuthRequest(BaseModel):
    action: str
    username: str = ""
    password: str = ""


class QuizQuestion(BaseModel):
    id: str
    question: str
    options: List[str] = Field(min_length=1)
    category: str = "detail"


class NextQuestionsRequest(BaseModel):
    answers: Dict[str, str] = {}


class NextQuestionsResponse(BaseModel):
    questions: List[QuizQuestion]
