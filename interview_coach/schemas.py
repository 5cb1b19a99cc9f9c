from datetime import datetime
from enum import Enum
from typing import List, Dict, Optional, Any
from pydantic import BaseModel, Field, field_validator, model_validator


class QuestionType(str, Enum):
    BEHAVIORAL = "behavioral"
    TECHNICAL = "technical"
    CODING = "coding"


class QuestionCategory(BaseModel):
    name: str = Field(..., min_length=1, description="Category name, e.g. 'coding'")
    weight: int = Field(..., ge=1, le=10, description="Relative sampling weight")
    questions: List[str] = Field(default_factory=list)


class JobProfile(BaseModel):
    categories: List[QuestionCategory]
    technical_topics: List[str] = Field(default_factory=list)
    coding_challenges: List[str] = Field(default_factory=list)

    @field_validator('categories')
    @classmethod
    def unique_category_names(cls, categories: List[QuestionCategory]) -> List[QuestionCategory]:
        names = [c.name for c in categories]
        if len(names) != len(set(names)):
            raise ValueError(f"Duplicate category names in profile: {names}")
        return categories

    def category_names(self) -> List[str]:
        return [c.name for c in self.categories]


class GeneratedQuestionSet(BaseModel):
    questions: List[str] = Field(default_factory=list)
    types: List[str] = Field(default_factory=list)

    @model_validator(mode='after')
    def parallel_lengths(self):
        if len(self.questions) != len(self.types):
            raise ValueError("questions and types must have the same length")
        return self

    def __len__(self) -> int:
        return len(self.questions)


class AnswerMetrics(BaseModel):
    word_count: int = Field(0, ge=0)
    sentence_count: int = Field(0, ge=0)
    avg_sentence_length: float = Field(0.0, ge=0)
    clarity: int = Field(0, ge=0, le=100)
    relevance: int = Field(0, ge=0, le=100)
    structure: int = Field(0, ge=0, le=100)
    depth: int = Field(0, ge=0, le=100)


class AnswerAnalysis(BaseModel):
    question: str
    type: str
    metrics: AnswerMetrics
    strengths: List[str] = Field(default_factory=list)
    improvements: List[str] = Field(default_factory=list)
    keywords: List[str] = Field(default_factory=list, max_length=5)
    coding_language: Optional[str] = None


class PersonalityTrait(BaseModel):
    name: str
    score: int = Field(..., ge=0, le=100)
    description: str
    strengths: List[str]
    improvements: List[str]


class PersonalityProfile(BaseModel):
    dominant_traits: List[str]
    traits: List[PersonalityTrait]
    summary: str
    interview_tips: List[str]


class CompiledResults(BaseModel):
    overall_score: int = Field(0, ge=0, le=100)
    metrics: Dict[str, int] = Field(default_factory=dict)
    personality: PersonalityProfile
    detailed_analysis: List[AnswerAnalysis] = Field(default_factory=list)


class SessionAnswers(BaseModel):
    """What a finished session hands to scoring, index-aligned with its questions."""
    questions: List[str]
    types: List[str]
    answers: List[str]
    code_answers: List[str]
    coding_languages: List[str]
    notes: List[str]


class SessionConfig(BaseModel):
    user_id: str
    role: str
    industry: Optional[str] = None
    difficulty: int = Field(3, ge=1, le=5)
    question_count: int = Field(5, ge=1)
    categories: List[str] = Field(default_factory=lambda: ["behavioral", "technical", "coding"])
    language: str = "en"
    status: str = "created"
    created_at: str = Field(default_factory=lambda: datetime.now().isoformat())


class InterviewResult(BaseModel):
    user_id: str
    session_id: Optional[str] = None
    role: Optional[str] = None
    questions: List[str]
    types: List[str]
    answers: List[str]
    code_answers: List[str] = Field(default_factory=list)
    coding_languages: List[str] = Field(default_factory=list)
    notes: List[str] = Field(default_factory=list)
    overall_score: int = Field(0, ge=0, le=100)
    metrics: Dict[str, int] = Field(default_factory=dict)
    personality_traits: List[str] = Field(default_factory=list)
    detailed_analysis: List[AnswerAnalysis] = Field(default_factory=list)
    completed_at: str = Field(default_factory=lambda: datetime.now().isoformat())
    email_sent: bool = False


class UserProfile(BaseModel):
    user_id: str
    email: str
    full_name: str = ""
    email_notifications: bool = True


class ScheduledInterview(BaseModel):
    user_id: str
    title: str
    scheduled_at: str
    duration_minutes: int = Field(30, ge=1)
    reminder_sent: bool = False


class EmailMessage(BaseModel):
    to: str
    subject: str
    body: str
    attachments: List[Any] = Field(default_factory=list)
