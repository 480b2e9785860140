"""Pydantic models for provider configuration and structured LLM outputs."""

from enum import Enum
from typing import List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class AIProvider(str, Enum):
    OPENAI = "openai"
    GEMINI = "gemini"
    ANTHROPIC = "anthropic"


DEFAULT_MODELS = {
    AIProvider.OPENAI: "gpt-4o-mini",
    AIProvider.GEMINI: "gemini-2.0-flash-exp",
    AIProvider.ANTHROPIC: "claude-3-5-sonnet-latest",
}


class AIProviderConfig(BaseModel):
    """Active provider selection. Only valid with a non-empty key."""

    model_config = ConfigDict(frozen=True)

    provider: AIProvider
    api_key: str = Field(..., min_length=1)
    model: str

    @field_validator("api_key")
    @classmethod
    def _strip_key(cls, value: str) -> str:
        value = value.strip()
        if not value:
            raise ValueError("api_key must not be blank")
        return value


class ProviderStatus(BaseModel):
    """Settings view of one provider; never exposes the full key."""

    provider: AIProvider
    configured: bool
    masked_key: Optional[str] = None
    model: str
    selected: bool = False


class _LLMOutput(BaseModel):
    model_config = ConfigDict(extra="ignore", populate_by_name=True)


class SummaryResult(_LLMOutput):
    summary: str
    key_points: List[str] = Field(default_factory=list, alias="keyPoints")


class MindMapBranch(_LLMOutput):
    title: str
    points: List[str] = Field(default_factory=list)
    note: Optional[str] = None


class MindMap(_LLMOutput):
    topic: str
    branches: List[MindMapBranch] = Field(default_factory=list)


class DifficultConcept(_LLMOutput):
    concept: str
    explanation: str
    level: Literal["easy", "medium", "hard"] = "medium"


class TimeEstimate(_LLMOutput):
    study_time: Optional[str] = Field(None, alias="studyTime")
    review_time: Optional[str] = Field(None, alias="reviewTime")
    practice_time: Optional[str] = Field(None, alias="practiceTime")


class PracticeQuestion(_LLMOutput):
    question: str
    type: Literal["multiple-choice", "essay", "short-answer"] = "short-answer"
    difficulty: Literal["easy", "medium", "hard"] = "medium"


class GlossaryTerm(_LLMOutput):
    term: str
    definition: str
    importance: Literal["high", "medium", "low"] = "medium"


class CommonMistake(_LLMOutput):
    mistake: str
    correction: str
    tip: Optional[str] = None


class DocumentAnalysis(_LLMOutput):
    """Full study analysis of a document."""

    main_summary: str = Field(..., alias="mainSummary")
    key_points: List[str] = Field(default_factory=list, alias="keyPoints")
    mind_map: Optional[MindMap] = Field(None, alias="mindMap")
    study_tips: List[str] = Field(default_factory=list, alias="studyTips")
    exam_preparation: List[str] = Field(default_factory=list, alias="examPreparation")
    difficult_concepts: List[DifficultConcept] = Field(default_factory=list, alias="difficultyConcepts")
    time_estimate: Optional[TimeEstimate] = Field(None, alias="timeEstimate")
    related_topics: List[str] = Field(default_factory=list, alias="relatedTopics")
    practice_questions: List[PracticeQuestion] = Field(default_factory=list, alias="practiceQuestions")
    key_terms_glossary: List[GlossaryTerm] = Field(default_factory=list, alias="keyTermsGlossary")
    learning_objectives: List[str] = Field(default_factory=list, alias="learningObjectives")
    common_mistakes: List[CommonMistake] = Field(default_factory=list, alias="commonMistakes")
