import re
from enum import Enum
from typing import Dict, List, Optional

from pydantic import BaseModel, Field, validator


class Severity(str, Enum):
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"


class RiskBand(str, Enum):
    LOW = "low"
    MODERATE = "moderate"
    HIGH = "high"


class Demographics(BaseModel):
    age: Optional[int] = Field(None, ge=0, le=120)
    gender: Optional[str] = Field(None, description="Male/Female/Other/Prefer not to say")
    medical_history: List[str] = []


class ConditionRule(BaseModel):
    condition_name: str
    base_probability: float = Field(..., ge=0.0, le=1.0)
    severity: Severity

    @validator("condition_name")
    def validate_condition_name(cls, v: str):
        v = v.strip()
        if not v:
            raise ValueError("condition_name must not be empty")
        return v


class ConditionInfo(BaseModel):
    description: Optional[str] = None
    recommendations: List[str] = []


class SymptomPattern(BaseModel):
    """A natural-language phrasing that implies a symptom, e.g. "my head hurts"."""

    pattern: str
    symptom: str

    @validator("pattern")
    def validate_pattern(cls, v: str):
        try:
            re.compile(v)
        except re.error as e:
            raise ValueError(f"invalid regular expression {v!r}: {e}")
        return v

    @validator("symptom")
    def validate_symptom(cls, v: str):
        return v.strip().lower()


class QuestionOption(BaseModel):
    value: str
    label: str
    score: int = Field(..., ge=0)


class QuestionnaireItem(BaseModel):
    id: str
    prompt: str
    category: str
    input_type: str = Field("radio", description="radio/select")
    options: List[QuestionOption]

    @validator("category")
    def validate_category(cls, v: str):
        return v.strip().lower()

    @validator("input_type")
    def validate_input_type(cls, v: str):
        if v not in {"radio", "select"}:
            raise ValueError("input_type must be 'radio' or 'select'")
        return v

    @validator("options")
    def validate_options(cls, v: List[QuestionOption]):
        if not v:
            raise ValueError("a question needs at least one option")
        values = [opt.value for opt in v]
        if len(values) != len(set(values)):
            raise ValueError("option values must be unique within a question")
        return v

    @property
    def max_score(self) -> int:
        return max(opt.score for opt in self.options)

    def option_for(self, value: str) -> Optional[QuestionOption]:
        for opt in self.options:
            if opt.value == value:
                return opt
        return None


class BodyArea(BaseModel):
    id: str
    name: str
    symptoms: List[str] = []

    @validator("symptoms")
    def validate_symptoms(cls, v: List[str]):
        return [s.strip().lower() for s in v]


class KnowledgeBase(BaseModel):
    """Static tables consulted by the extractor and both engines.

    Loaded once from configuration data and never mutated afterwards, so a single
    instance can be shared by any number of concurrent callers.
    """

    version: str = "1"
    symptom_conditions: Dict[str, List[ConditionRule]]
    conditions: Dict[str, ConditionInfo] = {}
    default_recommendations: List[str]
    default_description: str
    vocabulary: List[str]
    patterns: List[SymptomPattern] = []
    common_symptoms: List[str] = []
    questionnaire: List[QuestionnaireItem] = []
    category_recommendations: Dict[str, List[str]] = {}
    default_category_recommendations: List[str]
    body_areas: List[BodyArea] = []

    @validator("symptom_conditions")
    def validate_symptom_conditions(cls, v: Dict[str, List[ConditionRule]]):
        return {key.strip().lower(): rules for key, rules in v.items()}

    @validator("vocabulary", "common_symptoms")
    def validate_tokens(cls, v: List[str]):
        return list(dict.fromkeys(s.strip().lower() for s in v if s.strip()))

    @validator("category_recommendations")
    def validate_category_recommendations(cls, v: Dict[str, List[str]]):
        return {key.strip().lower(): recs for key, recs in v.items()}

    @validator("default_recommendations", "default_category_recommendations")
    def validate_defaults(cls, v: List[str]):
        if not v:
            raise ValueError("default recommendation lists must not be empty")
        return v

    def rules_for(self, symptom: str) -> List[ConditionRule]:
        return self.symptom_conditions.get(symptom, [])

    def recommendations_for(self, condition_name: str) -> List[str]:
        info = self.conditions.get(condition_name)
        if info is not None and info.recommendations:
            return list(info.recommendations)
        return list(self.default_recommendations)

    def description_for(self, condition_name: str) -> str:
        info = self.conditions.get(condition_name)
        if info is not None and info.description:
            return info.description
        return self.default_description
