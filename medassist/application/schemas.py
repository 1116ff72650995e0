from typing import List

from pydantic import BaseModel, Field

from medassist.domain.models import RiskBand, Severity
from medassist.domain.rules import category_percentage, classify_overall_risk


class ConditionPrediction(BaseModel):
    condition_name: str
    probability: float = Field(..., ge=0.0, le=0.95)
    severity: Severity
    recommendations: List[str]
    description: str


class InferenceResult(BaseModel):
    predictions: List[ConditionPrediction] = []
    risk_score: float = Field(0.0, ge=0.0, le=100.0)
    symptoms_analyzed: List[str] = []

    @property
    def risk_level(self) -> RiskBand:
        return classify_overall_risk(self.risk_score)


class CategoryAssessment(BaseModel):
    category: str
    score: int = Field(..., ge=0)
    max_score: int = Field(..., ge=0)
    risk_band: RiskBand
    recommendations: List[str]

    @property
    def percentage(self) -> float:
        return category_percentage(self.score, self.max_score)

    @property
    def display_name(self) -> str:
        return self.category[:1].upper() + self.category[1:]
