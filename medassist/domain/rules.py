from typing import Iterable, List, Optional

from .models import RiskBand, Severity


MAX_PROBABILITY = 0.95

SENIOR_AGE = 65
SENIOR_MULTIPLIER = 1.2
MINOR_AGE = 18
MINOR_MULTIPLIER = 0.8

# Applied once per rule evaluation whenever more than one distinct symptom was reported.
CORROBORATION_MULTIPLIER = 1.1

SEVERITY_WEIGHTS = {
    Severity.LOW: 1,
    Severity.MEDIUM: 2,
    Severity.HIGH: 3,
}

RISK_SCORE_SCALE = 20
MAX_RISK_SCORE = 100.0

# Questionnaire bands, as a percentage of the category's attainable maximum.
LOW_BAND_LIMIT = 30.0
MODERATE_BAND_LIMIT = 65.0

# Display bands for the aggregate symptom risk score.
OVERALL_HIGH_RISK = 70.0
OVERALL_MODERATE_RISK = 40.0


def normalize_symptoms(symptoms: Iterable[str]) -> List[str]:
    """Lower-case, strip and de-duplicate tokens, keeping first-seen order."""
    cleaned = (s.strip().lower() for s in symptoms if s and s.strip())
    return list(dict.fromkeys(cleaned))


def adjust_probability(base_probability: float, age: Optional[int] = None, symptom_count: int = 1) -> float:
    probability = base_probability

    if age is not None:
        if age > SENIOR_AGE:
            probability *= SENIOR_MULTIPLIER
        if age < MINOR_AGE:
            probability *= MINOR_MULTIPLIER

    if symptom_count > 1:
        probability *= CORROBORATION_MULTIPLIER

    return min(probability, MAX_PROBABILITY)


def severity_weight(severity: Severity) -> int:
    return SEVERITY_WEIGHTS[Severity(severity)]


def scale_risk_score(total: float) -> float:
    return max(0.0, min(total * RISK_SCORE_SCALE, MAX_RISK_SCORE))


def category_percentage(score: int, max_score: int) -> float:
    if max_score <= 0:
        return 0.0
    # score * 100 first keeps exact boundaries (e.g. 3/10 -> 30.0) exact
    return score * 100 / max_score


def classify_risk_band(percentage: float) -> RiskBand:
    if percentage < LOW_BAND_LIMIT:
        return RiskBand.LOW
    if percentage < MODERATE_BAND_LIMIT:
        return RiskBand.MODERATE
    return RiskBand.HIGH


def classify_overall_risk(score: float) -> RiskBand:
    if score > OVERALL_HIGH_RISK:
        return RiskBand.HIGH
    if score > OVERALL_MODERATE_RISK:
        return RiskBand.MODERATE
    return RiskBand.LOW
