import logging
from typing import Dict, Iterable, Optional

from medassist.application.schemas import ConditionPrediction, InferenceResult
from medassist.domain.models import Demographics, KnowledgeBase
from medassist.domain.rules import adjust_probability, normalize_symptoms, scale_risk_score, severity_weight


logger = logging.getLogger(__name__)


MAX_PREDICTIONS = 5


class ConditionInferenceEngine:
    """Ranks candidate conditions for a set of symptom tokens and scores overall risk."""

    def __init__(self, knowledge_base: KnowledgeBase, max_predictions: int = MAX_PREDICTIONS):
        self.knowledge_base = knowledge_base
        self.max_predictions = max_predictions

    def predict(self, symptoms: Iterable[str], demographics: Optional[Demographics] = None) -> InferenceResult:
        tokens = normalize_symptoms(symptoms)
        if not tokens:
            return InferenceResult()

        age = demographics.age if demographics else None
        merged: Dict[str, ConditionPrediction] = {}
        total_risk = 0.0

        for symptom in tokens:
            rules = self.knowledge_base.rules_for(symptom)
            if not rules:
                logger.debug("No condition rules for symptom %r; ignoring", symptom)
                continue

            for rule in rules:
                probability = adjust_probability(rule.base_probability, age=age, symptom_count=len(tokens))

                current = merged.get(rule.condition_name)
                if current is None:
                    merged[rule.condition_name] = ConditionPrediction(
                        condition_name=rule.condition_name,
                        probability=probability,
                        severity=rule.severity,
                        recommendations=self.knowledge_base.recommendations_for(rule.condition_name),
                        description=self.knowledge_base.description_for(rule.condition_name),
                    )
                elif probability > current.probability:
                    current.probability = probability

                # Every hit counts toward risk, including repeats of an already merged condition
                total_risk += probability * severity_weight(rule.severity)

        # sorted() is stable, so ties keep first-encountered order
        ranked = sorted(merged.values(), key=lambda p: p.probability, reverse=True)

        return InferenceResult(
            predictions=ranked[: self.max_predictions],
            risk_score=scale_risk_score(total_risk),
            symptoms_analyzed=tokens,
        )
