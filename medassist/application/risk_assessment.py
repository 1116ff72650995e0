import logging
from enum import Enum
from typing import Dict, List, Mapping, Optional

from medassist.application.schemas import CategoryAssessment
from medassist.domain.models import KnowledgeBase, QuestionnaireItem
from medassist.domain.rules import category_percentage, classify_risk_band


logger = logging.getLogger(__name__)


class RiskAssessmentEngine:
    """Scores questionnaire answers into per-category risk assessments."""

    def __init__(
        self,
        questionnaire: List[QuestionnaireItem],
        category_recommendations: Mapping[str, List[str]],
        default_recommendations: List[str],
    ):
        self.questionnaire = list(questionnaire)
        self.category_recommendations = dict(category_recommendations)
        self.default_recommendations = list(default_recommendations)

    @classmethod
    def from_knowledge_base(cls, knowledge_base: KnowledgeBase) -> "RiskAssessmentEngine":
        return cls(
            knowledge_base.questionnaire,
            knowledge_base.category_recommendations,
            knowledge_base.default_category_recommendations,
        )

    def recommendations_for(self, category: str) -> List[str]:
        recs = self.category_recommendations.get(category)
        if recs:
            return list(recs)
        return list(self.default_recommendations)

    def assess(self, answers: Mapping[str, str]) -> List[CategoryAssessment]:
        """
        Score answered questions by category.

        Args:
            answers: Question id -> selected option value; unanswered ids are absent

        Returns:
            One assessment per category with at least one scored answer,
            in questionnaire order
        """
        totals: Dict[str, List[int]] = {}

        for item in self.questionnaire:
            value = answers.get(item.id)
            if not value:
                continue

            option = item.option_for(value)
            if option is None:
                logger.debug("Answer %r is not an option of question %r; ignoring", value, item.id)
                continue

            entry = totals.setdefault(item.category, [0, 0])
            entry[0] += option.score
            # Per-question maximum, summed over the answered questions only
            entry[1] += item.max_score

        assessments = []
        for category, (score, max_score) in totals.items():
            assessments.append(
                CategoryAssessment(
                    category=category,
                    score=score,
                    max_score=max_score,
                    risk_band=classify_risk_band(category_percentage(score, max_score)),
                    recommendations=self.recommendations_for(category),
                )
            )
        return assessments


class AssessmentState(str, Enum):
    IN_PROGRESS = "in_progress"
    COMPLETE = "complete"


class RiskAssessmentSession:
    """One pass through the questionnaire, a question at a time.

    ``next()`` on the last question completes the session and scores it.
    ``restart()`` discards all answers and results.
    """

    def __init__(self, engine: RiskAssessmentEngine):
        self.engine = engine
        self.restart()

    def restart(self) -> None:
        self.state = AssessmentState.IN_PROGRESS
        self.current_index = 0
        self.answers: Dict[str, str] = {}
        self.results: List[CategoryAssessment] = []

    @property
    def questions(self) -> List[QuestionnaireItem]:
        return self.engine.questionnaire

    @property
    def is_complete(self) -> bool:
        return self.state == AssessmentState.COMPLETE

    @property
    def current_question(self) -> Optional[QuestionnaireItem]:
        if self.is_complete or not self.questions:
            return None
        return self.questions[self.current_index]

    @property
    def is_last_question(self) -> bool:
        return self.current_index == len(self.questions) - 1

    @property
    def can_advance(self) -> bool:
        question = self.current_question
        return question is not None and bool(self.answers.get(question.id))

    @property
    def can_go_back(self) -> bool:
        return not self.is_complete and self.current_index > 0

    @property
    def progress(self) -> float:
        if not self.questions:
            return 0.0
        return (self.current_index + 1) / len(self.questions) * 100

    def answer(self, question_id: str, value: str) -> None:
        if self.is_complete:
            raise ValueError("Assessment is complete; restart to answer again")

        item = next((q for q in self.questions if q.id == question_id), None)
        if item is None:
            raise ValueError(f"Unknown question: {question_id}")
        if item.option_for(value) is None:
            raise ValueError(f"{value!r} is not an option for question {question_id}")

        self.answers[question_id] = value

    def next(self) -> bool:
        """Advance to the next question, or complete on the last one. Returns False if nothing moved."""
        if not self.can_advance:
            return False

        if self.is_last_question:
            self.results = self.engine.assess(self.answers)
            self.state = AssessmentState.COMPLETE
            logger.info("Risk assessment complete: %d categories scored", len(self.results))
        else:
            self.current_index += 1
        return True

    def previous(self) -> bool:
        if not self.can_go_back:
            return False
        self.current_index -= 1
        return True
