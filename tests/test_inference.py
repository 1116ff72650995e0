"""Unit tests for the condition inference engine."""
import pytest

from medassist.application.inference import ConditionInferenceEngine
from medassist.application.schemas import InferenceResult
from medassist.domain.models import Demographics, KnowledgeBase, RiskBand, Severity
from medassist.infrastructure.knowledge.loader import load_knowledge_base


@pytest.fixture(scope="module")
def engine():
    return ConditionInferenceEngine(load_knowledge_base())


def _knowledge_base(symptom_conditions, conditions=None):
    return KnowledgeBase(
        symptom_conditions=symptom_conditions,
        conditions=conditions or {},
        default_recommendations=["Consult with a healthcare provider", "Monitor symptoms", "Rest and stay hydrated"],
        default_description="Consult a healthcare provider for proper diagnosis.",
        vocabulary=list(symptom_conditions),
        default_category_recommendations=["Consult with healthcare provider"],
    )


def _by_name(result: InferenceResult):
    return {p.condition_name: p for p in result.predictions}


class TestConcreteScenarios:
    """Test the documented reference scenarios."""

    def test_single_headache(self, engine):
        """Test headache alone gives Tension Headache at its base probability."""
        result = engine.predict(["headache"])
        tension = _by_name(result)["Tension Headache"]
        assert tension.probability == pytest.approx(0.7)
        assert tension.severity == Severity.LOW
        assert tension.description.startswith("Most common type of headache")
        assert tension.recommendations[0] == "Rest in a quiet, dark room"

    def test_senior_with_two_symptoms(self, engine):
        """Test age and corroboration multipliers stack once each."""
        result = engine.predict(["headache", "fever"], Demographics(age=70))
        assert _by_name(result)["Tension Headache"].probability == pytest.approx(0.924)

    def test_minor_reduces_probability(self, engine):
        """Test the under-18 multiplier."""
        result = engine.predict(["headache"], Demographics(age=10))
        assert _by_name(result)["Tension Headache"].probability == pytest.approx(0.56)

    def test_boundary_ages_are_unadjusted(self, engine):
        """Test ages 18 and 65 leave probabilities unchanged."""
        for age in (18, 65):
            result = engine.predict(["headache"], Demographics(age=age))
            assert _by_name(result)["Tension Headache"].probability == pytest.approx(0.7)


class TestRanking:
    """Test ordering, truncation and the probability cap."""

    def test_top_five_sorted_descending(self, engine):
        """Test at most five predictions, highest first."""
        result = engine.predict(["headache", "fever", "cough", "nausea"])
        probabilities = [p.probability for p in result.predictions]
        assert len(result.predictions) == 5
        assert probabilities == sorted(probabilities, reverse=True)

    def test_ties_keep_first_encountered_order(self, engine):
        """Test Migraine (from headache) precedes Flu (from fever) at equal probability."""
        result = engine.predict(["headache", "fever"])
        names = [p.condition_name for p in result.predictions]
        assert names == ["Tension Headache", "Viral Infection", "Migraine", "Flu", "Bacterial Infection"]
        assert "Cluster Headache" not in names

    def test_probability_capped(self):
        """Test stacked multipliers never exceed 0.95."""
        kb = _knowledge_base({
            "a": [{"condition_name": "Likely", "base_probability": 0.9, "severity": "low"}],
            "b": [{"condition_name": "Other", "base_probability": 0.1, "severity": "low"}],
        })
        result = ConditionInferenceEngine(kb).predict(["a", "b"], Demographics(age=80))
        assert _by_name(result)["Likely"].probability == pytest.approx(0.95)
        assert all(0.0 <= p.probability <= 0.95 for p in result.predictions)


class TestMerging:
    """Test conditions reachable from more than one symptom."""

    @pytest.fixture
    def overlapping(self):
        return ConditionInferenceEngine(_knowledge_base({
            "a": [{"condition_name": "Shared", "base_probability": 0.3, "severity": "low"}],
            "b": [{"condition_name": "Shared", "base_probability": 0.6, "severity": "medium"}],
        }))

    def test_max_not_sum(self, overlapping):
        """Test the merged probability is the larger adjusted value."""
        result = overlapping.predict(["a", "b"])
        assert len(result.predictions) == 1
        assert result.predictions[0].probability == pytest.approx(0.66)

    def test_first_occurrence_supplies_severity(self, overlapping):
        """Test severity comes from the first rule that reached the condition."""
        result = overlapping.predict(["a", "b"])
        assert result.predictions[0].severity == Severity.LOW

    def test_risk_counts_every_hit(self, overlapping):
        """Test the risk score double-counts pre-merge hits with their own severity."""
        result = overlapping.predict(["a", "b"])
        # (0.33 * 1 + 0.66 * 2) * 20
        assert result.risk_score == pytest.approx(33.0)

    def test_fallback_recommendations_and_description(self, overlapping):
        """Test conditions without authored entries get the defaults."""
        prediction = overlapping.predict(["a"]).predictions[0]
        assert prediction.recommendations == [
            "Consult with a healthcare provider",
            "Monitor symptoms",
            "Rest and stay hydrated",
        ]
        assert prediction.description == "Consult a healthcare provider for proper diagnosis."


class TestRiskScore:
    """Test the aggregate risk score."""

    def test_empty_input(self, engine):
        """Test no symptoms yields an empty, zero-risk result."""
        result = engine.predict([])
        assert result.predictions == []
        assert result.risk_score == 0
        assert result.risk_level == RiskBand.LOW

    def test_unknown_symptoms_ignored(self, engine):
        """Test tokens missing from the table are not errors."""
        result = engine.predict(["glowing toenails"])
        assert result.predictions == []
        assert result.risk_score == 0

    def test_vocabulary_symptom_without_rules(self, engine):
        """Test a recognised symptom with no condition rules yields nothing."""
        result = engine.predict(["sore throat"])
        assert result.predictions == []
        assert result.risk_score == 0

    def test_rule_less_symptom_only_boosts(self, engine):
        """Test fatigue adds no hits but still triggers the corroboration boost."""
        result = engine.predict(["headache", "fatigue"])
        assert result.risk_score == pytest.approx(39.6)

    def test_single_symptom_score(self, engine):
        """Test headache: (0.7*1 + 0.4*2 + 0.1*3) * 20."""
        result = engine.predict(["headache"])
        assert result.risk_score == pytest.approx(36.0)
        assert result.risk_level == RiskBand.LOW

    def test_two_symptom_score(self, engine):
        """Test headache and fever with the corroboration boost."""
        result = engine.predict(["headache", "fever"])
        assert result.risk_score == pytest.approx(83.6)
        assert result.risk_level == RiskBand.HIGH

    def test_score_clamped_to_100(self, engine):
        """Test many symptoms cannot push the score past 100."""
        result = engine.predict(["headache", "fever", "cough"])
        assert result.risk_score == 100.0

    def test_unknown_symptom_still_counts_toward_corroboration(self, engine):
        """Test the distinct input count includes tokens with no rules."""
        result = engine.predict(["headache", "glowing toenails"])
        assert _by_name(result)["Tension Headache"].probability == pytest.approx(0.77)

    def test_duplicate_tokens_are_collapsed(self, engine):
        """Test repeated and differently-cased tokens count once."""
        result = engine.predict(["Headache", "headache "])
        assert result.symptoms_analyzed == ["headache"]
        assert _by_name(result)["Tension Headache"].probability == pytest.approx(0.7)
