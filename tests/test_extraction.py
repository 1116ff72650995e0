"""Unit tests for free-text symptom extraction."""
import pytest

from medassist.application.extraction import SymptomExtractor, merge_symptoms, remove_symptom
from medassist.domain.models import SymptomPattern
from medassist.infrastructure.knowledge.loader import load_knowledge_base


@pytest.fixture(scope="module")
def extractor():
    return SymptomExtractor.from_knowledge_base(load_knowledge_base())


class TestVocabularyMatching:
    """Test direct vocabulary matches."""

    def test_single_symptom(self, extractor):
        """Test a vocabulary word inside a sentence."""
        assert extractor.extract("I woke up with a headache today") == ["headache"]

    def test_multi_word_symptoms(self, extractor):
        """Test multi-word vocabulary phrases."""
        found = extractor.extract("Sore throat and chest pain since Monday")
        assert set(found) == {"sore throat", "chest pain"}

    def test_case_insensitive(self, extractor):
        """Test that upper-case input still matches."""
        assert extractor.extract("HEADACHE") == ["headache"]

    def test_empty_and_no_match(self, extractor):
        """Test inputs that yield nothing."""
        assert extractor.extract("") == []
        assert extractor.extract(None) == []
        assert extractor.extract("I feel great, thanks") == []


class TestPatternMatching:
    """Test natural-language phrasings."""

    @pytest.mark.parametrize("text,symptom", [
        ("My head hurts", "headache"),
        ("It is hard to breathe when I climb stairs", "shortness of breath"),
        ("my stomach hurt all night", "abdominal pain"),
        ("I'm shivering under the blanket", "fever"),
        ("I've been feeling tired for a week", "fatigue"),
        ("I'm coughing a lot", "cough"),
    ])
    def test_phrasings(self, extractor, text, symptom):
        """Test phrasings that do not literally contain the vocabulary word."""
        assert symptom in extractor.extract(text)

    def test_pattern_does_not_duplicate_vocabulary_match(self, extractor):
        """Test a symptom found both ways appears once."""
        found = extractor.extract("I have a headache, my head hurts")
        assert found.count("headache") == 1

    def test_pattern_only_text_yields_exactly_pattern_symptom(self, extractor):
        """Test that nothing else sneaks in."""
        assert extractor.extract("my head hurts") == ["headache"]

    def test_body_area_words_are_not_extracted(self, extractor):
        """Test body-area suggestions outside the vocabulary are not matched in free text."""
        assert extractor.extract("some swelling and numbness in my leg") == []
        assert extractor.extract("a migraine and a headache") == ["headache"]


class TestExtractionProperties:
    """Test idempotence and monotonicity."""

    def test_idempotent(self, extractor):
        """Test that extracting twice gives the same tokens."""
        text = "Fever, a dry cough and it's hard to breathe"
        assert extractor.extract(text) == extractor.extract(text)

    def test_superset_text_gives_superset_tokens(self, extractor):
        """Test that a growing transcript never loses tokens."""
        partial = extractor.extract("my head hurts")
        full = extractor.extract("my head hurts and I feel nauseous")
        assert set(partial) <= set(full)
        assert "nausea" in full

    def test_custom_vocabulary_and_patterns(self):
        """Test an extractor built from explicit tables."""
        extractor = SymptomExtractor(
            ["Rash", "rash", "itching"],
            [SymptomPattern(pattern=r"skin is (red|blotchy)", symptom="rash")],
        )
        assert extractor.vocabulary == ["rash", "itching"]
        assert extractor.extract("My skin is blotchy") == ["rash"]


class TestSymptomAccumulation:
    """Test caller-side accumulation helpers."""

    def test_merge_preserves_order_and_dedupes(self):
        """Test merging keeps first-seen order without duplicates."""
        assert merge_symptoms(["headache"], ["Fever", "headache", " cough "]) == ["headache", "fever", "cough"]

    def test_remove_symptom(self):
        """Test removing a token ignores case."""
        assert remove_symptom(["headache", "fever"], "Fever") == ["headache"]
        assert remove_symptom(["headache"], "cough") == ["headache"]
