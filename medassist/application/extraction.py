"""Free-text symptom extraction for typed input and speech transcripts."""
import logging
import re
from typing import Iterable, List, Optional

from medassist.domain.models import KnowledgeBase, SymptomPattern
from medassist.domain.rules import normalize_symptoms


logger = logging.getLogger(__name__)


class SymptomExtractor:
    """Maps free text onto the closed symptom vocabulary.

    Stateless per call: accumulating tokens across transcript updates is left to
    the caller (see ``merge_symptoms``).
    """

    def __init__(self, vocabulary: Iterable[str], patterns: Iterable[SymptomPattern] = ()):
        self.vocabulary = normalize_symptoms(vocabulary)
        self._patterns = [
            (re.compile(p.pattern, re.IGNORECASE), p.symptom.lower())
            for p in patterns
        ]

    @classmethod
    def from_knowledge_base(cls, knowledge_base: KnowledgeBase) -> "SymptomExtractor":
        return cls(knowledge_base.vocabulary, knowledge_base.patterns)

    def extract(self, text: Optional[str]) -> List[str]:
        """
        Extract known symptom tokens from text.

        Args:
            text: Typed input or a speech-to-text transcript

        Returns:
            De-duplicated tokens, vocabulary matches first, then pattern matches
        """
        if not text:
            return []

        lowered = text.lower()
        found = [symptom for symptom in self.vocabulary if symptom in lowered]

        for pattern, symptom in self._patterns:
            if symptom not in found and pattern.search(lowered):
                found.append(symptom)

        logger.debug("Extracted %d symptom(s) from %d characters", len(found), len(text))
        return found


def merge_symptoms(existing: Iterable[str], new: Iterable[str]) -> List[str]:
    return normalize_symptoms(list(existing) + list(new))


def remove_symptom(existing: Iterable[str], symptom: str) -> List[str]:
    target = symptom.strip().lower()
    return [s for s in normalize_symptoms(existing) if s != target]
