from typing import Iterable, List

from medassist.domain.models import BodyArea, KnowledgeBase
from medassist.domain.rules import normalize_symptoms


class BodyMap:
    """Suggests symptom tokens for the body areas a user points at."""

    def __init__(self, areas: Iterable[BodyArea]):
        self.areas = list(areas)
        self._by_id = {area.id: area for area in self.areas}

    @classmethod
    def from_knowledge_base(cls, knowledge_base: KnowledgeBase) -> "BodyMap":
        return cls(knowledge_base.body_areas)

    def suggest(self, area_ids: Iterable[str]) -> List[str]:
        symptoms: List[str] = []
        for area_id in area_ids:
            area = self._by_id.get(area_id)
            if area is not None:
                symptoms.extend(area.symptoms)
        return normalize_symptoms(symptoms)
