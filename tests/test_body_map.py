from medassist.application.body_map import BodyMap
from medassist.infrastructure.knowledge.loader import load_knowledge_base


def test_suggest_for_single_area():
    body_map = BodyMap.from_knowledge_base(load_knowledge_base())
    assert body_map.suggest(["head"]) == ["headache", "dizziness", "migraine"]


def test_suggestions_are_deduplicated_across_areas():
    body_map = BodyMap.from_knowledge_base(load_knowledge_base())
    assert body_map.suggest(["left-arm", "right-arm"]) == ["arm pain", "numbness", "weakness"]


def test_unknown_areas_ignored():
    body_map = BodyMap.from_knowledge_base(load_knowledge_base())
    assert body_map.suggest(["tail", "neck"]) == ["stiff neck", "sore throat", "neck pain"]
    assert body_map.suggest([]) == []
