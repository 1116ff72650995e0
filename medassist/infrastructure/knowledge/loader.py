"""Builds a validated KnowledgeBase from a knowledge source."""
import logging
from functools import lru_cache
from typing import Any, Dict, Optional

from pydantic import ValidationError

from medassist.application.ports import KnowledgeSourcePort
from medassist.domain.models import KnowledgeBase
from medassist.infrastructure.config import Settings
from medassist.infrastructure.knowledge.file_source import FileKnowledgeSource
from medassist.infrastructure.knowledge.remote_source import RemoteKnowledgeSource
from medassist.infrastructure.knowledge.sections import SECTION_NAMES, KnowledgeBaseError


logger = logging.getLogger(__name__)


def knowledge_source_from_settings(settings: Settings | None = None) -> KnowledgeSourcePort:
    settings = settings or Settings()
    if settings.knowledge_url:
        return RemoteKnowledgeSource(settings.knowledge_url)
    return FileKnowledgeSource(settings.knowledge_dir)


def load_knowledge_base(source: Optional[KnowledgeSourcePort] = None) -> KnowledgeBase:
    """
    Read every knowledge section and validate it into a KnowledgeBase.

    Args:
        source: Where to read sections from. Defaults to the bundled data.

    Returns:
        The validated knowledge base

    Raises:
        KnowledgeBaseError: if a section is missing, malformed or inconsistent
    """
    source = source or FileKnowledgeSource()
    sections = {name: source.read_section(name) for name in SECTION_NAMES}

    raw = {
        "version": _common_version(sections),
        "symptom_conditions": sections["symptoms"].get("symptoms", {}),
        "conditions": sections["conditions"].get("conditions", {}),
        "default_recommendations": sections["conditions"].get("default_recommendations"),
        "default_description": sections["conditions"].get("default_description"),
        "vocabulary": sections["extraction"].get("vocabulary", []),
        "patterns": sections["extraction"].get("patterns", []),
        "common_symptoms": sections["extraction"].get("common_symptoms", []),
        "questionnaire": sections["questionnaire"].get("questions", []),
        "category_recommendations": sections["questionnaire"].get("category_recommendations", {}),
        "default_category_recommendations": sections["questionnaire"].get("default_recommendations"),
        "body_areas": sections["body_areas"].get("areas", []),
    }

    try:
        knowledge_base = KnowledgeBase(**raw)
    except ValidationError as e:
        raise KnowledgeBaseError(f"Knowledge base failed validation: {e}") from e

    _check_references(knowledge_base)

    logger.info(
        "Loaded knowledge base v%s: %d symptoms, %d conditions, %d questions",
        knowledge_base.version,
        len(knowledge_base.symptom_conditions),
        len(knowledge_base.conditions),
        len(knowledge_base.questionnaire),
    )
    return knowledge_base


@lru_cache(maxsize=1)
def get_default_knowledge_base() -> KnowledgeBase:
    return load_knowledge_base(knowledge_source_from_settings())


def _common_version(sections: Dict[str, Dict[str, Any]]) -> str:
    versions = {name: str(data.get("version", "1")) for name, data in sections.items()}
    distinct = set(versions.values())
    if len(distinct) > 1:
        detail = ", ".join(f"{name}={version}" for name, version in versions.items())
        raise KnowledgeBaseError(f"Knowledge sections disagree on version: {detail}")
    return distinct.pop()


def _check_references(kb: KnowledgeBase) -> None:
    vocabulary = set(kb.vocabulary)

    for symptom in kb.symptom_conditions:
        if symptom not in vocabulary:
            raise KnowledgeBaseError(f"symptoms: '{symptom}' is not in the extraction vocabulary")

    for pattern in kb.patterns:
        if pattern.symptom not in vocabulary:
            raise KnowledgeBaseError(
                f"extraction: pattern {pattern.pattern!r} maps to unknown symptom '{pattern.symptom}'"
            )

    for symptom in kb.common_symptoms:
        if symptom not in vocabulary:
            raise KnowledgeBaseError(f"extraction: common symptom '{symptom}' is not in the vocabulary")

    ids = [item.id for item in kb.questionnaire]
    duplicates = sorted({i for i in ids if ids.count(i) > 1})
    if duplicates:
        raise KnowledgeBaseError(f"questionnaire: duplicate question ids {duplicates}")

    reachable = {rule.condition_name for rules in kb.symptom_conditions.values() for rule in rules}
    for name in kb.conditions:
        if name not in reachable:
            logger.warning("conditions: '%s' is not reachable from any symptom", name)
