from typing import Any, Dict

import yaml


SECTION_NAMES = ("symptoms", "conditions", "extraction", "questionnaire", "body_areas")


class KnowledgeBaseError(ValueError):
    """Raised when knowledge data cannot be read or fails validation."""


def parse_section(text: str, name: str) -> Dict[str, Any]:
    try:
        data = yaml.safe_load(text)
    except yaml.YAMLError as e:
        raise KnowledgeBaseError(f"Section '{name}' is not valid YAML: {e}") from e

    if data is None:
        return {}
    if not isinstance(data, dict):
        raise KnowledgeBaseError(f"Section '{name}' must be a mapping, got {type(data).__name__}")
    return data
