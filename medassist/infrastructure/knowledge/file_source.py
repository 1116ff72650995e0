import logging
from pathlib import Path
from typing import Any, Dict

from medassist.application.ports import KnowledgeSourcePort
from medassist.infrastructure.knowledge.sections import KnowledgeBaseError, parse_section


logger = logging.getLogger(__name__)


DEFAULT_KNOWLEDGE_DIR = Path(__file__).parent / "data"


class FileKnowledgeSource(KnowledgeSourcePort):
    """Reads ``<name>.yaml`` files from a local directory."""

    def __init__(self, directory: str | Path | None = None):
        self.directory = Path(directory) if directory else DEFAULT_KNOWLEDGE_DIR

    def read_section(self, name: str) -> Dict[str, Any]:
        path = self.directory / f"{name}.yaml"
        try:
            text = path.read_text(encoding="utf-8")
        except OSError as e:
            raise KnowledgeBaseError(f"Cannot read knowledge section '{name}' from {path}: {e}") from e

        logger.debug("Read knowledge section %s from %s", name, path)
        return parse_section(text, name)
