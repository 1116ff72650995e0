import logging
from typing import Any, Dict

import requests

from medassist.application.ports import KnowledgeSourcePort
from medassist.infrastructure.knowledge.sections import KnowledgeBaseError, parse_section


logger = logging.getLogger(__name__)


class RemoteKnowledgeSource(KnowledgeSourcePort):
    """Fetches ``<base_url>/<name>.yaml`` over HTTP, for knowledge authored outside the app."""

    def __init__(self, base_url: str, timeout: float = 15):
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout

    def read_section(self, name: str) -> Dict[str, Any]:
        url = f"{self.base_url}/{name}.yaml"
        try:
            resp = requests.get(url, timeout=self.timeout)
            resp.raise_for_status()
        except requests.RequestException as e:
            logger.exception("Fetching knowledge section %s failed: %s", name, e)
            raise KnowledgeBaseError(f"Cannot fetch knowledge section '{name}' from {url}: {e}") from e

        return parse_section(resp.text, name)
