from typing import Any, Dict, Protocol


class KnowledgeSourcePort(Protocol):
    def read_section(self, name: str) -> Dict[str, Any]:
        """
        Returns the parsed mapping stored under a knowledge section name
        (e.g. "symptoms", "questionnaire").
        """
        ...
