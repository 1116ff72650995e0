import os
import logging

try:
    import streamlit as st  # type: ignore
    _HAS_STREAMLIT = True
except Exception:
    _HAS_STREAMLIT = False

logger = logging.getLogger(__name__)


def get_secret(name: str, default: str | None = None) -> str | None:
    # Prefer Streamlit secrets if available
    if _HAS_STREAMLIT:
        try:
            if name in st.secrets:
                return str(st.secrets.get(name))
        except Exception:
            # No secrets.toml outside a configured Streamlit deployment
            pass
    # Fallback to environment variables
    return os.environ.get(name, default)


class Settings:
    @property
    def knowledge_dir(self) -> str | None:
        return get_secret("MEDASSIST_KNOWLEDGE_DIR") or None

    @property
    def knowledge_url(self) -> str | None:
        return get_secret("MEDASSIST_KNOWLEDGE_URL") or None

    @property
    def thinking_delay_seconds(self) -> float:
        raw = get_secret("MEDASSIST_THINKING_DELAY", "0") or "0"
        try:
            delay = float(raw)
        except ValueError:
            logger.warning("Invalid MEDASSIST_THINKING_DELAY %r; using 0", raw)
            return 0.0
        return max(delay, 0.0)

    @property
    def log_level(self) -> str:
        return (get_secret("LOG_LEVEL", "INFO") or "INFO").upper()
