# ielts_portal/core/logging_config.py
import logging

from ielts_portal.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging(level: str | None = None) -> None:
    """Configure the root logger once for the API process or the worker."""
    global _configured
    if _configured:
        return

    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # uvicorn access lines are noisy next to our own request logs
    logging.getLogger("uvicorn.access").setLevel(logging.WARNING)
    _configured = True
