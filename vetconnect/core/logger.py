"""Logging configuration."""
import logging

from vetconnect.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"

_configured = False


def setup_logging() -> None:
    """Configure the root logger once per process."""
    global _configured
    if _configured:
        return

    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
    # httpx logs every request at INFO, which drowns the geocoder's own messages
    logging.getLogger("httpx").setLevel(logging.WARNING)
    _configured = True
