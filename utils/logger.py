import logging
from settings.config import settings

LOG_FORMAT = "%(asctime)s | %(levelname)s | %(name)s | %(message)s"

_configured = False

def _configure_root():
    global _configured
    if _configured:
        return
    logging.basicConfig(level=settings.LOG_LEVEL.upper(), format=LOG_FORMAT)
    _configured = True

def get_logger(name: str) -> logging.Logger:
    """
    Named application logger. The root handler is installed on first use.
    """
    _configure_root()
    return logging.getLogger(name)
