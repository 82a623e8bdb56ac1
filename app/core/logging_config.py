import logging

from app.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s - %(message)s"


def setup_logging(level: str = settings.log_level) -> logging.Logger:
    logging.basicConfig(level=level.upper(), format=LOG_FORMAT)
    return logging.getLogger("library")


logger = logging.getLogger("library")
