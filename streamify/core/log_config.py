import logging

from streamify.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def setup_logging(level: str = None):
    """Configure the root logger once for the API process."""
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
    )
    # motor/pymongo are chatty at debug
    logging.getLogger("pymongo").setLevel(logging.WARNING)
