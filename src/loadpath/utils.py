"""Logging setup for the load path stores.

Store modules log through ``logging.getLogger(__name__)`` and tag records with
``extra={"store": <store name>}``. ``init_loadpath_logging`` installs one
console handler whose format shows that tag.
"""

import logging
from typing import IO, Optional

logger = logging.getLogger(__name__)

LOG_FORMAT = "%(asctime)s - %(levelname)s - [%(name)s] [%(store)s] %(message)s"


class LoadPathLogFilter(logging.Filter):
    """Gives records logged without a store tag the placeholder ``-``."""

    def filter(self, record: logging.LogRecord) -> bool:
        if getattr(record, "store", None) is None:
            record.store = "-"
        return True


def _is_loadpath_handler(handler: logging.Handler) -> bool:
    return any(isinstance(f, LoadPathLogFilter) for f in handler.filters)


def init_loadpath_logging(
    level: int = logging.INFO, stream: Optional[IO[str]] = None
) -> logging.Handler:
    """
    Install a console handler for load path logs on the root logger.

    Calling it again replaces the handler installed by the previous call;
    handlers added by anyone else are left alone.

    Args:
        level: Level for the root logger
        stream: Stream to write to (default: sys.stderr)

    Returns:
        The installed handler.
    """
    root_logger = logging.getLogger()
    for handler in root_logger.handlers[:]:
        if _is_loadpath_handler(handler):
            root_logger.removeHandler(handler)
            handler.close()

    handler = logging.StreamHandler(stream)
    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    handler.addFilter(LoadPathLogFilter())
    root_logger.addHandler(handler)
    root_logger.setLevel(level)

    logger.debug(f"Load path logging enabled at {logging.getLevelName(level)}")
    return handler
