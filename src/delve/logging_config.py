import logging
import os

LOG_LEVEL_ENV = "DELVE_LOG_LEVEL"
LOG_FORMAT = "[%(asctime)s] [%(levelname)s] %(name)s: %(message)s"


def configure_logging(default_level: int = logging.INFO) -> None:
    """Set up root logging for the ``delve`` command line.

    ``DELVE_LOG_LEVEL`` (e.g. ``debug``) takes precedence over ``default_level``.
    Library modules only create named loggers; this is the one place handlers
    are installed, and calling it again replaces them.
    """
    name = os.getenv(LOG_LEVEL_ENV, "").strip().upper()
    level = getattr(logging, name, default_level) if name else default_level
    root = logging.getLogger()
    for handler in list(root.handlers):
        root.removeHandler(handler)
    logging.basicConfig(level=level, format=LOG_FORMAT)
