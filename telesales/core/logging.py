"""
Logging setup.

Gunicorn captures stdout, so a single stream handler on the root logger is
enough. Modules log through `logging.getLogger(__name__)`.
"""
import logging

_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str = "INFO") -> None:
    root = logging.getLogger()
    if not root.handlers:
        logging.basicConfig(level=level.upper(), format=_FORMAT)
    else:
        root.setLevel(level.upper())
