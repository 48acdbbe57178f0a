"""
Process-wide logging setup. Output goes to stdout so gunicorn / the container
runtime captures it alongside the access log.
"""
import logging
import sys

from storegoals.core.config import settings

LOG_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(level: str | None = None) -> None:
    logging.basicConfig(
        level=(level or settings.LOG_LEVEL).upper(),
        format=LOG_FORMAT,
        stream=sys.stdout,
    )
