"""Logging setup shared by the API process and scripts."""

import logging
import sys

from app.config import get_settings

LOG_FORMAT = "%(asctime)s %(levelname)s %(name)s %(message)s"


def configure_logging(level: str | None = None) -> None:
    """Configure the root logger once, writing to stdout."""

    logging.basicConfig(
        level=(level or get_settings().log_level).upper(),
        format=LOG_FORMAT,
        handlers=[logging.StreamHandler(sys.stdout)],
    )


__all__ = ["LOG_FORMAT", "configure_logging"]
