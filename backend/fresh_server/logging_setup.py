"""Logging setup: console output selected by profile, tagged with the release."""

from __future__ import annotations

import logging

_LOG_FMT = "%(asctime)s [%(levelname)s] %(name)s release=%(release)s: %(message)s"

PROFILE_LEVELS = {
    "production": logging.INFO,
    "development": logging.DEBUG,
}


class ReleaseFilter(logging.Filter):
    """Stamp every record with the build tag of the running service."""

    def __init__(self, release: str) -> None:
        super().__init__()
        self.release = release

    def filter(self, record: logging.LogRecord) -> bool:
        record.release = self.release
        return True


def configure_logging(profile: str, release: str) -> None:
    """Set up console logging for *profile*.

    ``production`` logs at INFO, ``development`` at DEBUG. Any other profile
    disables logging entirely.
    """
    level = PROFILE_LEVELS.get(profile)
    if level is None:
        logging.disable(logging.CRITICAL)
        return

    logging.disable(logging.NOTSET)
    handler = logging.StreamHandler()
    handler.setFormatter(logging.Formatter(_LOG_FMT))
    handler.addFilter(ReleaseFilter(release))
    logging.basicConfig(level=level, handlers=[handler], force=True)
