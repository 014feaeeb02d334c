"""Root logger setup for the replay CLI."""

from __future__ import annotations

import logging

_CHATTY_LIBRARIES = ("httpx", "apscheduler")


def configure_logging(*, level: int | str = logging.INFO, force: bool = False) -> None:
    """Install one stream handler with timestamps and logger names.

    Library request and job chatter is kept at WARNING unless ``level`` is DEBUG.
    ``force=True`` replaces handlers that are already installed.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    if logging.getLogger().getEffectiveLevel() > logging.DEBUG:
        for name in _CHATTY_LIBRARIES:
            logging.getLogger(name).setLevel(logging.WARNING)
