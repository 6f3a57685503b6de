"""Shared logging helpers for trustgate."""

from __future__ import annotations

import logging


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger with the terse CLI format.

    Pipeline modules only ever call ``logging.getLogger(__name__)``; this is the single
    place where handlers are installed. Pass ``force=True`` to reconfigure from tests or
    a job runner that already touched the root logger.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
