"""Logging setup for applications embedding collectionmap."""

from __future__ import annotations

import logging

LIBRARY_LOGGER = "collectionmap"


def configure_logging(
    *,
    level: int = logging.INFO,
    library_level: int | None = None,
    force: bool = False,
) -> None:
    """Configure the root logger and, optionally, the ``collectionmap`` namespace.

    Reconciliation and persistence report per-collection summaries at DEBUG. Pass
    ``library_level=logging.DEBUG`` to see them without making every other
    library chatty.
    """

    logging.basicConfig(
        level=level,
        format="%(asctime)s %(levelname)s [%(name)s] %(message)s",
        datefmt="%H:%M:%S",
        force=force,
    )
    if library_level is not None:
        logging.getLogger(LIBRARY_LOGGER).setLevel(library_level)
