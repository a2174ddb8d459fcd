"""Logging setup shared by the CLI and embedding applications."""

from __future__ import annotations

import logging

DEFAULT_FORMAT = "%(asctime)s %(levelname)s [%(name)s] %(message)s"


def configure_logging(*, level: int = logging.INFO, force: bool = False) -> None:
    """Initialise the root logger once.

    Library modules only ever obtain loggers via ``logging.getLogger(__name__)``;
    this helper is meant for entry points. ``force=True`` reconfigures handlers,
    which tests use to reset state between runs.
    """

    logging.basicConfig(
        level=level,
        format=DEFAULT_FORMAT,
        datefmt="%H:%M:%S",
        force=force,
    )
    # httpx logs every request at INFO
    logging.getLogger("httpx").setLevel(max(level, logging.WARNING))
