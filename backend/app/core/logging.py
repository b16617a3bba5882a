from __future__ import annotations

import logging


def setup_logging(*, level: str = "INFO") -> None:
    """Attach a single console handler to the root logger.

    Safe to call more than once: an already configured root logger is left alone.
    """

    root = logging.getLogger()
    if root.handlers:
        return

    resolved = logging.getLevelName(level.upper())
    if not isinstance(resolved, int):
        resolved = logging.INFO

    formatter = logging.Formatter(
        fmt="%(asctime)s %(levelname)s %(name)s %(message)s",
        datefmt="%Y-%m-%dT%H:%M:%S%z",
    )
    console = logging.StreamHandler()
    console.setLevel(resolved)
    console.setFormatter(formatter)

    logging.basicConfig(level=resolved, handlers=[console])

    logging.getLogger("uvicorn").setLevel(resolved)
    logging.getLogger("uvicorn.error").setLevel(resolved)
    logging.getLogger("uvicorn.access").setLevel(resolved)
    # SQL echo is noisy at DEBUG; keep it opt-in.
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
