# artify/core/logger.py
from __future__ import annotations

import logging
from typing import Any


def configure_logging(level: str = "INFO") -> None:
    """
    Call once at application startup.
    """
    numeric_level = getattr(logging, level.upper(), logging.INFO)

    logging.basicConfig(
        level=numeric_level,
        format="%(asctime)s [%(levelname)s] %(name)s - %(message)s",
    )

    logging.getLogger("artify").setLevel(numeric_level)

    # keep SQLAlchemy quiet unless something is wrong
    logging.getLogger("sqlalchemy.engine").setLevel(logging.WARNING)
    logging.getLogger("sqlalchemy.pool").setLevel(logging.WARNING)
    logging.getLogger("botocore").setLevel(logging.WARNING)


def kv(action: str, **fields: Any) -> str:
    """Render `action | k=v k=v` log lines."""
    if fields:
        pairs = " ".join(f"{k}={v!r}" for k, v in fields.items())
        return f"{action} | {pairs}"
    return action
