"""Per-installation player identity used to seed spawn placement."""

from __future__ import annotations

import logging
from pathlib import Path
from uuid import uuid4

logger = logging.getLogger("heartlands.identity")


def init_player_identity(path: str | Path) -> str:
    """Return the persisted identity, generating and saving one on first run.

    The identity only seeds spawn placement; it is not a credential.
    """
    target = Path(path).expanduser()
    if target.exists():
        existing = target.read_text(encoding="utf-8").strip()
        if existing:
            return existing

    identity = uuid4().hex
    target.parent.mkdir(parents=True, exist_ok=True)
    target.write_text(identity + "\n", encoding="utf-8")
    logger.info("player_identity_created", extra={"path": str(target)})
    return identity
