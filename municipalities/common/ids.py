"""Run identifier helpers."""

from __future__ import annotations

import secrets
from datetime import datetime, timezone

from municipalities.common.constants import STAGES


def generate_run_id(stage: str = STAGES[0]) -> str:
    """``<stage>-<UTC timestamp>-<6 hex chars>``, sortable by start time per stage."""
    now = datetime.now(tz=timezone.utc)
    return f"{stage}-{now:%Y%m%dT%H%M%SZ}-{secrets.token_hex(3)}"
