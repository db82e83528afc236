"""Record identifier helpers."""

from __future__ import annotations

import uuid


def generate_record_id() -> str:
    return uuid.uuid4().hex
