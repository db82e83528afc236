"""UTC-focused helpers for capture timestamps and report dates."""

from __future__ import annotations

import time
from datetime import datetime, timezone


def epoch_millis() -> int:
    return time.time_ns() // 1_000_000


def utc_now() -> datetime:
    return datetime.now(tz=timezone.utc)


def utc_timestamp_iso() -> str:
    return utc_now().isoformat(timespec="milliseconds")


def format_report_date(moment: datetime) -> str:
    return moment.date().isoformat()
