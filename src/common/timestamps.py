"""Timestamp parsing helpers."""

from __future__ import annotations

import re
from datetime import datetime, timedelta, timezone
from typing import Optional


_EPOCH = datetime(1970, 1, 1, tzinfo=timezone.utc)
# fromisoformat before 3.11 only takes 3 or 6 fraction digits
_FRACTION_RE = re.compile(r"(T\d{2}:\d{2}:\d{2})\.(\d+)")


def _normalize_fraction(text: str) -> str:
    return _FRACTION_RE.sub(lambda m: f"{m.group(1)}.{m.group(2)[:6].ljust(6, '0')}", text, count=1)


def epoch_ms_from_iso8601(value: Optional[str]) -> Optional[int]:
    """Parse an ISO-8601 string into epoch milliseconds."""
    if not isinstance(value, str) or not value.strip():
        return None
    text = _normalize_fraction(value.strip())
    try:
        if text.endswith("Z"):
            parsed = datetime.fromisoformat(text[:-1]).replace(tzinfo=timezone.utc)
        else:
            parsed = datetime.fromisoformat(text)
            if parsed.tzinfo is None:
                parsed = parsed.replace(tzinfo=timezone.utc)
        return (parsed - _EPOCH) // timedelta(milliseconds=1)
    except (ValueError, TypeError):
        return None


def sort_key_ms(value: Optional[str]) -> int:
    """Sort key for last-updated strings; empty or unparsable values sort as epoch."""
    parsed = epoch_ms_from_iso8601(value)
    return 0 if parsed is None else parsed
