"""Timestamp and id helpers (stdlib-only).

Timestamps are serialized the way the UI expects them: ISO 8601 with
millisecond precision and a ``Z`` suffix for UTC
(``2025-01-01T09:00:00.000Z``). Parsing accepts any ISO 8601 string;
naive values are taken as UTC.
"""

from __future__ import annotations

import secrets
import string
import time
from datetime import UTC, datetime, tzinfo

_ID_ALPHABET = string.ascii_lowercase + string.digits


def utc_now() -> datetime:
    """Get current UTC datetime."""
    return datetime.now(UTC)


def epoch_ms() -> int:
    """Milliseconds since the epoch."""
    return int(time.time() * 1000)


def random_suffix(length: int = 9) -> str:
    """Random lowercase base36 string used to keep ids unique within a millisecond."""
    return "".join(secrets.choice(_ID_ALPHABET) for _ in range(length))


def to_iso8601(dt: datetime | None) -> str | None:
    """Convert datetime to ISO 8601 string (UTC, millisecond precision)."""
    if dt is None:
        return None
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat(timespec="milliseconds").replace("+00:00", "Z")


def from_iso8601(s: str | None, tz: tzinfo = UTC) -> datetime | None:
    """Parse ISO 8601 string to an aware datetime; naive values are taken in ``tz``."""
    if not s:
        return None
    dt = datetime.fromisoformat(s)
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz)
    return dt
