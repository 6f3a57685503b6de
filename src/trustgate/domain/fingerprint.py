"""Deterministic dedup keys for events."""

from __future__ import annotations

import hashlib
import unicodedata
from datetime import UTC, date, datetime
from typing import Final

FINGERPRINT_LENGTH: Final[int] = 32


def normalize_title(title: str) -> str:
    """Unicode-normalize, lower-case and collapse whitespace."""

    normalized = unicodedata.normalize("NFKC", title).lower()
    return " ".join(normalized.split())


def event_day(occurred_at: datetime | date) -> date:
    """UTC calendar day of ``occurred_at``; naive datetimes are read as UTC."""

    if isinstance(occurred_at, datetime):
        if occurred_at.tzinfo is None:
            occurred_at = occurred_at.replace(tzinfo=UTC)
        return occurred_at.astimezone(UTC).date()
    return occurred_at


def compute_fingerprint(title: str, occurred_at: datetime | date, source_type: str) -> str:
    """First 32 hex chars of ``sha256("{source_type}:{YYYY-MM-DD}:{normalized title}")``.

    Day granularity is intentional: two stories with the same normalized title from the
    same source type on the same UTC day collapse into one event.
    """

    key = f"{source_type}:{event_day(occurred_at).isoformat()}:{normalize_title(title)}"
    return hashlib.sha256(key.encode("utf-8")).hexdigest()[:FINGERPRINT_LENGTH]
