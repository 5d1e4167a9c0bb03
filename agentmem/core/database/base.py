"""
Base database models and utilities.

This module provides the foundational database components used across
all entities in the centralized database layer using SQLModel.

Timestamps are persisted as ISO-8601 UTC strings with millisecond precision
(``2026-01-01T12:00:00.000Z``) so that lexicographic order equals
chronological order in every backend.
"""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import ConfigDict
from sqlmodel import SQLModel

ISO_FORMAT = "%Y-%m-%dT%H:%M:%S.%f"


class Base(SQLModel):
    """Base class for all SQLModel entities."""

    model_config = ConfigDict(arbitrary_types_allowed=True)


def to_iso(value: datetime) -> str:
    """Render a datetime as a UTC ISO-8601 string.

    Naive datetimes are taken to already be in UTC.
    """
    if value.tzinfo is None:
        value = value.replace(tzinfo=timezone.utc)
    value = value.astimezone(timezone.utc)
    return value.strftime(ISO_FORMAT)[:-3] + "Z"


def from_iso(value: str) -> datetime:
    """Parse an ISO-8601 string into an aware UTC datetime."""
    if value.endswith("Z"):
        value = value[:-1] + "+00:00"
    parsed = datetime.fromisoformat(value)
    if parsed.tzinfo is None:
        parsed = parsed.replace(tzinfo=timezone.utc)
    return parsed.astimezone(timezone.utc)


def utc_now_iso() -> str:
    """Get the current UTC time as a storage timestamp."""
    return to_iso(datetime.now(timezone.utc))
