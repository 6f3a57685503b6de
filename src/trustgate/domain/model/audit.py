"""Audit records for event status transitions."""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import TYPE_CHECKING

from .entity import Entity, utc_now

if TYPE_CHECKING:
    from datetime import datetime
    from uuid import UUID

    from .enums import EventStatus


@dataclass(eq=False, kw_only=True)
class EventStatusChange(Entity):
    """One row of the append-only status ledger.

    ``from_status`` is ``None`` only for the row written when the event is created.
    """

    event_id: UUID
    from_status: EventStatus | None
    to_status: EventStatus
    reason: str
    changed_by: str | None = None
    changed_at: datetime = field(default_factory=utc_now)

    def __post_init__(self) -> None:
        if self.from_status == self.to_status:
            raise ValueError(f"Status change must move away from {self.to_status}")
        if not self.reason.strip():
            raise ValueError("Status change requires a reason")
