"""Domain event primitives shared by every bounded context."""

from __future__ import annotations

from dataclasses import asdict, dataclass, field
from datetime import datetime, timezone
from typing import Any
from uuid import UUID, uuid4


@dataclass(frozen=True)
class DomainEvent:
    """Immutable record of something that happened to an aggregate."""

    aggregate_id: UUID
    event_id: UUID = field(default_factory=uuid4)
    occurred_on: datetime = field(default_factory=lambda: datetime.now(timezone.utc))
    event_name: str = field(init=False)

    def __post_init__(self) -> None:
        object.__setattr__(self, "event_name", self.__class__.__name__)

    def to_payload(self) -> dict[str, Any]:
        """JSON-safe dict of the event fields (UUIDs and datetimes as strings)."""
        return _to_json_safe(asdict(self))


def _to_json_safe(value: Any) -> Any:
    if isinstance(value, datetime):
        return value.isoformat()
    if isinstance(value, UUID):
        return str(value)
    if isinstance(value, (list, tuple)):
        return [_to_json_safe(item) for item in value]
    if isinstance(value, dict):
        return {key: _to_json_safe(val) for key, val in value.items()}
    return value


class DomainEventMixin:
    """Lets an aggregate collect events until its repository persists them."""

    _domain_events: list[DomainEvent]

    def add_domain_event(self, event: DomainEvent) -> None:
        self.__dict__.setdefault("_domain_events", []).append(event)

    def clear_domain_events(self) -> None:
        self.__dict__.get("_domain_events", []).clear()

    @property
    def domain_events(self) -> list[DomainEvent]:
        return list(self.__dict__.get("_domain_events", []))
