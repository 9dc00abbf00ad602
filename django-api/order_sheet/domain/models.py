"""Domain models representing upstream data and report output.

These are pure domain objects with no persistence or HTTP concerns.
Django ORM models are in order_sheet/models.py (persistence layer).
"""

from dataclasses import asdict, dataclass, field
from datetime import datetime
from typing import Any, Self

from order_sheet.domain.value_objects import (
    CAPABILITY,
    CacheStatus,
    EventId,
    OrderId,
    Quantity,
    ReportDate,
)

CANONICAL_DATETIME_FORMAT = "%Y-%m-%d %H:%M:%S"


def canonical_datetime(value: datetime | None) -> str:
    """Format a datetime so that string order equals chronological order."""
    if value is None:
        return ""
    return value.strftime(CANONICAL_DATETIME_FORMAT)


@dataclass(frozen=True)
class Event:
    """Domain representation of a calendar event."""

    id: EventId
    title: str
    starts_at: datetime


@dataclass(frozen=True)
class LineItem:
    """A purchased ticket entry inside an order."""

    ticket_id: str
    event_id: EventId
    name: str
    quantity: Quantity


@dataclass(frozen=True)
class Order:
    """Domain representation of an order with billing detail."""

    id: OrderId
    number: str
    edit_reference: str
    first_name: str
    last_name: str
    email: str
    phone: str | None
    status: str
    status_label: str
    created_at: datetime | None

    @property
    def purchaser_name(self) -> str:
        return f"{self.first_name} {self.last_name}".strip()


@dataclass(frozen=True)
class OrderRow:
    """One order's tickets for one event, flattened for display."""

    event_id: str
    event_title: str
    event_start: str
    order_id: str
    order_number: str
    order_edit_reference: str
    purchaser_name: str
    purchaser_email: str
    purchaser_phone: str | None
    order_status: str
    order_status_label: str
    ticket_count: int
    ticket_summary: str
    order_created_at: str

    @property
    def sort_key(self) -> tuple[str, str]:
        return (self.event_start, self.order_created_at)

    def to_dict(self) -> dict[str, Any]:
        return asdict(self)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(**data)


@dataclass(frozen=True)
class SkippedSource:
    """An event or order left out of an aggregation, and why."""

    kind: str
    source_id: str
    reason: str


@dataclass(frozen=True)
class AggregationResult:
    """Rows produced for a day, plus whatever had to be skipped."""

    rows: tuple[OrderRow, ...] = ()
    skipped: tuple[SkippedSource, ...] = ()

    @property
    def is_partial(self) -> bool:
        return bool(self.skipped)


@dataclass(frozen=True)
class CacheEntry:
    """Serializable snapshot of the rows computed for one day."""

    date: str
    rows: tuple[OrderRow, ...]
    created_at: datetime

    def to_dict(self) -> dict[str, Any]:
        return {
            "date": self.date,
            "rows": [row.to_dict() for row in self.rows],
            "created_at": self.created_at.isoformat(),
        }

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> Self:
        return cls(
            date=data["date"],
            rows=tuple(OrderRow.from_dict(row) for row in data["rows"]),
            created_at=datetime.fromisoformat(data["created_at"]),
        )


@dataclass(frozen=True)
class Actor:
    """The identity a request is made on behalf of."""

    id: str
    username: str
    email: str = ""
    origin: str = "unknown"
    capabilities: frozenset[str] = field(default_factory=frozenset)

    @property
    def can_view_order_sheet(self) -> bool:
        return CAPABILITY in self.capabilities


@dataclass(frozen=True)
class AccessLogEntry:
    """Audit record of a read of purchaser data."""

    actor_id: str
    actor_username: str
    actor_email: str
    date: str
    cache_status: CacheStatus
    timestamp: datetime
    origin: str


@dataclass(frozen=True)
class OrderSheet:
    """Everything needed to render the report for one day."""

    date: ReportDate
    rows: tuple[OrderRow, ...]
    was_cache_hit: bool
    visible_columns: tuple[str, ...]

    @property
    def total_orders(self) -> int:
        return len(self.rows)

    @property
    def total_tickets(self) -> int:
        return sum(row.ticket_count for row in self.rows)

    @property
    def unique_events(self) -> int:
        return len({row.event_id for row in self.rows})
