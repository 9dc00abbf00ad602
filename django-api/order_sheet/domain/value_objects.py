"""Domain primitives that enforce validity at creation time."""

import re
from dataclasses import dataclass
from datetime import date
from enum import Enum
from typing import Iterable, Self
from uuid import UUID

from order_sheet.domain.errors import ErrorCode, InvalidDateError

DATE_PATTERN = re.compile(r"[0-9]{4}-[0-9]{2}-[0-9]{2}")

MIN_YEAR = 2000
MAX_YEAR = 2050

# Column id -> header label, in display order.
AVAILABLE_COLUMNS: dict[str, str] = {
    "event": "Event",
    "event_date": "Event Date/Time",
    "order_id": "Order ID",
    "purchaser_name": "Purchaser Name",
    "email": "Email",
    "phone": "Phone",
    "status": "Status",
    "tickets": "Tickets",
}

CAPABILITY = "view_daily_order_sheet"


@dataclass(frozen=True)
class EventId:
    """Unique identifier for an Event."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class OrderId:
    """Unique identifier for an Order."""

    value: UUID

    @classmethod
    def from_string(cls, value: str) -> Self:
        return cls(value=UUID(value))

    def __str__(self) -> str:
        return str(self.value)


@dataclass(frozen=True)
class Quantity:
    """Non-negative number of tickets."""

    value: int

    def __post_init__(self) -> None:
        if self.value < 0:
            raise ValueError("Quantity cannot be negative")


@dataclass(frozen=True)
class ReportDate:
    """A calendar day the order sheet can be requested for."""

    value: date

    @classmethod
    def parse(cls, raw: str, min_year: int = MIN_YEAR, max_year: int = MAX_YEAR) -> Self:
        """Parse a ``YYYY-MM-DD`` string.

        Raises:
            InvalidDateError: If the string is malformed, not a calendar
                date, or outside ``[min_year, max_year]``.
        """
        if not isinstance(raw, str) or not DATE_PATTERN.fullmatch(raw):
            raise InvalidDateError(ErrorCode.INVALID_DATE_FORMAT)
        try:
            value = date.fromisoformat(raw)
        except ValueError:
            raise InvalidDateError(ErrorCode.INVALID_DATE) from None
        if not min_year <= value.year <= max_year:
            raise InvalidDateError(ErrorCode.DATE_OUT_OF_RANGE)
        return cls(value=value)

    @property
    def canonical(self) -> str:
        return self.value.isoformat()

    @property
    def formatted(self) -> str:
        """Long form, e.g. ``Sunday, June 15, 2025``."""
        return f"{self.value:%A, %B} {self.value.day}, {self.value.year}"

    def __str__(self) -> str:
        return self.canonical


class CacheStatus(Enum):
    """Whether a read was served from the cache."""

    HIT = "hit"
    MISS = "miss"


@dataclass(frozen=True)
class VisibleColumns:
    """Ordered subset of AVAILABLE_COLUMNS."""

    columns: tuple[str, ...]

    @classmethod
    def default(cls) -> Self:
        return cls(columns=tuple(AVAILABLE_COLUMNS))

    @classmethod
    def from_input(cls, values: Iterable[str]) -> Self:
        """Keep only known column ids; unknown ids are dropped silently."""
        requested = set(values)
        return cls(columns=tuple(c for c in AVAILABLE_COLUMNS if c in requested))

    def __contains__(self, column: object) -> bool:
        return column in self.columns

    def __iter__(self):
        return iter(self.columns)

    def __len__(self) -> int:
        return len(self.columns)
