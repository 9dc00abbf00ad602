"""Store interfaces (repository pattern).

Stores must be swappable and return domain models.
"""

from abc import ABC, abstractmethod
from datetime import date

from order_sheet.domain import AccessLogEntry, Event, EventId, LineItem, Order, OrderId


class EventProvider(ABC):
    """Interface for the event catalog."""

    @abstractmethod
    def events_on(self, day: date) -> list[Event]:
        """Return published events starting within the day, ordered by start ascending.

        Raises:
            ProviderError: If the catalog cannot be read.
        """
        ...


class OrderProvider(ABC):
    """Interface for the order ledger."""

    @abstractmethod
    def order_items_for_event(self, event_id: EventId) -> dict[OrderId, list[LineItem]]:
        """Return the event's valid line items grouped by order.

        Raises:
            ProviderError: If the ledger cannot be queried for this event.
        """
        ...

    @abstractmethod
    def get_order(self, order_id: OrderId) -> Order | None:
        """Return an order with billing detail, or None if it cannot be resolved.

        Raises:
            ProviderError: If the ledger cannot be queried for this order.
        """
        ...


class PreferenceStore(ABC):
    """Interface for per-actor column preferences."""

    @abstractmethod
    def get_columns(self, actor_id: str) -> list[str] | None:
        """Return the saved column ids, or None if nothing was saved."""
        ...

    @abstractmethod
    def save_columns(self, actor_id: str, columns: list[str]) -> None:
        """Replace the saved column ids."""
        ...


class AccessLogSink(ABC):
    """Write-only destination for access log entries."""

    @abstractmethod
    def write(self, entry: AccessLogEntry) -> None:
        """Persist one entry.

        Raises:
            LogSinkError: If the entry could not be written.
        """
        ...
