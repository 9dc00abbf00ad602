"""Pytest configuration and shared fixtures."""

import logging
import uuid
from datetime import date, datetime, timedelta, timezone as dt_timezone

import pytest
from rest_framework.test import APIClient

from order_sheet.domain import (
    AccessLogEntry,
    Actor,
    CAPABILITY,
    Event,
    EventId,
    LineItem,
    Order,
    OrderId,
    Quantity,
)
from order_sheet.domain.errors import LogSinkError, ProviderError
from order_sheet.stores.interfaces import (
    AccessLogSink,
    EventProvider,
    OrderProvider,
    PreferenceStore,
)


class FakeEventProvider(EventProvider):
    def __init__(self) -> None:
        self.events: list[Event] = []
        self.calls = 0

    def events_on(self, day: date) -> list[Event]:
        self.calls += 1
        found = [e for e in self.events if e.starts_at.date() == day]
        return sorted(found, key=lambda e: e.starts_at)


class FakeOrderProvider(OrderProvider):
    def __init__(self) -> None:
        self.items: dict[EventId, dict[OrderId, list[LineItem]]] = {}
        self.orders: dict[OrderId, Order] = {}
        self.failing_events: set[EventId] = set()
        self.failing_orders: set[OrderId] = set()

    def order_items_for_event(self, event_id: EventId) -> dict[OrderId, list[LineItem]]:
        if event_id in self.failing_events:
            raise ProviderError(f"Ledger unavailable for event {event_id}")
        return {order_id: list(items) for order_id, items in self.items.get(event_id, {}).items()}

    def get_order(self, order_id: OrderId) -> Order | None:
        if order_id in self.failing_orders:
            raise ProviderError(f"Ledger unavailable for order {order_id}")
        return self.orders.get(order_id)


class Catalog:
    """Builds events and orders into the fake providers."""

    def __init__(self) -> None:
        self.events = FakeEventProvider()
        self.orders = FakeOrderProvider()

    def add_event(self, title: str, starts_at: datetime) -> Event:
        event = Event(id=EventId(value=uuid.uuid4()), title=title, starts_at=starts_at)
        self.events.events.append(event)
        return event

    def add_order(
        self,
        number: str,
        created_at: datetime | None,
        tickets: list[tuple[Event, str, int]],
        status: str = "processing",
        status_label: str = "Processing",
        phone: str | None = "+1 555 0100",
    ) -> Order:
        order = Order(
            id=OrderId(value=uuid.uuid4()),
            number=number,
            edit_reference=f"/admin/order_sheet/order/{number}/change/",
            first_name="Ada",
            last_name=f"Buyer {number}",
            email=f"buyer{number}@example.com",
            phone=phone,
            status=status,
            status_label=status_label,
            created_at=created_at,
        )
        self.orders.orders[order.id] = order
        for event, name, quantity in tickets:
            item = LineItem(
                ticket_id=str(uuid.uuid4()),
                event_id=event.id,
                name=name,
                quantity=Quantity(quantity),
            )
            self.orders.items.setdefault(event.id, {}).setdefault(order.id, []).append(item)
        return order


class InMemoryPreferenceStore(PreferenceStore):
    def __init__(self) -> None:
        self.saved: dict[str, list[str]] = {}

    def get_columns(self, actor_id: str) -> list[str] | None:
        columns = self.saved.get(actor_id)
        return None if columns is None else list(columns)

    def save_columns(self, actor_id: str, columns: list[str]) -> None:
        self.saved[actor_id] = list(columns)


class RecordingSink(AccessLogSink):
    def __init__(self) -> None:
        self.entries: list[AccessLogEntry] = []

    def write(self, entry: AccessLogEntry) -> None:
        self.entries.append(entry)


class BrokenSink(AccessLogSink):
    def write(self, entry: AccessLogEntry) -> None:
        raise LogSinkError("disk full")


class FakeClock:
    def __init__(self, start: datetime) -> None:
        self.now = start

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now += timedelta(**kwargs)


class RecordingLogHandler(logging.Handler):
    def __init__(self) -> None:
        super().__init__()
        self.records: list[logging.LogRecord] = []

    def emit(self, record: logging.LogRecord) -> None:
        self.records.append(record)

    def messages(self, level: int) -> list[str]:
        return [r.getMessage() for r in self.records if r.levelno == level]


@pytest.fixture
def api_client() -> APIClient:
    return APIClient()


@pytest.fixture(autouse=True)
def clear_cache():
    from django.core.cache import cache
    cache.clear()
    yield
    cache.clear()


@pytest.fixture
def catalog() -> Catalog:
    return Catalog()


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock(datetime(2025, 6, 15, 8, 0, tzinfo=dt_timezone.utc))


@pytest.fixture
def preference_store() -> InMemoryPreferenceStore:
    return InMemoryPreferenceStore()


@pytest.fixture
def sink() -> RecordingSink:
    return RecordingSink()


@pytest.fixture
def broken_sink() -> BrokenSink:
    return BrokenSink()


@pytest.fixture
def actor() -> Actor:
    return Actor(
        id="7",
        username="boxoffice",
        email="boxoffice@example.com",
        origin="203.0.113.9",
        capabilities=frozenset({CAPABILITY}),
    )


@pytest.fixture
def outsider() -> Actor:
    return Actor(id="8", username="intern", email="intern@example.com", origin="203.0.113.10")


@pytest.fixture
def order_sheet_logs():
    """Records everything logged under the order_sheet logger."""
    handler = RecordingLogHandler()
    logger = logging.getLogger("order_sheet")
    logger.addHandler(handler)
    yield handler
    logger.removeHandler(handler)
