"""Order aggregation - joins a day's events with their orders.

The aggregator:
- Depends only on provider interfaces
- Produces one row per (order, event) pair
- Skips events and orders the providers cannot serve, recording why
- Sorts rows by event start, then order creation, as canonical strings
"""

import logging
from datetime import date

from order_sheet.domain import (
    AggregationResult,
    Event,
    LineItem,
    Order,
    OrderRow,
    SkippedSource,
)
from order_sheet.domain.errors import ProviderError
from order_sheet.domain.models import canonical_datetime
from order_sheet.stores.interfaces import EventProvider, OrderProvider

logger = logging.getLogger(__name__)


class OrderAggregator:
    """Builds the flattened order rows for one calendar day."""

    def __init__(self, events: EventProvider, orders: OrderProvider) -> None:
        self._events = events
        self._orders = orders

    def aggregate(self, day: date) -> AggregationResult:
        """Return the sorted rows for every order tied to an event on ``day``.

        Raises:
            ProviderError: If the event catalog itself cannot be read.
        """
        rows: list[OrderRow] = []
        skipped: list[SkippedSource] = []

        for event in self._events.events_on(day):
            try:
                items_by_order = self._orders.order_items_for_event(event.id)
            except ProviderError as exc:
                logger.warning("Error getting orders for event %s: %s", event.id, exc.message)
                skipped.append(SkippedSource(kind="event", source_id=str(event.id), reason=exc.message))
                continue

            for order_id, items in items_by_order.items():
                valid_items = [
                    item for item in items
                    if item.event_id == event.id and item.quantity.value > 0
                ]
                if not valid_items:
                    continue

                try:
                    order = self._orders.get_order(order_id)
                except ProviderError as exc:
                    logger.warning("Error getting order %s: %s", order_id, exc.message)
                    skipped.append(SkippedSource(kind="order", source_id=str(order_id), reason=exc.message))
                    continue
                if order is None:
                    logger.warning("Order %s could not be resolved, skipping", order_id)
                    skipped.append(SkippedSource(kind="order", source_id=str(order_id), reason="Order not found"))
                    continue

                rows.append(build_row(event, order, valid_items))

        rows.sort(key=lambda row: row.sort_key)
        return AggregationResult(rows=tuple(rows), skipped=tuple(skipped))


def build_row(event: Event, order: Order, items: list[LineItem]) -> OrderRow:
    """Flatten one order's items for one event."""
    return OrderRow(
        event_id=str(event.id),
        event_title=event.title,
        event_start=canonical_datetime(event.starts_at),
        order_id=str(order.id),
        order_number=order.number,
        order_edit_reference=order.edit_reference,
        purchaser_name=order.purchaser_name,
        purchaser_email=order.email,
        purchaser_phone=order.phone,
        order_status=order.status,
        order_status_label=order.status_label,
        ticket_count=sum(item.quantity.value for item in items),
        ticket_summary=", ".join(f"{item.name} (x{item.quantity.value})" for item in items),
        order_created_at=canonical_datetime(order.created_at),
    )
