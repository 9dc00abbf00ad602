"""Django ORM implementations of the store interfaces."""

import logging
from datetime import date, datetime, time

from django.db import DatabaseError
from django.urls import NoReverseMatch, reverse
from django.utils import timezone

from order_sheet import models
from order_sheet.domain import (
    AccessLogEntry,
    CacheStatus,
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


def _day_bounds(day: date) -> tuple[datetime, datetime]:
    tz = timezone.get_current_timezone()
    return (
        datetime.combine(day, time.min, tzinfo=tz),
        datetime.combine(day, time(23, 59, 59), tzinfo=tz),
    )


def _local(value: datetime | None) -> datetime | None:
    if value is None:
        return None
    if timezone.is_naive(value):
        return value
    return timezone.localtime(value)


class DjangoEventProvider(EventProvider):
    """Event catalog backed by the Event model."""

    def events_on(self, day: date) -> list[Event]:
        start, end = _day_bounds(day)
        try:
            rows = list(
                models.Event.objects.filter(
                    is_published=True,
                    starts_at__range=(start, end),
                ).order_by("starts_at")
            )
        except DatabaseError as exc:
            raise ProviderError(f"Could not load events for {day.isoformat()}") from exc
        return [
            Event(
                id=EventId(value=row.id),
                title=row.title,
                starts_at=_local(row.starts_at),
            )
            for row in rows
        ]


class DjangoOrderProvider(OrderProvider):
    """Order ledger backed by the Order and LineItem models."""

    def order_items_for_event(self, event_id: EventId) -> dict[OrderId, list[LineItem]]:
        try:
            items = list(
                models.LineItem.objects.filter(event_id=event_id.value, quantity__gt=0)
                .select_related("order")
                .order_by("order__created_at", "ticket_name")
            )
        except DatabaseError as exc:
            raise ProviderError(f"Could not load line items for event {event_id}") from exc

        grouped: dict[OrderId, list[LineItem]] = {}
        for item in items:
            grouped.setdefault(OrderId(value=item.order_id), []).append(
                LineItem(
                    ticket_id=str(item.id),
                    event_id=EventId(value=item.event_id),
                    name=item.ticket_name,
                    quantity=Quantity(item.quantity),
                )
            )
        return grouped

    def get_order(self, order_id: OrderId) -> Order | None:
        try:
            row = models.Order.objects.filter(pk=order_id.value).first()
        except DatabaseError as exc:
            raise ProviderError(f"Could not load order {order_id}") from exc
        if row is None:
            return None

        return Order(
            id=order_id,
            number=row.number,
            edit_reference=self._edit_reference(row),
            first_name=row.billing_first_name,
            last_name=row.billing_last_name,
            email=row.billing_email,
            phone=row.billing_phone or None,
            status=row.status,
            status_label=row.get_status_display(),
            created_at=_local(row.created_at),
        )

    @staticmethod
    def _edit_reference(row: models.Order) -> str:
        try:
            return reverse("admin:order_sheet_order_change", args=[row.pk])
        except NoReverseMatch:
            return ""


class DjangoPreferenceStore(PreferenceStore):
    """Column preferences backed by the ColumnPreference model."""

    def get_columns(self, actor_id: str) -> list[str] | None:
        row = models.ColumnPreference.objects.filter(actor_id=actor_id).first()
        if row is None:
            return None
        return list(row.visible_columns)

    def save_columns(self, actor_id: str, columns: list[str]) -> None:
        models.ColumnPreference.objects.update_or_create(
            actor_id=actor_id,
            defaults={"visible_columns": list(columns)},
        )


class LoggingAccessLogSink(AccessLogSink):
    """Writes access log entries as lines on a dedicated logger."""

    def __init__(self, logger_name: str) -> None:
        self._logger = logging.getLogger(logger_name)

    def write(self, entry: AccessLogEntry) -> None:
        try:
            self._logger.info(
                "PII access%s - User: %s (ID: %s, Email: %s) | Date: %s | Time: %s | IP: %s",
                " (CACHED)" if entry.cache_status is CacheStatus.HIT else "",
                entry.actor_username,
                entry.actor_id,
                entry.actor_email,
                entry.date,
                entry.timestamp.isoformat(),
                entry.origin,
            )
        except (OSError, ValueError) as exc:
            raise LogSinkError(str(exc)) from exc
