"""Django ORM models (persistence layer).

These models handle database concerns. Domain logic lives in domain/models.py.
"""

import uuid

from django.db import models


class Event(models.Model):
    """Persistence model for calendar events."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    title = models.CharField(max_length=255)
    starts_at = models.DateTimeField()
    is_published = models.BooleanField(default=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["starts_at"]
        indexes = [
            models.Index(fields=["starts_at"], name="order_sheet_event_start_idx"),
        ]

    def __str__(self) -> str:
        return self.title


class Order(models.Model):
    """Persistence model for shop orders."""

    class Status(models.TextChoices):
        PENDING = "pending", "Pending payment"
        PROCESSING = "processing", "Processing"
        ON_HOLD = "on-hold", "On hold"
        COMPLETED = "completed", "Completed"
        CANCELLED = "cancelled", "Cancelled"
        REFUNDED = "refunded", "Refunded"
        FAILED = "failed", "Failed"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    number = models.CharField(max_length=32, unique=True)
    billing_first_name = models.CharField(max_length=100, blank=True)
    billing_last_name = models.CharField(max_length=100, blank=True)
    billing_email = models.EmailField(blank=True)
    billing_phone = models.CharField(max_length=50, blank=True, null=True)
    status = models.CharField(max_length=20, choices=Status.choices, default=Status.PENDING)
    created_at = models.DateTimeField(null=True, blank=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["created_at"]
        indexes = [
            models.Index(fields=["status"], name="order_sheet_order_status_idx"),
        ]

    def __str__(self) -> str:
        return f"#{self.number}"


class LineItem(models.Model):
    """Persistence model for ticket line items."""

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    order = models.ForeignKey(Order, on_delete=models.CASCADE, related_name="line_items")
    event = models.ForeignKey(Event, on_delete=models.CASCADE, related_name="line_items")
    ticket_name = models.CharField(max_length=255)
    quantity = models.PositiveIntegerField(default=1)

    class Meta:
        indexes = [
            models.Index(fields=["event", "order"], name="order_sheet_item_event_idx"),
        ]

    def __str__(self) -> str:
        return f"{self.ticket_name} (x{self.quantity})"


class ColumnPreference(models.Model):
    """Persistence model for a user's visible order sheet columns."""

    actor_id = models.CharField(max_length=150, unique=True)
    visible_columns = models.JSONField(default=list)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        permissions = [
            ("view_daily_order_sheet", "Can view the daily order sheet"),
        ]

    def __str__(self) -> str:
        return self.actor_id
