"""Django signals for cache invalidation.

Any write to an event, order or line item drops every cached order sheet:
a saved order does not tell us which days it appeared on without another
lookup, and an edited event may have moved to a different day.
"""

import logging

from django.db.models.signals import post_delete, post_save
from django.dispatch import receiver

from order_sheet.models import Event, LineItem, Order
from order_sheet.services.factory import build_order_cache

logger = logging.getLogger(__name__)


def _clear_order_sheet_cache(sender) -> None:
    logger.debug("%s changed, clearing order sheet cache", sender.__name__)
    build_order_cache().invalidate()


@receiver([post_save, post_delete], sender=Event)
def invalidate_event_cache(sender, instance, **kwargs):
    """Invalidate caches when an event is saved or deleted."""
    _clear_order_sheet_cache(sender)


@receiver([post_save, post_delete], sender=Order)
def invalidate_order_cache(sender, instance, **kwargs):
    """Invalidate caches when an order is saved or deleted."""
    _clear_order_sheet_cache(sender)


@receiver([post_save, post_delete], sender=LineItem)
def invalidate_line_item_cache(sender, instance, **kwargs):
    """Invalidate caches when a line item is saved or deleted."""
    _clear_order_sheet_cache(sender)
