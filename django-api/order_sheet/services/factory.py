"""Explicit wiring of the order sheet services to Django-backed stores."""

from django.core.cache import caches

from order_sheet.conf import get_setting
from order_sheet.services.access_log import AccessLog
from order_sheet.services.aggregator import OrderAggregator
from order_sheet.services.order_cache import OrderCache
from order_sheet.services.order_sheet_service import OrderSheetService
from order_sheet.services.preferences import ColumnPreferenceService
from order_sheet.stores.django_store import (
    DjangoEventProvider,
    DjangoOrderProvider,
    DjangoPreferenceStore,
    LoggingAccessLogSink,
)


def build_order_cache() -> OrderCache:
    aggregator = OrderAggregator(events=DjangoEventProvider(), orders=DjangoOrderProvider())
    return OrderCache(
        aggregator=aggregator,
        store=caches[get_setting("CACHE_ALIAS")],
        ttl=get_setting("CACHE_TTL"),
        key_prefix=get_setting("CACHE_KEY_PREFIX"),
    )


def build_preference_service() -> ColumnPreferenceService:
    return ColumnPreferenceService(store=DjangoPreferenceStore())


def build_order_sheet_service() -> OrderSheetService:
    return OrderSheetService(
        cache=build_order_cache(),
        access_log=AccessLog(sink=LoggingAccessLogSink(get_setting("ACCESS_LOGGER"))),
        preferences=build_preference_service(),
        min_year=get_setting("MIN_YEAR"),
        max_year=get_setting("MAX_YEAR"),
    )
