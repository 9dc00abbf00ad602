"""App settings, read from ``settings.ORDER_SHEET`` with defaults."""

from typing import Any

from django.conf import settings

DEFAULTS: dict[str, Any] = {
    "CACHE_ALIAS": "default",
    "CACHE_TTL": 3600,
    "CACHE_KEY_PREFIX": "dos_orders_",
    "MIN_YEAR": 2000,
    "MAX_YEAR": 2050,
    "ACCESS_LOGGER": "order_sheet.access",
}


def get_setting(name: str) -> Any:
    if name not in DEFAULTS:
        raise KeyError(f"Unknown order sheet setting: {name}")
    overrides = getattr(settings, "ORDER_SHEET", None) or {}
    return overrides.get(name, DEFAULTS[name])
