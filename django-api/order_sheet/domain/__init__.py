from order_sheet.domain.models import (
    AccessLogEntry,
    Actor,
    AggregationResult,
    CacheEntry,
    Event,
    LineItem,
    Order,
    OrderRow,
    OrderSheet,
    SkippedSource,
)
from order_sheet.domain.value_objects import (
    AVAILABLE_COLUMNS,
    CAPABILITY,
    CacheStatus,
    EventId,
    OrderId,
    Quantity,
    ReportDate,
    VisibleColumns,
)

__all__ = [
    "AccessLogEntry",
    "Actor",
    "AggregationResult",
    "CacheEntry",
    "Event",
    "LineItem",
    "Order",
    "OrderRow",
    "OrderSheet",
    "SkippedSource",
    "AVAILABLE_COLUMNS",
    "CAPABILITY",
    "CacheStatus",
    "EventId",
    "OrderId",
    "Quantity",
    "ReportDate",
    "VisibleColumns",
]
