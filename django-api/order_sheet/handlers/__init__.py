from order_sheet.handlers.views import ColumnPreferenceView, OrderSheetFetchView, OrderSheetPageView

__all__ = [
    "ColumnPreferenceView",
    "OrderSheetFetchView",
    "OrderSheetPageView",
]
