from django.urls import path

from order_sheet.handlers import ColumnPreferenceView, OrderSheetFetchView, OrderSheetPageView

urlpatterns = [
    path("", OrderSheetPageView.as_view(), name="daily-order-sheet"),
    path("orders", OrderSheetFetchView.as_view(), name="order-sheet-fetch"),
    path("columns", ColumnPreferenceView.as_view(), name="order-sheet-columns"),
]
