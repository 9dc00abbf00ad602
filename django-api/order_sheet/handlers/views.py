"""HTTP handlers (views) - handle HTTP concerns only.

Handlers:
- Parse requests and validate input format
- Build the Actor explicitly from the request
- Call services for business logic
- Map domain errors to HTTP responses
- Never contain business logic
- Never expose internal error details
"""

from urllib.parse import urlencode

from django.contrib import messages
from django.contrib.auth.mixins import LoginRequiredMixin
from django.core.exceptions import PermissionDenied
from django.http import HttpRequest, HttpResponse
from django.shortcuts import redirect, render
from django.template.loader import render_to_string
from django.urls import reverse
from django.views import View
from rest_framework.authentication import SessionAuthentication
from rest_framework.permissions import IsAuthenticated
from rest_framework.request import Request
from rest_framework.response import Response
from rest_framework.views import APIView

from order_sheet.domain import AVAILABLE_COLUMNS, CAPABILITY, Actor, OrderSheet
from order_sheet.domain.errors import AuthorizationError
from order_sheet.handlers.serializers import (
    ColumnPreferenceSerializer,
    FetchOrdersSerializer,
    OrderRowSerializer,
)
from order_sheet.services.factory import build_order_sheet_service, build_preference_service
from order_sheet.services.order_sheet_service import require_capability

TABLE_TEMPLATE = "order_sheet/orders_table.html"
PAGE_TEMPLATE = "order_sheet/daily_order_sheet.html"


def actor_from_request(request: HttpRequest | Request) -> Actor:
    user = request.user
    capabilities = frozenset({CAPABILITY}) if user.has_perm(f"order_sheet.{CAPABILITY}") else frozenset()
    return Actor(
        id=str(user.pk),
        username=user.get_username(),
        email=getattr(user, "email", "") or "",
        origin=request.META.get("REMOTE_ADDR", "unknown"),
        capabilities=capabilities,
    )


def table_context(sheet: OrderSheet) -> dict:
    return {
        "sheet": sheet,
        "columns": [(key, AVAILABLE_COLUMNS[key]) for key in sheet.visible_columns],
    }


class OrderSheetPageView(LoginRequiredMixin, View):
    """Handler for GET/POST /order-sheet/"""

    service_factory = staticmethod(build_order_sheet_service)
    preference_factory = staticmethod(build_preference_service)

    def get(self, request: HttpRequest) -> HttpResponse:
        actor = actor_from_request(request)
        try:
            sheet = self.service_factory().load_sheet_or_today(
                actor,
                request.GET.get("date"),
                force_refresh=request.GET.get("refresh_cache") == "1",
            )
        except AuthorizationError:
            raise PermissionDenied
        context = table_context(sheet)
        context["available_columns"] = AVAILABLE_COLUMNS.items()
        return render(request, PAGE_TEMPLATE, context)

    def post(self, request: HttpRequest) -> HttpResponse:
        """Save the column visibility form, then show the page again."""
        actor = actor_from_request(request)
        try:
            require_capability(actor)
        except AuthorizationError:
            raise PermissionDenied
        self.preference_factory().save_visible_columns(actor, request.POST.getlist("visible_columns"))
        messages.success(request, "Column preferences saved.")
        url = reverse("daily-order-sheet")
        if request.GET.get("date"):
            url = f"{url}?{urlencode({'date': request.GET['date']})}"
        return redirect(url)


class OrderSheetFetchView(APIView):
    """Handler for POST /order-sheet/orders"""

    authentication_classes = [SessionAuthentication]
    permission_classes = [IsAuthenticated]
    service_factory = staticmethod(build_order_sheet_service)

    def post(self, request: Request) -> Response:
        serializer = FetchOrdersSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        data = serializer.validated_data

        sheet = self.service_factory().load_sheet(
            actor_from_request(request),
            data["date"],
            force_refresh=data["refresh_cache"] == "1",
        )
        fragment = render_to_string(TABLE_TEMPLATE, table_context(sheet), request=request)
        return Response({
            "success": True,
            "date": sheet.date.canonical,
            "formatted_date": sheet.date.formatted,
            "was_cache_hit": sheet.was_cache_hit,
            "visible_columns": list(sheet.visible_columns),
            "rows": OrderRowSerializer(sheet.rows, many=True).data,
            "rendered_fragment": fragment,
        })


class ColumnPreferenceView(APIView):
    """Handler for GET/POST /order-sheet/columns"""

    authentication_classes = [SessionAuthentication]
    permission_classes = [IsAuthenticated]
    preference_factory = staticmethod(build_preference_service)

    def get(self, request: Request) -> Response:
        actor = self._authorized_actor(request)
        columns = self.preference_factory().visible_columns(actor)
        return Response({"success": True, "visible_columns": list(columns)})

    def post(self, request: Request) -> Response:
        actor = self._authorized_actor(request)
        serializer = ColumnPreferenceSerializer(data=request.data)
        serializer.is_valid(raise_exception=True)
        columns = self.preference_factory().save_visible_columns(actor, serializer.validated_data["visible_columns"])
        return Response({"success": True, "visible_columns": list(columns)})

    @staticmethod
    def _authorized_actor(request: Request) -> Actor:
        actor = actor_from_request(request)
        require_capability(actor)
        return actor
