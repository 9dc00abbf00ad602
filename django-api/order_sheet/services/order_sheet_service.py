"""Order sheet service - all business logic lives here.

Services:
- Depend only on interfaces (stores) and collaborators passed in
- Validate domain invariants
- Perform orchestration and error mapping
- Return domain models or domain errors

A request moves Received -> Validated -> Authorized -> Resolved (hit or
miss) -> Logged -> Responded, or stops with a domain error.
"""

import logging
from datetime import date
from typing import Callable

from django.utils import timezone

from order_sheet.domain import Actor, CacheStatus, OrderSheet, ReportDate
from order_sheet.domain.errors import AuthorizationError, InvalidDateError
from order_sheet.domain.value_objects import MAX_YEAR, MIN_YEAR
from order_sheet.services.access_log import AccessLog
from order_sheet.services.order_cache import OrderCache
from order_sheet.services.preferences import ColumnPreferenceService

logger = logging.getLogger(__name__)


def require_capability(actor: Actor) -> None:
    if not actor.can_view_order_sheet:
        logger.warning(
            "Order sheet access denied for %s (ID: %s) from %s",
            actor.username,
            actor.id,
            actor.origin,
        )
        raise AuthorizationError()


class OrderSheetService:
    """Service for the daily order sheet."""

    def __init__(
        self,
        cache: OrderCache,
        access_log: AccessLog,
        preferences: ColumnPreferenceService,
        min_year: int = MIN_YEAR,
        max_year: int = MAX_YEAR,
        today: Callable[[], date] = timezone.localdate,
    ) -> None:
        self._cache = cache
        self._access_log = access_log
        self._preferences = preferences
        self._min_year = min_year
        self._max_year = max_year
        self._today = today

    def parse_date(self, raw: str | None) -> ReportDate:
        """Validate a requested date; a missing date means today.

        Raises:
            InvalidDateError: If the date is malformed or out of range.
        """
        if raw is None or raw == "":
            return ReportDate(value=self._today())
        return ReportDate.parse(raw, min_year=self._min_year, max_year=self._max_year)

    def authorize(self, actor: Actor) -> None:
        """Check the capability before any data is read.

        Raises:
            AuthorizationError: If the actor lacks the order sheet capability.
        """
        require_capability(actor)

    def load_sheet(self, actor: Actor, raw_date: str | None, force_refresh: bool = False) -> OrderSheet:
        """Return the order sheet for a day.

        Raises:
            InvalidDateError: If the date is malformed or out of range.
            AuthorizationError: If the actor lacks the order sheet capability.
        """
        report_date = self.parse_date(raw_date)
        self.authorize(actor)
        return self._resolve(actor, report_date, force_refresh)

    def load_sheet_or_today(self, actor: Actor, raw_date: str | None, force_refresh: bool = False) -> OrderSheet:
        """Like load_sheet, but an invalid date falls back to today.

        Raises:
            AuthorizationError: If the actor lacks the order sheet capability.
        """
        try:
            report_date = self.parse_date(raw_date)
        except InvalidDateError:
            report_date = ReportDate(value=self._today())
        self.authorize(actor)
        return self._resolve(actor, report_date, force_refresh)

    def _resolve(self, actor: Actor, report_date: ReportDate, force_refresh: bool) -> OrderSheet:
        visible = self._preferences.visible_columns(actor)
        lookup = self._cache.get_or_compute(report_date.value, force_refresh=force_refresh)
        status = CacheStatus.HIT if lookup.was_cache_hit else CacheStatus.MISS
        self._access_log.record(actor, report_date.value, status)
        return OrderSheet(
            date=report_date,
            rows=lookup.rows,
            was_cache_hit=lookup.was_cache_hit,
            visible_columns=visible.columns,
        )
