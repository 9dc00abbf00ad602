"""Audit trail of reads of purchaser data."""

import logging
from datetime import date, datetime
from typing import Callable

from django.utils import timezone

from order_sheet.domain import AccessLogEntry, Actor, CacheStatus
from order_sheet.stores.interfaces import AccessLogSink

logger = logging.getLogger(__name__)


class AccessLog:
    """Records who read the order sheet for which day.

    Recording is fire-and-forget: a failing sink is reported on this module's
    logger and never reaches the caller.
    """

    def __init__(self, sink: AccessLogSink, clock: Callable[[], datetime] = timezone.now) -> None:
        self._sink = sink
        self._clock = clock

    def record(self, actor: Actor, day: date, cache_status: CacheStatus) -> None:
        try:
            entry = AccessLogEntry(
                actor_id=actor.id,
                actor_username=actor.username,
                actor_email=actor.email,
                date=day.isoformat(),
                cache_status=cache_status,
                timestamp=self._clock(),
                origin=actor.origin,
            )
            self._sink.write(entry)
        except Exception:
            logger.exception("Failed to record order sheet access for %s on %s", actor.username, day)
