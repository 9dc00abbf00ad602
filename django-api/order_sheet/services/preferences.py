"""Per-actor column visibility."""

import logging
from typing import Iterable

from order_sheet.domain import Actor, VisibleColumns
from order_sheet.stores.interfaces import PreferenceStore

logger = logging.getLogger(__name__)


class ColumnPreferenceService:
    """Reads and saves which report columns an actor wants to see."""

    def __init__(self, store: PreferenceStore) -> None:
        self._store = store

    def visible_columns(self, actor: Actor) -> VisibleColumns:
        """Return the saved columns, storing the default on first use."""
        saved = self._store.get_columns(actor.id)
        if saved is None:
            default = VisibleColumns.default()
            self._store.save_columns(actor.id, list(default))
            return default

        columns = VisibleColumns.from_input(saved)
        if not columns:
            return VisibleColumns.default()
        return columns

    def save_visible_columns(self, actor: Actor, requested: Iterable[str]) -> VisibleColumns:
        """Replace the actor's columns; unknown ids are dropped."""
        requested = list(requested)
        columns = VisibleColumns.from_input(requested)
        dropped = len(set(requested)) - len(columns)
        if dropped:
            logger.debug("Dropped %d unknown column id(s) for %s", dropped, actor.username)
        self._store.save_columns(actor.id, list(columns))
        return columns
