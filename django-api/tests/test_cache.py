"""Tests for cache behavior.

Run with: pytest tests/test_cache.py -v
"""

from datetime import date, datetime, timezone as dt_timezone

import pytest
from django.core.cache import cache
from django.core.management import CommandError, call_command

from order_sheet import models
from order_sheet.services.aggregator import OrderAggregator
from order_sheet.services.factory import build_order_cache
from order_sheet.services.order_cache import OrderCache

DAY = date(2025, 6, 15)
OTHER_DAY = date(2025, 6, 16)


class CountingAggregator(OrderAggregator):
    def __init__(self, events, orders) -> None:
        super().__init__(events, orders)
        self.calls = 0

    def aggregate(self, day):
        self.calls += 1
        return super().aggregate(day)


class BrokenStore:
    """A cache backend whose every operation fails."""

    def get(self, *args, **kwargs):
        raise ConnectionError("cache down")

    set = add = delete = get


class FlakyStore:
    """Delegates to the test cache, but the first ``set`` fails."""

    def __init__(self) -> None:
        self.failed = False

    def get(self, *args, **kwargs):
        return cache.get(*args, **kwargs)

    def add(self, *args, **kwargs):
        return cache.add(*args, **kwargs)

    def delete(self, *args, **kwargs):
        return cache.delete(*args, **kwargs)

    def set(self, *args, **kwargs):
        if not self.failed:
            self.failed = True
            raise ConnectionError("blip")
        return cache.set(*args, **kwargs)


@pytest.fixture
def aggregator(catalog) -> CountingAggregator:
    gala = catalog.add_event("Summer Gala", datetime(2025, 6, 15, 19, 0))
    catalog.add_order("A", datetime(2025, 6, 1, 9, 0), [(gala, "Standard", 2)])
    catalog.add_event("Opening", datetime(2025, 6, 16, 18, 0))
    return CountingAggregator(catalog.events, catalog.orders)


@pytest.fixture
def order_cache(aggregator, clock) -> OrderCache:
    return OrderCache(aggregator=aggregator, store=cache, ttl=3600, key_prefix="test_orders_", clock=clock)


class TestGetOrCompute:
    """Tests for the cache-hit/cache-miss branch."""

    def test_second_call_within_ttl_is_a_hit(self, order_cache, aggregator):
        first = order_cache.get_or_compute(DAY)
        second = order_cache.get_or_compute(DAY)

        assert first.was_cache_hit is False
        assert second.was_cache_hit is True
        assert second.rows == first.rows
        assert aggregator.calls == 1

    def test_force_refresh_recomputes_and_overwrites(self, order_cache, aggregator, catalog):
        order_cache.get_or_compute(DAY)
        gala = catalog.events.events[0]
        catalog.add_order("B", datetime(2025, 6, 2, 9, 0), [(gala, "Standard", 1)])

        refreshed = order_cache.get_or_compute(DAY, force_refresh=True)
        cached = order_cache.get_or_compute(DAY)

        assert refreshed.was_cache_hit is False
        assert len(refreshed.rows) == 2
        assert cached.was_cache_hit is True
        assert cached.rows == refreshed.rows
        assert aggregator.calls == 2

    def test_entry_expires_after_ttl(self, order_cache, aggregator, clock):
        order_cache.get_or_compute(DAY)
        clock.advance(minutes=59)
        assert order_cache.get_or_compute(DAY).was_cache_hit is True

        clock.advance(minutes=1)
        assert order_cache.get_or_compute(DAY).was_cache_hit is False
        assert aggregator.calls == 2

    def test_empty_result_is_cached(self, order_cache, aggregator):
        """A day without events is stored and served like any other."""
        empty_day = date(2025, 7, 1)

        first = order_cache.get_or_compute(empty_day)
        second = order_cache.get_or_compute(empty_day)

        assert first.rows == ()
        assert second.was_cache_hit is True
        assert second.rows == ()

    def test_days_are_cached_independently(self, order_cache):
        order_cache.get_or_compute(DAY)

        assert order_cache.get_or_compute(OTHER_DAY).was_cache_hit is False

    def test_key_is_prefixed_hash_of_date(self, order_cache):
        key = order_cache.cache_key(DAY)

        assert key.startswith("test_orders_")
        assert "2025-06-15" not in key
        assert key != order_cache.cache_key(OTHER_DAY)

    def test_broken_store_falls_back_to_computation(self, aggregator, clock):
        order_cache = OrderCache(aggregator=aggregator, store=BrokenStore(), clock=clock)

        first = order_cache.get_or_compute(DAY)
        second = order_cache.get_or_compute(DAY)

        assert len(first.rows) == 1
        assert first.was_cache_hit is False
        assert second.was_cache_hit is False
        order_cache.invalidate()
        order_cache.invalidate(DAY)

    def test_unreadable_entry_is_a_miss(self, order_cache):
        cache.set(order_cache.cache_key(DAY), {"unexpected": True})

        assert order_cache.get_or_compute(DAY).was_cache_hit is False


class TestInvalidate:
    """Tests for explicit invalidation."""

    def test_invalidate_single_date(self, order_cache):
        order_cache.get_or_compute(DAY)
        order_cache.get_or_compute(OTHER_DAY)

        order_cache.invalidate(DAY)

        assert order_cache.get_or_compute(DAY).was_cache_hit is False
        assert order_cache.get_or_compute(OTHER_DAY).was_cache_hit is True

    def test_invalidate_all_dates(self, order_cache):
        order_cache.get_or_compute(DAY)
        order_cache.get_or_compute(OTHER_DAY)

        order_cache.invalidate()

        assert order_cache.get_or_compute(DAY).was_cache_hit is False
        assert order_cache.get_or_compute(OTHER_DAY).was_cache_hit is False

    def test_invalidate_all_leaves_unrelated_keys(self, order_cache):
        cache.set("test_orders_unrelated", "keep me")
        cache.set("sessions:abc", "keep me too")
        order_cache.get_or_compute(DAY)

        order_cache.invalidate()

        assert cache.get("test_orders_unrelated") == "keep me"
        assert cache.get("sessions:abc") == "keep me too"

    def test_invalidate_all_changes_every_key(self, order_cache):
        before = order_cache.cache_key(DAY)
        generation = cache.get(order_cache.generation_key)

        order_cache.invalidate()

        assert cache.get(order_cache.generation_key) != generation
        assert order_cache.cache_key(DAY) != before

    def test_invalidate_all_after_failed_write(self, catalog, aggregator, clock):
        """An entry written after a store error is still cleared."""
        order_cache = OrderCache(aggregator=aggregator, store=FlakyStore(), clock=clock)
        assert order_cache.get_or_compute(DAY).was_cache_hit is False
        order_cache.get_or_compute(DAY)
        assert order_cache.get_or_compute(DAY).was_cache_hit is True
        gala = catalog.events.events[0]
        catalog.add_order("B", datetime(2025, 6, 2, 9, 0), [(gala, "Standard", 1)])

        order_cache.invalidate()

        lookup = order_cache.get_or_compute(DAY)
        assert lookup.was_cache_hit is False
        assert len(lookup.rows) == 2

    def test_invalidate_during_computation_discards_result(self, catalog, clock):
        """A result computed before a bulk invalidation is never served."""
        gala = catalog.add_event("Summer Gala", datetime(2025, 6, 15, 19, 0))
        catalog.add_order("A", datetime(2025, 6, 1, 9, 0), [(gala, "Standard", 2)])
        holder = {}

        class InvalidatingAggregator(OrderAggregator):
            def aggregate(self, day):
                result = super().aggregate(day)
                holder["cache"].invalidate()
                return result

        order_cache = OrderCache(
            aggregator=InvalidatingAggregator(catalog.events, catalog.orders), store=cache, clock=clock
        )
        holder["cache"] = order_cache

        order_cache.get_or_compute(DAY)

        assert cache.get(order_cache.cache_key(DAY)) is None

    def test_lost_generation_key_is_a_miss(self, order_cache):
        order_cache.get_or_compute(DAY)

        cache.delete(order_cache.generation_key)

        assert order_cache.get_or_compute(DAY).was_cache_hit is False


def _seed_event() -> models.Event:
    return models.Event.objects.create(
        title="Summer Gala",
        starts_at=datetime(2025, 6, 15, 19, 0, tzinfo=dt_timezone.utc),
    )


@pytest.mark.django_db
class TestCacheInvalidation:
    """Tests for cache invalidation on model changes."""

    def test_event_save_invalidates_cache(self):
        """Saving an event drops cached order sheets."""
        event = _seed_event()
        order_cache = build_order_cache()
        order_cache.get_or_compute(DAY)

        event.title = "Summer Gala (moved)"
        event.save()

        assert order_cache.get_or_compute(DAY).was_cache_hit is False

    def test_order_save_invalidates_cache(self):
        """Saving an order drops cached order sheets."""
        _seed_event()
        order_cache = build_order_cache()
        order_cache.get_or_compute(DAY)

        models.Order.objects.create(number="1001", created_at=datetime(2025, 6, 1, tzinfo=dt_timezone.utc))

        assert order_cache.get_or_compute(DAY).was_cache_hit is False

    def test_line_item_save_invalidates_cache(self):
        """Saving a line item drops cached order sheets."""
        event = _seed_event()
        order = models.Order.objects.create(number="1001", created_at=datetime(2025, 6, 1, tzinfo=dt_timezone.utc))
        order_cache = build_order_cache()
        assert order_cache.get_or_compute(DAY).rows == ()

        models.LineItem.objects.create(order=order, event=event, ticket_name="Adult", quantity=2)

        lookup = order_cache.get_or_compute(DAY)
        assert lookup.was_cache_hit is False
        assert [row.ticket_count for row in lookup.rows] == [2]

    def test_delete_invalidates_cache(self):
        event = _seed_event()
        order_cache = build_order_cache()
        order_cache.get_or_compute(DAY)

        event.delete()

        assert order_cache.get_or_compute(DAY).was_cache_hit is False


@pytest.mark.django_db
class TestClearCacheCommand:
    """Tests for the clear_order_sheet_cache management command."""

    def test_clear_single_date(self):
        order_cache = build_order_cache()
        order_cache.get_or_compute(DAY)
        order_cache.get_or_compute(OTHER_DAY)

        call_command("clear_order_sheet_cache", date="2025-06-15")

        assert order_cache.get_or_compute(DAY).was_cache_hit is False
        assert order_cache.get_or_compute(OTHER_DAY).was_cache_hit is True

    def test_rejects_invalid_date(self):
        with pytest.raises(CommandError):
            call_command("clear_order_sheet_cache", date="2024-02-30")
