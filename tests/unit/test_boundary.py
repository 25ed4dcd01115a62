"""Tests for the boundary synthesizer."""

from __future__ import annotations

from datetime import timedelta

import pytest

from price_trends.analytics.boundary import synthesize_boundaries
from price_trends.core.models import ProductReference


class TestEmptyHistory:
    def test_anchors_only(self, discounted_product, now):
        series = synthesize_boundaries([], discounted_product, now)
        assert [(p.price, p.observed_at) for p in series] == [
            (100.0, now - timedelta(days=1)),
            (80.0, now),
        ]
        assert all(p.synthetic for p in series)
        assert all(p.currency == "USD" for p in series)

    def test_equal_anchors_give_single_point(self, flat_product, now):
        series = synthesize_boundaries([], flat_product, now)
        assert len(series) == 1
        assert series[0].price == 50.0
        assert series[0].observed_at == now

    def test_no_anchors_no_history_is_empty(self, now):
        product = ProductReference(id="ghost")
        assert synthesize_boundaries([], product, now) == []

    def test_only_original_anchor_and_no_history_is_empty(self, now):
        # Nothing to hang the original price off
        product = ProductReference(id="p", original_price=10.0)
        assert synthesize_boundaries([], product, now) == []


class TestAppend:
    def test_recent_history_not_appended(self, discounted_product, obs, now):
        history = [obs(90, days_ago=2), obs(80, hours_ago=3)]
        series = synthesize_boundaries(history, discounted_product, now)
        assert series[-1] == history[-1]
        assert not series[-1].synthetic

    def test_stale_history_gets_current_price(self, discounted_product, obs, now):
        history = [obs(90, days_ago=3), obs(85, days_ago=2)]
        series = synthesize_boundaries(history, discounted_product, now)
        assert series[-1].price == 80.0
        assert series[-1].observed_at == now
        assert series[-1].synthetic

    def test_exactly_at_threshold_is_not_stale(self, discounted_product, obs, now):
        history = [obs(85, days_ago=1)]
        series = synthesize_boundaries(history, discounted_product, now)
        assert series[-1] == history[0]

    def test_staleness_window_configurable(self, discounted_product, obs, now):
        history = [obs(85, hours_ago=3)]
        series = synthesize_boundaries(
            history, discounted_product, now, staleness=timedelta(hours=2)
        )
        assert series[-1].synthetic
        assert series[-1].observed_at == now

    def test_missing_current_price_skips_append(self, obs, now):
        product = ProductReference(id="p", original_price=100.0, original_currency="USD")
        history = [obs(90, days_ago=5)]
        series = synthesize_boundaries(history, product, now)
        assert [p.price for p in series] == [100.0, 90.0]


class TestPrepend:
    def test_original_one_day_before_first_point(self, discounted_product, obs, now):
        history = [obs(90, days_ago=2), obs(80, hours_ago=1)]
        series = synthesize_boundaries(history, discounted_product, now)
        assert series[0].price == 100.0
        assert series[0].observed_at == history[0].observed_at - timedelta(days=1)
        assert series[1:] == history

    def test_prepend_follows_append(self, discounted_product, now):
        # With no history the prepend is relative to the appended "now" point
        series = synthesize_boundaries([], discounted_product, now)
        assert series[0].observed_at == series[1].observed_at - timedelta(days=1)

    def test_equal_anchors_skip_prepend(self, flat_product, obs, now):
        history = [obs(55, days_ago=2), obs(50, hours_ago=1)]
        series = synthesize_boundaries(history, flat_product, now)
        assert series == history

    def test_price_increase_still_prepends(self, obs, now):
        product = ProductReference(
            id="p", current_price=120.0, original_price=100.0, original_currency="USD"
        )
        series = synthesize_boundaries([obs(120, hours_ago=1)], product, now)
        assert [p.price for p in series] == [100.0, 120.0]

    def test_custom_offset(self, discounted_product, obs, now):
        history = [obs(90, hours_ago=1)]
        series = synthesize_boundaries(
            history, discounted_product, now, original_offset=timedelta(days=7)
        )
        assert series[0].observed_at == history[0].observed_at - timedelta(days=7)

    def test_input_not_mutated(self, discounted_product, obs, now):
        history = [obs(90, days_ago=5)]
        synthesize_boundaries(history, discounted_product, now)
        assert len(history) == 1

    def test_original_in_product_currency(self, obs, now):
        product = ProductReference(
            id="p", current_price=300.0, original_price=375.0, original_currency="SAR"
        )
        series = synthesize_boundaries([obs(80, hours_ago=1, currency="USD")], product, now)
        assert series[0].currency == "SAR"
        assert series[1].currency == "USD"


class TestIdempotence:
    @pytest.mark.parametrize(
        "history_spec",
        [
            [],
            [(90, 2)],
            [(90, 3), (85, 2)],
            [(95, 10), (90, 0.1)],
        ],
    )
    def test_reapplication_is_stable(self, discounted_product, obs, now, history_spec):
        history = [obs(price, days_ago=days) for price, days in history_spec]
        once = synthesize_boundaries(history, discounted_product, now)
        twice = synthesize_boundaries(once, discounted_product, now)
        assert twice == once

    def test_real_first_point_at_original_price_still_prepends(self, discounted_product, obs, now):
        # Only the synthetic boundary counts as already anchored
        history = [obs(100, days_ago=2), obs(80, hours_ago=1)]
        series = synthesize_boundaries(history, discounted_product, now)
        assert len(series) == 3
        assert series[0].synthetic
