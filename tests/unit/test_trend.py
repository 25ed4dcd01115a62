"""Tests for the trend classifier and the previous-price resolver."""

from __future__ import annotations

import pytest

from price_trends.analytics.trend import (
    build_trend_badge,
    classify_trend,
    resolve_previous_price,
)
from price_trends.core.models import ProductReference, TrendDirection


class TestClassifyTrend:
    def test_drop(self):
        badge = classify_trend(80, 100)
        assert badge.direction == TrendDirection.DROP
        assert badge.percent == 20
        assert badge.change == -20

    def test_increase(self):
        badge = classify_trend(110, 100)
        assert badge.direction == TrendDirection.INCREASE
        assert badge.percent == pytest.approx(10)

    def test_stable(self):
        badge = classify_trend(100, 100)
        assert badge.direction == TrendDirection.STABLE
        assert badge.percent == 0

    def test_zero_previous_guarded(self):
        badge = classify_trend(15, 0)
        assert badge.direction == TrendDirection.INCREASE
        assert badge.percent == 0

    def test_both_zero_stable(self):
        badge = classify_trend(0, 0)
        assert badge.direction == TrendDirection.STABLE
        assert badge.percent == 0

    @pytest.mark.parametrize(
        ("current", "previous"),
        [(1, 2), (2, 1), (3.5, 3.5), (0, 7), (7, 0), (0.01, 1000)],
    )
    def test_sign_and_magnitude(self, current, previous):
        badge = classify_trend(current, previous)
        if current < previous:
            assert badge.direction == TrendDirection.DROP
        elif current > previous:
            assert badge.direction == TrendDirection.INCREASE
        else:
            assert badge.direction == TrendDirection.STABLE
            assert badge.percent == 0
        assert badge.percent >= 0

    @pytest.mark.parametrize(("current", "previous"), [(-1, 10), (10, -1), (float("inf"), 1)])
    def test_invalid_inputs_fail_fast(self, current, previous):
        with pytest.raises(ValueError, match="finite value >= 0"):
            classify_trend(current, previous)


class TestResolvePreviousPrice:
    def test_empty_history_uses_original(self):
        assert resolve_previous_price([], 100.0) == (100.0, None)

    def test_single_entry_uses_original(self, obs):
        assert resolve_previous_price([obs(90)], 100.0) == (100.0, None)

    def test_second_most_recent(self, obs):
        history = [obs(70, days_ago=1), obs(95, days_ago=5), obs(90, days_ago=3), obs(80)]
        assert resolve_previous_price(history, 100.0) == (70, "USD")

    def test_any_order_accepted(self, obs):
        newest_last = [obs(90, days_ago=2), obs(85, days_ago=1), obs(80)]
        assert resolve_previous_price(newest_last, 100.0)[0] == 85
        assert resolve_previous_price(list(reversed(newest_last)), 100.0)[0] == 85

    def test_missing_original(self):
        assert resolve_previous_price([], None) == (None, None)


class TestBuildTrendBadge:
    def test_no_history_compares_to_original(self, discounted_product, usd_converter):
        badge = build_trend_badge([], discounted_product, usd_converter)
        assert badge.direction == TrendDirection.DROP
        assert badge.percent == 20
        assert badge.previous == 100
        assert badge.current == 80

    def test_history_previous_is_converted(self, obs, usd_converter):
        product = ProductReference(
            id="p", current_price=300.0, original_price=450.0, original_currency="SAR"
        )
        history = [obs(300, currency="SAR"), obs(90, days_ago=2, currency="USD")]
        badge = build_trend_badge(history, product, usd_converter)
        assert badge.current == 80.0
        assert badge.previous == 90
        assert badge.direction == TrendDirection.DROP
        assert badge.percent == pytest.approx(100 / 9)

    def test_original_fallback_uses_product_currency(self, obs, usd_converter):
        product = ProductReference(
            id="p", current_price=300.0, original_price=375.0, original_currency="SAR"
        )
        badge = build_trend_badge([obs(300, currency="SAR")], product, usd_converter)
        assert badge.previous == 100.0
        assert badge.current == 80.0

    def test_free_item_previous_zero(self, usd_converter):
        product = ProductReference(
            id="gift", current_price=5.0, original_price=0.0, original_currency="USD"
        )
        badge = build_trend_badge([], product, usd_converter)
        assert badge.direction == TrendDirection.INCREASE
        assert badge.percent == 0

    def test_missing_current_uses_latest_history(self, obs, usd_converter):
        product = ProductReference(id="p", original_price=100.0, original_currency="USD")
        badge = build_trend_badge([obs(75), obs(90, days_ago=2)], product, usd_converter)
        assert badge.current == 75
        assert badge.previous == 90

    def test_missing_original_is_stable(self, usd_converter):
        product = ProductReference(id="p", current_price=40.0, original_currency="USD")
        badge = build_trend_badge([], product, usd_converter)
        assert badge.direction == TrendDirection.STABLE
        assert badge.current == badge.previous == 40

    def test_nothing_known_is_stable_zero(self, usd_converter):
        badge = build_trend_badge([], ProductReference(id="ghost"), usd_converter)
        assert badge.direction == TrendDirection.STABLE
        assert badge.percent == 0
        assert badge.current == 0
