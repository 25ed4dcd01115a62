"""Tests for the price timeline."""

from __future__ import annotations

import pytest

from price_trends.analytics.timeline import build_timeline
from price_trends.core.models import TrendDirection


class TestBuildTimeline:
    def test_empty(self, usd_converter):
        assert build_timeline([], usd_converter) == []

    def test_newest_first_with_changes(self, obs, usd_converter):
        history = [obs(100, days_ago=3), obs(80, days_ago=1), obs(90, days_ago=2)]
        entries = build_timeline(history, usd_converter)
        assert [e.price for e in entries] == [80, 90, 100]
        assert entries[0].change.direction == TrendDirection.DROP
        assert entries[0].change.percent == pytest.approx(100 / 9)
        assert entries[1].change.direction == TrendDirection.DROP
        assert entries[1].change.percent == pytest.approx(10)
        assert entries[2].change is None

    def test_limit(self, obs, usd_converter):
        history = [obs(i + 1, days_ago=i) for i in range(10)]
        entries = build_timeline(history, usd_converter, limit=3)
        assert len(entries) == 3
        assert entries[-1].change is None

    def test_changes_in_display_currency(self, obs, usd_converter):
        history = [obs(375, days_ago=1, currency="SAR"), obs(100, currency="USD")]
        entries = build_timeline(history, usd_converter)
        assert entries[0].display_price == 100
        assert entries[1].display_price == 100.0
        assert entries[0].change.direction == TrendDirection.STABLE
