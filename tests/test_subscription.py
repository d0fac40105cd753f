"""Tests for the subscription-active signal."""

from datetime import datetime, timezone

import pytest

from fantasy_nexus.services.subscription import is_active_status, is_pro, subscription_payload

NOW = datetime(2025, 10, 1, 12, tzinfo=timezone.utc)


class TestIsActiveStatus:
    @pytest.mark.parametrize("status", ["active", "trialing", "ACTIVE", "Trialing"])
    def test_active(self, status):
        assert is_active_status(status)

    @pytest.mark.parametrize("status", [None, "", "canceled", "past_due", "incomplete"])
    def test_inactive(self, status):
        assert not is_active_status(status)


class TestIsPro:
    def test_future_period_end(self):
        assert is_pro("active", "2025-11-01T00:00:00Z", now=NOW)

    def test_lapsed_period_end(self):
        assert not is_pro("active", "2025-09-01T00:00:00+00:00", now=NOW)

    def test_period_end_equal_to_now_is_lapsed(self):
        assert not is_pro("trialing", NOW, now=NOW)

    def test_missing_period_end_counts_as_open(self):
        assert is_pro("trialing", None, now=NOW)

    def test_inactive_status_wins(self):
        assert not is_pro("canceled", "2026-01-01T00:00:00Z", now=NOW)


class TestPayload:
    def test_shape(self):
        row = {"status": "active", "current_period_end": "2025-11-01T00:00:00Z", "brand_key": "fantasy_nexus"}
        assert subscription_payload(row, now=NOW) == {
            "pro": True,
            "status": "active",
            "current_period_end": "2025-11-01T00:00:00+00:00",
            "brand_key": "fantasy_nexus",
        }

    def test_no_row(self):
        out = subscription_payload(None, now=NOW)
        assert out["pro"] is False
        assert out["brand_key"] == "fantasy_nexus"
