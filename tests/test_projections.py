"""Tests for projection lookup and start/sit compare shaping."""

from unittest.mock import AsyncMock, patch

import pytest

from fantasy_nexus.core import cache
from fantasy_nexus.services.nfl_teams import team_abbr_from, team_name_from_abbr
from fantasy_nexus.services.projections import (
    ProjectionMemo,
    compare,
    compare_dedupe_key,
    shape_compare_item,
)

RECORD = {
    "identity": {
        "player_id": "p1",
        "full_name": "Joe Burrow",
        "position": "QB",
        "team_abbr": "CIN",
        "event_id": "e1",
        "commence_time": "2024-09-08T17:00:00Z",
    },
    "projections": {"pass_yds": 265.5},
    "inputs": {"line": 264.5},
    "event_total": 47.5,
    "home_spread": -8.5,
    "fantasy_points_full_ppr_6pt": 21.4,
    "fantasy_points_half_ppr_4pt": 17.9,
}


class TestShapeCompareItem:
    """Record -> compare row."""

    def test_identity_and_points(self):
        item = shape_compare_item("nfl:proj:p1", RECORD)
        assert item["proj_key"] == "nfl:proj:p1"
        assert item["identity"]["full_name"] == "Joe Burrow"
        assert item["identity"]["team_abbr"] == "CIN"
        assert item["identity"]["team_name"] == "Cincinnati Bengals"
        assert item["identity"]["headshot_url"] is None
        assert item["fantasy_points"] == {
            "fantasy_points_full_ppr_6pt": 21.4,
            "fantasy_points_half_ppr_4pt": 17.9,
        }
        assert item["event_total"] == 47.5

    def test_flat_record_with_team_name(self):
        flat = {"player_id": "p2", "full_name": "X", "player_position": "WR", "team_name": "Green Bay Packers"}
        item = shape_compare_item("k", flat)
        assert item["identity"]["position"] == "WR"
        assert item["identity"]["team_abbr"] == "GB"
        assert item["identity"]["team_name"] == "Green Bay Packers"
        assert item["projections"] is None

    def test_non_object_identity_falls_back_to_flat_record(self):
        rec = {"identity": "oops", "player_id": "p3", "full_name": "Y", "position": "TE", "team_abbr": "kc"}
        item = shape_compare_item("k", rec)
        assert item["identity"]["player_id"] == "p3"
        assert item["identity"]["position"] == "TE"
        assert item["identity"]["team_abbr"] == "KC"
        assert item["identity"]["team_name"] == "Kansas City Chiefs"


class TestProjectionMemo:
    """Per-request projection memo."""

    @pytest.mark.asyncio
    async def test_fetches_each_key_once(self):
        get_json = AsyncMock(return_value=RECORD)
        with patch.object(cache, "get_json", get_json):
            memo = ProjectionMemo()
            await memo.get("a")
            await memo.get("a")
            out = await memo.get_many(["a", "b", "b"])

        assert get_json.await_count == 2
        assert len(out) == 3
        assert "b" in memo

    @pytest.mark.asyncio
    async def test_separate_memos_do_not_share(self):
        get_json = AsyncMock(return_value=RECORD)
        with patch.object(cache, "get_json", get_json):
            await ProjectionMemo().get("a")
            await ProjectionMemo().get("a")
        assert get_json.await_count == 2

    @pytest.mark.asyncio
    async def test_non_object_reads_as_missing(self):
        with patch.object(cache, "get_json", AsyncMock(return_value="garbage")):
            assert await ProjectionMemo().get("a") is None


class TestCompare:
    """Compare keeps caller order and skips misses."""

    @pytest.mark.asyncio
    async def test_missing_records_skipped(self):
        async def fake_get(key):
            return RECORD if key != "missing" else None

        with patch.object(cache, "get_json", side_effect=fake_get):
            items = await compare(["k1", "missing", "k3"])

        assert [it["proj_key"] for it in items] == ["k1", "k3"]

    def test_dedupe_key_is_order_independent(self):
        assert compare_dedupe_key(["b", "a"], "full_ppr_6pt") == "a|b|full_ppr_6pt"
        assert compare_dedupe_key(["a", "b"], "full_ppr_6pt") == compare_dedupe_key(["b", "a"], "full_ppr_6pt")


class TestTeams:
    """Team name normalization."""

    def test_lookup(self):
        assert team_abbr_from("kansas city chiefs") == "KC"
        assert team_abbr_from(" Oakland Raiders ") == "LV"
        assert team_abbr_from("sf") == "SF"
        assert team_abbr_from("Nowhere") is None
        assert team_name_from_abbr("was") == "Washington Commanders"
