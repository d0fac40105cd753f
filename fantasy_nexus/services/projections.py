# fantasy_nexus/services/projections.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, Iterable, List, Optional

from fantasy_nexus.core import cache
from fantasy_nexus.models.nfl_types import CompareItem
from fantasy_nexus.services.nfl_teams import team_abbr_from, team_name_from_abbr

logger = logging.getLogger("app.projections")

FANTASY_POINTS_PREFIX = "fantasy_points_"


class ProjectionMemo:
    """
    Projection records fetched during one request, keyed by proj_key.
    Create one per request and pass it along; it is never shared.
    """

    def __init__(self) -> None:
        self._records: Dict[str, Optional[Dict[str, Any]]] = {}

    def __contains__(self, proj_key: str) -> bool:
        return proj_key in self._records

    async def get(self, proj_key: str) -> Optional[Dict[str, Any]]:
        if proj_key not in self._records:
            rec = await cache.get_json(proj_key)
            self._records[proj_key] = rec if isinstance(rec, dict) else None
        return self._records[proj_key]

    async def get_many(self, proj_keys: Iterable[str]) -> List[Optional[Dict[str, Any]]]:
        keys = list(proj_keys)
        # warm distinct keys concurrently, then answer in caller order
        missing = [k for k in dict.fromkeys(keys) if k not in self._records]
        await asyncio.gather(*(self.get(k) for k in missing))
        return [self._records[k] for k in keys]


async def get_projection(proj_key: str, memo: Optional[ProjectionMemo] = None) -> Optional[Dict[str, Any]]:
    return await (memo or ProjectionMemo()).get(proj_key)


def shape_compare_item(proj_key: str, rec: Dict[str, Any]) -> CompareItem:
    ident = rec.get("identity")
    if not isinstance(ident, dict):
        ident = rec
    team = ident.get("team_abbr") or ident.get("team_name")
    abbr = team_abbr_from(team) or team
    return {
        "proj_key": proj_key,
        "identity": {
            "player_id": ident.get("player_id"),
            "full_name": ident.get("full_name"),
            "position": ident.get("position") or ident.get("player_position"),
            "team_abbr": abbr,
            "team_name": team_name_from_abbr(abbr) or ident.get("team_name"),
            "headshot_url": ident.get("headshot_url") or rec.get("headshot_url"),
        },
        "event_total": rec.get("event_total"),
        "home_spread": rec.get("home_spread"),
        "home_team": rec.get("home_team") or ident.get("home_team"),
        "away_team": rec.get("away_team") or ident.get("away_team"),
        "inputs": rec.get("inputs"),
        "projections": rec.get("projections"),
        "fantasy_points": {k: v for k, v in rec.items() if k.startswith(FANTASY_POINTS_PREFIX)},
    }


async def compare(proj_keys: List[str], memo: Optional[ProjectionMemo] = None) -> List[CompareItem]:
    """Side-by-side records for 2-3 players; keys with no cached record are skipped."""
    memo = memo or ProjectionMemo()
    records = await memo.get_many(proj_keys)
    items = [shape_compare_item(k, rec) for k, rec in zip(proj_keys, records) if rec]
    logger.info("start-sit compare keys=%d found=%d", len(proj_keys), len(items))
    return items


def compare_dedupe_key(proj_keys: Iterable[str], profile: str) -> str:
    return "|".join(sorted(proj_keys)) + f"|{profile}"
