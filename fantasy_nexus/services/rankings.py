# fantasy_nexus/services/rankings.py
from __future__ import annotations

import asyncio
import logging
from typing import Any, Dict, List, Optional

from fantasy_nexus.core import cache
from fantasy_nexus.models.nfl_types import FantasyPosition, FantasyProfile, RankItem

logger = logging.getLogger("app.rankings")

PROFILES: tuple[FantasyProfile, ...] = (
    "half_ppr_4pt",
    "half_ppr_6pt",
    "full_ppr_4pt",
    "full_ppr_6pt",
    "standard_4pt",
    "standard_6pt",
)
POSITIONS: tuple[FantasyPosition, ...] = ("QB", "RB", "WR", "TE", "FLEX")
SKILL_POSITIONS: tuple[FantasyPosition, ...] = ("QB", "RB", "WR", "TE")

DEFAULT_PROFILE: FantasyProfile = "full_ppr_6pt"
DEFAULT_POSITION: FantasyPosition = "FLEX"
MAX_LIMIT = 1000

_SCORING_PREFIX = {"ppr": "full_ppr", "half_ppr": "half_ppr", "standard": "standard"}


def normalize_profile(value: Optional[str]) -> FantasyProfile:
    return value if value in PROFILES else DEFAULT_PROFILE  # type: ignore[return-value]


def normalize_position(value: Optional[str]) -> FantasyPosition:
    return value if value in POSITIONS else DEFAULT_POSITION  # type: ignore[return-value]


def profile_for(scoring: str, td_points: int) -> FantasyProfile:
    """('ppr'|'half_ppr'|'standard', 4|6) -> profile; unknown scoring reads as standard."""
    prefix = _SCORING_PREFIX.get((scoring or "").lower(), "standard")
    return f"{prefix}_{6 if td_points == 6 else 4}pt"  # type: ignore[return-value]


def resolve_profile(
    profile: Optional[str] = None,
    scoring: Optional[str] = None,
    td_points: Optional[int] = None,
) -> FantasyProfile:
    """A scoring format (with optional TD points, default 6) wins over a raw profile name."""
    if scoring:
        return profile_for(scoring, td_points if td_points is not None else 6)
    return normalize_profile(profile)


def clamp_limit(limit: Optional[int]) -> Optional[int]:
    if limit is None:
        return None
    return min(MAX_LIMIT, max(1, limit))


def rankcache_key(season_year: int, week: int, profile: str, position: str) -> str:
    return f"nfl:rankcache:WEEK:{season_year}:{week:02d}:{profile}:{position}"


def _records_from_value(value: Any) -> List[Dict[str, Any]]:
    # GET payloads come as an array, {"items": [...]}, or {player_id: record}
    if isinstance(value, list):
        return [r for r in value if isinstance(r, dict)]
    if isinstance(value, dict):
        items = value.get("items")
        if isinstance(items, list):
            return [r for r in items if isinstance(r, dict)]
        return [r for r in value.values() if isinstance(r, dict)]
    return []


def _normalize_item(rec: Dict[str, Any]) -> Optional[RankItem]:
    try:
        score = float(rec.get("score"))
    except (TypeError, ValueError):
        logger.debug("rankings skip record without numeric score: %s", rec.get("player_id"))
        return None
    return {**rec, "score": score}  # type: ignore[typeddict-item]


async def load_rank_items(key: str) -> List[RankItem]:
    """List form first, then a plain GET. Misses and cache errors give []."""
    records = [r for r in await cache.lrange_json(key) if isinstance(r, dict)]
    if not records:
        records = _records_from_value(await cache.get_json(key))

    items = [it for it in (_normalize_item(r) for r in records) if it is not None]
    logger.info("rankings %s -> %d", key, len(items))
    return items


async def get_rankings(
    season_year: int,
    week: int,
    profile: str,
    position: str,
    limit: Optional[int] = None,
) -> List[RankItem]:
    items = await load_rank_items(rankcache_key(season_year, week, profile, position))
    lim = clamp_limit(limit)
    return items[:lim] if lim is not None else items


async def get_player_pool(season_year: int, week: int, profile: str) -> List[RankItem]:
    """QB/RB/WR/TE lists merged; first occurrence of a player_id wins."""
    lists = await asyncio.gather(
        *(get_rankings(season_year, week, profile, pos) for pos in SKILL_POSITIONS)
    )
    seen: Dict[str, RankItem] = {}
    for items in lists:
        for it in items:
            pid = str(it.get("player_id"))
            if pid not in seen:
                seen[pid] = it
    return list(seen.values())
