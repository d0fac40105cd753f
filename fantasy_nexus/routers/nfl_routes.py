# fantasy_nexus/routers/nfl_routes.py
from __future__ import annotations

import logging
from datetime import datetime, timezone
from typing import Optional

from fastapi import APIRouter, HTTPException, Query
from fastapi.responses import JSONResponse

from fantasy_nexus.core.supabase import SupabaseNotConfigured, SupabaseRPCError, rpc
from fantasy_nexus.services.nfl_weeks import (
    DEFAULT_TZ,
    configured_overrides,
    current_week_window,
    filter_within_window,
    season_year_for,
    window_for_week,
)
from fantasy_nexus.services.projections import get_projection
from fantasy_nexus.services.rankings import (
    get_rankings,
    normalize_position,
    resolve_profile,
)

logger = logging.getLogger("app.nfl")
router = APIRouter(tags=["nfl"])

PUBLIC_CACHE = {
    "Cache-Control": "public, max-age=60, stale-while-revalidate=60",
    "CDN-Cache-Control": "public, max-age=60",
}


def _resolve_window(season: Optional[int], week: Optional[int], tz: str = DEFAULT_TZ):
    if week:
        # a bare week means that week of the season in progress
        season = season or season_year_for(datetime.now(timezone.utc))
        return window_for_week(season, week, tz=tz, overrides=configured_overrides())
    return current_week_window(season_year=season, tz=tz)


# ---------------- Week descriptor ----------------
@router.get("/week")
async def nfl_week(
    at: Optional[datetime] = None,
    season: Optional[int] = None,
    tz: str = DEFAULT_TZ,
):
    """
    Active fantasy week (Thu..Wed) for `at` (default: now).
    `season` pins the season year; `tz` picks the local day boundaries.
    """
    try:
        ww = current_week_window(now=at, season_year=season, tz=tz)
    except (KeyError, ValueError) as e:
        # ZoneInfoNotFoundError is a KeyError
        raise HTTPException(400, f"unknown timezone: {tz}") from e
    except OverflowError as e:
        raise HTTPException(400, "instant out of range for timezone") from e
    return {**ww.to_dict(), "label": f"NFL Week {ww.week}"}


# ---------------- Rankings (rank cache) ----------------
@router.get("/rankings")
async def nfl_rankings(
    profile: Optional[str] = None,
    position: Optional[str] = None,
    limit: Optional[int] = None,
    season: Optional[int] = None,
    week: Optional[int] = None,
    this_week: bool = False,
    scoring: Optional[str] = Query(None, pattern="^(ppr|half_ppr|standard)$"),
    td_points: Optional[int] = Query(None, ge=4, le=6),
):
    """
    Precomputed rankings for the current week (or an explicit season+week).
    `scoring` + `td_points` pick the profile when given. Unknown
    profile/position fall back to full_ppr_6pt/FLEX. An empty or
    unreachable cache returns an empty list.
    """
    prof = resolve_profile(profile, scoring, td_points)
    pos = normalize_position(position)
    ww = _resolve_window(season, week)

    items = await get_rankings(ww.season_year, ww.week, prof, pos, limit=limit)
    if this_week:
        items = filter_within_window(items, ww)

    data = {"profile": prof, "position": pos, "season": ww.season_year, "week": ww.week, "items": items}
    if items:
        data["updatedAt"] = datetime.now(timezone.utc).isoformat()
    logger.info("NFL rankings: season=%s week=%s %s/%s -> %d", ww.season_year, ww.week, prof, pos, len(items))
    return JSONResponse({"success": True, "data": data}, headers=PUBLIC_CACHE)


# ---------------- Single projection ----------------
@router.get("/projection")
async def nfl_projection(proj_key: str = Query(..., min_length=1)):
    record = await get_projection(proj_key)
    if not record:
        raise HTTPException(404, "Not found")
    return JSONResponse({"success": True, "data": record}, headers=PUBLIC_CACHE)


# ---------------- Season breakdown (RPC) ----------------
@router.get("/season-breakdown")
async def nfl_season_breakdown(
    position: str = "QB",
    season: Optional[int] = None,
    scoring: str = "half_ppr",
    limit: int = 50,
):
    params = {
        "p_position": position,
        "p_season": season or datetime.now(timezone.utc).year,
        "p_scoring_type": scoring,
        "p_limit": limit,
    }
    try:
        data = await rpc("get_fantasy_season_breakdown", params)
    except SupabaseNotConfigured as e:
        return JSONResponse({"error": str(e)}, status_code=500)
    except SupabaseRPCError as e:
        return JSONResponse({"error": "RPC call failed", "detail": e.detail}, status_code=500)
    return {"data": data}
