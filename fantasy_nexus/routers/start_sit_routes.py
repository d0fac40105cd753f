# fantasy_nexus/routers/start_sit_routes.py
from __future__ import annotations

import logging
from datetime import datetime
from typing import List, Optional, Union

from fastapi import APIRouter, HTTPException, Query, Request
from fastapi.responses import JSONResponse
from pydantic import BaseModel

from fantasy_nexus.core.persist import insert_start_sit_comparison
from fantasy_nexus.core.supabase import SupabaseNotConfigured, SupabaseRPCError, bearer_token, get_user, rpc
from fantasy_nexus.services.nfl_weeks import as_utc, configured_overrides, current_week_window, window_for_week
from fantasy_nexus.services.projections import ProjectionMemo, compare, compare_dedupe_key
from fantasy_nexus.services.rankings import get_player_pool, resolve_profile

logger = logging.getLogger("app.start_sit")
router = APIRouter(tags=["start-sit"])


class CompareRequest(BaseModel):
    proj_keys: List[str] = []


class CompareLog(BaseModel):
    season_year: Optional[int] = None
    week: Optional[int] = None
    profile: Optional[str] = None
    player_ids: List[Union[str, int]] = []
    proj_keys: Optional[List[str]] = None
    source_path: Optional[str] = None
    dedupe_key: Optional[str] = None


# ---------------- Compare 2-3 players ----------------
@router.post("/compare")
async def start_sit_compare(body: CompareRequest):
    keys = [k for k in body.proj_keys if k]
    if len(keys) < 2 or len(keys) > 3:
        raise HTTPException(400, "Provide 2-3 proj_keys")

    items = await compare(keys, memo=ProjectionMemo())
    return JSONResponse({"success": True, "data": {"items": items}}, headers={"Cache-Control": "no-store"})


# ---------------- Player pool for the picker ----------------
@router.get("/players")
async def start_sit_players(
    profile: Optional[str] = None,
    scoring: Optional[str] = Query(None, pattern="^(ppr|half_ppr|standard)$"),
    td_points: Optional[int] = Query(None, ge=4, le=6),
):
    prof = resolve_profile(profile, scoring, td_points)
    ww = current_week_window()
    items = await get_player_pool(ww.season_year, ww.week, prof)
    return {"success": True, "data": {"profile": prof, "season": ww.season_year, "week": ww.week, "items": items}}


# ---------------- Top compared players (RPC) ----------------
@router.get("/top-players")
async def start_sit_top_players(
    start: Optional[datetime] = None,
    end: Optional[datetime] = None,
    season: Optional[int] = None,
    week: Optional[int] = None,
    limit: int = 25,
):
    if season and week and not (start or end):
        ww = window_for_week(season, week, overrides=configured_overrides())
        start, end = ww.start, ww.end

    params = {
        "season_y": season,
        "week_no": week,
        "limit_count": limit,
    }
    if start:
        params["start_time"] = as_utc(start).isoformat()
    if end:
        params["end_time"] = as_utc(end).isoformat()

    try:
        data = await rpc("get_top_players", params)
    except (SupabaseNotConfigured, SupabaseRPCError) as e:
        return JSONResponse({"error": str(e)}, status_code=500)
    return {"success": True, "data": data}


# ---------------- Log a comparison ----------------
@router.post("/log")
async def start_sit_log(body: CompareLog, request: Request):
    player_ids = [str(p) for p in body.player_ids]
    if not body.season_year or not body.week or not body.profile or len(player_ids) < 2:
        raise HTTPException(400, "Invalid payload")

    user = await get_user(bearer_token(request))
    dedupe_key = body.dedupe_key
    if dedupe_key is None and body.proj_keys:
        dedupe_key = compare_dedupe_key(body.proj_keys, body.profile)

    row = {
        "season_year": body.season_year,
        "week": body.week,
        "profile": body.profile,
        "player_ids": player_ids,
        "proj_keys": body.proj_keys,
        "source_path": body.source_path,
        "created_by": (user or {}).get("id"),
        "client_fingerprint": request.headers.get("x-forwarded-for", ""),
        "dedupe_key": dedupe_key,
    }
    if not await insert_start_sit_comparison(row):
        logger.warning("start-sit log dropped (DB disabled): season=%s week=%s", body.season_year, body.week)
        return JSONResponse({"error": "storage unavailable"}, status_code=503)
    return {"success": True}
