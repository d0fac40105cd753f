from typing import Any, Dict, Optional
from fantasy_nexus.core.db import exec_sql, fetch_one

BRAND_KEY = "fantasy_nexus"

async def insert_start_sit_comparison(row: Dict[str, Any]) -> bool:
    """Returns False when the DB layer is disabled (no DATABASE_URL)."""
    sql = """
    INSERT INTO start_sit_comparisons
      (season_year, week, profile, player_ids, proj_keys, source_path,
       created_by, client_fingerprint, dedupe_key)
    VALUES
      (:season_year, :week, :profile, :player_ids, :proj_keys, :source_path,
       :created_by, :client_fingerprint, :dedupe_key);
    """
    payload = {
        "season_year": row["season_year"],
        "week": row["week"],
        "profile": row["profile"],
        "player_ids": list(row["player_ids"]),
        "proj_keys": list(row["proj_keys"]) if row.get("proj_keys") is not None else None,
        "source_path": row.get("source_path"),
        "created_by": row.get("created_by"),
        "client_fingerprint": row.get("client_fingerprint") or "",
        "dedupe_key": row.get("dedupe_key"),
    }
    res = await exec_sql(sql, payload)
    return res is not None

async def latest_subscription(user_id: str, brand_key: str = BRAND_KEY) -> Optional[Dict[str, Any]]:
    sql = """
    SELECT status, current_period_end, cancel_at_period_end, brand_key
    FROM subscriptions
    WHERE user_id = :user_id AND brand_key = :brand_key
    ORDER BY updated_at DESC
    LIMIT 1;
    """
    return await fetch_one(sql, {"user_id": user_id, "brand_key": brand_key})
