# fantasy_nexus/services/subscription.py
from __future__ import annotations

from datetime import datetime, timezone
from typing import Any, Dict, Optional

ACTIVE_STATUSES = {"active", "trialing"}


def is_active_status(status: Optional[str]) -> bool:
    if not status:
        return False
    return status.lower() in ACTIVE_STATUSES


def _to_utc(value: Any) -> Optional[datetime]:
    if value is None or value == "":
        return None
    if isinstance(value, datetime):
        dt = value
    else:
        dt = datetime.fromisoformat(str(value).replace("Z", "+00:00"))
    return dt if dt.tzinfo else dt.replace(tzinfo=timezone.utc)


def is_pro(status: Optional[str], current_period_end: Any, now: Optional[datetime] = None) -> bool:
    """Active/trialing and the paid period has not lapsed (no period end counts as open)."""
    end = _to_utc(current_period_end)
    now = now or datetime.now(timezone.utc)
    in_period = end > now if end else True
    return is_active_status(status) and in_period


def subscription_payload(row: Optional[Dict[str, Any]], now: Optional[datetime] = None) -> Dict[str, Any]:
    row = row or {}
    end = _to_utc(row.get("current_period_end"))
    return {
        "pro": is_pro(row.get("status"), end, now),
        "status": row.get("status"),
        "current_period_end": end.isoformat() if end else None,
        "brand_key": row.get("brand_key") or "fantasy_nexus",
    }
