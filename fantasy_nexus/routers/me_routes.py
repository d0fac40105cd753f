# fantasy_nexus/routers/me_routes.py
from __future__ import annotations

import logging

from fastapi import APIRouter, Request

from fantasy_nexus.core.persist import latest_subscription
from fantasy_nexus.core.supabase import bearer_token, get_user
from fantasy_nexus.services.subscription import subscription_payload

logger = logging.getLogger("app.me")
router = APIRouter(tags=["me"])


@router.get("/subscription")
async def my_subscription(request: Request):
    """
    Pro flag for the signed-in caller. Anonymous callers and any lookup
    failure read as {"pro": false}.
    """
    try:
        user = await get_user(bearer_token(request))
        if not user:
            return {"pro": False}
        row = await latest_subscription(user["id"])
        return subscription_payload(row)
    except Exception as e:
        logger.warning("subscription lookup failed: %r", e)
        return {"pro": False}
