# fantasy_nexus/core/supabase.py
from __future__ import annotations

import logging
import os
from typing import Any, Dict, Optional

import httpx
from fastapi import Request

logger = logging.getLogger("app.supabase")

HEADERS = {"Accept": "application/json", "Content-Type": "application/json"}


class SupabaseNotConfigured(RuntimeError):
    pass


class SupabaseRPCError(RuntimeError):
    def __init__(self, name: str, status: int | None, detail: str):
        super().__init__(f"rpc {name} failed ({status}): {detail}")
        self.status = status
        self.detail = detail


def _config() -> tuple[str, str]:
    url = os.getenv("SUPABASE_URL") or os.getenv("NEXT_PUBLIC_SUPABASE_URL")
    key = os.getenv("SUPABASE_SERVICE_ROLE_KEY")
    if not url or not key:
        raise SupabaseNotConfigured(
            "Missing Supabase env. Ensure SUPABASE_URL and SUPABASE_SERVICE_ROLE_KEY are set."
        )
    return url.rstrip("/"), key


def _service_headers(key: str) -> Dict[str, str]:
    return {**HEADERS, "apikey": key, "Authorization": f"Bearer {key}"}


async def rpc(name: str, params: Dict[str, Any], timeout: float = 15.0) -> Any:
    """
    POST /rest/v1/rpc/{name}. No retries; non-2xx raises SupabaseRPCError
    carrying the response text.
    """
    base, key = _config()
    headers = {**_service_headers(key), "Prefer": "count=exact"}

    async with httpx.AsyncClient(timeout=timeout, headers=headers) as client:
        try:
            r = await client.post(f"{base}/rest/v1/rpc/{name}", json=params)
        except httpx.HTTPError as e:
            logger.warning("supabase rpc %s transport error: %r", name, e)
            raise SupabaseRPCError(name, None, str(e)) from e

    if not r.is_success:
        logger.warning("supabase rpc %s -> %s", name, r.status_code)
        raise SupabaseRPCError(name, r.status_code, r.text)
    logger.info("supabase rpc %s -> %s", name, r.status_code)
    return r.json()


async def get_user(access_token: str) -> Optional[Dict[str, Any]]:
    """Resolve a session token to the Supabase user; any failure reads as anonymous."""
    if not access_token:
        return None
    try:
        base, key = _config()
    except SupabaseNotConfigured:
        logger.warning("supabase not configured; treating caller as anonymous")
        return None

    headers = {**HEADERS, "apikey": key, "Authorization": f"Bearer {access_token}"}
    try:
        async with httpx.AsyncClient(timeout=10.0, headers=headers) as client:
            r = await client.get(f"{base}/auth/v1/user")
    except httpx.HTTPError as e:
        logger.warning("supabase user lookup failed: %r", e)
        return None
    if not r.is_success:
        return None
    data = r.json()
    return data if isinstance(data, dict) and data.get("id") else None


def bearer_token(request: Request) -> str:
    auth = request.headers.get("authorization") or ""
    scheme, _, token = auth.partition(" ")
    return token.strip() if scheme.lower() == "bearer" else ""
