"""Graph API client — app-only token, retry wrapper for mail sends.

Usage:
    from app.utils.graph_client import GraphClient, get_app_token
    token = await get_app_token()
    gc = GraphClient(token)
    await gc.post_json(f"/users/{sender}/sendMail", message)
"""
import asyncio
import time

import httpx
from loguru import logger

from ..config import settings
from ..http_client import http

GRAPH_BASE = "https://graph.microsoft.com/v1.0"
GRAPH_SCOPE = "https://graph.microsoft.com/.default"

# Retry config
MAX_RETRIES = 3
BACKOFF_BASE = 2  # seconds — exponential: 2, 4, 8

# Refresh the cached app token this many seconds before it expires
TOKEN_EXPIRY_BUFFER = 300

_app_token: dict = {}  # {"access_token": str, "expires_at": float}


async def get_app_token() -> str | None:
    """Client-credentials token for application mail. Cached until near expiry.

    Returns None if Azure credentials are missing or the token request fails.
    """
    cached = _app_token.get("access_token")
    if cached and time.monotonic() < _app_token.get("expires_at", 0):
        return cached

    if not (settings.azure_client_id and settings.azure_client_secret and settings.azure_tenant_id):
        return None

    token_url = f"https://login.microsoftonline.com/{settings.azure_tenant_id}/oauth2/v2.0/token"
    try:
        r = await http.post(
            token_url,
            data={
                "client_id": settings.azure_client_id,
                "client_secret": settings.azure_client_secret,
                "grant_type": "client_credentials",
                "scope": GRAPH_SCOPE,
            },
            timeout=15,
        )
    except httpx.HTTPError as e:
        logger.warning("App token request error: {}", e)
        return None

    if r.status_code != 200:
        logger.warning("App token request failed: {} — {}", r.status_code, r.text[:200])
        return None

    try:
        tokens = r.json()
        expires_in = int(tokens.get("expires_in", 3600))
    except (ValueError, TypeError, AttributeError) as e:
        logger.warning("App token response unreadable: {}", e)
        return None

    _app_token["access_token"] = tokens.get("access_token")
    _app_token["expires_at"] = time.monotonic() + expires_in - TOKEN_EXPIRY_BUFFER
    return _app_token["access_token"]


def clear_app_token() -> None:
    _app_token.clear()


def _retry_after(resp: httpx.Response, attempt: int) -> int:
    """Seconds from a numeric Retry-After header, else the exponential backoff."""
    try:
        return max(int(resp.headers.get("Retry-After", "")), 0)
    except ValueError:
        return BACKOFF_BASE ** (attempt + 1)


class GraphClient:
    """Thin wrapper around Microsoft Graph with retry on 429 / 5xx."""

    def __init__(self, access_token: str):
        self.token = access_token
        self._base_headers = {
            "Authorization": f"Bearer {access_token}",
            "Content-Type": "application/json",
        }

    async def post_json(self, path: str, json_data: dict,
                        timeout: int = 30) -> dict:
        """POST → parsed JSON or empty dict on 202/204."""
        url = path if path.startswith("http") else f"{GRAPH_BASE}{path}"
        return await self._request_with_retry(url, json_data, timeout)

    # ── Internal retry logic ────────────────────────────────────────

    async def _request_with_retry(self, url: str, json_data: dict, timeout: int) -> dict:
        """Execute POST with exponential backoff on 429 / 5xx."""
        last_error: Exception | None = None

        for attempt in range(MAX_RETRIES + 1):
            try:
                resp = await http.post(url, json=json_data,
                                       headers=self._base_headers, timeout=timeout)

                if resp.status_code in (200, 201):
                    return resp.json()
                if resp.status_code in (202, 204):
                    return {}  # Accepted / no content (sendMail)

                # Throttled — respect Retry-After
                if resp.status_code == 429:
                    wait = _retry_after(resp, attempt)
                    logger.warning("Graph 429 — retry in {}s (attempt {})", wait, attempt + 1)
                    await asyncio.sleep(wait)
                    continue

                if resp.status_code >= 500:
                    wait = BACKOFF_BASE ** (attempt + 1)
                    logger.warning("Graph {} — retry in {}s (attempt {})",
                                   resp.status_code, wait, attempt + 1)
                    await asyncio.sleep(wait)
                    continue

                # Client error (400, 401, 403, 404) — don't retry
                logger.error("Graph {}: {}", resp.status_code, resp.text[:300])
                return {"error": resp.status_code, "detail": resp.text[:300]}

            except (httpx.TimeoutException, httpx.ConnectError) as e:
                last_error = e
                wait = BACKOFF_BASE ** (attempt + 1)
                logger.warning("Graph connection error — retry in {}s: {}", wait, e)
                await asyncio.sleep(wait)

        logger.error("Graph request failed after {} retries: {}", MAX_RETRIES, url)
        if last_error:
            raise last_error
        return {"error": "max_retries", "detail": "All retries exhausted"}
