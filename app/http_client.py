"""Shared HTTP client — connection pooling for all outbound requests.

One module-level httpx.AsyncClient (no redirects, 30s timeout) used by
the Graph mail client. Per-request timeout overrides via
http.post(url, timeout=15).

Usage:
    from app.http_client import http
    resp = await http.post(url, json=payload, timeout=15)
"""

import httpx

_LIMITS = httpx.Limits(
    max_connections=50,
    max_keepalive_connections=20,
    keepalive_expiry=30,
)

http = httpx.AsyncClient(
    timeout=30,
    limits=_LIMITS,
    follow_redirects=False,
)


async def close_clients():
    """Shut down the shared client. Call from app lifespan shutdown."""
    try:
        await http.aclose()
    except RuntimeError:
        pass
