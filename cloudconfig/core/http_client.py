"""Shared HTTP client used as the default config transport"""
import httpx
from typing import Optional

from cloudconfig.core.config import get_settings
from cloudconfig.models.config import RefreshSettings


_http_client: Optional[httpx.AsyncClient] = None


def get_http_client(settings: Optional[RefreshSettings] = None) -> httpx.AsyncClient:
    """
    Get or create the shared HTTP client instance

    Args:
        settings: Settings used when the client is created; defaults to get_settings()

    Returns:
        Shared httpx.AsyncClient configured with the refresher settings
    """
    global _http_client
    if _http_client is None or _http_client.is_closed:
        settings = settings or get_settings()
        _http_client = httpx.AsyncClient(
            verify=settings.verify_ssl,
            timeout=float(settings.request_timeout_secs),
            # Every config request asks for Connection: close
            limits=httpx.Limits(max_keepalive_connections=0, max_connections=10),
        )
    return _http_client


async def close_http_client() -> None:
    """Close the shared HTTP client"""
    global _http_client
    if _http_client is not None:
        await _http_client.aclose()
        _http_client = None
