"""Refresher wiring and the periodic refresh loop"""
import asyncio
from typing import Optional

import httpx

from cloudconfig import __version__
from cloudconfig.core.config import get_settings
from cloudconfig.core.context import ConfigContext
from cloudconfig.core.defaults import default_configuration
from cloudconfig.core.exceptions import ConfigRefreshError, ConfigUnchangedError
from cloudconfig.core.http_client import close_http_client, get_http_client
from cloudconfig.core.logging import get_logger
from cloudconfig.core.metrics import APP_INFO
from cloudconfig.models.config import RefreshSettings
from cloudconfig.services.fetcher import ConfigTransport
from cloudconfig.services.refresher import ConfigRefresher
from cloudconfig.services.security import FrontedRouting

logger = get_logger()


def create_refresher(
    settings: Optional[RefreshSettings] = None,
    transport: Optional[ConfigTransport] = None,
    routing: Optional[FrontedRouting] = None,
) -> ConfigRefresher:
    """Create a refresher seeded with the embedded configuration.

    Routing is configured from the embedded configuration right away, so the
    network client has trust material before the first pull succeeds.
    """
    settings = settings or get_settings()

    refresher = ConfigRefresher(
        context=ConfigContext(default_configuration()),
        transport=transport or get_http_client(settings),
        routing=routing or FrontedRouting(),
        settings=settings,
    )
    refresher.bootstrap()

    APP_INFO.info({
        'version': __version__,
        'config_url': settings.config_url,
        'etag_commit': settings.etag_commit,
    })
    return refresher


async def refresh_once(refresher: ConfigRefresher) -> bool:
    """Run a cycle and log its outcome. Returns True if a new configuration was applied."""
    try:
        config = await refresher.refresh()
    except ConfigUnchangedError as e:
        logger.debug(f"Configuration unchanged: {e.reason}")
        return False
    except ConfigRefreshError as e:
        logger.warning(f"Configuration refresh failed: {e}")
        return False
    except httpx.HTTPError as e:
        logger.warning(f"Unable to reach config server: {e!r}")
        return False

    logger.info(f"Applied configuration instance={config.instance_id or '-'} version={config.firetweet_version or '-'}")
    return True


async def run(refresher: ConfigRefresher, interval_secs: float, once: bool = False) -> None:
    """Refresh at a fixed interval until cancelled"""
    try:
        while True:
            await refresh_once(refresher)
            if once:
                return
            await asyncio.sleep(interval_secs)
    finally:
        await close_http_client()
