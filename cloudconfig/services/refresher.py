"""One refresh cycle: fetch, update, re-apply security"""
import asyncio
from typing import Optional

from cloudconfig.core.context import ConfigContext
from cloudconfig.core.exceptions import ConfigUnchangedError
from cloudconfig.core.logging import get_logger
from cloudconfig.core.metrics import CHAINED_SERVERS, REFRESH_COUNT
from cloudconfig.models.config import Configuration, RefreshSettings
from cloudconfig.services.fetcher import ConfigFetcher, ConfigTransport
from cloudconfig.services.security import FrontedRouting, SecurityApplier
from cloudconfig.services.updater import ConfigUpdater

logger = get_logger()


class ConfigRefresher:
    """Runs refresh cycles against a single ``ConfigContext``.

    Cycles are serialized: the fetch, the swap and the security re-apply of
    one cycle never interleave with another cycle's.
    """

    def __init__(
        self,
        context: ConfigContext,
        transport: ConfigTransport,
        routing: FrontedRouting,
        settings: Optional[RefreshSettings] = None,
    ):
        self.settings = settings or RefreshSettings()
        self.context = context
        self.routing = routing
        self.fetcher = ConfigFetcher(context, transport, self.settings)
        self.updater = ConfigUpdater()
        self.security = SecurityApplier(routing)
        self._cycle_lock = asyncio.Lock()

    def bootstrap(self) -> None:
        """Configure routing from the live configuration before any fetch"""
        config = self.context.config
        CHAINED_SERVERS.set(len(config.client.chained_servers))
        self.security.apply_security(config)

    async def refresh(self) -> Configuration:
        """Run one cycle.

        Returns:
            The newly applied configuration

        Raises:
            ConfigRefreshError: Any stage failed or there was nothing to apply;
                the previous configuration stays live
            httpx.HTTPError: The transport failed
        """
        async with self._cycle_lock:
            try:
                config = await self._run_cycle()
            except ConfigUnchangedError:
                REFRESH_COUNT.labels(outcome="unchanged").inc()
                raise
            except Exception as e:
                REFRESH_COUNT.labels(outcome=type(e).__name__).inc()
                raise
            REFRESH_COUNT.labels(outcome="updated").inc()
            return config

    async def _run_cycle(self) -> Configuration:
        # Leftover from a cancelled cycle
        self.context.discard_staged_etag()
        try:
            raw = await self.fetcher.pull()
            config = self.updater.apply_update(self.context, raw)
        except ConfigUnchangedError:
            # A 304 stages nothing; an identical body keeps its new validator
            self.context.commit_etag()
            raise
        except Exception:
            self.context.discard_staged_etag()
            raise

        self.context.commit_etag()
        CHAINED_SERVERS.set(len(config.client.chained_servers))
        self.security.apply_security(config)
        return config
