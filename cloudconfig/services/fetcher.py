"""Conditional download of the remote configuration file"""
import time
import zlib
from typing import Optional, Protocol

import httpx

from cloudconfig.core.context import ConfigContext
from cloudconfig.core.exceptions import (
    ConfigUnchangedError,
    DecompressionError,
    RequestFailedError,
)
from cloudconfig.core.logging import get_logger
from cloudconfig.core.metrics import FETCH_DURATION
from cloudconfig.models.config import RefreshSettings

logger = get_logger()

HTTP_IF_NONE_MATCH = "If-None-Match"
HTTP_ETAG = "ETag"
FRONTED_URL_HEADER = "Lantern-Fronted-URL"

# zlib window size that only accepts a gzip header and trailer
GZIP_WBITS = 16 + zlib.MAX_WBITS


class ConfigTransport(Protocol):
    """Delivers a request, directly or over a fronted route.

    ``httpx.AsyncClient`` satisfies this protocol.
    """

    async def send(self, request: httpx.Request, *, stream: bool = False) -> httpx.Response:
        ...


class ConfigFetcher:
    """Pulls the gzip-compressed configuration file from the config server"""

    def __init__(
        self,
        context: ConfigContext,
        transport: ConfigTransport,
        settings: Optional[RefreshSettings] = None,
    ):
        self._context = context
        self._transport = transport
        self._settings = settings or RefreshSettings()

    def build_request(self) -> httpx.Request:
        """Build the GET request, conditional when an ETag is cached"""
        headers = {
            # Never serve a copy cached along the way
            "Cache-Control": "no-cache",
            FRONTED_URL_HEADER: self._settings.fronted_url,
            "Connection": "close",
        }

        etag = self._context.etag
        if etag:
            # Don't bother fetching if unchanged
            headers[HTTP_IF_NONE_MATCH] = etag

        return httpx.Request(
            "GET",
            self._settings.config_url,
            headers=headers,
            extensions={"timeout": httpx.Timeout(self._settings.request_timeout_secs).as_dict()},
        )

    async def pull(self) -> bytes:
        """Fetch and decompress the configuration file.

        Returns:
            The decompressed document bytes

        Raises:
            ConfigUnchangedError: The server answered 304 Not Modified
            RequestFailedError: The server answered anything but 200 or 304
            DecompressionError: The body is not a complete gzip stream
            httpx.HTTPError: The transport failed
        """
        request = self.build_request()
        started = time.perf_counter()
        response = await self._transport.send(request, stream=True)
        try:
            FETCH_DURATION.labels(status_code=str(response.status_code)).observe(
                time.perf_counter() - started
            )

            if response.status_code == httpx.codes.NOT_MODIFIED:
                logger.debug("Configuration file has not changed since last pull")
                raise ConfigUnchangedError("Configuration file has not changed since last pull")

            if response.status_code != httpx.codes.OK:
                logger.warning(f"Config server answered HTTP {response.status_code} for {request.url}")
                raise RequestFailedError(response.status_code, str(request.url))

            self._record_etag(response.headers.get(HTTP_ETAG))
            return await self._read_gzip(response)
        finally:
            await response.aclose()

    def _record_etag(self, etag: Optional[str]) -> None:
        if self._settings.etag_commit == "on_apply":
            self._context.stage_etag(etag)
        else:
            # Cached even if the body is rejected later on
            self._context.set_etag(etag)

    async def _read_gzip(self, response: httpx.Response) -> bytes:
        """Drain the raw body through a streaming gzip decoder.

        Concatenated gzip members are decoded one after the other.
        """
        decompressor = zlib.decompressobj(GZIP_WBITS)
        chunks: list[bytes] = []
        try:
            async for raw in response.aiter_raw():
                while raw:
                    if decompressor.eof:
                        decompressor = zlib.decompressobj(GZIP_WBITS)
                    chunks.append(decompressor.decompress(raw))
                    raw = decompressor.unused_data if decompressor.eof else b""
            chunks.append(decompressor.flush())
        except zlib.error as e:
            raise DecompressionError(str(e)) from e

        if not decompressor.eof:
            raise DecompressionError("unexpected end of gzip stream")

        data = b"".join(chunks)
        logger.debug(f"Pulled configuration file: {response.num_bytes_downloaded} bytes compressed, {len(data)} bytes raw")
        return data
