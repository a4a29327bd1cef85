"""Process state shared by the refresh components.

``ConfigContext`` owns the two pieces of mutable state: the cached ETag of the
last accepted download and the live ``Configuration``. Both are only touched
through the accessors below, under one re-entrant lock, so a reader always
gets a whole snapshot.
"""
import threading
from contextlib import contextmanager
from typing import Iterator, Optional

from cloudconfig.models.config import Configuration

_NOTHING_STAGED = object()


class ConfigContext:
    """Owner of the ETag cache and the live configuration"""

    def __init__(self, config: Configuration):
        self._lock = threading.RLock()
        self._config = config
        self._etag: Optional[str] = None
        self._staged_etag: object = _NOTHING_STAGED

    @property
    def config(self) -> Configuration:
        """Current configuration snapshot"""
        with self._lock:
            return self._config

    @property
    def etag(self) -> Optional[str]:
        """Validator of the last successful download, if any"""
        with self._lock:
            return self._etag

    @contextmanager
    def locked(self) -> Iterator[Configuration]:
        """Hold the state lock and yield the current configuration.

        Used for compare-and-swap sequences that must not interleave with other
        writers.
        """
        with self._lock:
            yield self._config

    def swap(self, config: Configuration) -> Configuration:
        """Replace the live configuration as a whole, returning the previous one"""
        with self._lock:
            previous = self._config
            self._config = config
            return previous

    def set_etag(self, etag: Optional[str]) -> None:
        """Store the validator sent with the next request.

        An empty or missing header still overwrites the cache, so a server that
        stops sending ETags also stops getting conditional requests.
        """
        with self._lock:
            self._etag = etag or None
            self._staged_etag = _NOTHING_STAGED

    def stage_etag(self, etag: Optional[str]) -> None:
        """Hold a validator until the body it came with has been accepted"""
        with self._lock:
            self._staged_etag = etag or None

    def commit_etag(self) -> bool:
        """Promote the staged validator to the cache. Returns False if none was staged."""
        with self._lock:
            if self._staged_etag is _NOTHING_STAGED:
                return False
            self._etag = self._staged_etag
            self._staged_etag = _NOTHING_STAGED
            return True

    def discard_staged_etag(self) -> None:
        with self._lock:
            self._staged_etag = _NOTHING_STAGED
