"""Trusted cert pool and fronted routing derived from the live configuration"""
import ssl
import threading
from dataclasses import dataclass, field
from typing import Mapping, Optional, Sequence

import httpx

from cloudconfig.core.exceptions import TrustPoolError
from cloudconfig.core.logging import get_logger
from cloudconfig.core.metrics import ROUTING_GENERATION, TRUSTED_CAS
from cloudconfig.models.config import Configuration, Masquerade

logger = get_logger()


@dataclass(frozen=True)
class TrustPool:
    """Certificate authorities trusted for fronted TLS connections"""
    certs: tuple[str, ...]
    ssl_context: ssl.SSLContext = field(compare=False, repr=False)

    def __len__(self) -> int:
        return len(self.certs)


def build_trust_pool(certs: Sequence[str]) -> TrustPool:
    """Build a client SSL context trusting exactly the given PEM certificates.

    Raises:
        TrustPoolError: A certificate cannot be loaded
    """
    context = ssl.SSLContext(ssl.PROTOCOL_TLS_CLIENT)
    for index, pem in enumerate(certs):
        try:
            context.load_verify_locations(cadata=pem)
        except (ssl.SSLError, ValueError) as e:
            logger.debug(f"Error configuring certs pool: {e}")
            raise TrustPoolError(str(e), index=index) from e
    return TrustPool(certs=tuple(certs), ssl_context=context)


@dataclass(frozen=True)
class FrontedState:
    """Trust material and front domains used by fronted connections"""
    generation: int
    pool: TrustPool
    masquerade_sets: Mapping[str, tuple[Masquerade, ...]]

    def masquerades(self) -> list[Masquerade]:
        """All masquerades of every set, set by set"""
        return [m for name in sorted(self.masquerade_sets) for m in self.masquerade_sets[name]]


class FrontedRouting:
    """Holds the fronted routing state read by the live network client.

    Every ``configure`` call publishes a new ``FrontedState`` in one reference
    swap; connections opened afterwards use the new trust pool.
    """

    def __init__(self):
        self._lock = threading.Lock()
        self._state: Optional[FrontedState] = None

    def configure(self, pool: TrustPool, masquerade_sets: Mapping[str, Sequence[Masquerade]]) -> FrontedState:
        with self._lock:
            generation = self._state.generation + 1 if self._state else 1
            self._state = FrontedState(
                generation=generation,
                pool=pool,
                masquerade_sets={name: tuple(ms) for name, ms in masquerade_sets.items()},
            )
            state = self._state

        ROUTING_GENERATION.set(state.generation)
        logger.info(
            f"Fronted routing configured: generation={state.generation}, "
            f"{len(pool)} trusted CAs, {len(state.masquerades())} masquerades"
        )
        return state

    @property
    def state(self) -> Optional[FrontedState]:
        with self._lock:
            return self._state

    def build_client(self, **kwargs) -> httpx.AsyncClient:
        """Create an HTTP client verifying peers against the current trust pool"""
        state = self.state
        if state is None:
            raise RuntimeError("Fronted routing has not been configured yet")
        return httpx.AsyncClient(verify=state.pool.ssl_context, **kwargs)


class SecurityApplier:
    """Re-derives trust and routing state from a configuration"""

    def __init__(self, routing: FrontedRouting):
        self._routing = routing

    def apply_security(self, config: Configuration) -> TrustPool:
        """Rebuild the trust pool and re-activate fronted routing.

        Routing is left untouched when the pool cannot be built.

        Raises:
            TrustPoolError: A trusted CA is not valid PEM
        """
        certs = config.trusted_certs()
        logger.debug(f"Length of trusted certs: {len(certs)}")

        try:
            pool = build_trust_pool(certs)
        except TrustPoolError as e:
            logger.error(f"Unable to get trusted ca certs, fronted not configured: {e}")
            raise

        self._routing.configure(pool, config.client.masquerade_sets)
        TRUSTED_CAS.set(len(pool))
        return pool
