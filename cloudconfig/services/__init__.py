"""Refresh services"""
from .fetcher import ConfigFetcher
from .refresher import ConfigRefresher
from .security import FrontedRouting, SecurityApplier, TrustPool, build_trust_pool
from .updater import ConfigUpdater, parse_configuration

__all__ = [
    "ConfigFetcher",
    "ConfigRefresher",
    "ConfigUpdater",
    "FrontedRouting",
    "SecurityApplier",
    "TrustPool",
    "build_trust_pool",
    "parse_configuration",
]
