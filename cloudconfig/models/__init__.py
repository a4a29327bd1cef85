"""Data models and schemas"""
from .config import (
    ChainedServer,
    ClientConfig,
    Configuration,
    Masquerade,
    RefreshSettings,
    TrustedCA,
)

__all__ = [
    "ChainedServer",
    "ClientConfig",
    "Configuration",
    "Masquerade",
    "RefreshSettings",
    "TrustedCA",
]
