"""Shared test fixtures and configuration"""
import gzip
from pathlib import Path
from typing import AsyncGenerator, Callable

import httpx
import pytest
import yaml

from cloudconfig.core.context import ConfigContext
from cloudconfig.core.defaults import DIGICERT_HIGH_ASSURANCE_EV_ROOT_CA, default_configuration
from cloudconfig.models.config import Configuration, RefreshSettings
from cloudconfig.services.refresher import ConfigRefresher
from cloudconfig.services.security import FrontedRouting

FIXTURES = Path(__file__).parent / 'fixtures'


@pytest.fixture
def ca_a() -> str:
    """PEM of the CA embedded in the default configuration"""
    return DIGICERT_HIGH_ASSURANCE_EV_ROOT_CA


@pytest.fixture
def ca_b() -> str:
    """PEM of a second, unrelated root CA"""
    return (FIXTURES / 'isrg_root_x1.pem').read_text()


@pytest.fixture
def config_doc(ca_a: str, ca_b: str) -> dict:
    """Remote configuration document as the server publishes it"""
    return {
        'client': {
            'chainedServers': [
                {
                    'name': 'fallback-sg-1',
                    'addr': '128.199.93.248:443',
                    'pipelined': True,
                    'weight': 1000000,
                    'qos': 10,
                    'trusted': True,
                }
            ],
            'masqueradeSets': {
                'cloudflare': [
                    {'domain': 'cdnjs.cloudflare.com', 'ipaddress': '104.16.51.111'},
                    {'domain': 'www.cloudflare.com', 'ipaddress': '104.16.124.96'},
                ]
            },
        },
        'trustedcas': [
            {'commonname': 'DigiCert High Assurance EV Root CA', 'cert': ca_a},
            {'commonname': 'ISRG Root X1', 'cert': ca_b},
        ],
        'instanceid': 'instance-42',
        'firetweetversion': '1.2.3',
    }


@pytest.fixture
def to_yaml() -> Callable[[dict], bytes]:
    """Serialize a document the way the config server does"""
    def _to_yaml(doc: dict) -> bytes:
        return yaml.safe_dump(doc, sort_keys=False).encode('utf-8')
    return _to_yaml


@pytest.fixture
def gzipped(to_yaml) -> Callable[[dict], bytes]:
    """Serialize and gzip a document"""
    def _gzipped(doc: dict) -> bytes:
        return gzip.compress(to_yaml(doc))
    return _gzipped


@pytest.fixture
def default_config() -> Configuration:
    return default_configuration()


@pytest.fixture
def context(default_config: Configuration) -> ConfigContext:
    """Context seeded with the embedded configuration"""
    return ConfigContext(default_config)


@pytest.fixture
def settings() -> RefreshSettings:
    return RefreshSettings(log_file=None)


@pytest.fixture
def routing() -> FrontedRouting:
    return FrontedRouting()


@pytest.fixture
async def transport() -> AsyncGenerator[httpx.AsyncClient, None]:
    """Plain HTTP client; tests intercept it with respx"""
    client = httpx.AsyncClient()
    yield client
    await client.aclose()


@pytest.fixture
def refresher(context, transport, routing, settings) -> ConfigRefresher:
    """Refresher with routing bootstrapped from the default configuration"""
    refresher = ConfigRefresher(context, transport, routing, settings)
    refresher.bootstrap()
    return refresher
