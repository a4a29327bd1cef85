"""Prometheus metrics for the configuration refresher"""
from prometheus_client import Counter, Histogram, Gauge, Info

# Refresh cycle metrics
REFRESH_COUNT = Counter(
    'cloudconfig_refresh_total',
    'Total number of refresh cycles by outcome',
    ['outcome']
)

FETCH_DURATION = Histogram(
    'cloudconfig_fetch_duration_seconds',
    'Configuration fetch duration in seconds',
    ['status_code'],
    buckets=(0.1, 0.5, 1.0, 2.0, 5.0, 10.0, 30.0, 60.0, float('inf'))
)

# Live configuration state
TRUSTED_CAS = Gauge(
    'cloudconfig_trusted_cas',
    'Number of trusted CAs in the active trust pool'
)

CHAINED_SERVERS = Gauge(
    'cloudconfig_chained_servers',
    'Number of chained servers in the live configuration'
)

ROUTING_GENERATION = Gauge(
    'cloudconfig_routing_generation',
    'Generation of the active fronted routing state'
)

# Application info
APP_INFO = Info('cloudconfig_app', 'Application information')
