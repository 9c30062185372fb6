"""Transport layer: configuration and the aiohttp-backed HTTP client."""
from .config import (
    ClientConfig,
    ProxyConfig,
    SSLConfig,
    TimeoutConfig,
    DEFAULT_CHUNK_SIZE
)
from .http import AiohttpTransport, HttpResponse, HttpTransport, TRANSPORT_ERRORS

__all__ = [
    # Configuration
    'ClientConfig',
    'ProxyConfig',
    'SSLConfig',
    'TimeoutConfig',
    'DEFAULT_CHUNK_SIZE',

    # Transport
    'AiohttpTransport',
    'HttpResponse',
    'HttpTransport',
    'TRANSPORT_ERRORS',
]
