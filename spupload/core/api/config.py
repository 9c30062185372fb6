"""
Client configuration module.

Transport settings for talking to a SharePoint farm or tenant, plus the
chunk size used by uploads. ``ClientConfig()`` works out of the box for
SharePoint Online; on-premises farms usually need ``ssl`` or ``proxy``.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, Optional, Union
import ssl

import aiohttp

DEFAULT_CHUNK_SIZE = 16 * 1024 * 1024  # 16 MiB


@dataclass
class ProxyConfig:
    """
    Outbound proxy for every SharePoint and token request.

    Credentials are sent as ``Proxy-Authorization`` basic auth, never
    embedded in the proxy URL.
    """
    url: Optional[str] = None
    username: Optional[str] = None
    password: Optional[str] = None

    def request_kwargs(self) -> Dict[str, Any]:
        """``proxy`` / ``proxy_auth`` arguments for ``ClientSession.request``."""
        if not self.url:
            return {}
        kwargs: Dict[str, Any] = {'proxy': self.url}
        if self.username:
            kwargs['proxy_auth'] = aiohttp.BasicAuth(self.username, self.password or '')
        return kwargs


@dataclass
class SSLConfig:
    """
    TLS settings for the site connection.

    Farms signed by an internal CA should set ``ca_file``; ``verify=False``
    turns verification off entirely. ``cert_file``/``key_file`` provide a
    client certificate where the farm requires one.
    """
    verify: bool = True
    cert_file: Optional[str] = None
    key_file: Optional[str] = None
    ca_file: Optional[str] = None
    check_hostname: bool = True

    def ssl_context(self) -> Union[ssl.SSLContext, bool]:
        """Value for the connector's ``ssl`` argument (``False`` skips verification)."""
        if not self.verify:
            return False

        context = ssl.create_default_context(cafile=self.ca_file)
        context.check_hostname = self.check_hostname
        if self.cert_file:
            context.load_cert_chain(self.cert_file, keyfile=self.key_file)
        return context


@dataclass
class TimeoutConfig:
    """
    Limits for each HTTP call, in seconds.

    ``total`` must cover one chunk upload on the slowest expected link; the
    deadline of a whole upload is the ``timeout`` argument of
    ``SharePointUploader.upload``.
    """
    total: float = 600.0
    connect: float = 30.0
    sock_read: float = 300.0
    sock_connect: float = 30.0

    def client_timeout(self) -> aiohttp.ClientTimeout:
        return aiohttp.ClientTimeout(
            total=self.total,
            connect=self.connect,
            sock_read=self.sock_read,
            sock_connect=self.sock_connect
        )


@dataclass
class ClientConfig:
    """
    Settings of one SharePointUploader and its HTTP session.

    Attributes:
        chunk_size: Bytes per ``startupload``/``continueupload``/``finishupload``
            body; files up to this size go in a single request
        user_agent: ``User-Agent`` header of every request
        proxy: Optional outbound proxy
        ssl: TLS settings
        timeout: Per-request limits
        extra_headers: Headers added to every request (e.g. tenant routing)
        limit: Maximum open connections
        limit_per_host: Maximum open connections to the site host
    """
    chunk_size: int = DEFAULT_CHUNK_SIZE
    user_agent: str = 'spupload/1.0.0'
    proxy: Optional[ProxyConfig] = None
    ssl: SSLConfig = field(default_factory=SSLConfig)
    timeout: TimeoutConfig = field(default_factory=TimeoutConfig)
    extra_headers: Dict[str, str] = field(default_factory=dict)
    limit: int = 20
    limit_per_host: int = 4

    def __post_init__(self):
        if self.chunk_size <= 0:
            raise ValueError("Chunk size must be positive")

    @classmethod
    def default(cls) -> 'ClientConfig':
        return cls()

    @classmethod
    def with_proxy(cls, proxy_url: str, **kwargs) -> 'ClientConfig':
        """Configuration routing all traffic through ``proxy_url``."""
        return cls(proxy=ProxyConfig(url=proxy_url), **kwargs)

    @classmethod
    def insecure(cls, **kwargs) -> 'ClientConfig':
        """Configuration for test farms with self-signed certificates."""
        return cls(ssl=SSLConfig(verify=False, check_hostname=False), **kwargs)

    def get_connector_kwargs(self) -> Dict[str, Any]:
        """Arguments for the ``aiohttp.TCPConnector`` of the upload session."""
        return {
            'limit': self.limit,
            'limit_per_host': self.limit_per_host,
            'ssl': self.ssl.ssl_context(),
        }

    def get_session_kwargs(self) -> Dict[str, Any]:
        """Arguments for the ``aiohttp.ClientSession``: default headers and timeouts."""
        return {
            'headers': {'User-Agent': self.user_agent, **self.extra_headers},
            'timeout': self.timeout.client_timeout(),
        }

    def get_request_kwargs(self) -> Dict[str, Any]:
        """Per-request arguments (proxy settings) for ``ClientSession.request``."""
        return self.proxy.request_kwargs() if self.proxy else {}
