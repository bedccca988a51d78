"""
HTTP over an SSH tunnel.

Path: nodetunnel/ssh/http.py

requests/urllib3 transport whose connections get their socket from a Dialer
instead of a TCP connect. Mount the adapter on a requests.Session (the Docker
APIClient is one) and every request it sends travels through the tunnel.
"""

import logging
import threading
from typing import TYPE_CHECKING, Optional

import requests.adapters
import urllib3
import urllib3.connection
import urllib3.connectionpool

from nodetunnel.core.errors import TransportError, TunnelError
from nodetunnel.ssh.dialer import Dialer, DialerFactory

if TYPE_CHECKING:
    from nodetunnel.hosts.host import Host

logger = logging.getLogger(__name__)


class TunnelHTTPConnection(urllib3.connection.HTTPConnection):
    """HTTP connection whose socket comes from a dialer."""

    def __init__(self, dial: Dialer, timeout: float = 60):
        super().__init__("localhost", timeout=timeout)
        self.dial = dial

    def connect(self):
        self.sock = self.dial()


class TunnelHTTPConnectionPool(urllib3.connectionpool.HTTPConnectionPool):
    def __init__(self, dial: Dialer, timeout: float = 60, maxsize: int = 10):
        super().__init__("localhost", timeout=urllib3.Timeout(connect=timeout, read=timeout), maxsize=maxsize)
        self.dial = dial
        self.timeout_seconds = timeout

    def _new_conn(self):
        return TunnelHTTPConnection(self.dial, self.timeout_seconds)


class TunnelHTTPAdapter(requests.adapters.HTTPAdapter):
    """
    requests adapter routing all traffic through one tunnel pool.

    The pool is created on first use; request URLs are sent path-only since
    the far end of the tunnel is a single engine endpoint.
    """

    __attrs__ = requests.adapters.HTTPAdapter.__attrs__ + ['timeout', 'max_pool_size']

    def __init__(self, dial: Dialer, timeout: float = 60, max_pool_size: int = 10):
        self.dial = dial
        self.timeout = timeout
        self.max_pool_size = max_pool_size
        self._pool: Optional[TunnelHTTPConnectionPool] = None
        self._pool_lock = threading.Lock()
        super().__init__()

    def get_connection(self, url, proxies=None):
        with self._pool_lock:
            if self._pool is None:
                self._pool = TunnelHTTPConnectionPool(
                    self.dial, self.timeout, maxsize=self.max_pool_size
                )
            return self._pool

    def get_connection_with_tls_context(self, request, verify, proxies=None, cert=None):
        # requests >= 2.32 calls this instead of get_connection
        return self.get_connection(request.url, proxies)

    def request_url(self, request, proxies):
        return request.path_url

    def close(self):
        with self._pool_lock:
            if self._pool is not None:
                self._pool.close()
                self._pool = None
        super().close()

        dial_close = getattr(self.dial, "close", None)
        if callable(dial_close):
            dial_close()


def new_http_client(dialer_factory: DialerFactory, host: "Host", timeout: float = 60) -> TunnelHTTPAdapter:
    """
    Build the tunneled HTTP client for a host.

    Raises:
        CredentialError: The host's private key could not be resolved.
        TransportError: The dialer could not be set up.
    """
    try:
        dial = dialer_factory(host)
    except TunnelError as e:
        if e.host is None:
            e.host = host.address
        raise
    except Exception as e:
        raise TransportError(f"Can't establish dialer connection: {e}", host=host.address) from e

    if not callable(dial):
        raise TransportError(
            f"Can't establish dialer connection: factory returned {type(dial).__name__}",
            host=host.address,
        )

    logger.debug(f"Dialer ready for host [{host.address}]")
    return TunnelHTTPAdapter(dial, timeout=timeout)
