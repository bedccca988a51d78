"""
Cluster host and tunnel setup.

Path: nodetunnel/hosts/host.py

Host.tunnel_up() brings up the Docker engine client for one node:

    UNBOUND -> CONNECTING -> BOUND
                          \\-> FAILED

1. Build the tunneled HTTP client (dialer factory + adapter)
2. Construct the Docker APIClient on the fixed socket/API version
3. Query daemon info
4. Store the client and check the engine version

A BOUND host is never set up twice. Hosts share no state, so different hosts
can be set up from different threads; calls for the same host must not
overlap (there is no lock).

Usage:
    host = Host(address="10.0.0.1", user="ubuntu", enforce_docker_version=True)
    host.tunnel_up(SSHDialerFactory())
    host.docker_client.containers()
"""

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Any, Callable, List, Optional

import docker

from nodetunnel.core.errors import (
    ClientError,
    CompatibilityError,
    DaemonError,
    TunnelError,
)
from nodetunnel.core.versions import (
    DEFAULT_VERSION_TABLE,
    DOCKER_API_VERSION,
    DOCKER_SOCKET,
    K8S_VERSION,
    VersionTable,
    check_docker_version,
)
from nodetunnel.ssh.dialer import DialerFactory
from nodetunnel.ssh.http import TunnelHTTPAdapter, new_http_client

logger = logging.getLogger(__name__)

DEFAULT_SSH_KEY_PATH = "~/.ssh/id_rsa"

# (http_client, timeout) -> engine client with an info() method
ClientFactory = Callable[[TunnelHTTPAdapter, float], Any]


class TunnelState(Enum):
    """Tunnel lifecycle of a host."""
    UNBOUND = "unbound"
    CONNECTING = "connecting"
    BOUND = "bound"
    FAILED = "failed"


def new_docker_client(http_client: TunnelHTTPAdapter, timeout: float = 60) -> docker.APIClient:
    """
    Docker API client addressing the engine socket through the tunnel.

    APIClient mounts its own Unix socket adapter for DOCKER_SOCKET; the tunnel
    adapter replaces it so no local socket is ever opened.
    """
    api_client = docker.APIClient(
        base_url=DOCKER_SOCKET,
        version=DOCKER_API_VERSION,
        timeout=timeout,
    )
    api_client.mount("http+docker://", http_client)
    api_client._custom_adapter = http_client
    return api_client


@dataclass
class Host:
    """A cluster node reachable over SSH."""

    address: str
    user: str
    port: int = 22
    ssh_key: str = ""  # Inline PEM, wins over ssh_key_path
    ssh_key_path: str = DEFAULT_SSH_KEY_PATH
    role: List[str] = field(default_factory=list)
    hostname_override: Optional[str] = None
    enforce_docker_version: bool = False

    # Populated by tunnel_up
    docker_client: Optional[Any] = field(default=None, repr=False)
    tunnel_state: TunnelState = TunnelState.UNBOUND
    tunnel_error: Optional[TunnelError] = field(default=None, repr=False)
    _http_client: Optional[TunnelHTTPAdapter] = field(default=None, repr=False)

    @property
    def name(self) -> str:
        return self.hostname_override or self.address

    @property
    def is_bound(self) -> bool:
        return self.tunnel_state == TunnelState.BOUND

    def tunnel_up(
        self,
        dialer_factory: DialerFactory,
        client_factory: ClientFactory = new_docker_client,
        version_table: Optional[VersionTable] = None,
        http_timeout: float = 60,
        k8s_version: str = K8S_VERSION,
    ) -> None:
        """
        Establish the Docker engine tunnel for this host.

        Args:
            dialer_factory: Builds the dialer for this host.
            client_factory: Builds the engine client on the tunneled HTTP client.
            version_table: Supported engine versions (default table if None).
            http_timeout: HTTP timeout through the tunnel in seconds.
            k8s_version: Release identifier for the version check.

        Raises:
            CredentialError: Private key could not be resolved.
            TransportError: Dialer setup failed.
            ClientError: Engine client construction failed.
            DaemonError: Daemon info query failed.
            CompatibilityError: Engine version rejected or undeterminable.
        """
        if self.tunnel_state == TunnelState.BOUND:
            return

        # Connection worked but the version was rejected; don't dial again
        if (self.tunnel_state == TunnelState.FAILED
                and isinstance(self.tunnel_error, CompatibilityError)
                and self.docker_client is not None):
            raise self.tunnel_error

        self.tunnel_state = TunnelState.CONNECTING
        self.tunnel_error = None

        try:
            self._connect(dialer_factory, client_factory, version_table, http_timeout, k8s_version)
        except TunnelError as e:
            self.tunnel_state = TunnelState.FAILED
            self.tunnel_error = e
            raise

        self.tunnel_state = TunnelState.BOUND

    def _connect(self, dialer_factory, client_factory, version_table, http_timeout, k8s_version):
        logger.info(f"[dialer] Setup tunnel for host [{self.address}]")
        http_client = new_http_client(dialer_factory, self, timeout=http_timeout)

        logger.debug(f"Connecting to Docker API for host [{self.address}]")
        try:
            docker_client = client_factory(http_client, http_timeout)
        except Exception as e:
            http_client.close()
            raise ClientError(f"Can't initiate NewClient: {e}", host=self.address) from e

        try:
            info = docker_client.info()
        except Exception as e:
            _close_quietly(docker_client)
            http_client.close()
            raise DaemonError(f"Can't retrieve Docker Info: {e}", host=self.address) from e

        logger.debug(f"Docker Info found: {info!r}")
        self.docker_client = docker_client
        self._http_client = http_client

        check_docker_version(
            info,
            enforce=self.enforce_docker_version,
            host=self.address,
            k8s_version=k8s_version,
            table=version_table if version_table is not None else DEFAULT_VERSION_TABLE,
        )

    def tunnel_down(self) -> None:
        """Close the engine client and SSH session and return to UNBOUND."""
        if self.docker_client is not None:
            _close_quietly(self.docker_client)
        if self._http_client is not None:
            self._http_client.close()

        self.docker_client = None
        self._http_client = None
        self.tunnel_error = None
        self.tunnel_state = TunnelState.UNBOUND


def _close_quietly(client: Any) -> None:
    close = getattr(client, "close", None)
    if not callable(close):
        return
    try:
        close()
    except Exception as e:
        logger.debug(f"Error closing engine client: {e}")
