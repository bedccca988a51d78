"""
NodeTunnel - Docker engine access to cluster nodes over SSH.

Usage:
    nodetunnel init
    nodetunnel up --cluster cluster.yml
    nodetunnel versions
"""

__version__ = "0.1.0"

from nodetunnel.core.config import Config, get_config
from nodetunnel.core.errors import (
    TunnelStage,
    TunnelError,
    CredentialError,
    TransportError,
    ClientError,
    DaemonError,
    CompatibilityError,
    VersionLookupError,
    UnsupportedVersionError,
)
from nodetunnel.core.versions import (
    DOCKER_API_VERSION,
    DOCKER_SOCKET,
    K8S_VERSION,
    VersionTable,
    check_docker_version,
)
from nodetunnel.hosts.host import Host, TunnelState
from nodetunnel.hosts.cluster import ClusterFile, load_cluster_file
from nodetunnel.ssh.dialer import SSHDialerFactory

__all__ = [
    # Version
    "__version__",
    # Config
    "Config",
    "get_config",
    # Errors
    "TunnelStage",
    "TunnelError",
    "CredentialError",
    "TransportError",
    "ClientError",
    "DaemonError",
    "CompatibilityError",
    "VersionLookupError",
    "UnsupportedVersionError",
    # Versions
    "DOCKER_API_VERSION",
    "DOCKER_SOCKET",
    "K8S_VERSION",
    "VersionTable",
    "check_docker_version",
    # Hosts
    "Host",
    "TunnelState",
    "ClusterFile",
    "load_cluster_file",
    # SSH
    "SSHDialerFactory",
]
