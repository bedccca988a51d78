"""Cluster hosts and tunnel setup."""

from nodetunnel.hosts.host import Host, TunnelState, new_docker_client
from nodetunnel.hosts.cluster import ClusterFile, load_cluster_file

__all__ = [
    "Host",
    "TunnelState",
    "new_docker_client",
    "ClusterFile",
    "load_cluster_file",
]
