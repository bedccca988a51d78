"""
Cluster file loader.

Path: nodetunnel/hosts/cluster.py

Reads the node list from a cluster.yml:

    ssh_key_path: ~/.ssh/id_rsa        # default for all nodes
    ignore_docker_version: false       # true = only warn on unsupported engines
    nodes:
      - address: 10.0.0.1
        user: ubuntu
        role: [controlplane, etcd]
      - address: 10.0.0.2
        user: ubuntu
        port: 2222
        ssh_key_path: ~/.ssh/worker_key
        role: [worker]
"""

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, List, Optional, Union

import yaml

from nodetunnel.hosts.host import DEFAULT_SSH_KEY_PATH, Host

logger = logging.getLogger(__name__)


@dataclass
class ClusterFile:
    """Parsed cluster file."""
    path: Optional[Path]
    hosts: List[Host] = field(default_factory=list)
    ignore_docker_version: bool = False

    def get_host(self, address: str) -> Optional[Host]:
        """Find a host by address or hostname_override."""
        return next(
            (h for h in self.hosts if h.address == address or h.hostname_override == address),
            None,
        )


def _host_from_node(node: Dict[str, Any], index: int, defaults: Dict[str, Any]) -> Host:
    if not isinstance(node, dict):
        raise ValueError(f"Node #{index} must be a mapping")

    address = node.get("address")
    user = node.get("user")
    if not address:
        raise ValueError(f"Node #{index} is missing 'address'")
    if not user:
        raise ValueError(f"Node [{address}] is missing 'user'")

    role = node.get("role") or []
    if isinstance(role, str):
        role = [role]

    try:
        port = int(node.get("port") or 22)
    except (TypeError, ValueError):
        raise ValueError(f"Node [{address}] has invalid port: {node.get('port')!r}")

    return Host(
        address=str(address),
        user=str(user),
        port=port,
        ssh_key=node.get("ssh_key") or defaults["ssh_key"],
        ssh_key_path=node.get("ssh_key_path") or defaults["ssh_key_path"],
        role=list(role),
        hostname_override=node.get("hostname_override"),
        enforce_docker_version=not defaults["ignore_docker_version"],
    )


def parse_cluster(data: Any, path: Optional[Path] = None) -> ClusterFile:
    """
    Build a ClusterFile from parsed YAML data.

    Raises:
        ValueError: Structure is invalid.
    """
    if not isinstance(data, dict):
        raise ValueError("Cluster file must be a mapping")

    nodes = data.get("nodes")
    if not nodes or not isinstance(nodes, list):
        raise ValueError("Cluster file has no 'nodes' list")

    ignore_docker_version = bool(data.get("ignore_docker_version", False))
    defaults = {
        "ssh_key": data.get("ssh_key") or "",
        "ssh_key_path": data.get("ssh_key_path") or DEFAULT_SSH_KEY_PATH,
        "ignore_docker_version": ignore_docker_version,
    }

    hosts = [_host_from_node(node, i, defaults) for i, node in enumerate(nodes)]
    logger.debug(f"Loaded {len(hosts)} hosts from {path or 'cluster data'}")

    return ClusterFile(path=path, hosts=hosts, ignore_docker_version=ignore_docker_version)


def load_cluster_file(path: Union[str, Path]) -> ClusterFile:
    """
    Load hosts from a cluster.yml.

    Raises:
        ValueError: File missing, invalid YAML, or invalid structure.
    """
    path = Path(path).expanduser()
    if not path.exists():
        raise ValueError(f"Cluster file not found: {path}")

    try:
        with open(path) as f:
            data = yaml.safe_load(f) or {}
    except yaml.YAMLError as e:
        raise ValueError(f"Invalid cluster YAML: {e}")

    return parse_cluster(data, path)
