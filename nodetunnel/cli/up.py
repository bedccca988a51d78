"""
Up CLI handler.

Path: nodetunnel/cli/up.py

Handles: nodetunnel up [options]

Brings up the Docker engine tunnel for each node in the cluster file, one
node at a time, and reports the engine version found on each.
"""

import logging
import sys
from typing import List

from nodetunnel.core.config import Config
from nodetunnel.core.errors import TunnelError
from nodetunnel.hosts.cluster import load_cluster_file
from nodetunnel.hosts.host import Host, new_docker_client
from nodetunnel.ssh.dialer import SSHDialerFactory

logger = logging.getLogger(__name__)


def handle_up(args, config: Config) -> int:
    """Handle up subcommand."""
    try:
        cluster = load_cluster_file(args.cluster)
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    hosts = _select_hosts(cluster.hosts, args.hosts)
    if not hosts:
        print(f"Error: No matching nodes in {cluster.path}", file=sys.stderr)
        return 1

    if args.ignore_docker_version:
        for host in hosts:
            host.enforce_docker_version = False

    try:
        version_table = config.version_table()
    except ValueError as e:
        print(f"Error: {e}", file=sys.stderr)
        return 1

    factory = SSHDialerFactory(
        timeout=config.ssh.timeout,
        dial_command=config.ssh.dial_command,
    )

    print(f"Bringing up {len(hosts)} node(s) from {cluster.path}\n")

    failed = 0
    for host in hosts:
        try:
            host.tunnel_up(
                factory,
                client_factory=new_docker_client,
                version_table=version_table,
                http_timeout=config.docker.timeout,
            )
            print(f"  ✓ {host.name}: {_engine_version(host)}")
        except TunnelError as e:
            failed += 1
            print(f"  ✗ {host.name}: {e.stage.value} - {e.message}")
        finally:
            host.tunnel_down()

    print()
    print(f"{len(hosts) - failed}/{len(hosts)} node(s) ready")

    return 1 if failed else 0


def _select_hosts(hosts: List[Host], addresses) -> List[Host]:
    if not addresses:
        return list(hosts)
    return [h for h in hosts if h.address in addresses or h.hostname_override in addresses]


def _engine_version(host: Host) -> str:
    try:
        return f"Docker {host.docker_client.version().get('Version', 'unknown')}"
    except Exception as e:
        logger.debug(f"Version query failed for {host.address}: {e}")
        return "Docker engine reachable"
