"""SSH credentials, dialer and HTTP-over-tunnel transport."""

from nodetunnel.ssh.keys import check_encrypted_key, parse_private_key, private_key_path
from nodetunnel.ssh.auth import AuthConfig, HostKeyPolicy, make_ssh_config
from nodetunnel.ssh.dialer import SSHDialer, SSHDialerFactory
from nodetunnel.ssh.http import TunnelHTTPAdapter, new_http_client

__all__ = [
    "check_encrypted_key",
    "parse_private_key",
    "private_key_path",
    "AuthConfig",
    "HostKeyPolicy",
    "make_ssh_config",
    "SSHDialer",
    "SSHDialerFactory",
    "TunnelHTTPAdapter",
    "new_http_client",
]
