"""
SSH tunnel dialer.

Path: nodetunnel/ssh/dialer.py

A DialerFactory turns a Host into a Dialer; a Dialer opens one byte stream to
the host's Docker engine each time it is called. The HTTP transport in
nodetunnel.ssh.http calls the dialer whenever it needs a new connection.

SSHDialerFactory is the production factory: it authenticates with the host's
private key, keeps one SSH session per host, and opens a session channel per
connection running the engine's stdio bridge (`docker system dial-stdio`).
Tests substitute any callable with the same shape.
"""

import logging
import threading
from typing import TYPE_CHECKING, Any, Callable, Optional

import paramiko

from nodetunnel.core.errors import TransportError
from nodetunnel.ssh.auth import make_ssh_config
from nodetunnel.ssh.keys import SecretPrompt, check_encrypted_key, terminal_prompt

if TYPE_CHECKING:
    from nodetunnel.hosts.host import Host

logger = logging.getLogger(__name__)

DEFAULT_DIAL_COMMAND = "docker system dial-stdio"

# Opens one socket-like stream to the engine
Dialer = Callable[[], Any]
DialerFactory = Callable[["Host"], Dialer]


class SSHDialer:
    """Opens engine connections over an established SSH session."""

    def __init__(self, ssh_client: paramiko.SSHClient, address: str,
                 dial_command: str = DEFAULT_DIAL_COMMAND, timeout: Optional[float] = None):
        self._ssh_client = ssh_client
        self.address = address
        self.dial_command = dial_command
        self.timeout = timeout
        self._lock = threading.Lock()

    def __call__(self) -> paramiko.Channel:
        transport = self._ssh_client.get_transport()
        if transport is None or not transport.is_active():
            raise TransportError("SSH session is not active", host=self.address)

        # urllib3 may open pooled connections from several threads
        with self._lock:
            channel = transport.open_session(timeout=self.timeout)
        channel.settimeout(self.timeout)
        channel.exec_command(self.dial_command)
        logger.debug(f"[ssh] Opened engine channel to [{self.address}]")
        return channel

    def close(self):
        """Close the SSH session."""
        self._ssh_client.close()


class SSHDialerFactory:
    """
    Build SSH dialers for hosts.

    Usage:
        factory = SSHDialerFactory(timeout=30)
        host.tunnel_up(factory)
    """

    def __init__(
        self,
        prompt: SecretPrompt = terminal_prompt,
        timeout: int = 30,
        dial_command: str = DEFAULT_DIAL_COMMAND,
    ):
        """
        Args:
            prompt: Secret prompt for encrypted key passphrases.
            timeout: SSH connect and channel timeout in seconds.
            dial_command: Remote command bridging stdio to the engine socket.
        """
        self.prompt = prompt
        self.timeout = timeout
        self.dial_command = dial_command

    def __call__(self, host: "Host") -> SSHDialer:
        signer = check_encrypted_key(host.ssh_key, host.ssh_key_path, self.prompt)
        auth = make_ssh_config(host.user, signer)

        ssh_client = paramiko.SSHClient()
        ssh_client.set_missing_host_key_policy(auth.host_key_policy.missing_host_key_policy())

        logger.debug(f"[ssh] Connecting to [{host.address}:{host.port}] as [{host.user}]")
        try:
            ssh_client.connect(
                hostname=host.address,
                port=host.port,
                timeout=self.timeout,
                auth_timeout=self.timeout,
                banner_timeout=self.timeout,
                **auth.connect_kwargs(),
            )
        except Exception:
            ssh_client.close()
            raise

        return SSHDialer(ssh_client, host.address, self.dial_command, self.timeout)
