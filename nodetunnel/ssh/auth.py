"""
SSH session authentication settings.

Path: nodetunnel/ssh/auth.py

Host key verification is NOT performed: every session uses
HostKeyPolicy.ACCEPT_ANY, which trusts whatever key the node presents
(trust-on-first-use without pinning). Nodes are identified by address only.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict

import paramiko


class HostKeyPolicy(Enum):
    """How a session treats the host key presented by the node."""
    ACCEPT_ANY = "accept_any"

    def missing_host_key_policy(self) -> paramiko.MissingHostKeyPolicy:
        """paramiko policy implementing this value."""
        return paramiko.AutoAddPolicy()


@dataclass(frozen=True)
class AuthConfig:
    """Immutable authentication settings for one SSH session."""
    user: str
    signer: paramiko.PKey
    host_key_policy: HostKeyPolicy = HostKeyPolicy.ACCEPT_ANY

    def connect_kwargs(self) -> Dict[str, Any]:
        """Keyword arguments for paramiko.SSHClient.connect (publickey only)."""
        return {
            'username': self.user,
            'pkey': self.signer,
            'allow_agent': False,
            'look_for_keys': False,
        }


def make_ssh_config(user: str, signer: paramiko.PKey) -> AuthConfig:
    return AuthConfig(user=user, signer=signer, host_key_policy=HostKeyPolicy.ACCEPT_ANY)
