"""
Tunnel errors.

Path: nodetunnel/core/errors.py

Every failure raised while bringing a host tunnel up carries the stage it
failed in, so callers can tell a bad key from an unreachable daemon without
inspecting message text.
"""

from enum import Enum
from typing import Optional, Sequence


class TunnelStage(Enum):
    """Stage of tunnel setup that produced an error."""
    CREDENTIALS = "credentials"
    TRANSPORT = "transport"
    CLIENT = "client"
    DAEMON = "daemon"
    COMPATIBILITY = "compatibility"


class TunnelError(Exception):
    """Base class for host tunnel failures."""

    stage: TunnelStage = TunnelStage.TRANSPORT

    def __init__(self, message: str, host: Optional[str] = None):
        self.message = message
        self.host = host
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.host:
            return f"[{self.host}] {self.message}"
        return self.message


class CredentialError(TunnelError):
    """Private key could not be read, parsed or unlocked."""
    stage = TunnelStage.CREDENTIALS


class KeyParseError(CredentialError):
    """Key material is not a usable private key."""


class PassphraseRequiredError(KeyParseError):
    """Key material is encrypted and no passphrase was supplied."""


class TransportError(TunnelError):
    """Dialer or HTTP-over-tunnel client could not be set up."""
    stage = TunnelStage.TRANSPORT


class ClientError(TunnelError):
    """Engine API client could not be constructed."""
    stage = TunnelStage.CLIENT


class DaemonError(TunnelError):
    """Engine daemon did not answer the info query."""
    stage = TunnelStage.DAEMON


class CompatibilityError(TunnelError):
    """Engine version check failed."""
    stage = TunnelStage.COMPATIBILITY


class VersionLookupError(CompatibilityError):
    """Support for the engine version cannot be determined."""


class UnsupportedVersionError(CompatibilityError):
    """Engine version is not in the supported set for the release."""

    def __init__(
        self,
        version: str,
        k8s_version: str,
        supported: Sequence[str],
        host: Optional[str] = None,
    ):
        self.version = version
        self.k8s_version = k8s_version
        self.supported = tuple(supported)
        super().__init__(
            unsupported_version_message(version, self.supported),
            host=host,
        )


def unsupported_version_message(version: str, supported: Sequence[str]) -> str:
    """Operator-facing text shared by the strict error and the advisory warning."""
    return (
        f"Unsupported Docker version found [{version}], "
        f"supported versions are [{', '.join(supported)}]"
    )
