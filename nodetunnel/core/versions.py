"""
Docker version compatibility.

Path: nodetunnel/core/versions.py

Maps an orchestration release to the Docker engine versions it has been
validated against, and gates tunnel setup on the version the daemon reports.

Matching is exact: "1.13.1" supports only a daemon reporting "1.13.1".

Usage:
    table = VersionTable.from_mapping({"1.8": ["1.12.6", "1.13.1"]})
    check_docker_version(info, enforce=True, host="10.0.0.1", table=table)
"""

import logging
from typing import Any, Dict, Iterator, Mapping, Optional, Sequence, Tuple

from nodetunnel.core.errors import (
    UnsupportedVersionError,
    VersionLookupError,
    unsupported_version_message,
)

logger = logging.getLogger(__name__)

# Engine API endpoint addressed through the tunnel
DOCKER_SOCKET = "unix:///var/run/docker.sock"
DOCKER_API_VERSION = "1.24"

# Orchestration release this build validates against
K8S_VERSION = "1.8"


class VersionTable(Mapping[str, Tuple[str, ...]]):
    """Read-only release -> supported engine versions table."""

    def __init__(self, entries: Optional[Mapping[str, Any]] = None):
        self._entries: Dict[str, Any] = dict(entries or {})

    @classmethod
    def from_mapping(cls, data: Any) -> "VersionTable":
        """
        Build a table from parsed YAML/JSON data.

        Entries are kept as given; malformed entries only fail when looked up,
        so one bad release does not hide the others.

        Raises:
            ValueError: data is not a mapping.
        """
        if not isinstance(data, Mapping):
            raise ValueError(f"Version table must be a mapping, got {type(data).__name__}")
        return cls({str(k): v for k, v in data.items()})

    def __getitem__(self, k8s_version: str) -> Tuple[str, ...]:
        if k8s_version not in self._entries:
            raise KeyError(k8s_version)
        return self.supported_versions(k8s_version)

    def __contains__(self, k8s_version: object) -> bool:
        return k8s_version in self._entries

    def __iter__(self) -> Iterator[str]:
        return iter(self._entries)

    def __len__(self) -> int:
        return len(self._entries)

    def __repr__(self) -> str:
        return f"VersionTable({self._entries!r})"

    def supported_versions(self, k8s_version: str) -> Tuple[str, ...]:
        """
        Supported engine versions for a release.

        Raises:
            VersionLookupError: release missing or its entry is not a list of strings.
        """
        if k8s_version not in self._entries:
            raise VersionLookupError(
                f"No supported Docker versions known for Kubernetes version [{k8s_version}]"
            )

        versions = self._entries[k8s_version]
        if isinstance(versions, (str, bytes)) or not isinstance(versions, (list, tuple, set, frozenset)):
            raise VersionLookupError(
                f"Malformed Docker version entry for Kubernetes version [{k8s_version}]: {versions!r}"
            )
        if not all(isinstance(v, str) for v in versions):
            raise VersionLookupError(
                f"Malformed Docker version entry for Kubernetes version [{k8s_version}]: {versions!r}"
            )

        return tuple(versions)


DEFAULT_VERSION_TABLE = VersionTable({
    "1.8": ("1.11.2", "1.12.6", "1.13.1", "17.03.2"),
})


def server_version(info: Mapping[str, Any]) -> str:
    """Engine version reported in a daemon info payload."""
    version = info.get("ServerVersion") if isinstance(info, Mapping) else None
    if not version:
        raise VersionLookupError("Docker daemon did not report a ServerVersion")
    return str(version)


def is_supported_docker_version(
    info: Mapping[str, Any],
    k8s_version: str = K8S_VERSION,
    table: VersionTable = DEFAULT_VERSION_TABLE,
) -> bool:
    """
    Check the daemon's version against the release's supported set.

    Returns:
        True if the reported version appears verbatim in the supported set.

    Raises:
        VersionLookupError: support cannot be determined.
    """
    return server_version(info) in table.supported_versions(k8s_version)


def check_docker_version(
    info: Mapping[str, Any],
    enforce: bool,
    host: Optional[str] = None,
    k8s_version: str = K8S_VERSION,
    table: VersionTable = DEFAULT_VERSION_TABLE,
) -> bool:
    """
    Gate tunnel setup on the daemon's engine version.

    Args:
        info: Daemon info payload (must contain ServerVersion).
        enforce: Strict mode - unsupported versions are fatal.
        host: Host address used in messages.
        k8s_version: Release identifier to look up.
        table: Supported versions table.

    Returns:
        True when supported, False when unsupported in advisory mode.

    Raises:
        VersionLookupError: support cannot be determined (always fatal).
        UnsupportedVersionError: unsupported version in strict mode.
    """
    try:
        supported = is_supported_docker_version(info, k8s_version, table)
    except VersionLookupError as e:
        version = info.get("ServerVersion", "") if isinstance(info, Mapping) else ""
        raise VersionLookupError(
            f"Error while determining supported Docker version [{version}]: {e.message}",
            host=host,
        ) from e

    if supported:
        return True

    version = server_version(info)
    supported_set: Sequence[str] = table.supported_versions(k8s_version)

    if enforce:
        raise UnsupportedVersionError(version, k8s_version, supported_set, host=host)

    prefix = f"[{host}] " if host else ""
    logger.warning(f"{prefix}{unsupported_version_message(version, supported_set)}")
    return False
