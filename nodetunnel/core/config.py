"""
Configuration management for NodeTunnel.

Handles loading config from ~/.nodetunnel/config.yaml and providing
default values for all settings.
"""

import logging
import os
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Dict, Optional

import yaml

from nodetunnel.core.versions import DEFAULT_VERSION_TABLE, VersionTable
from nodetunnel.ssh.dialer import DEFAULT_DIAL_COMMAND


# Default paths
DEFAULT_BASE_DIR = Path.home() / ".nodetunnel"
DEFAULT_CONFIG_FILE = DEFAULT_BASE_DIR / "config.yaml"
DEFAULT_LOG_DIR = DEFAULT_BASE_DIR / "logs"


@dataclass
class SSHConfig:
    """SSH session settings."""

    timeout: int = 30
    dial_command: str = DEFAULT_DIAL_COMMAND


@dataclass
class DockerConfig:
    """Engine API settings."""

    timeout: int = 60  # HTTP timeout through the tunnel


@dataclass
class LoggingConfig:
    """Logging settings."""

    level: str = "INFO"
    file: Optional[Path] = None


@dataclass
class Config:
    """Main configuration container."""

    base_dir: Path = DEFAULT_BASE_DIR
    config_file: Path = DEFAULT_CONFIG_FILE
    log_dir: Path = DEFAULT_LOG_DIR

    ssh: SSHConfig = field(default_factory=SSHConfig)
    docker: DockerConfig = field(default_factory=DockerConfig)
    logging: LoggingConfig = field(default_factory=LoggingConfig)

    # Replaces the built-in table when set
    docker_versions: Optional[Dict[str, Any]] = None

    @classmethod
    def load(cls, config_path: Optional[Path] = None) -> "Config":
        """
        Load configuration from YAML file.

        Args:
            config_path: Path to config file. If None, uses default location.
                         Can also be set via NODETUNNEL_CONFIG env var.

        Returns:
            Config instance with values from file merged with defaults.
        """
        if config_path is None:
            config_path = Path(
                os.environ.get("NODETUNNEL_CONFIG", str(DEFAULT_CONFIG_FILE))
            )
        config_path = Path(config_path).expanduser()

        config = cls()
        config.config_file = config_path

        # If config file doesn't exist, return defaults
        if not config_path.exists():
            return config

        try:
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}
        except yaml.YAMLError as e:
            raise ValueError(f"Invalid config YAML: {e}")

        if not isinstance(data, dict):
            raise ValueError(f"Invalid config: expected a mapping in {config_path}")

        if "ssh" in data:
            ssh_data = data["ssh"] or {}
            config.ssh = SSHConfig(
                timeout=int(ssh_data.get("timeout", 30)),
                dial_command=ssh_data.get("dial_command", DEFAULT_DIAL_COMMAND),
            )

        if "docker" in data:
            docker_data = data["docker"] or {}
            config.docker = DockerConfig(
                timeout=int(docker_data.get("timeout", 60)),
            )

        if "logging" in data:
            log_data = data["logging"] or {}
            log_file = log_data.get("file")
            config.logging = LoggingConfig(
                level=str(log_data.get("level", "INFO")).upper(),
                file=Path(log_file).expanduser() if log_file else None,
            )

        if data.get("docker_versions") is not None:
            if not isinstance(data["docker_versions"], dict):
                raise ValueError("Invalid config: 'docker_versions' must be a mapping")
            config.docker_versions = data["docker_versions"]

        return config

    def version_table(self) -> VersionTable:
        """Supported Docker versions table in effect."""
        if self.docker_versions is None:
            return DEFAULT_VERSION_TABLE
        return VersionTable.from_mapping(self.docker_versions)

    @property
    def log_level(self) -> int:
        return getattr(logging, self.logging.level, logging.INFO)

    def ensure_directories(self):
        """Create required directories if they don't exist."""
        self.base_dir.mkdir(parents=True, exist_ok=True)
        self.log_dir.mkdir(parents=True, exist_ok=True)

    def save_default_config(self) -> bool:
        """
        Save a default config file if one doesn't exist.

        Returns:
            True if a file was written.
        """
        if self.config_file.exists():
            return False

        self.ensure_directories()
        self.config_file.parent.mkdir(parents=True, exist_ok=True)

        default_config = f"""\
# NodeTunnel Configuration

# =============================================================================
# SSH
# =============================================================================

ssh:
  timeout: 30              # Connect/auth timeout in seconds
  dial_command: {DEFAULT_DIAL_COMMAND}

# =============================================================================
# Docker engine API
# =============================================================================

docker:
  timeout: 60              # HTTP timeout through the tunnel

# Override the supported Docker versions per Kubernetes release
# docker_versions:
#   "1.8": ["1.12.6", "1.13.1", "17.03.2"]

# =============================================================================
# Logging
# =============================================================================

logging:
  level: INFO              # DEBUG, INFO, WARNING, ERROR
  file: {self.log_dir / 'nodetunnel.log'}
"""

        with open(self.config_file, "w") as f:
            f.write(default_config)

        return True


# Singleton instance
_config: Optional[Config] = None


def get_config(reload: bool = False) -> Config:
    """
    Get the global configuration instance.

    Args:
        reload: Force reload from file.

    Returns:
        Config instance.
    """
    global _config

    if _config is None or reload:
        _config = Config.load()

    return _config
