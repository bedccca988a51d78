import logging

import pytest

from nodetunnel.core.config import Config, get_config
from nodetunnel.core.versions import DEFAULT_VERSION_TABLE
from nodetunnel.ssh.dialer import DEFAULT_DIAL_COMMAND


def test_defaults_when_missing(tmp_path):
    config = Config.load(tmp_path / "missing.yaml")

    assert config.config_file == tmp_path / "missing.yaml"
    assert config.ssh.timeout == 30
    assert config.ssh.dial_command == DEFAULT_DIAL_COMMAND
    assert config.docker.timeout == 60
    assert config.logging.level == "INFO"
    assert config.logging.file is None
    assert config.version_table() is DEFAULT_VERSION_TABLE


def test_load_values(tmp_path):
    path = tmp_path / "config.yaml"
    path.write_text(
        "ssh:\n"
        "  timeout: 10\n"
        "  dial_command: socat - UNIX-CONNECT:/var/run/docker.sock\n"
        "docker:\n"
        "  timeout: 90\n"
        "logging:\n"
        "  level: debug\n"
        f"  file: {tmp_path / 'nt.log'}\n"
        "docker_versions:\n"
        "  '1.8': ['1.13.1']\n"
    )

    config = Config.load(path)

    assert config.ssh.timeout == 10
    assert config.ssh.dial_command == "socat - UNIX-CONNECT:/var/run/docker.sock"
    assert config.docker.timeout == 90
    assert config.logging.level == "DEBUG"
    assert config.log_level == logging.DEBUG
    assert config.logging.file == tmp_path / "nt.log"
    assert config.version_table().supported_versions("1.8") == ("1.13.1",)


def test_env_var(tmp_path, monkeypatch):
    path = tmp_path / "env.yaml"
    path.write_text("docker:\n  timeout: 5\n")
    monkeypatch.setenv("NODETUNNEL_CONFIG", str(path))

    assert Config.load().docker.timeout == 5
    assert get_config(reload=True).docker.timeout == 5


@pytest.mark.parametrize("content", ["ssh: [\n", "- just\n- a list\n", "docker_versions: [1.8]\n"])
def test_invalid_config(tmp_path, content):
    path = tmp_path / "config.yaml"
    path.write_text(content)

    with pytest.raises(ValueError):
        Config.load(path)


def test_save_default_config(tmp_path):
    config = Config(
        base_dir=tmp_path,
        config_file=tmp_path / "config.yaml",
        log_dir=tmp_path / "logs",
    )

    assert config.save_default_config() is True
    assert config.save_default_config() is False
    assert (tmp_path / "logs").is_dir()

    loaded = Config.load(tmp_path / "config.yaml")
    assert loaded.ssh.dial_command == DEFAULT_DIAL_COMMAND
    assert loaded.ssh.timeout == 30
    assert loaded.docker.timeout == 60
    assert loaded.logging.file == tmp_path / "logs" / "nodetunnel.log"
    assert loaded.docker_versions is None
