import logging

import pytest

from nodetunnel.core.errors import (
    CompatibilityError,
    TunnelStage,
    UnsupportedVersionError,
    VersionLookupError,
)
from nodetunnel.core.versions import (
    DEFAULT_VERSION_TABLE,
    DOCKER_API_VERSION,
    DOCKER_SOCKET,
    K8S_VERSION,
    VersionTable,
    check_docker_version,
    is_supported_docker_version,
)

TABLE = VersionTable({"1.8": ["1.12.0", "1.13.0"]})


def _info(version):
    return {"ServerVersion": version}


def test_constants():
    assert DOCKER_SOCKET == "unix:///var/run/docker.sock"
    assert DOCKER_API_VERSION == "1.24"
    assert K8S_VERSION == "1.8"
    assert K8S_VERSION in DEFAULT_VERSION_TABLE


def test_supported_version_passes(caplog):
    caplog.set_level(logging.WARNING)

    assert check_docker_version(_info("1.13.0"), enforce=True, table=TABLE) is True
    assert caplog.records == []


def test_strict_mode_rejects_unsupported():
    with pytest.raises(UnsupportedVersionError) as exc_info:
        check_docker_version(_info("1.11.0"), enforce=True, host="10.0.0.1", table=TABLE)

    error = exc_info.value
    assert error.version == "1.11.0"
    assert error.supported == ("1.12.0", "1.13.0")
    assert error.stage == TunnelStage.COMPATIBILITY
    assert "1.11.0" in str(error)
    assert "1.12.0" in str(error) and "1.13.0" in str(error)
    assert "10.0.0.1" in str(error)


def test_advisory_mode_warns(caplog):
    caplog.set_level(logging.WARNING, logger="nodetunnel")

    assert check_docker_version(_info("1.11.0"), enforce=False, table=TABLE) is False

    warnings = [r for r in caplog.records if r.levelno == logging.WARNING]
    assert len(warnings) == 1
    message = warnings[0].getMessage()
    assert "1.11.0" in message
    assert "1.12.0" in message and "1.13.0" in message


@pytest.mark.parametrize("enforce", [True, False])
def test_unknown_release_cannot_determine_support(enforce):
    with pytest.raises(VersionLookupError) as exc_info:
        check_docker_version(_info("1.12.0"), enforce=enforce, k8s_version="1.9", table=TABLE)

    assert not isinstance(exc_info.value, UnsupportedVersionError)
    assert isinstance(exc_info.value, CompatibilityError)


@pytest.mark.parametrize("enforce", [True, False])
def test_malformed_entry_cannot_determine_support(enforce):
    table = VersionTable({"1.8": "1.12.0"})

    with pytest.raises(VersionLookupError):
        check_docker_version(_info("1.12.0"), enforce=enforce, table=table)


@pytest.mark.parametrize("info", [{}, {"ServerVersion": ""}, None])
def test_missing_server_version(info):
    with pytest.raises(VersionLookupError):
        check_docker_version(info, enforce=False, table=TABLE)


@pytest.mark.parametrize("version", ["1.13", "1.13.0-ce", "v1.13.0", "1.13.0 "])
def test_match_is_exact(version):
    assert is_supported_docker_version(_info(version), "1.8", TABLE) is False


class TestVersionTable:

    def test_from_mapping(self):
        table = VersionTable.from_mapping({1.8: ["17.03.2"]})
        assert table.supported_versions("1.8") == ("17.03.2",)

    def test_from_mapping_rejects_non_mapping(self):
        with pytest.raises(ValueError):
            VersionTable.from_mapping(["1.8"])

    def test_mapping_protocol(self):
        assert "1.8" in TABLE
        assert "1.9" not in TABLE
        assert TABLE["1.8"] == ("1.12.0", "1.13.0")
        assert TABLE.get("1.9") is None
        assert list(TABLE) == ["1.8"]
        assert len(TABLE) == 1

    def test_non_string_versions_are_malformed(self):
        with pytest.raises(VersionLookupError):
            VersionTable({"1.8": [1.12, 1.13]}).supported_versions("1.8")
