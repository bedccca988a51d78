import pytest

from nodetunnel.hosts.cluster import load_cluster_file, parse_cluster
from nodetunnel.hosts.host import TunnelState

CLUSTER_YML = """\
ssh_key_path: ~/.ssh/cluster_key
ignore_docker_version: false
nodes:
  - address: 10.0.0.1
    user: ubuntu
    role: [controlplane, etcd]
  - address: 10.0.0.2
    user: rancher
    port: 2222
    role: worker
    ssh_key_path: ~/.ssh/worker_key
    hostname_override: worker-1
  - address: 10.0.0.3
    user: ubuntu
    ssh_key: |
      inline key material
"""


@pytest.fixture
def cluster_file(tmp_path):
    path = tmp_path / "cluster.yml"
    path.write_text(CLUSTER_YML)
    return path


def test_load_cluster_file(cluster_file):
    cluster = load_cluster_file(cluster_file)

    assert cluster.path == cluster_file
    assert [h.address for h in cluster.hosts] == ["10.0.0.1", "10.0.0.2", "10.0.0.3"]

    cp, worker, inline = cluster.hosts
    assert cp.user == "ubuntu"
    assert cp.port == 22
    assert cp.role == ["controlplane", "etcd"]
    assert cp.ssh_key_path == "~/.ssh/cluster_key"
    assert cp.ssh_key == ""
    assert cp.enforce_docker_version is True
    assert cp.tunnel_state == TunnelState.UNBOUND

    assert worker.port == 2222
    assert worker.role == ["worker"]
    assert worker.ssh_key_path == "~/.ssh/worker_key"
    assert worker.name == "worker-1"

    assert inline.ssh_key == "inline key material\n"


def test_ignore_docker_version_makes_hosts_advisory():
    cluster = parse_cluster({
        "ignore_docker_version": True,
        "nodes": [{"address": "10.0.0.1", "user": "ubuntu"}],
    })

    assert cluster.ignore_docker_version is True
    assert cluster.hosts[0].enforce_docker_version is False


def test_default_key_path():
    cluster = parse_cluster({"nodes": [{"address": "10.0.0.1", "user": "ubuntu"}]})
    assert cluster.hosts[0].ssh_key_path == "~/.ssh/id_rsa"


def test_get_host(cluster_file):
    cluster = load_cluster_file(cluster_file)

    assert cluster.get_host("10.0.0.1").address == "10.0.0.1"
    assert cluster.get_host("worker-1").address == "10.0.0.2"
    assert cluster.get_host("10.9.9.9") is None


@pytest.mark.parametrize("data, message", [
    ([], "mapping"),
    ({}, "nodes"),
    ({"nodes": []}, "nodes"),
    ({"nodes": [{"user": "ubuntu"}]}, "address"),
    ({"nodes": [{"address": "10.0.0.1"}]}, "user"),
    ({"nodes": ["10.0.0.1"]}, "mapping"),
    ({"nodes": [{"address": "10.0.0.1", "user": "u", "port": "ssh"}]}, "port"),
])
def test_invalid_cluster(data, message):
    with pytest.raises(ValueError, match=message):
        parse_cluster(data)


def test_missing_file(tmp_path):
    with pytest.raises(ValueError, match="not found"):
        load_cluster_file(tmp_path / "missing.yml")


def test_invalid_yaml(tmp_path):
    path = tmp_path / "cluster.yml"
    path.write_text("nodes: [\n")

    with pytest.raises(ValueError, match="Invalid cluster YAML"):
        load_cluster_file(path)
