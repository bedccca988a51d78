import dataclasses

import paramiko
import pytest

from nodetunnel.ssh.auth import AuthConfig, HostKeyPolicy, make_ssh_config
from nodetunnel.ssh.keys import parse_private_key


@pytest.fixture
def signer(ed25519_key):
    return parse_private_key(ed25519_key)


def test_make_ssh_config(signer):
    config = make_ssh_config("ubuntu", signer)

    assert config.user == "ubuntu"
    assert config.signer is signer
    assert config.host_key_policy is HostKeyPolicy.ACCEPT_ANY


def test_config_is_immutable(signer):
    config = make_ssh_config("ubuntu", signer)

    with pytest.raises(dataclasses.FrozenInstanceError):
        config.user = "root"


def test_connect_kwargs_use_publickey_only(signer):
    kwargs = make_ssh_config("ubuntu", signer).connect_kwargs()

    assert kwargs == {
        'username': "ubuntu",
        'pkey': signer,
        'allow_agent': False,
        'look_for_keys': False,
    }


def test_accept_any_policy_is_autoadd():
    policy = HostKeyPolicy.ACCEPT_ANY.missing_host_key_policy()
    assert isinstance(policy, paramiko.AutoAddPolicy)


def test_default_policy(signer):
    assert AuthConfig(user="root", signer=signer).host_key_policy is HostKeyPolicy.ACCEPT_ANY
