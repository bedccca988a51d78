import pytest
from cryptography.hazmat.primitives import serialization
from cryptography.hazmat.primitives.asymmetric import ed25519, rsa

from fakes import KEY_PASSPHRASE, FakeClientFactory, FakeDialerFactory
from nodetunnel.hosts.host import Host


def _ed25519_pem(encryption) -> str:
    key = ed25519.Ed25519PrivateKey.generate()
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.OpenSSH,
        encryption_algorithm=encryption,
    ).decode()


@pytest.fixture(scope="session")
def ed25519_key() -> str:
    return _ed25519_pem(serialization.NoEncryption())


@pytest.fixture(scope="session")
def encrypted_ed25519_key() -> str:
    return _ed25519_pem(serialization.BestAvailableEncryption(KEY_PASSPHRASE.encode()))


@pytest.fixture(scope="session")
def rsa_key() -> str:
    key = rsa.generate_private_key(public_exponent=65537, key_size=2048)
    return key.private_bytes(
        encoding=serialization.Encoding.PEM,
        format=serialization.PrivateFormat.TraditionalOpenSSL,
        encryption_algorithm=serialization.NoEncryption(),
    ).decode()


@pytest.fixture
def dialer_factory():
    return FakeDialerFactory()


@pytest.fixture
def client_factory():
    return FakeClientFactory()


@pytest.fixture
def host(ed25519_key):
    return Host(address="10.0.0.1", user="ubuntu", ssh_key=ed25519_key)
