"""
Private key loading.

Path: nodetunnel/ssh/keys.py

Resolves the signer used to authenticate a host's SSH session. Key material
comes from the host's inline ssh_key or, when that is empty, from the file at
ssh_key_path. Encrypted keys get exactly one interactive passphrase prompt.

The prompt is injected so tests can script it:

    signer = check_encrypted_key("", "~/.ssh/id_rsa", prompt=lambda _: "secret")
"""

import getpass
import logging
import os
from io import StringIO
from typing import Callable, List, Optional, Tuple, Type

import paramiko

from nodetunnel.core.errors import (
    CredentialError,
    KeyParseError,
    PassphraseRequiredError,
)

logger = logging.getLogger(__name__)

PASSPHRASE_PROMPT = "Passphrase for Private SSH Key: "

# Returns the secret typed for the given prompt text
SecretPrompt = Callable[[str], str]


def terminal_prompt(prompt: str) -> str:
    """Read a secret from the controlling terminal without echo."""
    return getpass.getpass(prompt)


def _key_types() -> List[Tuple[str, Type[paramiko.PKey]]]:
    key_types = [
        ('Ed25519', paramiko.Ed25519Key),
        ('RSA', paramiko.RSAKey),
        ('ECDSA', paramiko.ECDSAKey),
    ]

    # DSA was removed in paramiko 4
    if hasattr(paramiko, 'DSSKey'):
        key_types.append(('DSA', paramiko.DSSKey))

    return key_types


def parse_private_key(key_material: str, passphrase: Optional[str] = None) -> paramiko.PKey:
    """
    Parse PEM/OpenSSH private key content into a signer.

    Args:
        key_material: Private key text.
        passphrase: Passphrase for encrypted keys.

    Returns:
        paramiko PKey usable for publickey authentication.

    Raises:
        PassphraseRequiredError: Key is encrypted and no passphrase was given.
        KeyParseError: Content is not a supported private key, or the
            passphrase is wrong.
    """
    last_exception: Optional[Exception] = None

    for key_name, key_class in _key_types():
        try:
            pkey = key_class.from_private_key(StringIO(key_material), password=passphrase)
            logger.debug(f"[ssh] Loaded {key_name} private key")
            return pkey

        except paramiko.ssh_exception.PasswordRequiredException as e:
            raise PassphraseRequiredError(f"Private key is encrypted: {e}") from e

        except paramiko.ssh_exception.SSHException as e:
            # Different key type, keep trying
            last_exception = e
            continue

        except Exception as e:
            last_exception = e
            continue

    raise KeyParseError(
        f"Could not parse private key. "
        f"Make sure it's a valid RSA, ECDSA, or Ed25519 key. "
        f"Last error: {last_exception}"
    ) from last_exception


def private_key_path(ssh_key_path: str) -> str:
    """
    Read a private key file, expanding a leading "~/" against $HOME.

    Unreadable files yield "" so the parse step reports the failure.
    """
    if ssh_key_path.startswith("~/"):
        ssh_key_path = os.path.join(os.environ.get("HOME", ""), ssh_key_path[2:])

    try:
        with open(ssh_key_path) as f:
            return f.read()
    except (OSError, UnicodeDecodeError) as e:
        logger.debug(f"[ssh] Can't read private key file {ssh_key_path}: {e}")
        return ""


def check_encrypted_key(
    ssh_key: str,
    ssh_key_path: str,
    prompt: SecretPrompt = terminal_prompt,
) -> paramiko.PKey:
    """
    Resolve a signer, asking once for a passphrase if the key is encrypted.

    Args:
        ssh_key: Inline key material. Takes precedence when non-empty.
        ssh_key_path: Key file path, read only when ssh_key is empty.
        prompt: Secret prompt used for the passphrase.

    Returns:
        paramiko PKey.

    Raises:
        CredentialError: Key unreadable/malformed, wrong passphrase, or
            passphrase entry aborted.
    """
    logger.debug("[ssh] Checking private key")

    key_material = ssh_key if ssh_key else private_key_path(ssh_key_path or "")

    try:
        return parse_private_key(key_material)
    except PassphraseRequiredError:
        pass

    try:
        passphrase = prompt(PASSPHRASE_PROMPT)
    except (EOFError, KeyboardInterrupt) as e:
        raise CredentialError("Passphrase entry aborted for encrypted private key") from e

    if not passphrase:
        raise CredentialError("No passphrase supplied for encrypted private key")

    return parse_private_key(key_material, passphrase=passphrase)
