"""Symmetric encryption for stored third-party API keys.

Stored values use a versioned envelope, ``"<version>:<payload>"``:

``v2``
    Fernet token (AES-128-CBC with HMAC-SHA256 authentication). The key is
    read from the ``ENCRYPTION_KEY`` environment variable. If the variable is
    not set, a key is auto-generated on first access, persisted to
    ``.encryption_key`` in the working directory, and a warning is logged.

``v1``
    Legacy AES-256-CBC with a scrypt-derived key and a hex ``iv:ciphertext``
    payload. This scheme carries no integrity check, so it is only ever
    decrypted (to migrate the value) and never written.

The version tag decides the scheme. Values without a known tag are rejected
rather than tried against each scheme in turn.
"""

import logging
import os
from functools import lru_cache
from pathlib import Path

from cryptography.fernet import Fernet, InvalidToken
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes
from cryptography.hazmat.primitives.kdf.scrypt import Scrypt

from proposal_maker.utils.error_handling import CredentialDecryptionError

logger = logging.getLogger(__name__)

_ENV_KEY_NAME = "ENCRYPTION_KEY"
_LEGACY_ENV_NAME = "LEGACY_ENCRYPTION_SECRET"
_KEY_FILE = Path.cwd() / ".encryption_key"

CURRENT_VERSION = "v2"
LEGACY_VERSION = "v1"


@lru_cache(maxsize=1)
def get_encryption_key() -> bytes:
    """Return the Fernet encryption key.

    Resolution order:
    1. ``ENCRYPTION_KEY`` env var (production).
    2. ``.encryption_key`` file (persisted across restarts).
    3. Generate a new key, write it to the file and set the env var.
    """
    key = os.getenv(_ENV_KEY_NAME)
    if not key:
        from proposal_maker.config.settings import get_settings

        key = get_settings().encryption_key
    if key:
        return key.encode()

    if _KEY_FILE.exists():
        key = _KEY_FILE.read_text().strip()
        if key:
            os.environ[_ENV_KEY_NAME] = key
            logger.info("Loaded encryption key from %s", _KEY_FILE)
            return key.encode()

    generated = Fernet.generate_key()
    try:
        _KEY_FILE.write_text(generated.decode())
        _KEY_FILE.chmod(0o600)  # owner-only read/write
        logger.warning(
            "ENCRYPTION_KEY not set: auto-generated and saved to %s. "
            "Set the env var in production.",
            _KEY_FILE,
        )
    except OSError:
        logger.warning(
            "ENCRYPTION_KEY not set: auto-generated a key but could not persist to %s. "
            "Stored API keys will be unreadable after a restart.",
            _KEY_FILE,
        )

    os.environ[_ENV_KEY_NAME] = generated.decode()
    return generated


def envelope_version(envelope: str) -> str:
    """Return the version tag of a stored envelope ("" when untagged)."""
    version, sep, _ = envelope.partition(":")
    return version if sep else ""


def needs_reencryption(envelope: str) -> bool:
    """True when the envelope was written by a scheme other than the current one."""
    return envelope_version(envelope) != CURRENT_VERSION


def encrypt_data(plaintext: str) -> str:
    """Encrypt *plaintext* and return a ``v2`` envelope."""
    f = Fernet(get_encryption_key())
    return f"{CURRENT_VERSION}:{f.encrypt(plaintext.encode()).decode()}"


def decrypt_data(envelope: str) -> str:
    """Decrypt a stored envelope and return the plaintext.

    Raises:
        CredentialDecryptionError: If the tag is unknown, the key does not
            match, or the payload is corrupt.
    """
    version, sep, payload = envelope.partition(":")
    if not sep:
        raise CredentialDecryptionError(details={"reason": "untagged envelope"})

    if version == CURRENT_VERSION:
        try:
            return Fernet(get_encryption_key()).decrypt(payload.encode()).decode()
        except InvalidToken as e:
            raise CredentialDecryptionError(details={"reason": "invalid token"}) from e

    if version == LEGACY_VERSION:
        logger.warning("Decrypting legacy v1 credential envelope")
        return _decrypt_legacy(payload)

    raise CredentialDecryptionError(details={"reason": f"unknown envelope version '{version}'"})


def _legacy_key(secret: str) -> bytes:
    # Fixed salt and cost parameters of the legacy writer
    kdf = Scrypt(salt=b"salt", length=32, n=2**14, r=8, p=1)
    return kdf.derive(secret.encode())


def _decrypt_legacy(payload: str) -> str:
    secret = os.getenv(_LEGACY_ENV_NAME)
    if not secret:
        from proposal_maker.config.settings import get_settings

        secret = get_settings().legacy_encryption_secret
    if not secret:
        raise CredentialDecryptionError(details={"reason": "legacy secret not configured"})

    iv_hex, sep, ciphertext_hex = payload.partition(":")
    try:
        if not sep:
            raise ValueError("missing iv separator")
        iv = bytes.fromhex(iv_hex)
        ciphertext = bytes.fromhex(ciphertext_hex)
        decryptor = Cipher(algorithms.AES(_legacy_key(secret)), modes.CBC(iv)).decryptor()
        padded = decryptor.update(ciphertext) + decryptor.finalize()
        unpadder = padding.PKCS7(128).unpadder()
        return (unpadder.update(padded) + unpadder.finalize()).decode("utf-8")
    except ValueError as e:
        raise CredentialDecryptionError(details={"reason": "corrupt legacy payload"}) from e
