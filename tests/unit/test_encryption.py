"""Tests for the versioned credential envelope."""

import os
from unittest.mock import patch

import pytest
from cryptography.fernet import Fernet
from cryptography.hazmat.primitives import padding
from cryptography.hazmat.primitives.ciphers import Cipher, algorithms, modes

from proposal_maker.core.encryption import (
    _legacy_key,
    decrypt_data,
    encrypt_data,
    envelope_version,
    get_encryption_key,
    needs_reencryption,
)
from proposal_maker.utils.error_handling import CredentialDecryptionError

LEGACY_SECRET = "legacy-test-secret"


def legacy_envelope(plaintext: str, secret: str = LEGACY_SECRET, iv: bytes = b"\x01" * 16) -> str:
    """Build a v1 envelope the way the previous writer stored keys."""
    padder = padding.PKCS7(128).padder()
    padded = padder.update(plaintext.encode()) + padder.finalize()
    encryptor = Cipher(algorithms.AES(_legacy_key(secret)), modes.CBC(iv)).encryptor()
    ciphertext = encryptor.update(padded) + encryptor.finalize()
    return f"v1:{iv.hex()}:{ciphertext.hex()}"


def test_encrypt_decrypt_roundtrip():
    """Encrypt then decrypt returns original plaintext for various inputs."""
    for plaintext in ["gsk_abc123", "", "a" * 10_000]:
        envelope = encrypt_data(plaintext)
        assert envelope.startswith("v2:")
        assert plaintext not in envelope[3:] or plaintext == ""
        assert decrypt_data(envelope) == plaintext


def test_envelope_version_helpers():
    assert envelope_version(encrypt_data("x")) == "v2"
    assert envelope_version("v1:aa:bb") == "v1"
    assert envelope_version("no-tag") == ""
    assert needs_reencryption("v1:aa:bb") is True
    assert needs_reencryption(encrypt_data("x")) is False


def test_decrypt_with_wrong_key_raises():
    envelope = encrypt_data("secret")

    get_encryption_key.cache_clear()
    with patch.dict(os.environ, {"ENCRYPTION_KEY": Fernet.generate_key().decode()}):
        with pytest.raises(CredentialDecryptionError):
            decrypt_data(envelope)


@pytest.mark.parametrize("envelope", [
    "gAAAAABuntaggedfernettoken",
    "v9:payload",
    "v2:not-a-fernet-token",
])
def test_unusable_envelopes_rejected(envelope):
    with pytest.raises(CredentialDecryptionError) as exc_info:
        decrypt_data(envelope)
    assert exc_info.value.status_code == 500


def test_untagged_value_is_not_tried_as_legacy():
    """A bare legacy payload without its tag must not be decrypted."""
    bare = legacy_envelope("gsk_legacy")[len("v1:"):]
    with pytest.raises(CredentialDecryptionError):
        decrypt_data(bare)


def test_legacy_envelope_decrypts():
    assert decrypt_data(legacy_envelope("gsk_legacy_key")) == "gsk_legacy_key"


def test_legacy_envelope_with_wrong_secret():
    envelope = legacy_envelope("gsk_legacy_key", secret="some-other-secret")
    # Wrong key almost always breaks the padding; if it does not, the text is garbage
    try:
        assert decrypt_data(envelope) != "gsk_legacy_key"
    except CredentialDecryptionError:
        pass


def test_legacy_envelope_without_secret_configured():
    envelope = legacy_envelope("gsk_legacy_key")
    with patch.dict(os.environ, {"LEGACY_ENCRYPTION_SECRET": ""}):
        with pytest.raises(CredentialDecryptionError):
            decrypt_data(envelope)


@pytest.mark.parametrize("payload", ["v1:zz:yy", "v1:0011", "v1:" + "00" * 16 + ":abc"])
def test_corrupt_legacy_payload(payload):
    with pytest.raises(CredentialDecryptionError):
        decrypt_data(payload)


def test_key_from_env_var():
    expected_key = Fernet.generate_key().decode()
    with patch.dict(os.environ, {"ENCRYPTION_KEY": expected_key}):
        assert get_encryption_key() == expected_key.encode()


def test_key_auto_generated_when_missing(tmp_path):
    """When env var is absent and no key file, a key is generated and persisted."""
    key_file = tmp_path / ".encryption_key"
    original = os.environ["ENCRYPTION_KEY"]

    try:
        with patch("proposal_maker.core.encryption._KEY_FILE", key_file):
            os.environ.pop("ENCRYPTION_KEY")
            key = get_encryption_key()

            assert len(key) > 0
            assert key_file.exists(), "Key file should be created"
            assert key_file.read_text().strip().encode() == key
    finally:
        os.environ["ENCRYPTION_KEY"] = original
