"""Tests for stored credential resolution and updates."""

import pytest

from proposal_maker.core.encryption import decrypt_data, envelope_version
from proposal_maker.services.credential_service import (
    reencrypt_legacy_credentials,
    remove_api_key,
    resolve_api_key,
    save_api_key,
)
from proposal_maker.services.llm_client import ChatCompletionsClient
from proposal_maker.utils.error_handling import (
    CredentialDecryptionError,
    CredentialMissing,
    InvalidCredentialFormat,
    ValidationError,
)
from tests.fixtures.factories import TEST_API_KEY, create_account
from tests.unit.test_encryption import legacy_envelope


def test_resolve_current_envelope(db_session, account_with_key):
    assert resolve_api_key(db_session, account_with_key) == TEST_API_KEY


def test_resolve_missing_key(db_session, account):
    with pytest.raises(CredentialMissing) as exc_info:
        resolve_api_key(db_session, account)
    assert exc_info.value.to_dict()["settings_url"] == "/api/settings/credentials"


def test_legacy_envelope_reencrypted_on_read(db_session, account):
    account.api_key_encrypted = legacy_envelope("gsk_legacy_key")
    db_session.commit()

    assert resolve_api_key(db_session, account) == "gsk_legacy_key"

    db_session.refresh(account)
    assert envelope_version(account.api_key_encrypted) == "v2"
    assert decrypt_data(account.api_key_encrypted) == "gsk_legacy_key"


def test_untagged_stored_value_rejected(db_session, account):
    account.api_key_encrypted = "plaintext-or-unknown"
    db_session.commit()

    with pytest.raises(CredentialDecryptionError):
        resolve_api_key(db_session, account)


def test_save_verifies_then_encrypts(db_session, account, model_service):
    model_service.reply("Hello!")
    client = ChatCompletionsClient(TEST_API_KEY, http_client=model_service.client())

    save_api_key(db_session, account, TEST_API_KEY, client)

    assert model_service.call_count == 1
    assert account.api_key_encrypted.startswith("v2:")
    assert TEST_API_KEY not in account.api_key_encrypted
    assert resolve_api_key(db_session, account) == TEST_API_KEY


def test_save_rejected_key_not_stored(db_session, account, model_service):
    model_service.fail(401, "invalid api key")
    client = ChatCompletionsClient(TEST_API_KEY, http_client=model_service.client())

    with pytest.raises(ValidationError):
        save_api_key(db_session, account, TEST_API_KEY, client)
    assert account.api_key_encrypted is None


def test_save_wrong_prefix_makes_no_call(db_session, account, model_service):
    client = ChatCompletionsClient("sk-wrong", http_client=model_service.client())

    with pytest.raises(InvalidCredentialFormat):
        save_api_key(db_session, account, "sk-wrong", client)
    assert model_service.call_count == 0


def test_remove(db_session, account_with_key):
    remove_api_key(db_session, account_with_key)
    assert account_with_key.has_api_key is False


def test_bulk_reencryption(db_session, account_with_key):
    legacy = create_account(db_session, email="legacy@example.com")
    legacy.api_key_encrypted = legacy_envelope("gsk_old")
    db_session.commit()
    current_envelope = account_with_key.api_key_encrypted

    assert reencrypt_legacy_credentials(db_session, dry_run=True) == (1, 0)
    db_session.refresh(legacy)
    assert envelope_version(legacy.api_key_encrypted) == "v1"

    assert reencrypt_legacy_credentials(db_session) == (1, 0)
    db_session.refresh(legacy)
    assert envelope_version(legacy.api_key_encrypted) == "v2"
    assert decrypt_data(legacy.api_key_encrypted) == "gsk_old"
    assert account_with_key.api_key_encrypted == current_envelope


def test_bulk_reencryption_skips_unreadable_rows(db_session):
    legacy = create_account(db_session, email="legacy@example.com")
    legacy.api_key_encrypted = legacy_envelope("gsk_old")
    broken = create_account(db_session, email="broken@example.com")
    broken.api_key_encrypted = "corrupt-untagged"
    db_session.commit()

    assert reencrypt_legacy_credentials(db_session) == (1, 1)

    db_session.refresh(legacy)
    db_session.refresh(broken)
    assert envelope_version(legacy.api_key_encrypted) == "v2"
    assert decrypt_data(legacy.api_key_encrypted) == "gsk_old"
    assert broken.api_key_encrypted == "corrupt-untagged"
