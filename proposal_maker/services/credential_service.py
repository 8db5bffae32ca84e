"""Per-account model service credential handling.

Plaintext keys only exist transiently: they are decrypted just before a
model call and never stored, logged or returned by any endpoint.
"""
import logging
from typing import Tuple

from sqlalchemy.orm import Session

from proposal_maker.core.encryption import decrypt_data, encrypt_data, needs_reencryption
from proposal_maker.database.models import Account
from proposal_maker.services.llm_client import ChatCompletionsClient
from proposal_maker.utils.error_handling import CredentialDecryptionError, CredentialMissing, ValidationError

logger = logging.getLogger(__name__)


def resolve_api_key(db: Session, account: Account) -> str:
    """Decrypt the account's stored API key.

    Legacy envelopes are re-encrypted with the current scheme on the way out.

    Raises:
        CredentialMissing: No key stored for the account.
        CredentialDecryptionError: Stored envelope cannot be decrypted.
    """
    envelope = account.api_key_encrypted
    if not envelope:
        raise CredentialMissing()

    api_key = decrypt_data(envelope)

    if needs_reencryption(envelope):
        account.api_key_encrypted = encrypt_data(api_key)
        db.commit()
        logger.info(f"Re-encrypted stored API key for account {account.id}")

    return api_key


def build_client(db: Session, account: Account) -> ChatCompletionsClient:
    """Create a model client authenticated with the account's credential."""
    return ChatCompletionsClient(resolve_api_key(db, account))


def save_api_key(db: Session, account: Account, api_key: str, client: ChatCompletionsClient = None) -> None:
    """Verify *api_key* against the model service and store it encrypted.

    Raises:
        InvalidCredentialFormat: Key does not carry the expected prefix.
        ValidationError: The model service rejected the key.
    """
    client = client or ChatCompletionsClient(api_key)
    client.check_credential_format()

    if not client.verify_credential():
        raise ValidationError("Invalid API key")

    account.api_key_encrypted = encrypt_data(api_key)
    db.commit()
    logger.info(f"Stored API key for account {account.id}")


def remove_api_key(db: Session, account: Account) -> None:
    account.api_key_encrypted = None
    db.commit()
    logger.info(f"Removed API key for account {account.id}")


def reencrypt_legacy_credentials(db: Session, dry_run: bool = False) -> Tuple[int, int]:
    """Rewrite every stored key that is not in the current envelope format.

    Envelopes that cannot be decrypted are left untouched and counted as
    failed; the remaining accounts are still migrated.

    Returns:
        ``(migrated, failed)``. With *dry_run*, ``migrated`` is the number of
        accounts that would be rewritten.
    """
    accounts = db.query(Account).filter(Account.api_key_encrypted.isnot(None)).all()
    migrated = failed = 0
    for account in accounts:
        if not needs_reencryption(account.api_key_encrypted):
            continue
        try:
            api_key = decrypt_data(account.api_key_encrypted)
        except CredentialDecryptionError as e:
            failed += 1
            logger.warning(f"Skipping unreadable API key for account {account.id}: {e.details.get('reason')}")
            continue

        migrated += 1
        if dry_run:
            logger.info(f"Would re-encrypt API key for account {account.id}")
            continue
        account.api_key_encrypted = encrypt_data(api_key)
        logger.info(f"Re-encrypted API key for account {account.id}")

    if not dry_run:
        db.commit()
    return migrated, failed
