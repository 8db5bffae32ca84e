"""Rewrite legacy (v1) credential envelopes with the current scheme.

Requires LEGACY_ENCRYPTION_SECRET for reading the old values and
ENCRYPTION_KEY for writing the new ones.

Usage:
    python scripts/reencrypt_credentials.py [--dry-run]
"""
import argparse
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from proposal_maker.core.database import get_db_session
from proposal_maker.services.credential_service import reencrypt_legacy_credentials

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def main():
    parser = argparse.ArgumentParser(description="Re-encrypt legacy stored API keys")
    parser.add_argument("--dry-run", action="store_true", help="Only report what would change")
    args = parser.parse_args()

    try:
        with get_db_session() as db:
            migrated, failed = reencrypt_legacy_credentials(db, dry_run=args.dry_run)
    except Exception as e:
        logger.error(f"Re-encryption failed: {e}")
        sys.exit(1)

    verb = "would be re-encrypted" if args.dry_run else "re-encrypted"
    logger.info(f"{migrated} stored API keys {verb}")
    if failed:
        logger.warning(f"{failed} stored API keys could not be decrypted and were left unchanged")
        sys.exit(1)


if __name__ == "__main__":
    main()
