"""Create the database tables and seed the system prompt templates.

Usage:
    python scripts/init_database.py
"""
import logging
import sys
from pathlib import Path

# Add project root to path
sys.path.insert(0, str(Path(__file__).parent.parent))

from proposal_maker.core.database import init_db
from proposal_maker.core.init_default_prompts import init_default_prompts

logging.basicConfig(level=logging.INFO, format="%(asctime)s - %(levelname)s - %(message)s")
logger = logging.getLogger(__name__)


def initialize_database():
    """Create tables (if missing) and register any missing system templates."""
    init_db()
    print("✓ Database tables ready")

    created = init_default_prompts()
    if created:
        print(f"✓ Seeded {created} system prompt templates")
    else:
        print("✓ System prompt templates already present")


if __name__ == "__main__":
    try:
        initialize_database()
    except Exception as e:
        print(f"✗ Error initializing database: {e}")
        sys.exit(1)
