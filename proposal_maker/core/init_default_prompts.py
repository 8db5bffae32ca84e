"""
Seed the prompt template library with the built-in system templates.

Templates are registered by name: a template is created only when no row
with that name exists, so running the seed repeatedly is harmless and never
overwrites rows an operator has changed.
"""

import logging
from typing import Dict, Iterable, List

from sqlalchemy.orm import Session

from proposal_maker.core.database import get_db_session
from proposal_maker.core.defaults import DEFAULT_PROMPT_TEMPLATES
from proposal_maker.database.models import PromptTemplate

logger = logging.getLogger(__name__)


def seed_default_templates(db: Session, templates: Iterable[Dict[str, str]] = DEFAULT_PROMPT_TEMPLATES) -> List[PromptTemplate]:
    """Create any missing system templates.

    Returns:
        The templates created by this call (empty when all already exist)
    """
    created = []
    for template_data in templates:
        existing = db.query(PromptTemplate).filter_by(name=template_data["name"]).first()
        if existing:
            logger.debug(f"Prompt template already exists: {existing.name} (id={existing.id})")
            continue

        template = PromptTemplate(
            name=template_data["name"],
            description=template_data["description"],
            category=template_data.get("category", "general"),
            prompt=template_data["prompt"],
            is_active=True,
            is_system=True,
            version=1,
            created_by=None,
        )
        db.add(template)
        created.append(template)
        logger.info(f"Created system prompt template: {template_data['name']}")

    db.commit()
    if created:
        logger.info(f"Seeded {len(created)} system prompt templates")
    return created


def init_default_prompts() -> int:
    """Seed defaults using a standalone session. Returns the number created."""
    with get_db_session() as db:
        return len(seed_default_templates(db))
