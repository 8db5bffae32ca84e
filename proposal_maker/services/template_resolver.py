"""Prompt template lookup and placeholder substitution."""
import logging
from typing import Optional

from sqlalchemy.orm import Session

from proposal_maker.core.defaults import DEFAULT_DECK_TEMPLATE, TEXT_PLACEHOLDER
from proposal_maker.database.models import PromptTemplate
from proposal_maker.utils.error_handling import InvalidTemplate, TemplateNotFound

logger = logging.getLogger(__name__)


def substitute_input(template_body: str, text: str) -> str:
    """Insert *text* at the first ``{text}`` placeholder.

    Only the first occurrence is replaced and the input is inserted
    verbatim: no escaping, no recursive substitution.
    """
    if TEXT_PLACEHOLDER not in template_body:
        raise InvalidTemplate()
    return template_body.replace(TEXT_PLACEHOLDER, text, 1)


def extract_input(template_body: str, rendered: str) -> str:
    """Recover the text that ``substitute_input`` inserted into *template_body*."""
    prefix, _, suffix = template_body.partition(TEXT_PLACEHOLDER)
    if not rendered.startswith(prefix) or not rendered.endswith(suffix):
        raise ValueError("Rendered prompt was not produced from this template")
    return rendered[len(prefix):len(rendered) - len(suffix)]


class TemplateResolver:
    """Resolves template references against the prompt template library."""

    def __init__(self, db: Session):
        self.db = db

    def get_active_template(self, template_id: int) -> PromptTemplate:
        template = self.db.query(PromptTemplate).filter(PromptTemplate.id == template_id).first()
        if template is None or not template.is_active:
            raise TemplateNotFound(details={"template_id": template_id})
        return template

    def resolve(self, template_id: Optional[int], text: str) -> str:
        """Build the final prompt for *text*.

        Without a template reference the built-in deck template is used.
        """
        if template_id is None:
            logger.info("Using default deck template")
            return substitute_input(DEFAULT_DECK_TEMPLATE, text)

        template = self.get_active_template(template_id)
        logger.info(f"Resolved prompt template: {template.name} (id={template.id})")
        return substitute_input(template.prompt, text)
