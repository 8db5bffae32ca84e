"""Text-to-deck, deck-to-HTML, one-shot and improvement flows.

Every flow that needs the model service builds exactly one client from the
caller's stored credential and performs at most one call. Nothing is
retried; failures propagate as ``AppException`` subclasses.
"""
import logging
from typing import Any, Callable, Dict, Optional

from sqlalchemy.orm import Session

from proposal_maker.core.defaults import (
    DEFAULT_CSS_VARIABLES,
    IMPROVEMENT_SYSTEM_PROMPT,
    IMPROVEMENT_USER_TEMPLATE,
    ONE_SHOT_SYSTEM_PROMPT,
    ONE_SHOT_USER_TEMPLATE,
)
from proposal_maker.database.models import Account, DesignLibrary
from proposal_maker.domain.slide_deck import Deck
from proposal_maker.services.credential_service import build_client
from proposal_maker.services.html_renderer import count_slides, render_presentation
from proposal_maker.services.llm_client import LARGE_MODEL, TEXT_MODELS, ChatCompletionsClient, resolve_model
from proposal_maker.services.response_parser import ResponseShape, normalize, normalize_deck_data
from proposal_maker.services.template_resolver import TemplateResolver
from proposal_maker.utils.error_handling import ResourceNotFoundError, SchemaViolation, ValidationError

logger = logging.getLogger(__name__)

ClientFactory = Callable[[Session, Account], ChatCompletionsClient]

MIN_IMPROVE_HTML_CHARS = 100
MIN_IMPROVE_PROMPT_CHARS = 10

IMPROVED_TITLE = "Improved Presentation"
IMPROVED_LIBRARY_NAME = "Enhanced Design"
ONE_SHOT_TITLE = "Generated Presentation"


class GenerationService:
    """Runs the generation pipelines on behalf of one account."""

    def __init__(self, db: Session, account: Account, client_factory: Optional[ClientFactory] = None):
        self.db = db
        self.account = account
        self.client_factory = client_factory or build_client

    def _client(self) -> ChatCompletionsClient:
        return self.client_factory(self.db, self.account)

    def _get_design_library(self, design_library_id: int) -> DesignLibrary:
        library = (
            self.db.query(DesignLibrary)
            .filter(
                DesignLibrary.id == design_library_id,
                DesignLibrary.created_by == self.account.id,
            )
            .first()
        )
        if library is None:
            raise ResourceNotFoundError("Design library not found", details={"design_library_id": design_library_id})
        return library

    def text_to_deck(self, text: str, model: str, template_id: Optional[int] = None) -> Deck:
        """Convert free-form *text* into a structured deck.

        Raises:
            InvalidModel: *model* is not a text model (checked before any I/O).
            TemplateNotFound: *template_id* is missing or inactive.
            CredentialMissing: The account has no stored API key.
        """
        if not text or not text.strip():
            raise ValidationError("Text is required")
        model_id = resolve_model(model, TEXT_MODELS)

        prompt = TemplateResolver(self.db).resolve(template_id, text)
        client = self._client()

        raw = client.complete_prompt(prompt, model_id, max_tokens=4000, temperature=0.7)
        deck = normalize(raw, ResponseShape.DECK)
        logger.info(f"Generated {deck} with {model_id}")
        return deck

    def deck_to_html(self, deck_data: Dict[str, Any], design_library_id: int) -> Dict[str, Any]:
        """Render a deck with a design library's tokens. No model call."""
        try:
            deck = normalize_deck_data(deck_data)
        except SchemaViolation as e:
            raise ValidationError("Invalid JSON data structure", details={"reason": e.message}) from e
        library = self._get_design_library(design_library_id)

        html = render_presentation(deck, library.css_variables)
        logger.info(f"Rendered {deck} with design library '{library.name}' (id={library.id})")
        return {
            "html": html,
            "designLibraryName": library.name,
            "presentationTitle": deck.title,
            "totalSlides": deck.total_slides,
        }

    def one_shot(self, text: str, design_library_id: Optional[int] = None, model: str = "large") -> Dict[str, Any]:
        """Have the model write a complete HTML presentation for *text*."""
        if not text or not text.strip():
            raise ValidationError("Text is required")
        model_id = resolve_model(model, TEXT_MODELS)

        library = self._get_design_library(design_library_id) if design_library_id is not None else None
        css = library.css_variables if library is not None else DEFAULT_CSS_VARIABLES
        client = self._client()

        messages = [
            {"role": "system", "content": ONE_SHOT_SYSTEM_PROMPT},
            {"role": "user", "content": ONE_SHOT_USER_TEMPLATE.format(css=css, text=text)},
        ]
        html = normalize(client.complete(messages, model_id, max_tokens=15000, temperature=0.7), ResponseShape.FREE_TEXT)
        slide_count = count_slides(html)
        logger.info(f"One-shot generation produced {slide_count} slides with {model_id}")
        return {
            "html": html,
            "designLibraryName": library.name if library is not None else None,
            "presentationTitle": ONE_SHOT_TITLE,
            "totalSlides": slide_count,
        }

    def improve(self, html: str, prompt: str) -> Dict[str, Any]:
        """Apply a targeted improvement request to an existing HTML presentation."""
        if not html or len(html) < MIN_IMPROVE_HTML_CHARS:
            raise ValidationError("Invalid HTML content")
        if not prompt or len(prompt.strip()) < MIN_IMPROVE_PROMPT_CHARS:
            raise ValidationError(
                f"Improvement prompt must be at least {MIN_IMPROVE_PROMPT_CHARS} characters long"
            )

        client = self._client()
        messages = [
            {"role": "system", "content": IMPROVEMENT_SYSTEM_PROMPT},
            {"role": "user", "content": IMPROVEMENT_USER_TEMPLATE.format(improvement=prompt.strip(), html=html)},
        ]
        improved = normalize(
            client.complete(messages, LARGE_MODEL, max_tokens=15000, temperature=0.3),
            ResponseShape.FREE_TEXT,
        )
        slide_count = count_slides(improved)
        logger.info(f"Improved presentation ({slide_count} slides)")
        return {
            "html": improved,
            "designLibraryName": IMPROVED_LIBRARY_NAME,
            "presentationTitle": IMPROVED_TITLE,
            "totalSlides": slide_count,
        }
