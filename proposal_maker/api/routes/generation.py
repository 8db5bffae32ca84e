"""Generation endpoints: text to deck, deck to HTML, one-shot and improve.

Each endpoint performs at most one model service call on behalf of the
authenticated account. Pipeline failures surface through the application
exception handler with their own status codes.
"""

import logging

from fastapi import APIRouter, Depends, HTTPException, status
from sqlalchemy.orm import Session

from proposal_maker.api.dependencies import get_client_factory
from proposal_maker.api.schemas import (
    DeckResponse,
    DeckToHtmlRequest,
    ImproveRequest,
    OneShotRequest,
    PresentationResponse,
    TextToDeckRequest,
)
from proposal_maker.core.database import get_db
from proposal_maker.core.user_context import get_current_account
from proposal_maker.database.models import Account
from proposal_maker.services.generation_service import GenerationService
from proposal_maker.utils.error_handling import AppException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/generate", tags=["generation"])


def get_generation_service(
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    client_factory=Depends(get_client_factory),
) -> GenerationService:
    return GenerationService(db, account, client_factory)


@router.post("/text-to-deck", response_model=DeckResponse, response_model_exclude_none=True)
def text_to_deck(request: TextToDeckRequest, service: GenerationService = Depends(get_generation_service)):
    """Convert text into a structured slide deck.

    Raises:
        400: Unknown model, bad template or missing credential
        404: Template not found or inactive
        429/502: Model service failure or unusable model output
    """
    try:
        deck = service.text_to_deck(request.text, request.model, request.template_id)
        return DeckResponse.from_deck(deck)
    except (HTTPException, AppException):
        raise
    except Exception as e:
        logger.error(f"Error converting text to deck: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate slide deck",
        )


@router.post("/deck-to-html", response_model=PresentationResponse)
def deck_to_html(request: DeckToHtmlRequest, service: GenerationService = Depends(get_generation_service)):
    """Render a deck as HTML using one of the caller's design libraries."""
    try:
        return PresentationResponse.model_validate(
            service.deck_to_html(request.json_data, request.design_library_id)
        )
    except (HTTPException, AppException):
        raise
    except Exception as e:
        logger.error(f"Error generating HTML presentation: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate HTML presentation",
        )


@router.post("/one-shot", response_model=PresentationResponse)
def one_shot(request: OneShotRequest, service: GenerationService = Depends(get_generation_service)):
    """Have the model write a complete HTML presentation from text."""
    try:
        return PresentationResponse.model_validate(
            service.one_shot(request.text, request.design_library_id, request.model)
        )
    except (HTTPException, AppException):
        raise
    except Exception as e:
        logger.error(f"Error in one-shot generation: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to generate presentation",
        )


@router.post("/improve", response_model=PresentationResponse)
def improve(request: ImproveRequest, service: GenerationService = Depends(get_generation_service)):
    """Apply a targeted improvement request to existing presentation HTML."""
    try:
        return PresentationResponse.model_validate(service.improve(request.html, request.prompt))
    except (HTTPException, AppException):
        raise
    except Exception as e:
        logger.error(f"Error improving presentation: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to improve presentation",
        )
