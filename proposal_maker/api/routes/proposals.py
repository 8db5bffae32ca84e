"""Shareable proposal endpoints.

Creating and listing proposals requires a session. Reading a proposal by
its share token is public and records one view per request.
"""

import logging
from datetime import datetime
from typing import Callable, List

from fastapi import APIRouter, Depends, HTTPException, Request, status
from fastapi.responses import HTMLResponse
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from proposal_maker.api.dependencies import get_geo_lookup
from proposal_maker.core.database import get_db
from proposal_maker.core.user_context import get_current_account
from proposal_maker.database.models import Account, Proposal
from proposal_maker.services.proposal_service import ProposalService, client_ip, render_shared_html, view_count
from proposal_maker.utils.error_handling import AppException

logger = logging.getLogger(__name__)

router = APIRouter(tags=["proposals"])


class ProposalCreate(BaseModel):
    name: str = Field(..., min_length=1, max_length=255)
    html: str = Field(..., min_length=1)


class ProposalViewResponse(BaseModel):
    ip_address: str
    location: str
    viewed_at: datetime


class ProposalResponse(BaseModel):
    id: int
    name: str
    html: str
    share_token: str
    view_count: int
    views: List[ProposalViewResponse]
    created_at: datetime
    updated_at: datetime


class SharedProposalResponse(BaseModel):
    name: str
    html: str
    view_count: int


def _to_response(proposal: Proposal) -> ProposalResponse:
    return ProposalResponse(
        id=proposal.id,
        name=proposal.name,
        html=proposal.html,
        share_token=proposal.share_token,
        view_count=len(proposal.views),
        views=[
            ProposalViewResponse(ip_address=v.ip_address, location=v.location, viewed_at=v.viewed_at)
            for v in proposal.views
        ],
        created_at=proposal.created_at,
        updated_at=proposal.updated_at,
    )


def _viewer_ip(request: Request) -> str:
    return client_ip(
        request.headers.get("x-forwarded-for"),
        request.client.host if request.client else None,
    )


@router.post("/api/proposals", response_model=ProposalResponse, status_code=status.HTTP_201_CREATED)
def create_proposal(
    request: ProposalCreate,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    try:
        proposal = ProposalService(db).create_proposal(account, request.name, request.html)
        return _to_response(proposal)
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating proposal: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create proposal",
        )


@router.get("/api/proposals", response_model=List[ProposalResponse])
def list_proposals(
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    """List the caller's proposals with their view history."""
    try:
        return [_to_response(p) for p in ProposalService(db).list_proposals(account)]
    except Exception as e:
        logger.error(f"Error listing proposals: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list proposals",
        )


@router.get("/api/proposals/shared/{share_token}", response_model=SharedProposalResponse)
def get_shared_proposal(
    share_token: str,
    request: Request,
    db: Session = Depends(get_db),
    geo_lookup: Callable[[str], str] = Depends(get_geo_lookup),
):
    """
    Public read of a proposal. Records a view before responding.

    Raises:
        404: Unknown share token
    """
    try:
        proposal = ProposalService(db, geo_lookup).record_view(share_token, _viewer_ip(request))
        return SharedProposalResponse(name=proposal.name, html=proposal.html, view_count=view_count(db, proposal))
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error reading shared proposal: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to load proposal",
        )


@router.get("/p/{share_token}", response_class=HTMLResponse)
def view_shared_proposal(
    share_token: str,
    request: Request,
    db: Session = Depends(get_db),
    geo_lookup: Callable[[str], str] = Depends(get_geo_lookup),
):
    """Public HTML page for a shared proposal."""
    try:
        proposal = ProposalService(db, geo_lookup).record_view(share_token, _viewer_ip(request))
    except AppException as e:
        if e.status_code == status.HTTP_404_NOT_FOUND:
            return HTMLResponse("<h1>Proposal not found</h1>", status_code=status.HTTP_404_NOT_FOUND)
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error rendering shared proposal: {e}", exc_info=True)
        return HTMLResponse(
            "<h1>Something went wrong</h1>",
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        )
    return HTMLResponse(render_shared_html(proposal, request.headers.get("host")))
