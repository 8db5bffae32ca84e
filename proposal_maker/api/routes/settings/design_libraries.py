"""
Design Library API endpoints.

A design library is created by sending a screenshot to the vision model
with a design prompt template; the extracted CSS tokens are then used to
style rendered presentations.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from proposal_maker.api.dependencies import get_client_factory
from proposal_maker.core.database import get_db
from proposal_maker.core.user_context import get_current_account
from proposal_maker.database.models import Account, DesignLibrary
from proposal_maker.services.design_library_service import DesignLibraryService
from proposal_maker.utils.error_handling import AppException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/design-libraries", tags=["design-libraries"])


class DesignLibraryCreate(BaseModel):
    """Request to create a design library from a screenshot."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    image_base64: str = Field(..., min_length=1)
    prompt_template_id: int


class DesignLibraryUpdate(BaseModel):
    """Only the name and description of a library can change."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)


class DesignLibraryResponse(BaseModel):
    id: int
    name: str
    description: str
    css_variables: str
    analysis_result: str
    prompt_template_id: Optional[int]
    prompt_template_name: Optional[str]
    created_by: int
    created_at: str
    updated_at: str


class DesignLibraryListResponse(BaseModel):
    libraries: List[DesignLibraryResponse]
    total: int


def _to_response(library: DesignLibrary) -> DesignLibraryResponse:
    return DesignLibraryResponse(
        id=library.id,
        name=library.name,
        description=library.description,
        css_variables=library.css_variables,
        analysis_result=library.analysis_result,
        prompt_template_id=library.prompt_template_id,
        prompt_template_name=library.prompt_template.name if library.prompt_template else None,
        created_by=library.created_by,
        created_at=library.created_at.isoformat(),
        updated_at=library.updated_at.isoformat(),
    )


@router.get("", response_model=DesignLibraryListResponse)
def list_design_libraries(
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    """List the caller's design libraries, newest first."""
    try:
        libraries = DesignLibraryService(db, account).list_libraries()
        return DesignLibraryListResponse(
            libraries=[_to_response(lib) for lib in libraries],
            total=len(libraries),
        )
    except Exception as e:
        logger.error(f"Error listing design libraries: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list design libraries",
        )


@router.get("/{library_id}", response_model=DesignLibraryResponse)
def get_design_library(
    library_id: int,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    try:
        return _to_response(DesignLibraryService(db, account).get_library(library_id))
    except (HTTPException, AppException):
        raise
    except Exception as e:
        logger.error(f"Error getting design library {library_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get design library",
        )


@router.post("", response_model=DesignLibraryResponse, status_code=status.HTTP_201_CREATED)
def create_design_library(
    request: DesignLibraryCreate,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    client_factory=Depends(get_client_factory),
):
    """
    Analyse a screenshot and store the extracted design tokens.

    Raises:
        400: Invalid image, missing credential or bad template
        404: Prompt template missing or inactive
        429/502: Model service failure
    """
    try:
        library = DesignLibraryService(db, account, client_factory).create_library(
            name=request.name,
            description=request.description,
            image_base64=request.image_base64,
            prompt_template_id=request.prompt_template_id,
        )
        return _to_response(library)
    except (HTTPException, AppException):
        db.rollback()
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating design library: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create design library",
        )


@router.put("/{library_id}", response_model=DesignLibraryResponse)
def update_design_library(
    library_id: int,
    request: DesignLibraryUpdate,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    try:
        library = DesignLibraryService(db, account).update_library(
            library_id, name=request.name, description=request.description
        )
        return _to_response(library)
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating design library {library_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update design library",
        )


@router.delete("/{library_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_design_library(
    library_id: int,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    try:
        DesignLibraryService(db, account).delete_library(library_id)
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting design library {library_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete design library",
        )
