"""
Prompt Template Library API endpoints.

CRUD operations for the global library of prompt templates. Seeded system
templates are read-only; user templates can only be changed by the account
that created them.
"""
import logging
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel, Field, field_validator
from sqlalchemy.orm import Session

from proposal_maker.core.database import get_db
from proposal_maker.core.user_context import get_current_account, require_owner
from proposal_maker.database.models import PROMPT_CATEGORIES, Account, DesignLibrary, PromptTemplate
from proposal_maker.utils.error_handling import (
    AppException,
    ConflictError,
    PermissionDeniedError,
    ResourceNotFoundError,
)

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/prompt-templates", tags=["prompt-templates"])


# Request/Response schemas


def _check_category(value: Optional[str]) -> Optional[str]:
    if value is not None and value not in PROMPT_CATEGORIES:
        raise ValueError(f"category must be one of {', '.join(PROMPT_CATEGORIES)}")
    return value


class PromptTemplateCreate(BaseModel):
    """Request to create a prompt template."""
    name: str = Field(..., min_length=1, max_length=100)
    description: str = Field(..., min_length=1)
    prompt: str = Field(..., min_length=1)
    category: str = "general"

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return _check_category(v)


class PromptTemplateUpdate(BaseModel):
    """Request to update a prompt template. Only provided fields change."""
    name: Optional[str] = Field(None, min_length=1, max_length=100)
    description: Optional[str] = Field(None, min_length=1)
    prompt: Optional[str] = Field(None, min_length=1)
    category: Optional[str] = None
    is_active: Optional[bool] = None

    @field_validator("category")
    @classmethod
    def validate_category(cls, v):
        return _check_category(v)


class PromptTemplateResponse(BaseModel):
    """Response schema for prompt templates."""
    id: int
    name: str
    description: str
    prompt: str
    category: str
    is_active: bool
    is_system: bool
    version: int
    created_by: Optional[int]
    created_at: str
    updated_at: str


class PromptTemplateListResponse(BaseModel):
    templates: List[PromptTemplateResponse]
    total: int


def _to_response(template: PromptTemplate) -> PromptTemplateResponse:
    return PromptTemplateResponse(
        id=template.id,
        name=template.name,
        description=template.description,
        prompt=template.prompt,
        category=template.category,
        is_active=template.is_active,
        is_system=template.is_system,
        version=template.version,
        created_by=template.created_by,
        created_at=template.created_at.isoformat(),
        updated_at=template.updated_at.isoformat(),
    )


def _get_template(db: Session, template_id: int) -> PromptTemplate:
    template = db.query(PromptTemplate).filter(PromptTemplate.id == template_id).first()
    if not template:
        raise ResourceNotFoundError(f"Prompt template {template_id} not found")
    return template


def _check_writable(template: PromptTemplate, account: Account, action: str) -> None:
    if template.is_system:
        raise PermissionDeniedError(f"System prompt templates cannot be {action}d")
    require_owner(template, account, action)


# API endpoints


@router.get("", response_model=PromptTemplateListResponse)
def list_prompt_templates(
    category: Optional[str] = None,
    active: Optional[bool] = None,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    """
    List prompt templates, newest first.

    Args:
        category: Filter by category ("all" or omitted for every category)
        active: When true, only active templates are returned
    """
    try:
        query = db.query(PromptTemplate)

        if category and category != "all":
            query = query.filter(PromptTemplate.category == category)
        if active:
            query = query.filter(PromptTemplate.is_active == True)  # noqa: E712

        templates = query.order_by(PromptTemplate.created_at.desc(), PromptTemplate.id.desc()).all()
        return PromptTemplateListResponse(
            templates=[_to_response(t) for t in templates],
            total=len(templates),
        )
    except Exception as e:
        logger.error(f"Error listing prompt templates: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to list prompt templates",
        )


@router.get("/{template_id}", response_model=PromptTemplateResponse)
def get_prompt_template(
    template_id: int,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    """
    Get a prompt template by ID.

    Raises:
        404: Template not found
    """
    try:
        return _to_response(_get_template(db, template_id))
    except (HTTPException, AppException):
        raise
    except Exception as e:
        logger.error(f"Error getting prompt template {template_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to get prompt template",
        )


@router.post("", response_model=PromptTemplateResponse, status_code=status.HTTP_201_CREATED)
def create_prompt_template(
    request: PromptTemplateCreate,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    """
    Create a new prompt template owned by the caller.

    Raises:
        409: Template with same name already exists
    """
    try:
        existing = db.query(PromptTemplate).filter(PromptTemplate.name == request.name).first()
        if existing:
            raise ConflictError(f"Prompt template with name '{request.name}' already exists")

        template = PromptTemplate(
            name=request.name,
            description=request.description,
            prompt=request.prompt,
            category=request.category,
            is_active=True,
            is_system=False,
            version=1,
            created_by=account.id,
        )
        db.add(template)
        db.commit()
        db.refresh(template)

        logger.info(f"Created prompt template: {template.name} (id={template.id})")
        return _to_response(template)
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error creating prompt template: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to create prompt template",
        )


@router.put("/{template_id}", response_model=PromptTemplateResponse)
def update_prompt_template(
    template_id: int,
    request: PromptTemplateUpdate,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    """
    Update a prompt template. The version increments when the prompt body changes.

    Raises:
        403: System template, or not the creator
        404: Template not found
        409: Name conflicts with another template
    """
    try:
        template = _get_template(db, template_id)
        _check_writable(template, account, "update")

        if request.name and request.name != template.name:
            existing = db.query(PromptTemplate).filter(
                PromptTemplate.name == request.name,
                PromptTemplate.id != template_id,
            ).first()
            if existing:
                raise ConflictError(f"Prompt template with name '{request.name}' already exists")
            template.name = request.name

        if request.description is not None:
            template.description = request.description
        if request.category is not None:
            template.category = request.category
        if request.is_active is not None:
            template.is_active = request.is_active
        if request.prompt is not None and request.prompt != template.prompt:
            template.prompt = request.prompt
            template.version = template.version + 1

        db.commit()
        db.refresh(template)

        logger.info(f"Updated prompt template: {template.name} (id={template.id}, version={template.version})")
        return _to_response(template)
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating prompt template {template_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update prompt template",
        )


@router.delete("/{template_id}", status_code=status.HTTP_204_NO_CONTENT)
def delete_prompt_template(
    template_id: int,
    hard_delete: bool = False,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
):
    """
    Delete a prompt template (soft-delete by default).

    Args:
        hard_delete: If True, permanently delete. Otherwise, mark as inactive.

    Raises:
        403: System template, or not the creator
        404: Template not found
    """
    try:
        template = _get_template(db, template_id)
        _check_writable(template, account, "delete")

        if hard_delete:
            # Libraries keep their tokens but lose the template reference
            db.query(DesignLibrary).filter(DesignLibrary.prompt_template_id == template.id).update(
                {DesignLibrary.prompt_template_id: None}, synchronize_session=False
            )
            db.delete(template)
            logger.info(f"Hard deleted prompt template: {template.name} (id={template_id})")
        else:
            template.is_active = False
            logger.info(f"Soft deleted prompt template: {template.name} (id={template_id})")

        db.commit()
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error deleting prompt template {template_id}: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to delete prompt template",
        )
