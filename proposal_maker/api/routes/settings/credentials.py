"""
Model service credential settings.

The API key itself is write-only: responses only say whether one is stored.
"""
import logging
from typing import Optional

import httpx
from fastapi import APIRouter, Depends, HTTPException, status
from pydantic import BaseModel
from sqlalchemy.orm import Session

from proposal_maker.api.dependencies import get_http_client
from proposal_maker.core.database import get_db
from proposal_maker.core.user_context import get_current_account
from proposal_maker.database.models import Account
from proposal_maker.services.credential_service import remove_api_key, save_api_key
from proposal_maker.services.llm_client import ChatCompletionsClient
from proposal_maker.utils.error_handling import AppException

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/settings/credentials", tags=["settings"])


class CredentialUpdate(BaseModel):
    """Empty or missing ``api_key`` removes the stored key."""
    api_key: Optional[str] = None


class CredentialStatus(BaseModel):
    has_api_key: bool


class CredentialUpdateResponse(CredentialStatus):
    message: str


@router.get("", response_model=CredentialStatus)
def get_credential_status(account: Account = Depends(get_current_account)):
    return CredentialStatus(has_api_key=account.has_api_key)


@router.put("", response_model=CredentialUpdateResponse)
def update_credentials(
    request: CredentialUpdate,
    db: Session = Depends(get_db),
    account: Account = Depends(get_current_account),
    http_client: Optional[httpx.Client] = Depends(get_http_client),
):
    """
    Store or remove the caller's API key.

    A new key is checked for the expected prefix and verified against the
    model service before it is encrypted and stored.

    Raises:
        400: Bad key format or the model service rejected the key
    """
    try:
        api_key = (request.api_key or "").strip()
        if api_key:
            save_api_key(db, account, api_key, ChatCompletionsClient(api_key, http_client=http_client))
            message = "API key updated successfully"
        else:
            remove_api_key(db, account)
            message = "API key removed successfully"
        return CredentialUpdateResponse(message=message, has_api_key=account.has_api_key)
    except (HTTPException, AppException):
        raise
    except Exception as e:
        db.rollback()
        logger.error(f"Error updating credentials: {e}", exc_info=True)
        raise HTTPException(
            status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
            detail="Failed to update credentials",
        )
