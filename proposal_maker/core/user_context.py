"""Current-account resolution for authenticated endpoints.

Requests authenticate with ``Authorization: Bearer <session token>``. The
resolved account id is also kept in a ContextVar so log records emitted
while handling the request can be attributed to it.
"""
import logging
from contextvars import ContextVar
from typing import Optional

from fastapi import Depends, Header
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from proposal_maker.core.database import get_db
from proposal_maker.utils.error_handling import AuthenticationError, PermissionDeniedError

logger = logging.getLogger(__name__)

# Request-scoped account id
_current_account_var: ContextVar[Optional[int]] = ContextVar("current_account", default=None)


def set_current_account_id(account_id: Optional[int]) -> None:
    _current_account_var.set(account_id)


def get_current_account_id() -> Optional[int]:
    return _current_account_var.get()


def reset_current_account() -> None:
    """Reset the context variable. Primarily useful for testing."""
    _current_account_var.set(None)


def _bearer_token(authorization: Optional[str]) -> Optional[str]:
    if not authorization:
        return None
    scheme, _, token = authorization.partition(" ")
    if scheme.lower() != "bearer" or not token.strip():
        return None
    return token.strip()


async def get_current_account(
    authorization: Optional[str] = Header(default=None),
    db: Session = Depends(get_db),
):
    """FastAPI dependency returning the authenticated Account.

    Declared async so the ContextVar is set in the request task and is
    visible to the (threadpool) endpoint that follows. The account query
    itself runs in the threadpool.

    Raises:
        AuthenticationError: If the token is missing, invalid, expired, or
            refers to an account that no longer exists.
    """
    from proposal_maker.core.security import read_session_token
    from proposal_maker.database.models import Account

    token = _bearer_token(authorization)
    if token is None:
        raise AuthenticationError()

    account_id = read_session_token(token)
    if account_id is None:
        raise AuthenticationError("Session expired or invalid")

    account = await run_in_threadpool(lambda: db.query(Account).filter(Account.id == account_id).first())
    if account is None:
        raise AuthenticationError()

    set_current_account_id(account.id)
    return account


def require_owner(resource, account, action: str = "modify") -> None:
    """Raise PermissionDeniedError unless *account* created *resource*."""
    if resource.created_by != account.id:
        raise PermissionDeniedError(f"You do not have permission to {action} this resource")
