"""Shared FastAPI dependencies for outbound service clients.

Tests override ``get_http_client`` (and ``get_geo_lookup``) through
``app.dependency_overrides`` to keep outbound calls in-process.
"""
from typing import Callable, Optional

import httpx
from fastapi import Depends
from sqlalchemy.orm import Session

from proposal_maker.database.models import Account
from proposal_maker.services.credential_service import resolve_api_key
from proposal_maker.services.geo_lookup import lookup_location
from proposal_maker.services.llm_client import ChatCompletionsClient


def get_http_client() -> Optional[httpx.Client]:
    """Shared client for model service calls. None opens one per request."""
    return None


def get_client_factory(
    http_client: Optional[httpx.Client] = Depends(get_http_client),
) -> Callable[[Session, Account], ChatCompletionsClient]:
    """Return a factory building a model client from an account's stored key."""

    def factory(db: Session, account: Account) -> ChatCompletionsClient:
        return ChatCompletionsClient(resolve_api_key(db, account), http_client=http_client)

    return factory


def get_geo_lookup() -> Callable[[str], str]:
    return lookup_location
