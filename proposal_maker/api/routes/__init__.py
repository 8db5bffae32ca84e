"""API routes."""

from proposal_maker.api.routes.auth import router as auth_router
from proposal_maker.api.routes.generation import router as generation_router
from proposal_maker.api.routes.proposals import router as proposals_router

__all__ = [
    "auth_router",
    "generation_router",
    "proposals_router",
]
