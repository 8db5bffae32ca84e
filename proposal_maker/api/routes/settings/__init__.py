"""Settings API routes."""
from proposal_maker.api.routes.settings.credentials import router as credentials_router
from proposal_maker.api.routes.settings.design_libraries import router as design_libraries_router
from proposal_maker.api.routes.settings.prompt_templates import router as prompt_templates_router

__all__ = [
    "credentials_router",
    "design_libraries_router",
    "prompt_templates_router",
]
