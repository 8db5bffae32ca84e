"""Database models."""

from proposal_maker.database.models.account import Account
from proposal_maker.database.models.design_library import DesignLibrary
from proposal_maker.database.models.prompt_template import PROMPT_CATEGORIES, PromptTemplate
from proposal_maker.database.models.proposal import Proposal, ProposalView

__all__ = [
    "Account",
    "DesignLibrary",
    "PROMPT_CATEGORIES",
    "PromptTemplate",
    "Proposal",
    "ProposalView",
]
