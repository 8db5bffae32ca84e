"""Domain objects produced by the generation pipeline."""

from proposal_maker.domain.slide_deck import SLIDE_TYPES, Deck, DesignTokens, Slide

__all__ = ["SLIDE_TYPES", "Deck", "DesignTokens", "Slide"]
