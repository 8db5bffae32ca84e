"""Response schemas for the generation API (camelCase on the wire)."""

from typing import Optional

from pydantic import BaseModel, ConfigDict, Field

from proposal_maker.domain.slide_deck import Deck


class SlideResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    id: str
    title: str
    content: str
    type: str
    bullets: Optional[list[str]] = None
    image_placeholder: Optional[str] = Field(default=None, alias="imagePlaceholder")


class DeckResponse(BaseModel):
    """Normalized deck. ``totalSlides`` always equals the number of slides."""

    model_config = ConfigDict(populate_by_name=True)

    presentation_title: str = Field(..., alias="presentationTitle")
    total_slides: int = Field(..., alias="totalSlides")
    slides: list[SlideResponse]

    @classmethod
    def from_deck(cls, deck: Deck) -> "DeckResponse":
        return cls(
            presentation_title=deck.title,
            total_slides=deck.total_slides,
            slides=[
                SlideResponse(
                    id=s.id,
                    title=s.title,
                    content=s.content,
                    type=s.type,
                    bullets=s.bullets,
                    image_placeholder=s.image_placeholder,
                )
                for s in deck.slides
            ],
        )


class PresentationResponse(BaseModel):
    """Rendered or generated HTML presentation."""

    model_config = ConfigDict(populate_by_name=True)

    html: str
    design_library_name: Optional[str] = Field(default=None, alias="designLibraryName")
    presentation_title: str = Field(..., alias="presentationTitle")
    total_slides: int = Field(..., alias="totalSlides")
