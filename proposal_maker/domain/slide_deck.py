"""Structured slide deck and design token value objects.

These are the canonical shapes the response parser always returns,
regardless of which field layout the model used.
"""
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

SLIDE_TYPES = ("title", "content", "bullet", "image", "mixed")


@dataclass
class Slide:
    """A single slide inside a generated deck.

    ``bullets`` is meaningful for bullet/mixed slides and ``image_placeholder``
    for image/mixed slides, but both are kept whatever the type tag says.
    """

    id: str
    title: str
    content: str
    type: str = "content"
    bullets: Optional[List[str]] = None
    image_placeholder: Optional[str] = None

    def to_dict(self) -> Dict[str, Any]:
        data: Dict[str, Any] = {
            "id": self.id,
            "title": self.title,
            "content": self.content,
            "type": self.type,
        }
        if self.bullets is not None:
            data["bullets"] = list(self.bullets)
        if self.image_placeholder is not None:
            data["imagePlaceholder"] = self.image_placeholder
        return data


@dataclass
class Deck:
    """Ordered slides plus a presentation title."""

    title: str
    slides: List[Slide] = field(default_factory=list)

    @property
    def total_slides(self) -> int:
        return len(self.slides)

    def to_dict(self) -> Dict[str, Any]:
        return {
            "presentationTitle": self.title,
            "totalSlides": self.total_slides,
            "slides": [s.to_dict() for s in self.slides],
        }

    def __str__(self) -> str:
        return f"Deck('{self.title}', {self.total_slides} slides)"


@dataclass(frozen=True)
class DesignTokens:
    """Canonical ``{cssVariables, analysisResult}`` pair."""

    css_variables: str
    analysis_result: str

    def to_dict(self) -> Dict[str, str]:
        return {"cssVariables": self.css_variables, "analysisResult": self.analysis_result}
