"""Request schemas for the generation API.

Fields accept both snake_case and the camelCase names used by the web client.
"""

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class TextToDeckRequest(BaseModel):
    """Convert free-form text into a structured deck."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., min_length=1, description="Source text for the presentation")
    model: str = Field(default="fast", description="Model alias or id")
    template_id: Optional[int] = Field(
        default=None,
        alias="templateId",
        description="Prompt template to use; the built-in deck template when omitted",
    )

    @field_validator("text")
    @classmethod
    def validate_text_not_whitespace(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("Text cannot be empty or whitespace only")
        return value


class DeckToHtmlRequest(BaseModel):
    """Render a previously generated deck with a design library."""

    model_config = ConfigDict(populate_by_name=True)

    json_data: dict[str, Any] = Field(..., alias="jsonData")
    design_library_id: int = Field(..., alias="designLibraryId")


class OneShotRequest(BaseModel):
    """Generate a full HTML presentation directly from text."""

    model_config = ConfigDict(populate_by_name=True)

    text: str = Field(..., min_length=1)
    design_library_id: Optional[int] = Field(default=None, alias="designLibraryId")
    model: str = "large"


class ImproveRequest(BaseModel):
    """Apply a targeted change request to existing presentation HTML.

    Length rules are enforced by the generation service.
    """

    html: str
    prompt: str
