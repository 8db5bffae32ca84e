"""API schemas for request and response schemas."""

from .requests import DeckToHtmlRequest, ImproveRequest, OneShotRequest, TextToDeckRequest
from .responses import DeckResponse, PresentationResponse, SlideResponse

__all__ = [
    "DeckResponse",
    "DeckToHtmlRequest",
    "ImproveRequest",
    "OneShotRequest",
    "PresentationResponse",
    "SlideResponse",
    "TextToDeckRequest",
]
