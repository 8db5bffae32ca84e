"""Validation and normalisation of raw model completions.

Three response shapes are supported:

* ``deck``: JSON slide deck, normalised into :class:`Deck`.
* ``design-tokens``: JSON design tokens in one of several known field
  layouts, normalised into :class:`DesignTokens`.
* ``free-text``: returned unchanged (HTML generation flows).

This module performs no I/O.
"""
import json
import logging
import re
import uuid
from enum import Enum
from typing import Any, Callable, Dict, List, Optional, Union

from proposal_maker.domain.slide_deck import SLIDE_TYPES, Deck, DesignTokens, Slide
from proposal_maker.utils.error_handling import EmptyResult, MalformedModelOutput, SchemaViolation

logger = logging.getLogger(__name__)

DEFAULT_SLIDE_TYPE = "content"

_CODE_FENCE_RE = re.compile(r"^\s*```[a-zA-Z0-9_-]*\s*\n(?P<body>.*?)\n?\s*```\s*$", re.DOTALL)


class ResponseShape(str, Enum):
    DECK = "deck"
    DESIGN_TOKENS = "design-tokens"
    FREE_TEXT = "free-text"


def strip_code_fence(raw: str) -> str:
    """Remove one markdown code fence wrapping the whole completion, if present."""
    match = _CODE_FENCE_RE.match(raw)
    return match.group("body") if match else raw


def _load_json_object(raw: str) -> Dict[str, Any]:
    try:
        data = json.loads(strip_code_fence(raw))
    except (json.JSONDecodeError, TypeError) as e:
        logger.error("Model returned non-JSON output (%d chars)", len(raw or ""))
        raise MalformedModelOutput(details={"parse_error": str(e)}) from e

    if not isinstance(data, dict):
        raise SchemaViolation(f"Expected a JSON object, got {type(data).__name__}")
    return data


# ---------------------------------------------------------------------------
# Deck
# ---------------------------------------------------------------------------


def _optional_str(value: Any, field_name: str) -> Optional[str]:
    if value is None:
        return None
    if isinstance(value, (dict, list)):
        raise SchemaViolation(f"Slide field '{field_name}' must be text")
    return str(value)


def _parse_slide(entry: Any, index: int) -> Slide:
    if not isinstance(entry, dict):
        raise SchemaViolation(f"Slide {index + 1} is not an object")

    slide_type = entry.get("type") or DEFAULT_SLIDE_TYPE
    if not isinstance(slide_type, str) or slide_type.strip().lower() not in SLIDE_TYPES:
        raise SchemaViolation(
            f"Slide {index + 1} has unknown type {slide_type!r}; expected one of {', '.join(SLIDE_TYPES)}"
        )

    bullets = entry.get("bullets")
    if bullets is not None:
        if not isinstance(bullets, list):
            raise SchemaViolation(f"Slide {index + 1} bullets must be a list")
        bullets = [str(b) for b in bullets]

    return Slide(
        id=str(entry.get("id") or uuid.uuid4()),
        title=_optional_str(entry.get("title"), "title") or "",
        content=_optional_str(entry.get("content"), "content") or "",
        type=slide_type.strip().lower(),
        bullets=bullets,
        image_placeholder=_optional_str(entry.get("imagePlaceholder"), "imagePlaceholder"),
    )


def normalize_deck_data(data: Dict[str, Any]) -> Deck:
    """Validate an already-parsed deck object.

    Any ``totalSlides`` value supplied by the model is ignored; the count is
    always the length of the slide list.
    """
    slides = data.get("slides")
    if not isinstance(slides, list):
        raise SchemaViolation("Invalid response structure: missing slides array")

    title = data.get("presentationTitle", data.get("title"))
    if not isinstance(title, str) or not title.strip():
        raise SchemaViolation("Invalid response structure: missing presentation title")

    return Deck(title=title.strip(), slides=[_parse_slide(s, i) for i, s in enumerate(slides)])


def parse_deck(raw: str) -> Deck:
    return normalize_deck_data(_load_json_object(raw))


# ---------------------------------------------------------------------------
# Design tokens
# ---------------------------------------------------------------------------


def _analysis_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    return json.dumps(value, indent=2)


def _css_text(value: Any) -> str:
    if isinstance(value, str):
        return value
    if isinstance(value, dict):
        lines = []
        for name, token in value.items():
            prop = name if str(name).startswith("--") else f"--{name}"
            lines.append(f"  {prop}: {token};")
        return ":root {\n" + "\n".join(lines) + "\n}"
    raise SchemaViolation("CSS variables must be text or a mapping of variable names to values")


def _css_note_variant(data: Dict[str, Any]) -> Optional[DesignTokens]:
    """``{"css": ..., "implementationNote": ...}``"""
    if data.get("css") and data.get("implementationNote"):
        return DesignTokens(_css_text(data["css"]), _analysis_text(data["implementationNote"]))
    return None


def _css_variables_variant(data: Dict[str, Any]) -> Optional[DesignTokens]:
    """``{"cssVariables": ..., "analysisResult": ...}``"""
    if data.get("cssVariables") and data.get("analysisResult"):
        return DesignTokens(_css_text(data["cssVariables"]), _analysis_text(data["analysisResult"]))
    return None


_CSS_KEYS = ("css", "cssVariables", "styles")
_ANALYSIS_KEYS = ("implementationNote", "analysisResult", "analysis")


def _first_present(data: Dict[str, Any], keys) -> Any:
    for key in keys:
        if data.get(key):
            return data[key]
    return None


def _generic_variant(data: Dict[str, Any]) -> Optional[DesignTokens]:
    """Any recognisable CSS / analysis field, possibly only one of them."""
    if not any(key in data for key in _CSS_KEYS + _ANALYSIS_KEYS):
        return None
    css = _first_present(data, _CSS_KEYS)
    analysis = _first_present(data, _ANALYSIS_KEYS)
    return DesignTokens(
        _css_text(css) if css is not None else "",
        _analysis_text(analysis) if analysis is not None else "",
    )


# Tried in order; the first variant that matches wins
DESIGN_TOKEN_VARIANTS: List[Callable[[Dict[str, Any]], Optional[DesignTokens]]] = [
    _css_note_variant,
    _css_variables_variant,
    _generic_variant,
]


def normalize_design_token_data(data: Dict[str, Any]) -> DesignTokens:
    for variant in DESIGN_TOKEN_VARIANTS:
        tokens = variant(data)
        if tokens is not None:
            break
    else:
        raise SchemaViolation(
            "Design token response has no recognisable fields",
            details={"fields": sorted(data.keys())},
        )

    if not tokens.css_variables.strip() or not tokens.analysis_result.strip():
        raise EmptyResult()
    return tokens


def parse_design_tokens(raw: str) -> DesignTokens:
    return normalize_design_token_data(_load_json_object(raw))


# ---------------------------------------------------------------------------


def normalize(raw: str, shape: Union[ResponseShape, str]) -> Union[Deck, DesignTokens, str]:
    """Turn a raw completion into the canonical value for *shape*."""
    shape = ResponseShape(shape)
    if shape is ResponseShape.DECK:
        return parse_deck(raw)
    if shape is ResponseShape.DESIGN_TOKENS:
        return parse_design_tokens(raw)
    return raw
