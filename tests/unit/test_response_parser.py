"""Tests for model response normalisation.

All fixtures are literal model outputs; the parser performs no I/O.
"""

import json

import pytest

from proposal_maker.domain.slide_deck import Deck, DesignTokens
from proposal_maker.services.response_parser import (
    ResponseShape,
    normalize,
    normalize_deck_data,
    parse_deck,
    parse_design_tokens,
    strip_code_fence,
)
from proposal_maker.utils.error_handling import EmptyResult, MalformedModelOutput, SchemaViolation

Q1_COMPLETION = (
    '{"presentationTitle":"Q1 Update","slides":['
    '{"title":"Revenue","content":"Grew 20%","type":"content"},'
    '{"title":"Hiring","content":"5 engineers","type":"content"}]}'
)


class TestDeckShape:
    def test_q1_completion_normalises_with_synthesized_ids(self):
        deck = parse_deck(Q1_COMPLETION)

        assert isinstance(deck, Deck)
        assert deck.title == "Q1 Update"
        assert deck.total_slides == 2
        assert [s.title for s in deck.slides] == ["Revenue", "Hiring"]
        ids = [s.id for s in deck.slides]
        assert all(ids)
        assert len(set(ids)) == 2

    def test_total_slides_ignores_model_supplied_count(self):
        deck = parse_deck(json.dumps({
            "presentationTitle": "Wrong count",
            "totalSlides": 7,
            "slides": [{"id": "a", "title": "Only", "content": "one"}],
        }))

        assert deck.total_slides == 1
        assert deck.to_dict()["totalSlides"] == 1

    def test_existing_ids_are_kept(self):
        deck = parse_deck(json.dumps({
            "presentationTitle": "Ids",
            "slides": [{"id": "slide-1", "title": "A", "content": "B", "type": "title"}],
        }))
        assert deck.slides[0].id == "slide-1"

    def test_missing_type_defaults_to_content(self):
        deck = parse_deck('{"presentationTitle":"T","slides":[{"title":"A","content":"B"}]}')
        assert deck.slides[0].type == "content"

    def test_type_is_case_insensitive(self):
        deck = parse_deck('{"presentationTitle":"T","slides":[{"title":"A","content":"B","type":"Bullet"}]}')
        assert deck.slides[0].type == "bullet"

    def test_unknown_type_is_schema_violation(self):
        with pytest.raises(SchemaViolation):
            parse_deck('{"presentationTitle":"T","slides":[{"title":"A","content":"B","type":"chart"}]}')

    def test_bullets_and_placeholder_kept_regardless_of_type(self):
        deck = parse_deck(json.dumps({
            "presentationTitle": "T",
            "slides": [{
                "title": "A",
                "content": "B",
                "type": "title",
                "bullets": ["one", 2],
                "imagePlaceholder": "A chart",
            }],
        }))
        slide = deck.slides[0]
        assert slide.bullets == ["one", "2"]
        assert slide.image_placeholder == "A chart"
        assert slide.to_dict()["imagePlaceholder"] == "A chart"

    def test_bullets_must_be_a_list(self):
        with pytest.raises(SchemaViolation):
            parse_deck('{"presentationTitle":"T","slides":[{"title":"A","content":"B","bullets":"x"}]}')

    def test_title_field_fallback(self):
        deck = parse_deck('{"title":"Fallback","slides":[]}')
        assert deck.title == "Fallback"
        assert deck.total_slides == 0

    @pytest.mark.parametrize("raw", [
        '{"slides":[]}',
        '{"presentationTitle":"","slides":[]}',
        '{"presentationTitle":42,"slides":[]}',
        '{"presentationTitle":"T"}',
        '{"presentationTitle":"T","slides":{"a":1}}',
        '{"presentationTitle":"T","slides":["not an object"]}',
        '[1, 2, 3]',
    ])
    def test_structure_errors_are_schema_violations(self, raw):
        with pytest.raises(SchemaViolation):
            parse_deck(raw)

    @pytest.mark.parametrize("raw", ["", "not json", '{"presentationTitle": "T", '])
    def test_unparseable_output_is_malformed(self, raw):
        with pytest.raises(MalformedModelOutput):
            parse_deck(raw)

    def test_code_fenced_json_is_accepted(self):
        fenced = "```json\n" + Q1_COMPLETION + "\n```"
        assert parse_deck(fenced).title == "Q1 Update"

    def test_normalize_deck_data_accepts_parsed_dict(self):
        deck = normalize_deck_data({"presentationTitle": "T", "slides": [{"title": "A", "content": "B"}]})
        assert deck.total_slides == 1


class TestDesignTokenShape:
    def test_css_and_implementation_note_variant(self):
        tokens = parse_design_tokens('{"css": ":root{--c:#fff;}", "implementationNote": {"approach":"grid"}}')

        assert tokens == DesignTokens(":root{--c:#fff;}", '{\n  "approach": "grid"\n}')

    def test_css_variables_and_analysis_result_variant(self):
        tokens = parse_design_tokens('{"cssVariables": ":root{--a:1px;}", "analysisResult": "Clean layout"}')

        assert tokens.css_variables == ":root{--a:1px;}"
        assert tokens.analysis_result == "Clean layout"

    def test_equivalent_variants_normalize_identically(self):
        analysis = {"palette": ["#111", "#eee"], "spacing": "8px grid"}
        from_note = parse_design_tokens(json.dumps({"css": ":root{--c:#fff;}", "implementationNote": analysis}))
        from_result = parse_design_tokens(json.dumps({"cssVariables": ":root{--c:#fff;}", "analysisResult": analysis}))

        assert from_note == from_result

    def test_first_matching_variant_wins(self):
        tokens = parse_design_tokens(json.dumps({
            "css": "from-css",
            "implementationNote": "from-note",
            "cssVariables": "from-vars",
            "analysisResult": "from-result",
        }))
        assert tokens.css_variables == "from-css"
        assert tokens.analysis_result == "from-note"

    def test_generic_fallback_mixes_field_names(self):
        tokens = parse_design_tokens('{"styles": ":root{--x:0;}", "analysis": ["a", "b"]}')

        assert tokens.css_variables == ":root{--x:0;}"
        assert tokens.analysis_result == '[\n  "a",\n  "b"\n]'

    def test_css_mapping_rendered_as_root_block(self):
        tokens = parse_design_tokens('{"cssVariables": {"--primary": "#000", "spacing": "4px"}, "analysisResult": "ok"}')

        assert tokens.css_variables == ":root {\n  --primary: #000;\n  --spacing: 4px;\n}"

    def test_no_recognisable_field_is_schema_violation(self):
        with pytest.raises(SchemaViolation):
            parse_design_tokens('{"colors": ["red"], "notes": "none"}')

    def test_missing_analysis_is_empty_result(self):
        with pytest.raises(EmptyResult):
            parse_design_tokens('{"css": ":root{--c:#fff;}"}')

    def test_blank_css_is_empty_result(self):
        with pytest.raises(EmptyResult):
            parse_design_tokens('{"cssVariables": "   ", "analysisResult": "text"}')

    def test_non_json_is_malformed(self):
        with pytest.raises(MalformedModelOutput):
            parse_design_tokens("I could not analyse this image.")

    def test_to_dict_uses_canonical_names(self):
        tokens = parse_design_tokens('{"css": "a", "implementationNote": "b"}')
        assert tokens.to_dict() == {"cssVariables": "a", "analysisResult": "b"}


class TestFreeTextAndDispatch:
    def test_free_text_returned_unmodified(self):
        raw = "```html\n<div class='slide'>x</div>\n```"
        assert normalize(raw, ResponseShape.FREE_TEXT) == raw

    def test_dispatch_accepts_shape_strings(self):
        assert isinstance(normalize(Q1_COMPLETION, "deck"), Deck)
        assert isinstance(normalize('{"css": "a", "implementationNote": "b"}', "design-tokens"), DesignTokens)

    def test_unknown_shape_rejected(self):
        with pytest.raises(ValueError):
            normalize("{}", "xml")


def test_strip_code_fence_leaves_plain_text_alone():
    assert strip_code_fence('{"a": 1}') == '{"a": 1}'
    assert strip_code_fence('```\n{"a": 1}\n```') == '{"a": 1}'
