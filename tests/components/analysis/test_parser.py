import json
import sys

import pytest

from prompt_judge.components.analysis.parser import parse_analysis_response
from prompt_judge.shared.errors import ParseError, ParseErrorKind

VALID = {
    "promptResult": "Cats purr to communicate contentment.",
    "response": "Clear and casual question.",
    "scores": {"style": 70, "grammar": 90, "creativity": 40, "clarity": 85, "relevance": 75},
    "suggestions": ["Ask about a specific situation.", "Mention your cat's age."],
}


def _raw(payload=None, **changes):
    data = dict(VALID if payload is None else payload)
    data.update(changes)
    return json.dumps(data)


def test_clean_json_parses():
    result = parse_analysis_response(_raw())
    assert result.prompt_result == VALID["promptResult"]
    assert result.scores.grammar == 90
    assert result.suggestions == VALID["suggestions"]


def test_parse_is_idempotent_on_clean_json():
    first = parse_analysis_response(_raw())
    second = parse_analysis_response(json.dumps(first.to_payload()))
    assert first == second


def test_markdown_fences_are_stripped():
    raw = "```json\n" + _raw() + "\n```"
    assert parse_analysis_response(raw).scores.clarity == 85


def test_surrounding_prose_is_ignored():
    raw = "Here is my evaluation:\n" + _raw() + "\nLet me know if you need more."
    assert parse_analysis_response(raw).response == VALID["response"]


def test_trailing_text_with_braces_still_parses():
    raw = _raw() + "\nNote: {this part is not JSON}"
    assert parse_analysis_response(raw).scores.style == 70


def test_fence_inside_string_value_survives():
    raw = _raw(promptResult="Use ```code``` blocks")
    assert parse_analysis_response(raw).prompt_result == "Use ```code``` blocks"


def test_no_json_found():
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response("I cannot help with that.")
    assert exc_info.value.kind == ParseErrorKind.NO_JSON_FOUND


def test_empty_text_has_no_json():
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response("")
    assert exc_info.value.kind == ParseErrorKind.NO_JSON_FOUND


def test_malformed_json():
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response('{"promptResult": "x", "scores": {')
    assert exc_info.value.kind in (ParseErrorKind.MALFORMED_JSON, ParseErrorKind.NO_JSON_FOUND)


def test_truncated_object_is_malformed():
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response('{"promptResult": "x", "response": } trailing }')
    assert exc_info.value.kind == ParseErrorKind.MALFORMED_JSON


def test_missing_suggestions_is_missing_field():
    payload = {k: v for k, v in VALID.items() if k != "suggestions"}
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response(json.dumps(payload))
    assert exc_info.value.kind == ParseErrorKind.MISSING_FIELD
    assert exc_info.value.field == "suggestions"


def test_suggestions_must_be_a_list():
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response(_raw(suggestions="Be more specific"))
    assert exc_info.value.kind == ParseErrorKind.MISSING_FIELD


def test_null_prompt_result_is_missing_field():
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response(_raw(promptResult=None))
    assert exc_info.value.field == "promptResult"


def test_scores_must_be_an_object():
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response(_raw(scores=[1, 2, 3]))
    assert exc_info.value.kind == ParseErrorKind.INVALID_SCORE
    assert exc_info.value.field == "scores"


def test_scores_are_clamped_and_defaulted():
    raw = _raw(scores={"style": 150, "grammar": -20, "creativity": "55", "clarity": "high"})
    scores = parse_analysis_response(raw).scores
    assert scores.style == 100
    assert scores.grammar == 0
    assert scores.creativity == 55
    assert scores.clarity == 0
    assert scores.relevance == 0


def test_boolean_scores_are_not_numbers():
    scores = parse_analysis_response(_raw(scores={**VALID["scores"], "style": True})).scores
    assert scores.style == 0


def test_non_string_suggestions_are_dropped():
    result = parse_analysis_response(_raw(suggestions=["Keep it short", {"tip": "x"}, None, 3]))
    assert result.suggestions == ["Keep it short", "3"]


def test_parse_error_detail_is_generic():
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response("nothing here")
    assert exc_info.value.detail == "Failed to analyze prompt"
    assert exc_info.value.raw_text == "nothing here"


def test_huge_integer_scores_are_clamped():
    scores = {**VALID["scores"], "style": 10 ** 400, "grammar": -(10 ** 400)}
    parsed = parse_analysis_response(_raw(scores=scores)).scores
    assert parsed.style == 100
    assert parsed.grammar == 0
    assert parsed.clarity == 85


@pytest.mark.skipif(not hasattr(sys, "get_int_max_str_digits"), reason="no int digit limit")
def test_integer_literal_over_digit_limit_is_malformed():
    raw = _raw().replace('"style": 70', '"style": ' + "9" * 5000)
    with pytest.raises(ParseError) as exc_info:
        parse_analysis_response(raw)
    assert exc_info.value.kind == ParseErrorKind.MALFORMED_JSON
