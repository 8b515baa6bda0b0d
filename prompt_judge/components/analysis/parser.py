"""Parse and validate the analysis model's raw text response.

The model output is untrusted: it may be wrapped in markdown fences, framed
by prose, truncated, or shaped differently from what was requested. Every
field is validated before anything downstream sees it.

Score policy: the ``scores`` object itself must be present and be an object.
Individual scores that are missing or not numeric default to 0; numeric
scores outside 0-100 are clamped into range.
"""

from __future__ import annotations

import json
import logging
import math
import re
from typing import Any, Dict, List

from .rubrics import SCORE_CATEGORIES
from .schemas import AnalysisResult, AnalysisScores
from ...shared.errors import ParseError, ParseErrorKind

logger = logging.getLogger("prompt_judge.analysis.parser")

REQUIRED_FIELDS = ("promptResult", "response", "scores", "suggestions")

_FENCE_RE = re.compile(r"```[A-Za-z0-9_-]*")
_LEADING_LANG_RE = re.compile(r"^\s*json\b\s*:?", re.IGNORECASE)

# Bound the brace scan on pathological inputs
_MAX_DECODE_ATTEMPTS = 50


def _strip_fences(raw_text: str) -> str:
    text = _FENCE_RE.sub("", raw_text or "")
    text = _LEADING_LANG_RE.sub("", text, count=1)
    return text.strip()


def _decode_object(text: str, raw_text: str) -> Any:
    start = text.find("{")
    end = text.rfind("}")
    if start == -1 or end == -1 or end < start:
        raise ParseError(ParseErrorKind.NO_JSON_FOUND, raw_text=raw_text)

    try:
        return json.loads(text[start:end + 1])
    except ValueError:
        pass

    # Trailing commentary may contain its own braces; decode the first
    # complete object instead of the outermost brace span.
    decoder = json.JSONDecoder()
    position = start
    for _ in range(_MAX_DECODE_ATTEMPTS):
        try:
            value, _end = decoder.raw_decode(text, position)
            if isinstance(value, dict):
                return value
        except ValueError:
            pass
        position = text.find("{", position + 1)
        if position == -1:
            break
    raise ParseError(ParseErrorKind.MALFORMED_JSON, raw_text=raw_text)


def _coerce_text(payload: Dict[str, Any], field: str, raw_text: str) -> str:
    value = payload.get(field)
    if value is None or isinstance(value, (dict, list)):
        raise ParseError(ParseErrorKind.MISSING_FIELD, field=field, raw_text=raw_text)
    return value if isinstance(value, str) else str(value)


def _coerce_score(value: Any) -> float:
    if isinstance(value, bool) or value is None:
        return 0.0
    try:
        numeric = float(value)
    except OverflowError:
        # JSON integers have no upper bound
        return 100.0 if value > 0 else 0.0
    except (TypeError, ValueError):
        return 0.0
    if math.isnan(numeric) or math.isinf(numeric):
        return 0.0
    return max(0.0, min(100.0, numeric))


def _coerce_scores(payload: Dict[str, Any], raw_text: str) -> AnalysisScores:
    scores = payload.get("scores")
    if not isinstance(scores, dict):
        raise ParseError(ParseErrorKind.INVALID_SCORE, field="scores", raw_text=raw_text)
    normalized = {}
    for key in SCORE_CATEGORIES:
        if key not in scores:
            logger.info("Model response missing score %r; defaulting to 0", key)
        normalized[key] = _coerce_score(scores.get(key))
    return AnalysisScores(**normalized)


def _coerce_suggestions(payload: Dict[str, Any], raw_text: str) -> List[str]:
    suggestions = payload.get("suggestions")
    if not isinstance(suggestions, list):
        raise ParseError(ParseErrorKind.MISSING_FIELD, field="suggestions", raw_text=raw_text)
    out: List[str] = []
    for item in suggestions:
        if isinstance(item, str):
            out.append(item)
        elif isinstance(item, (int, float)) and not isinstance(item, bool):
            out.append(str(item))
    return out


def parse_analysis_response(raw_text: str) -> AnalysisResult:
    """Reduce ``raw_text`` to a validated :class:`AnalysisResult`.

    Raises:
        ParseError: with ``kind`` NO_JSON_FOUND, MALFORMED_JSON,
            MISSING_FIELD or INVALID_SCORE.
    """
    raw_text = raw_text or ""
    payload = None
    try:
        # Clean JSON is taken as-is so fences inside string values survive.
        payload = json.loads(raw_text.strip())
    except ValueError:
        pass
    if not isinstance(payload, dict):
        payload = _decode_object(_strip_fences(raw_text), raw_text)
    if not isinstance(payload, dict):
        raise ParseError(ParseErrorKind.MALFORMED_JSON, raw_text=raw_text)

    for field in REQUIRED_FIELDS:
        if field not in payload:
            raise ParseError(ParseErrorKind.MISSING_FIELD, field=field, raw_text=raw_text)

    return AnalysisResult(
        prompt_result=_coerce_text(payload, "promptResult", raw_text),
        response=_coerce_text(payload, "response", raw_text),
        scores=_coerce_scores(payload, raw_text),
        suggestions=_coerce_suggestions(payload, raw_text),
    )
