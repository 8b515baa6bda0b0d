"""Prompt analysis orchestration: instruction -> model -> parse -> persist."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Optional, Protocol

from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from .instructions import ANALYSIS_SYSTEM_PROMPT, build_analysis_instruction
from .parser import parse_analysis_response
from .rubrics import apply_minimal_prompt_cap, normalize_mode, weighted_overall_score
from .schemas import AnalysisResult, AnalysisScores
from ...models.analysis import Analysis
from ...shared.errors import ParseError, PersistenceError

logger = logging.getLogger("prompt_judge.analysis")

# Raw model text kept in logs when parsing fails
_RAW_LOG_CHARS = 2000


class CompletionClient(Protocol):
    def complete(self, instruction: str, system: str) -> str: ...


@dataclass
class AnalysisOutcome:
    result: AnalysisResult
    mode: str
    overall_score: float
    analysis_id: Optional[int] = None
    persisted: bool = False

    def to_payload(self) -> dict:
        payload = self.result.to_payload()
        payload.update(
            {
                "mode": self.mode,
                "overallScore": self.overall_score,
                "id": self.analysis_id,
                "persisted": self.persisted,
            }
        )
        return payload


def persist_analysis(db: Session, author_id: int, prompt: str, mode: str, result: AnalysisResult) -> Analysis:
    """Store one analysis row for ``author_id``.

    Raises:
        PersistenceError: the write failed; the session has been rolled back.
    """
    scores = result.scores
    analysis = Analysis(
        author_id=author_id,
        prompt=prompt,
        mode=mode,
        style=scores.style,
        grammar=scores.grammar,
        creativity=scores.creativity,
        clarity=scores.clarity,
        relevance=scores.relevance,
        prompt_result=result.prompt_result,
        response=result.response,
        suggestions=list(result.suggestions),
    )
    try:
        db.add(analysis)
        db.commit()
        db.refresh(analysis)
    except SQLAlchemyError as exc:
        db.rollback()
        raise PersistenceError(f"Failed to store analysis for user {author_id}") from exc
    return analysis


def run_analysis(
    db: Session,
    client: CompletionClient,
    prompt: str,
    mode: str,
    author_id: Optional[int] = None,
) -> AnalysisOutcome:
    """Analyze ``prompt`` and, for signed-in callers, persist the result.

    Anonymous analyses are never stored. A storage failure does not fail the
    request: the computed result is returned with ``persisted=False``.
    """
    normalized_mode = normalize_mode(mode)
    prompt = prompt.strip()
    instruction = build_analysis_instruction(prompt, normalized_mode)
    raw_text = client.complete(instruction, system=ANALYSIS_SYSTEM_PROMPT)

    try:
        result = parse_analysis_response(raw_text)
    except ParseError as exc:
        logger.error(
            "Failed to parse analysis response (kind=%s, field=%s, mode=%s): %s",
            exc.kind.value,
            exc.field,
            normalized_mode,
            (raw_text or "")[:_RAW_LOG_CHARS],
        )
        raise

    capped = apply_minimal_prompt_cap(prompt, result.scores.model_dump())
    result = result.model_copy(update={"scores": AnalysisScores(**capped)})
    outcome = AnalysisOutcome(
        result=result,
        mode=normalized_mode,
        overall_score=weighted_overall_score(capped, normalized_mode),
    )

    if author_id is None:
        return outcome

    try:
        analysis = persist_analysis(db, author_id, prompt, normalized_mode, result)
    except PersistenceError:
        logger.exception("Analysis computed but not stored (user_id=%s, mode=%s)", author_id, normalized_mode)
        return outcome

    outcome.analysis_id = analysis.id
    outcome.persisted = True
    logger.info("Stored analysis id=%s user_id=%s mode=%s", analysis.id, author_id, normalized_mode)
    return outcome
