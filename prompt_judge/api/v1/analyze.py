"""Prompt analysis and analysis-mode endpoints."""

import logging
from typing import Callable, Optional

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from ...components.analysis.rubrics import (
    SCORE_CATEGORIES,
    available_modes,
    get_mode_examples,
    get_mode_rubric,
    get_mode_weights,
    get_prompt_template,
    normalize_mode,
)
from ...components.analysis.schemas import AnalyzeRequest, AnalyzeResponse
from ...components.analysis.service import run_analysis
from ...components.integrations.claude.service import AnalysisModelClient, get_analysis_client_factory
from ...deps import get_optional_user
from ...models.user import User
from ...platform.config import settings
from ...platform.database import get_db
from ...shared.errors import InvalidInputError

logger = logging.getLogger("prompt_judge.analysis.api")

router = APIRouter(tags=["Analysis"])


@router.post("/analyze", response_model=AnalyzeResponse)
def analyze_prompt(
    data: AnalyzeRequest,
    db: Session = Depends(get_db),
    current_user: Optional[User] = Depends(get_optional_user),
    client_factory: Callable[[], AnalysisModelClient] = Depends(get_analysis_client_factory),
):
    """Score a prompt. Signed-in callers get the analysis stored in their history."""
    prompt = (data.prompt or "").strip()
    if not prompt:
        raise InvalidInputError("Prompt is required")
    if len(prompt) > settings.ANALYSIS_PROMPT_MAX_CHARS:
        raise InvalidInputError(
            f"Prompt must be at most {settings.ANALYSIS_PROMPT_MAX_CHARS} characters"
        )
    if not (data.mode or "").strip():
        raise InvalidInputError("Mode is required")

    mode = normalize_mode(data.mode)
    if get_mode_rubric(mode) is None:
        logger.info("Analyzing with unrecognized mode=%s", mode)

    outcome = run_analysis(
        db,
        client_factory(),
        prompt,
        mode,
        author_id=current_user.id if current_user else None,
    )
    return outcome.to_payload()


@router.get("/modes")
def list_modes():
    modes = []
    for mode in available_modes():
        rubric = get_mode_rubric(mode)
        modes.append({"mode": mode, "label": rubric.label, "weights": dict(rubric.weights)})
    return {"modes": modes, "categories": list(SCORE_CATEGORIES)}


@router.get("/modes/{mode}")
def get_mode(mode: str):
    """Template and examples for a mode. Unknown modes return empty guidance."""
    rubric = get_mode_rubric(mode)
    return {
        "mode": normalize_mode(mode),
        "label": rubric.label if rubric else None,
        "criteria": rubric.criteria if rubric else "",
        "template": get_prompt_template(mode),
        "examples": get_mode_examples(mode),
        "weights": get_mode_weights(mode),
    }
