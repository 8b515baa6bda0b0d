"""Builds the natural-language instruction sent to the analysis model.

Pure string construction: no network access, fully unit-testable.
"""

from __future__ import annotations

from .rubrics import SCORE_CATEGORIES, SCORING_BANDS, get_mode_rubric, normalize_mode
from ...shared.errors import InvalidInputError

ANALYSIS_SYSTEM_PROMPT = (
    "You are a strict, fair prompt-writing coach. You answer the user's prompt, "
    "then grade the prompt itself. Respond ONLY with a single valid JSON object."
)

ANALYSIS_INSTRUCTION = """Analyze the following prompt and provide a comprehensive evaluation.

PROMPT:
\"\"\"
{prompt}
\"\"\"

MODE: {mode}
{mode_section}
Complete three tasks.

1. DIRECT ANSWER: Answer the prompt itself as a helpful assistant would.

2. DEEP ANALYSIS of the prompt (not of your answer):
- Strengths: key strengths and effective techniques used (if any)
- Areas for Improvement: weaknesses and missed opportunities
- Mode-Specific Analysis ({mode}): how well the prompt fits the chosen mode and audience
- Scoring Breakdown: a short justification for each category score

3. SCORES: score each category from 0 to 100.
IMPORTANT: Be very strict with scoring. A simple or minimal prompt should receive low scores.
For example, a one-word prompt like "hi" should score below 30 in every category.
{weights_section}
{bands_section}

Provide SPECIFIC, actionable suggestions for improving the prompt. Do NOT use placeholders.

Return a JSON response with EXACTLY this structure (no markdown, no explanation, ONLY valid JSON):
{{
    "promptResult": "<your direct answer to the prompt>",
    "response": "<the deep analysis as plain text>",
    "scores": {{
        "style": <0-100>,
        "grammar": <0-100>,
        "creativity": <0-100>,
        "clarity": <0-100>,
        "relevance": <0-100>
    }},
    "suggestions": ["<suggestion 1>", "<suggestion 2>"]
}}
"""


def _format_mode_section(mode: str) -> str:
    rubric = get_mode_rubric(mode)
    if rubric is None:
        return ""
    examples = "\n".join(f"- {example}" for example in rubric.examples)
    return (
        f"\nMODE CRITERIA ({rubric.label}): {rubric.criteria}\n"
        f"Examples of strong {rubric.mode} prompts:\n{examples}\n"
    )


def _format_weights_section(mode: str) -> str:
    rubric = get_mode_rubric(mode)
    if rubric is None:
        return ""
    lines = [
        f"- {category.capitalize()}: {round(rubric.weights[category] * 100)}%"
        for category in SCORE_CATEGORIES
    ]
    return "\nCategory weights for this mode:\n" + "\n".join(lines) + "\n"


def _format_bands_section() -> str:
    blocks = []
    for category in SCORE_CATEGORIES:
        bands = "\n".join(f"  - {band}" for band in SCORING_BANDS[category])
        blocks.append(f"{category.capitalize()} scoring criteria:\n{bands}")
    return "\n".join(blocks)


def build_analysis_instruction(prompt: str, mode: str | None) -> str:
    """Compose the model instruction for ``prompt`` graded under ``mode``.

    An unknown mode is not an error: the instruction is built without
    mode criteria, weights or examples.
    """
    text = (prompt or "").strip()
    if not text:
        raise InvalidInputError("Prompt is required")
    normalized = normalize_mode(mode) or "general"
    return ANALYSIS_INSTRUCTION.format(
        prompt=text,
        mode=normalized,
        mode_section=_format_mode_section(normalized),
        weights_section=_format_weights_section(normalized),
        bands_section=_format_bands_section(),
    )
