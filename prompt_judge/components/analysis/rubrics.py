"""Per-mode scoring rubrics: criteria, category weights, examples, templates.

Single source of truth for everything the analysis pipeline knows about a
mode. The table is built once at import and exposed read-only, so concurrent
requests can share it without coordination.
"""

from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Dict, List, Mapping, Optional

SCORE_CATEGORIES = ("style", "grammar", "creativity", "clarity", "relevance")

# Shared 0-100 bands per category, quoted verbatim in the model instruction.
SCORING_BANDS: Mapping[str, tuple] = MappingProxyType({
    "style": (
        "0-20: Minimal effort, single words, or basic greetings",
        "21-40: Basic phrases with little style consideration",
        "41-60: Clear writing with some style elements",
        "61-80: Well-crafted with consistent tone and good expression",
        "81-100: Exceptional writing with masterful style",
    ),
    "grammar": (
        "0-20: Incomplete sentences or single words",
        "21-40: Basic complete sentences with potential errors",
        "41-60: Proper sentences with standard grammar",
        "61-80: Well-structured with varied sentence patterns",
        "81-100: Perfect grammar with sophisticated structure",
    ),
    "creativity": (
        "0-20: Common words/phrases, no creative elements",
        "21-40: Basic creative attempt",
        "41-60: Some original elements",
        "61-80: Unique and engaging approach",
        "81-100: Highly innovative and original",
    ),
    "clarity": (
        "0-20: Unclear or too brief to convey meaning",
        "21-40: Basic meaning conveyed but lacks detail",
        "41-60: Clear meaning with adequate detail",
        "61-80: Very clear with good detail and organization",
        "81-100: Exceptionally clear and well-organized",
    ),
    "relevance": (
        "0-20: Minimal relevance to mode or purpose",
        "21-40: Basic relevance but lacks focus",
        "41-60: Relevant with room for improvement",
        "61-80: Well-aligned with mode and purpose",
        "81-100: Perfectly aligned with exceptional focus",
    ),
})

# Prompts this short are scored as minimal effort no matter what the model says.
MINIMAL_PROMPT_MAX_WORDS = 2
MINIMAL_PROMPT_SCORE_CAP = 29.0


@dataclass(frozen=True)
class ModeRubric:
    mode: str
    label: str
    criteria: str
    weights: Mapping[str, float]
    examples: tuple
    template: str


def _rubric(mode: str, label: str, criteria: str, weights: Dict[str, float], examples: List[str], template: str) -> ModeRubric:
    if set(weights) != set(SCORE_CATEGORIES):
        raise ValueError(f"Rubric {mode!r} must weight exactly {SCORE_CATEGORIES}")
    if abs(sum(weights.values()) - 1.0) > 1e-9:
        raise ValueError(f"Rubric {mode!r} weights must sum to 1.0")
    return ModeRubric(
        mode=mode,
        label=label,
        criteria=criteria,
        weights=MappingProxyType(dict(weights)),
        examples=tuple(examples),
        template=template,
    )


_RUBRICS = {
    "casual": _rubric(
        "casual",
        "Casual",
        "Friendly, conversational prompts. Reward an approachable tone, plain "
        "language and a clear everyday question; penalize jargon and vagueness.",
        {"style": 0.25, "grammar": 0.15, "creativity": 0.15, "clarity": 0.30, "relevance": 0.15},
        [
            "Explain why the sky is blue in simple terms",
            "What makes ice cream so delicious?",
            "Why do cats purr?",
        ],
        "Topic: [what you want to talk about]\n"
        "Audience: [who the answer is for, e.g. a curious friend]\n"
        "Tone: [friendly, informal, playful]\n"
        "Question: [the one thing you want answered]\n"
        "Length: [a short paragraph, a few bullet points]",
    ),
    "technical": _rubric(
        "technical",
        "Technical",
        "Precise, detailed technical requests. Reward correct terminology, "
        "explicit scope, constraints and expected depth; penalize ambiguity.",
        {"style": 0.10, "grammar": 0.15, "creativity": 0.10, "clarity": 0.35, "relevance": 0.30},
        [
            "Explain the principles of quantum computing",
            "How does blockchain technology work?",
            "Describe the process of photosynthesis in detail",
        ],
        "Subject: [the system, concept or technology]\n"
        "Context: [what you already know or are working on]\n"
        "Scope: [which aspects to cover and which to skip]\n"
        "Constraints: [versions, platforms, assumptions]\n"
        "Output format: [step-by-step explanation, comparison table, code sample]",
    ),
    "creative": _rubric(
        "creative",
        "Creative",
        "Imaginative, open-ended requests. Reward originality, vivid framing "
        "and a clear creative brief; penalize generic or cliched setups.",
        {"style": 0.25, "grammar": 0.10, "creativity": 0.35, "clarity": 0.15, "relevance": 0.15},
        [
            "Write a story about a time-traveling coffee cup",
            "Describe a world where colors have sounds",
            "Create a tale about a library that comes alive at night",
        ],
        "Premise: [the central idea or 'what if']\n"
        "Setting: [where and when it takes place]\n"
        "Characters: [who is involved]\n"
        "Mood: [whimsical, eerie, hopeful]\n"
        "Form: [short story, poem, scene, description]",
    ),
}

MODE_RUBRICS: Mapping[str, ModeRubric] = MappingProxyType(_RUBRICS)

_EQUAL_WEIGHTS: Mapping[str, float] = MappingProxyType(
    {category: 1.0 / len(SCORE_CATEGORIES) for category in SCORE_CATEGORIES}
)


def normalize_mode(mode: Optional[str]) -> str:
    return (mode or "").strip().lower()


def available_modes() -> List[str]:
    return list(MODE_RUBRICS.keys())


def get_mode_rubric(mode: Optional[str]) -> Optional[ModeRubric]:
    return MODE_RUBRICS.get(normalize_mode(mode))


def get_prompt_template(mode: Optional[str]) -> str:
    """Structural template for the mode, or "" when no guidance is available."""
    rubric = get_mode_rubric(mode)
    return rubric.template if rubric else ""


def get_mode_examples(mode: Optional[str]) -> List[str]:
    rubric = get_mode_rubric(mode)
    return list(rubric.examples) if rubric else []


def get_mode_weights(mode: Optional[str]) -> Dict[str, float]:
    rubric = get_mode_rubric(mode)
    return dict(rubric.weights if rubric else _EQUAL_WEIGHTS)


def weighted_overall_score(scores: Mapping[str, float], mode: Optional[str]) -> float:
    """Mode-weighted overall score; equal weights when the mode is unknown."""
    weights = get_mode_weights(mode)
    total = sum(float(scores.get(category, 0.0) or 0.0) * weight for category, weight in weights.items())
    return round(max(0.0, min(100.0, total)), 2)


def is_minimal_prompt(prompt: str) -> bool:
    return len((prompt or "").split()) <= MINIMAL_PROMPT_MAX_WORDS


def apply_minimal_prompt_cap(prompt: str, scores: Mapping[str, float]) -> Dict[str, float]:
    """Cap every score of a minimal prompt (e.g. "hi") below 30."""
    capped = {category: float(scores.get(category, 0.0) or 0.0) for category in SCORE_CATEGORIES}
    if not is_minimal_prompt(prompt):
        return capped
    return {category: min(value, MINIMAL_PROMPT_SCORE_CAP) for category, value in capped.items()}
