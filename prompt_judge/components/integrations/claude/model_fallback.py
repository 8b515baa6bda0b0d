from __future__ import annotations

from ....platform.config import settings

PRIMARY_HAIKU_MODEL = "claude-3-5-haiku-latest"
SNAPSHOT_HAIKU_MODEL = "claude-3-5-haiku-20241022"
LEGACY_HAIKU_MODEL = "claude-3-haiku-20240307"

_HAIKU_FAMILY = (PRIMARY_HAIKU_MODEL, SNAPSHOT_HAIKU_MODEL, LEGACY_HAIKU_MODEL)


def candidate_models_for(model: str | None, extra: list[str] | None = None) -> list[str]:
    """Ordered, de-duplicated list of models to try for an analysis call.

    The configured model comes first, then any configured fallbacks, then the
    Haiku aliases when the configured model is one of them.
    """
    candidates: list[str] = []

    def _add(value: str | None) -> None:
        cleaned = (value or "").strip()
        if cleaned and cleaned not in candidates:
            candidates.append(cleaned)

    _add(model or PRIMARY_HAIKU_MODEL)
    for value in settings.claude_fallback_models if extra is None else extra:
        _add(value)
    if candidates[0].lower() in _HAIKU_FAMILY:
        for value in _HAIKU_FAMILY:
            _add(value)
    return candidates


def is_model_not_found_error(exc: Exception) -> bool:
    text = str(exc or "").lower()
    if not text:
        return False
    return (
        "not_found_error" in text
        or ("model" in text and "not found" in text)
        or ("error code: 404" in text and "model" in text)
    )
