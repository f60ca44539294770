"""Runtime configuration helpers for the display engine."""
from __future__ import annotations

import os
from typing import Optional

DEFAULT_ARC_SEGMENTS = 72
DEFAULT_LABEL_PRECISION = 3

_TRUTHY = {"1", "true", "yes", "on"}


def _get_env(name: str, default: Optional[str] = None) -> Optional[str]:
    return os.getenv(name, default)


def _get_int(name: str, default: int) -> int:
    raw = _get_env(name)
    if raw is None or raw.strip() == "":
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


def is_strict_mode() -> bool:
    """Raise on render degradations instead of recording them."""
    return (_get_env("DETECTOR_DISPLAY_STRICT") or "").strip().lower() in _TRUTHY


def get_arc_segments() -> int:
    """Segments per full turn used when sampling sector contours."""
    return _get_int("DETECTOR_DISPLAY_ARC_SEGMENTS", DEFAULT_ARC_SEGMENTS)


def get_label_precision() -> int:
    return _get_int("DETECTOR_DISPLAY_LABEL_PRECISION", DEFAULT_LABEL_PRECISION)


def config_snapshot() -> dict:
    """Return the env-driven config currently in effect."""
    return {
        "strict": is_strict_mode(),
        "arc_segments": get_arc_segments(),
        "label_precision": get_label_precision(),
    }
