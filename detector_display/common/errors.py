"""Error taxonomy and render diagnostics for the display engine.

Rendering degrades instead of aborting: a malformed or unsupported entity
yields an empty or partial scene object, and the degradation is recorded on a
``RenderReport`` so callers can inspect it:

{
  "strict": false,
  "issues": [
    {"code": "unsupported_combination", "message": "...", "object_id": "..."}
  ]
}
"""
from __future__ import annotations

import logging
from typing import List, Literal, Optional

from pydantic import BaseModel, Field

from detector_display.config import is_strict_mode

logger = logging.getLogger(__name__)

IssueCode = Literal["geometry", "unsupported_combination", "unsupported_feature"]


class DisplayError(Exception):
    """Base class for display engine errors."""

    code: IssueCode = "geometry"

    def __init__(self, message: str, object_id: Optional[str] = None):
        super().__init__(message)
        self.message = message
        self.object_id = object_id


class GeometryError(DisplayError, ValueError):
    """Malformed radii or insufficient bound values."""

    code: IssueCode = "geometry"


class UnsupportedCombinationError(DisplayError):
    """No rendering rule exists for a shape kind in the active view."""

    code: IssueCode = "unsupported_combination"


class UnsupportedFeatureError(DisplayError):
    """A feature was requested in a view that does not support it."""

    code: IssueCode = "unsupported_feature"


class RenderIssue(BaseModel):
    code: IssueCode
    message: str
    object_id: Optional[str] = None


class RenderReport(BaseModel):
    """Collects degradations observed during one render call."""

    strict: bool = Field(default_factory=is_strict_mode)
    issues: List[RenderIssue] = Field(default_factory=list)

    def record(self, error: DisplayError) -> None:
        """Log the error and keep it, or raise it in strict mode."""
        logger.warning("Render degradation [%s] %s: %s", error.code, error.object_id, error.message)
        if self.strict:
            raise error
        self.issues.append(
            RenderIssue(code=error.code, message=error.message, object_id=error.object_id)
        )

    def codes(self) -> List[str]:
        return [issue.code for issue in self.issues]

    @property
    def ok(self) -> bool:
        return not self.issues


def record_issue(report: Optional[RenderReport], error: DisplayError) -> None:
    """Record on the given report, or just log when the caller passed none."""
    if report is None:
        logger.warning("Render degradation [%s] %s: %s", error.code, error.object_id, error.message)
        if is_strict_mode():
            raise error
        return
    report.record(error)
