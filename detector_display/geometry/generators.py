"""Contour generators for parametric shapes."""
from __future__ import annotations

import math
from typing import List, Optional

from detector_display.config import get_arc_segments
from detector_display.vector_core.models import Point2


def phi_values(start_phi: float, end_phi: float, segments: Optional[int] = None) -> List[float]:
    """Sample [start_phi, end_phi] with ``segments`` per full turn, both ends included."""
    segments = segments or get_arc_segments()
    span = end_phi - start_phi
    n_seg = max(1, int(abs(span) / (2 * math.pi) * segments))
    step = span / n_seg
    values = [start_phi + i * step for i in range(n_seg)]
    values.append(end_phi)
    return values


def sector_contour(
    inner_r: float,
    outer_r: float,
    start_phi: float,
    end_phi: float,
    segments: Optional[int] = None,
) -> List[Point2]:
    """Closed contour of an angular wedge.

    Inner arc from start to end, then outer arc back from end to start. A zero
    inner radius collapses the inner arc to the origin.
    """
    phis = phi_values(start_phi, end_phi, segments)
    if inner_r > 0:
        contour = [(inner_r * math.cos(phi), inner_r * math.sin(phi)) for phi in phis]
    else:
        contour = [(0.0, 0.0)]
    contour.extend((outer_r * math.cos(phi), outer_r * math.sin(phi)) for phi in reversed(phis))
    return contour
