"""Pseudorapidity reference lines for the z-r view."""
from __future__ import annotations

import math
from typing import List, Optional, Sequence

from pydantic import BaseModel, Field

from detector_display.config import get_label_precision
from detector_display.vector_core import draw
from detector_display.vector_core.models import Font, Point2, SceneObject, Stroke, Transform


class EtaTrack(BaseModel):
    """A set of eta values drawn with one stroke, optionally labelled."""

    values: List[float] = Field(default_factory=list)
    stroke: Stroke = Field(default_factory=Stroke)
    label: bool = False
    font: Font = Field(default_factory=Font)


def theta_from_eta(eta: float) -> float:
    return 2.0 * math.atan(math.exp(-eta))


def eta_line_end(theta: float, z_range: float, r_range: float) -> Point2:
    """Where the line at polar angle theta leaves the (z, r) frame."""
    theta_cut = math.atan2(r_range, z_range)
    if theta < theta_cut:
        return (z_range, z_range * math.tan(theta))
    return (r_range / math.tan(theta), r_range)


def format_eta(eta: float) -> str:
    return f"{eta:.{get_label_precision()}g}"


def render_eta_lines(
    id_: str,
    z_range: float,
    r_range: float,
    tracks: Sequence[EtaTrack],
    transform: Optional[Transform] = None,
) -> SceneObject:
    group = SceneObject(tag="g", id=id_, transform=transform or Transform())

    for it, track in enumerate(tracks):
        for ie, eta in enumerate(track.values):
            theta = theta_from_eta(eta)
            end = eta_line_end(theta, z_range, r_range)
            uid = f"{it}_{ie}"
            group.add_object(draw.line(f"{id_}eta_line_{uid}", (0.0, 0.0), end, track.stroke))

            if not track.label:
                continue
            half_size = 0.5 * track.font.size
            label_x = end[0] + math.cos(theta) * half_size
            label_y = end[1] + math.sin(theta) * half_size
            if eta == 0.0:
                # keep the label off the vertical line
                label_x -= half_size
            group.add_object(
                draw.text(f"{id_}eta_label_{uid}", (label_x, label_y), [format_eta(eta)], track.font)
            )
    return group
