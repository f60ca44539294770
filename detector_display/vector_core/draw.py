"""Primitive drawing layer: leaf scene objects from projected 2-D geometry."""
from __future__ import annotations

import math
from typing import List, Optional, Sequence

from detector_display.vector_core.models import (
    Fill,
    Font,
    Marker,
    Point2,
    SceneObject,
    Stroke,
    Transform,
)


def _num(value: float) -> str:
    return f"{float(value):.6g}"


def _bounds(points: Sequence[Point2]):
    if not points:
        return None, None
    xs = [p[0] for p in points]
    ys = [p[1] for p in points]
    return (min(xs), max(xs)), (min(ys), max(ys))


def _own(value, default_type):
    return value.model_copy() if value is not None else default_type()


def _sterile_fill() -> Fill:
    return Fill(sterile=True)


def circle(
    id_: str,
    center: Point2,
    radius: float,
    fill: Optional[Fill] = None,
    stroke: Optional[Stroke] = None,
    transform: Optional[Transform] = None,
) -> SceneObject:
    cx, cy = center
    return SceneObject(
        tag="circle",
        id=id_,
        fill=_own(fill, Fill),
        stroke=_own(stroke, Stroke),
        transform=_own(transform, Transform),
        attributes={"cx": _num(cx), "cy": _num(cy), "r": _num(radius)},
        x_range=(cx - radius, cx + radius),
        y_range=(cy - radius, cy + radius),
    )


def line(
    id_: str,
    start: Point2,
    end: Point2,
    stroke: Optional[Stroke] = None,
    transform: Optional[Transform] = None,
) -> SceneObject:
    x_range, y_range = _bounds([start, end])
    return SceneObject(
        tag="line",
        id=id_,
        fill=_sterile_fill(),
        stroke=_own(stroke, Stroke),
        transform=_own(transform, Transform),
        attributes={
            "x1": _num(start[0]),
            "y1": _num(start[1]),
            "x2": _num(end[0]),
            "y2": _num(end[1]),
        },
        x_range=x_range,
        y_range=y_range,
    )


def polygon(
    id_: str,
    points: Sequence[Point2],
    fill: Optional[Fill] = None,
    stroke: Optional[Stroke] = None,
    transform: Optional[Transform] = None,
) -> SceneObject:
    x_range, y_range = _bounds(points)
    return SceneObject(
        tag="polygon",
        id=id_,
        fill=_own(fill, Fill),
        stroke=_own(stroke, Stroke),
        transform=_own(transform, Transform),
        attributes={"points": " ".join(f"{_num(x)},{_num(y)}" for x, y in points)},
        x_range=x_range,
        y_range=y_range,
    )


def _arc_bounds(radius: float, phi_start: float, span: float) -> List[Point2]:
    points = [
        (radius * math.cos(phi_start), radius * math.sin(phi_start)),
        (radius * math.cos(phi_start + span), radius * math.sin(phi_start + span)),
    ]
    # Axis crossings inside the swept range extend the bounds
    quarter = math.ceil(phi_start / (0.5 * math.pi)) * 0.5 * math.pi
    while quarter < phi_start + span:
        points.append((radius * math.cos(quarter), radius * math.sin(quarter)))
        quarter += 0.5 * math.pi
    return points


def arc(
    id_: str,
    radius: float,
    start: Point2,
    end: Point2,
    fill: Optional[Fill] = None,
    stroke: Optional[Stroke] = None,
    transform: Optional[Transform] = None,
) -> SceneObject:
    """Counter-clockwise arc of the circle around the origin from start to end."""
    phi_start = math.atan2(start[1], start[0])
    phi_end = math.atan2(end[1], end[0])
    span = (phi_end - phi_start) % (2 * math.pi)
    large_arc = 1 if span > math.pi else 0
    x_range, y_range = _bounds(_arc_bounds(radius, phi_start, span))
    d = (
        f"M {_num(start[0])} {_num(start[1])} "
        f"A {_num(radius)} {_num(radius)} 0 {large_arc} 1 {_num(end[0])} {_num(end[1])}"
    )
    return SceneObject(
        tag="path",
        id=id_,
        fill=_own(fill, Fill),
        stroke=_own(stroke, Stroke),
        transform=_own(transform, Transform),
        attributes={"d": d},
        x_range=x_range,
        y_range=y_range,
    )


def text(
    id_: str,
    position: Point2,
    lines: Sequence[str],
    font: Optional[Font] = None,
    transform: Optional[Transform] = None,
) -> SceneObject:
    font = font or Font()
    x, y = position
    return SceneObject(
        tag="text",
        id=id_,
        fill=Fill(color=font.color),
        stroke=Stroke(sterile=True),
        transform=_own(transform, Transform),
        attributes={
            "x": _num(x),
            "y": _num(y),
            "font-family": font.family,
            "font-size": _num(font.size),
        },
        text=list(lines),
        x_range=(x, x),
        y_range=(y, y),
    )


def _place(points: Sequence[Point2], at: Point2, angle: float) -> List[Point2]:
    cos_a = math.cos(angle)
    sin_a = math.sin(angle)
    return [
        (at[0] + cos_a * px - sin_a * py, at[1] + sin_a * px + cos_a * py)
        for px, py in points
    ]


def marker(id_: str, at: Point2, marker_: Marker, angle: float = 0.0) -> SceneObject:
    """Arrow head at a point, ``>`` pointing along ``angle`` (radians), ``<`` against it."""
    size = marker_.size
    kind = marker_.kind
    if kind == "none":
        return SceneObject(id=id_)
    if kind == "o":
        return circle(id_, at, 0.5 * size, marker_.fill, marker_.stroke)
    if kind == "|":
        start, end = _place([(0.0, -0.5 * size), (0.0, 0.5 * size)], at, angle)
        return line(id_, start, end, marker_.stroke)

    if kind.startswith("<"):
        angle += math.pi
    head = [(0.0, 0.0), (-size, 0.5 * size), (-size, -0.5 * size)]
    if len(kind) == 1:
        return polygon(id_, _place(head, at, angle), marker_.fill, marker_.stroke)

    group = SceneObject(tag="g", id=id_, fill=_sterile_fill(), stroke=Stroke(sterile=True))
    for ih, offset in enumerate((0.0, -0.5 * size)):
        shifted = [(px + offset, py) for px, py in head]
        group.add_object(
            polygon(f"{id_}_head_{ih}", _place(shifted, at, angle), marker_.fill, marker_.stroke)
        )
    return group


def arrow(
    id_: str,
    start: Point2,
    end: Point2,
    stroke: Optional[Stroke] = None,
    start_marker: Optional[Marker] = None,
    end_marker: Optional[Marker] = None,
) -> SceneObject:
    a = SceneObject(tag="g", id=id_, fill=_sterile_fill(), stroke=Stroke(sterile=True))
    a.add_object(line(f"{id_}_line", start, end, stroke))

    angle = math.atan2(end[1] - start[1], end[0] - start[0])
    if start_marker is not None and start_marker.is_drawn():
        a.add_object(marker(f"{id_}_start_marker", start, start_marker, angle))
    if end_marker is not None and end_marker.is_drawn():
        a.add_object(marker(f"{id_}_end_marker", end, end_marker, angle))
    return a


def from_template(
    id_: str,
    template: SceneObject,
    fill: Optional[Fill] = None,
    stroke: Optional[Stroke] = None,
    transform: Optional[Transform] = None,
) -> SceneObject:
    obj = template.model_copy(deep=True)
    obj.id = id_
    if fill is not None:
        obj.fill = fill.model_copy()
    if stroke is not None:
        obj.stroke = stroke.model_copy()
    if transform is not None:
        obj.transform = transform.model_copy()
    return obj
