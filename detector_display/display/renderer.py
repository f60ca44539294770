"""Renderers for surfaces, portal links, portals, volumes and detectors.

Shape rendering dispatches on the pair (surface kind, view kind). Generic
surface kinds are drawn from their projected vertices in every view; pairs
without a rule render as an undefined object and are recorded on the report.
"""
from __future__ import annotations

import logging
import math
import sys
from typing import Callable, Dict, Optional, Tuple

from pydantic import ValidationError

from detector_display.common.errors import (
    GeometryError,
    RenderReport,
    UnsupportedCombinationError,
    UnsupportedFeatureError,
    record_issue,
)
from detector_display.display.masks import attach_mask
from detector_display.geometry.generators import sector_contour
from detector_display.geometry.schemas import (
    BOUND_PHI_CENTER,
    BOUND_PHI_HALF,
    BOUND_R_INNER,
    BOUND_R_OUTER,
    BOUND_Z_CENTER,
    BOUND_Z_HALF,
    CYLINDER_BOUND_COUNT,
    Detector,
    Link,
    Portal,
    Surface,
    SurfaceKind,
    Volume,
    VolumeKind,
)
from detector_display.geometry.views import View, ViewKind
from detector_display.vector_core import draw
from detector_display.vector_core.models import Fill, SceneObject, Stroke, Transform

logger = logging.getLogger(__name__)

FULL_TURN_TOLERANCE = 5 * sys.float_info.epsilon

SurfaceRule = Callable[[str, Surface, View, Transform, Optional[RenderReport]], SceneObject]


def is_full_turn(opening: Tuple[float, float]) -> bool:
    return abs((opening[1] - opening[0]) - 2 * math.pi) <= FULL_TURN_TOLERANCE


def _sterile_group(id_: str) -> SceneObject:
    return SceneObject(tag="g", id=id_, fill=Fill(sterile=True), stroke=Stroke(sterile=True))


# --- Shape rules ---

def _disc_x_y(id_, surface, view, transform, report):
    inner_r, outer_r = surface.radii
    if not is_full_turn(surface.opening):
        contour = sector_contour(inner_r, outer_r, surface.opening[0], surface.opening[1])
        return draw.polygon(id_, contour, surface.fill, surface.stroke, transform)

    obj = draw.circle(id_, (0.0, 0.0), outer_r, surface.fill, surface.stroke, transform)
    if inner_r > 0:
        # mask content lives in the user space of the masked object
        local = Transform()
        outer = render_surface(
            id_ + "_mask_surface_outer",
            surface.model_copy(update={"radii": (0.0, outer_r), "transform": local}),
            view,
            draw_boolean=False,
            report=report,
        )
        inner = render_surface(
            id_ + "_mask_surface_inner",
            surface.model_copy(update={"radii": (0.0, inner_r), "transform": local}),
            view,
            draw_boolean=False,
            report=report,
        )
        attach_mask(obj, outer, inner)
    return obj


def _disc_z_r(id_, surface, view, transform, report):
    z = surface.zparameters[0]
    inner_r, outer_r = surface.radii
    return draw.line(id_, (z, inner_r), (z, outer_r), surface.stroke, transform)


def _cylinder_x_y(id_, surface, view, transform, report):
    # Cylinders are hollow shells in this view
    r = surface.radii[1]
    if is_full_turn(surface.opening):
        return draw.circle(id_, (0.0, 0.0), r, Fill(), surface.stroke, transform)
    phi_min, phi_max = surface.opening
    start = (r * math.cos(phi_min), r * math.sin(phi_min))
    end = (r * math.cos(phi_max), r * math.sin(phi_max))
    return draw.arc(id_, r, start, end, Fill(), surface.stroke, transform)


def _cylinder_z_r(id_, surface, view, transform, report):
    z, z_half = surface.zparameters
    r = surface.radii[1]
    return draw.line(id_, (z - z_half, r), (z + z_half, r), surface.stroke, transform)


def _generic_polygon(id_, surface, view, transform, report):
    return draw.polygon(id_, view(surface.vertices), surface.fill, surface.stroke, transform)


_SURFACE_RULES: Dict[Tuple[SurfaceKind, ViewKind], SurfaceRule] = {
    (SurfaceKind.DISC, ViewKind.X_Y): _disc_x_y,
    (SurfaceKind.DISC, ViewKind.Z_R): _disc_z_r,
    (SurfaceKind.CYLINDER, ViewKind.X_Y): _cylinder_x_y,
    (SurfaceKind.CYLINDER, ViewKind.Z_R): _cylinder_z_r,
}


def surface_rule(kind: SurfaceKind, view_kind: ViewKind) -> Optional[SurfaceRule]:
    if kind.is_generic:
        return _generic_polygon
    return _SURFACE_RULES.get((kind, view_kind))


def _template_transform(surface: Surface, apply_scale: bool, as_template: bool) -> Transform:
    transform = surface.transform.model_copy()
    if as_template:
        transform = transform.without_placement()
    if not apply_scale:
        transform.scale_x = 1.0
        transform.scale_y = 1.0
    return transform


def render_surface(
    id_: str,
    surface: Surface,
    view: View,
    draw_boolean: bool = True,
    full_size: bool = False,
    apply_scale: bool = False,
    as_template: bool = False,
    report: Optional[RenderReport] = None,
) -> SceneObject:
    """Draw one surface in the given view.

    Args:
        id_: identifier of the produced object, prefixes all sub-objects
        surface: the surface to draw
        view: the active view
        draw_boolean: attach the boolean subtraction mask (x-y view only)
        full_size: draw without the surface translation and rotation
        apply_scale: keep the scale of a template surface
        as_template: draw a template surface anchored at the origin
        report: sink for render degradations
    """
    if surface.template_object is not None and surface.template_object.is_defined():
        return draw.from_template(
            id_,
            surface.template_object,
            surface.fill,
            surface.stroke,
            _template_transform(surface, apply_scale, as_template),
        )

    transform = Transform() if full_size else surface.transform.model_copy()
    transform.scale_x = surface.transform.scale_x
    transform.scale_y = surface.transform.scale_y

    rule = surface_rule(surface.kind, view.kind)
    if rule is None:
        record_issue(
            report,
            UnsupportedCombinationError(
                f"No rule to draw a {surface.kind.value} surface in the {view.kind.value} view",
                id_,
            ),
        )
        return SceneObject(id=id_)

    logger.debug("Drawing %s surface %s in %s view", surface.kind.value, id_, view.kind.value)
    obj = rule(id_, surface, view, transform, report)

    if draw_boolean and surface.has_subtraction():
        if view.kind != ViewKind.X_Y:
            record_issue(
                report,
                UnsupportedFeatureError(
                    f"Boolean subtraction is not drawn in the {view.kind.value} view", id_
                ),
            )
        else:
            # the sub-surface is placed relative to the masked object
            outer = render_surface(
                id_ + "_mask_surface_outer",
                surface.model_copy(update={"transform": Transform()}),
                view,
                draw_boolean=False,
                report=report,
            )
            inner = render_surface(
                id_ + "_mask_surface_inner",
                surface.boolean_surface[0],
                view,
                draw_boolean=False,
                report=report,
            )
            attach_mask(obj, outer, inner, surface.stroke)
    return obj


def render_link(
    id_: str,
    portal: Portal,
    link: Link,
    view: View,
) -> SceneObject:
    """Draw a portal link as an arrow between its projected end points."""
    group = SceneObject(tag="g", id=id_)
    start, end = view([link.start, link.end])
    group.add_object(
        draw.arrow(id_ + "_arrow", start, end, link.stroke, link.start_marker, link.end_marker)
    )
    return group


def render_portal(
    id_: str,
    portal: Portal,
    view: View,
    report: Optional[RenderReport] = None,
) -> SceneObject:
    group = _sterile_group(id_)
    group.add_object(render_surface(id_ + "_surface", portal.surface, view, report=report))
    for il, link in enumerate(portal.volume_links):
        group.add_object(render_link(f"{id_}_volume_link_{il}", portal, link, view))
    return group


def _cylinder_volume_shape(
    id_: str,
    volume: Volume,
    view: View,
    report: Optional[RenderReport],
) -> Optional[SceneObject]:
    bounds = volume.bound_values
    ri = bounds[BOUND_R_INNER]
    ro = bounds[BOUND_R_OUTER]
    zp = bounds[BOUND_Z_CENTER]
    zh = bounds[BOUND_Z_HALF]
    ps = bounds[BOUND_PHI_HALF]
    ap = bounds[BOUND_PHI_CENTER]

    if view.kind == ViewKind.X_Y:
        try:
            surface = Surface(
                name=id_ + "_volume",
                kind=SurfaceKind.DISC,
                radii=(ri, ro),
                opening=(ap - ps, ap + ps),
                zparameters=(zp, zh),
                fill=volume.fill,
                stroke=volume.stroke,
                transform=volume.transform,
            )
        except ValidationError as exc:
            record_issue(report, GeometryError(f"Invalid cylinder bounds: {exc}", id_))
            return None
        return render_surface(surface.name, surface, view, report=report)

    if view.kind == ViewKind.Z_R:
        corners = [(zp - zh, ri), (zp + zh, ri), (zp + zh, ro), (zp - zh, ro)]
        return draw.polygon(id_ + "_volume", corners, volume.fill, volume.stroke, volume.transform)

    record_issue(
        report,
        UnsupportedCombinationError(
            f"No rule to draw a cylinder volume in the {view.kind.value} view", id_
        ),
    )
    return None


def render_volume(
    id_: str,
    volume: Volume,
    view: View,
    draw_portals: bool = True,
    report: Optional[RenderReport] = None,
) -> SceneObject:
    group = _sterile_group(id_)

    shape: Optional[SceneObject] = None
    if volume.vertices:
        shape = draw.polygon(
            id_ + "_volume", view(volume.vertices), volume.fill, volume.stroke, volume.transform
        )
    elif volume.kind == VolumeKind.CYLINDER and len(volume.bound_values) >= CYLINDER_BOUND_COUNT:
        shape = _cylinder_volume_shape(id_, volume, view, report)
    else:
        record_issue(
            report,
            GeometryError(
                f"Volume has no vertices and {len(volume.bound_values)} bound values,"
                f" no shape drawn",
                id_,
            ),
        )
    if shape is not None:
        group.add_object(shape)

    if draw_portals:
        for ip, portal in enumerate(volume.portals):
            group.add_object(render_portal(f"{id_}_portal_{ip}", portal, view, report))
    return group


def render_detector(
    id_: str,
    detector: Detector,
    view: View,
    report: Optional[RenderReport] = None,
) -> SceneObject:
    """Draw all volumes by ascending depth, then every distinct portal once."""
    group = _sterile_group(id_)

    volumes = sorted(detector.volumes, key=lambda v: v.depth_level)
    for volume in volumes:
        group.add_object(render_volume(volume.name, volume, view, draw_portals=False, report=report))

    # Shared portals are keyed by name, the last volume listing one wins
    portals: Dict[str, Portal] = {}
    for volume in volumes:
        for portal in volume.portals:
            previous = portals.get(portal.name)
            if previous is not None and previous != portal:
                logger.debug(
                    "Portal %s differs between volumes, keeping the one of %s",
                    portal.name,
                    volume.name,
                )
            portals[portal.name] = portal

    for name in sorted(portals):
        group.add_object(render_portal(name, portals[name], view, report))
    return group
