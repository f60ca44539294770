"""Masking compositor: white keeps, black removes."""
from __future__ import annotations

from typing import Optional

from detector_display.vector_core.models import Fill, SceneObject, Stroke
from detector_display.vector_core.svg_export import id_to_url

MASK_SUFFIX = "_mask"


def _as_silhouette(obj: SceneObject, color: str) -> SceneObject:
    obj.fill = Fill(sterile=True)
    obj.stroke = Stroke(sterile=True)
    obj.attributes["fill"] = color
    return obj


def build_mask(
    mask_id: str,
    outer: SceneObject,
    inner: SceneObject,
    stroke: Optional[Stroke] = None,
) -> SceneObject:
    mask = SceneObject(
        tag="mask",
        id=mask_id,
        fill=Fill(sterile=True),
        stroke=stroke.model_copy() if stroke is not None else Stroke(sterile=True),
    )
    # outer first, the inner silhouette is painted over it
    mask.add_object(_as_silhouette(outer, "white"))
    mask.add_object(_as_silhouette(inner, "black"))
    return mask


def attach_mask(
    target: SceneObject,
    outer: SceneObject,
    inner: SceneObject,
    stroke: Optional[Stroke] = None,
) -> SceneObject:
    """Hoist a mask into ``target.definitions`` and reference it by url."""
    mask_id = target.id + MASK_SUFFIX
    mask = build_mask(mask_id, outer, inner, stroke)
    # a later mask on the same object replaces the earlier one
    target.definitions = [d for d in target.definitions if d.id != mask_id]
    target.definitions.append(mask)
    target.attributes["mask"] = id_to_url(mask_id)
    return mask
