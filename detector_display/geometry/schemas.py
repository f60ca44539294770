"""Detector geometry schemas: surfaces, portals, volumes, detectors."""
from __future__ import annotations

import math
from enum import Enum
from typing import List, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

from detector_display.common.errors import GeometryError
from detector_display.vector_core.models import Fill, Marker, SceneObject, Stroke, Transform

Point3 = Tuple[float, float, float]


class SurfaceKind(str, Enum):
    DISC = "disc"
    CYLINDER = "cylinder"
    ANNULUS = "annulus"
    POLYGON = "polygon"
    RECTANGLE = "rectangle"
    TRAPEZ = "trapez"
    DIAMOND = "diamond"
    STRAW = "straw"

    @property
    def is_generic(self) -> bool:
        """Generic kinds are drawn from their vertices in every view."""
        return self not in (SurfaceKind.DISC, SurfaceKind.CYLINDER)


class BooleanOperation(str, Enum):
    NONE = "none"
    SUBTRACTION = "subtraction"


class Surface(BaseModel):
    name: str = ""
    kind: SurfaceKind = SurfaceKind.POLYGON

    # Parametric description (disc, cylinder)
    radii: Tuple[float, float] = (0.0, 0.0)  # inner, outer
    opening: Tuple[float, float] = (-math.pi, math.pi)  # phi min, phi max
    zparameters: Tuple[float, float] = (0.0, 0.0)  # z center, z half length

    # Generic description
    vertices: List[Point3] = Field(default_factory=list)

    boolean_surface: List[Surface] = Field(default_factory=list)
    boolean_operation: BooleanOperation = BooleanOperation.NONE

    # Pre-rendered object reused verbatim
    template_object: Optional[SceneObject] = None

    fill: Fill = Field(default_factory=Fill)
    stroke: Stroke = Field(default_factory=Stroke)
    transform: Transform = Field(default_factory=Transform)

    @field_validator("radii")
    @classmethod
    def radii_ordered(cls, value):
        inner, outer = value
        if inner < 0 or outer < 0:
            raise GeometryError(f"Radii cannot be negative: {value}")
        if inner > outer:
            raise GeometryError(f"Inner radius exceeds outer radius: {value}")
        return value

    @field_validator("boolean_surface")
    @classmethod
    def single_boolean_surface(cls, value):
        if len(value) > 1:
            raise GeometryError("A surface carries at most one boolean sub-surface")
        return value

    def has_subtraction(self) -> bool:
        return (
            len(self.boolean_surface) == 1
            and self.boolean_operation == BooleanOperation.SUBTRACTION
        )


class Link(BaseModel):
    """Directed connector from a portal into a neighbouring volume."""

    start: Point3 = (0.0, 0.0, 0.0)
    end: Point3 = (0.0, 0.0, 0.0)
    stroke: Stroke = Field(default_factory=Stroke)
    start_marker: Marker = Field(default_factory=Marker)
    end_marker: Marker = Field(default_factory=lambda: Marker(kind=">"))


class Portal(BaseModel):
    name: str
    surface: Surface = Field(default_factory=Surface)
    volume_links: List[Link] = Field(default_factory=list)


class VolumeKind(str, Enum):
    CYLINDER = "cylinder"
    GENERIC = "generic"


# Cylinder bound value layout
BOUND_R_INNER = 0
BOUND_R_OUTER = 1
BOUND_Z_CENTER = 2
BOUND_Z_HALF = 3
BOUND_PHI_HALF = 4
BOUND_PHI_CENTER = 5
CYLINDER_BOUND_COUNT = 6


class Volume(BaseModel):
    name: str = ""
    kind: VolumeKind = VolumeKind.CYLINDER
    depth_level: int = Field(default=0, ge=0)

    # Explicit vertices take precedence over bound values
    vertices: List[Point3] = Field(default_factory=list)
    bound_values: List[float] = Field(default_factory=list)

    fill: Fill = Field(default_factory=Fill)
    stroke: Stroke = Field(default_factory=Stroke)
    transform: Transform = Field(default_factory=Transform)

    portals: List[Portal] = Field(default_factory=list)


class Detector(BaseModel):
    name: str = ""
    volumes: List[Volume] = Field(default_factory=list)


Surface.model_rebuild()
