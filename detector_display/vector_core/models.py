from __future__ import annotations

import hashlib
import json
import math
from typing import Dict, List, Literal, Optional, Tuple

from pydantic import BaseModel, Field, field_validator

Point2 = Tuple[float, float]
Range = Tuple[float, float]


class Fill(BaseModel):
    color: Optional[str] = None  # Hex or svg color name
    opacity: float = 1.0
    sterile: bool = False  # sterile fills write nothing

    @field_validator("opacity")
    @classmethod
    def opacity_in_range(cls, value):
        if not 0.0 <= value <= 1.0:
            raise ValueError("Opacity must be between 0 and 1")
        return value


class Stroke(BaseModel):
    color: Optional[str] = "#000000"
    width: float = 0.5
    dasharray: List[int] = Field(default_factory=list)
    sterile: bool = False

    @field_validator("width")
    @classmethod
    def width_non_negative(cls, value):
        if value < 0:
            raise ValueError("Stroke width cannot be negative")
        return value


class Font(BaseModel):
    family: str = "Arial"
    size: float = 12.0
    color: str = "#000000"

    @field_validator("size")
    @classmethod
    def size_positive(cls, value):
        if value <= 0:
            raise ValueError("Font size must be positive")
        return value


MarkerKind = Literal["none", "<", "<<", ">", ">>", "|", "o"]


class Marker(BaseModel):
    kind: MarkerKind = "none"
    size: float = 4.0
    fill: Fill = Field(default_factory=lambda: Fill(color="#000000"))
    stroke: Stroke = Field(default_factory=Stroke)

    def is_drawn(self) -> bool:
        return self.kind != "none"


class Transform(BaseModel):
    x: float = 0.0
    y: float = 0.0
    rotation: float = 0.0  # degrees
    rx: float = 0.0  # rotation center
    ry: float = 0.0
    scale_x: float = 1.0
    scale_y: float = 1.0

    def matrix(self) -> Tuple[float, float, float, float, float, float]:
        theta = math.radians(self.rotation)
        cos_t = math.cos(theta)
        sin_t = math.sin(theta)
        a = cos_t * self.scale_x
        b = sin_t * self.scale_x
        c = -sin_t * self.scale_y
        d = cos_t * self.scale_y
        tx = self.x + self.rx - (cos_t * self.rx - sin_t * self.ry)
        ty = self.y + self.ry - (sin_t * self.rx + cos_t * self.ry)
        return (a, b, c, d, tx, ty)

    def is_identity(self) -> bool:
        return self == Transform()

    def without_placement(self) -> Transform:
        """Same scale, no translation nor rotation."""
        return Transform(scale_x=self.scale_x, scale_y=self.scale_y)


def _merge_range(current: Optional[Range], other: Optional[Range]) -> Optional[Range]:
    if other is None:
        return current
    if current is None:
        return other
    return (min(current[0], other[0]), max(current[1], other[1]))


class SceneObject(BaseModel):
    """One node of the rendered tree.

    ``children`` are drawn, ``definitions`` are hoisted into the output
    definitions block and only referenced (masks, markers, templates).
    An empty ``tag`` marks an undefined object that draws nothing.
    """

    tag: str = ""
    id: str = ""
    fill: Fill = Field(default_factory=Fill)
    stroke: Stroke = Field(default_factory=Stroke)
    transform: Transform = Field(default_factory=Transform)
    children: List[SceneObject] = Field(default_factory=list)
    attributes: Dict[str, str] = Field(default_factory=dict)
    definitions: List[SceneObject] = Field(default_factory=list)
    text: List[str] = Field(default_factory=list)
    x_range: Optional[Range] = None
    y_range: Optional[Range] = None

    def is_defined(self) -> bool:
        return bool(self.tag)

    def add_object(self, obj: SceneObject) -> None:
        self.children.append(obj)
        self.x_range = _merge_range(self.x_range, obj.x_range)
        self.y_range = _merge_range(self.y_range, obj.y_range)

    def find(self, object_id: str) -> Optional[SceneObject]:
        if self.id == object_id:
            return self
        for child in self.children:
            found = child.find(object_id)
            if found is not None:
                return found
        return None

    def layout_payload(self) -> Dict[str, object]:
        return {
            "tag": self.tag,
            "id": self.id,
            "fill": self.fill.model_dump(),
            "stroke": self.stroke.model_dump(),
            "transform": self.transform.model_dump(),
            "attributes": dict(sorted(self.attributes.items())),
            "text": list(self.text),
            "children": [child.layout_payload() for child in self.children],
            "definitions": [d.layout_payload() for d in self.definitions],
        }

    def compute_layout_hash(self) -> str:
        payload = self.layout_payload()
        serialized = json.dumps(payload, sort_keys=True, default=str)
        return hashlib.sha256(serialized.encode("utf-8")).hexdigest()


SceneObject.model_rebuild()
