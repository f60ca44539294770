"""View projectors: 3-D points to the 2-D drawing plane."""
from __future__ import annotations

import math
from abc import ABC, abstractmethod
from enum import Enum
from typing import List, Literal, Sequence, Union

from pydantic import BaseModel

from detector_display.geometry.schemas import Point3
from detector_display.vector_core.models import Point2


class ViewKind(str, Enum):
    X_Y = "x_y"
    Z_R = "z_r"
    Z_PHI = "z_phi"


class _View(BaseModel, ABC):
    kind: ViewKind

    @abstractmethod
    def project_point(self, point: Point3) -> Point2:
        ...

    def project(self, points: Sequence[Point3]) -> List[Point2]:
        return [self.project_point(p) for p in points]

    def __call__(self, points: Sequence[Point3]) -> List[Point2]:
        return self.project(points)


class XYView(_View):
    """Planar view, keeps (x, y)."""

    kind: Literal[ViewKind.X_Y] = ViewKind.X_Y

    def project_point(self, point: Point3) -> Point2:
        return (point[0], point[1])


class ZRView(_View):
    """Cylindrical view, (z, r) with r negative below the x axis when signed."""

    kind: Literal[ViewKind.Z_R] = ViewKind.Z_R
    signed_r: bool = True

    def project_point(self, point: Point3) -> Point2:
        r = math.hypot(point[0], point[1])
        if self.signed_r and point[1] < 0:
            r = -r
        return (point[2], r)


class ZPhiView(_View):
    kind: Literal[ViewKind.Z_PHI] = ViewKind.Z_PHI

    def project_point(self, point: Point3) -> Point2:
        return (point[2], math.atan2(point[1], point[0]))


View = Union[XYView, ZRView, ZPhiView]
