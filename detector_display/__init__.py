"""Detector Display Engine - draw detector geometry as vector scene trees."""

from detector_display.common.errors import (
    DisplayError,
    GeometryError,
    RenderIssue,
    RenderReport,
    UnsupportedCombinationError,
    UnsupportedFeatureError,
)
from detector_display.display.eta_lines import EtaTrack, render_eta_lines
from detector_display.display.renderer import (
    render_detector,
    render_link,
    render_portal,
    render_surface,
    render_volume,
)
from detector_display.display.service import DisplayResult, DisplayService, get_display_service
from detector_display.geometry.schemas import (
    BooleanOperation,
    Detector,
    Link,
    Portal,
    Surface,
    SurfaceKind,
    Volume,
    VolumeKind,
)
from detector_display.geometry.views import View, ViewKind, XYView, ZPhiView, ZRView
from detector_display.vector_core.models import Fill, Font, Marker, SceneObject, Stroke, Transform

__all__ = [
    "DisplayError",
    "GeometryError",
    "RenderIssue",
    "RenderReport",
    "UnsupportedCombinationError",
    "UnsupportedFeatureError",
    "EtaTrack",
    "render_eta_lines",
    "render_detector",
    "render_link",
    "render_portal",
    "render_surface",
    "render_volume",
    "DisplayResult",
    "DisplayService",
    "get_display_service",
    "BooleanOperation",
    "Detector",
    "Link",
    "Portal",
    "Surface",
    "SurfaceKind",
    "Volume",
    "VolumeKind",
    "View",
    "ViewKind",
    "XYView",
    "ZPhiView",
    "ZRView",
    "Fill",
    "Font",
    "Marker",
    "SceneObject",
    "Stroke",
    "Transform",
]
