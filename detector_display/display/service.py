from __future__ import annotations

import logging
from typing import Optional, Sequence

from pydantic import BaseModel, Field

from detector_display.common.errors import RenderReport
from detector_display.display.eta_lines import EtaTrack, render_eta_lines
from detector_display.display.renderer import (
    render_detector,
    render_portal,
    render_surface,
    render_volume,
)
from detector_display.geometry.schemas import Detector, Portal, Surface, Volume
from detector_display.geometry.views import View
from detector_display.vector_core.models import SceneObject, Transform
from detector_display.vector_core.svg_export import SvgExporter

logger = logging.getLogger(__name__)


class DisplayResult(BaseModel):
    scene: SceneObject
    report: RenderReport = Field(default_factory=RenderReport)
    layout_hash: str = ""


class DisplayService:
    def __init__(self, exporter: Optional[SvgExporter] = None, strict: Optional[bool] = None):
        self.exporter = exporter or SvgExporter()
        self.strict = strict

    def _new_report(self) -> RenderReport:
        if self.strict is None:
            return RenderReport()
        return RenderReport(strict=self.strict)

    def _result(self, obj: SceneObject, report: RenderReport) -> DisplayResult:
        if report.issues:
            logger.info("Rendered %s with %d issue(s)", obj.id, len(report.issues))
        return DisplayResult(scene=obj, report=report, layout_hash=obj.compute_layout_hash())

    def render_surface(self, id_: str, surface: Surface, view: View, **flags) -> DisplayResult:
        report = self._new_report()
        obj = render_surface(id_, surface, view, report=report, **flags)
        return self._result(obj, report)

    def render_portal(self, id_: str, portal: Portal, view: View) -> DisplayResult:
        report = self._new_report()
        return self._result(render_portal(id_, portal, view, report), report)

    def render_volume(
        self, id_: str, volume: Volume, view: View, draw_portals: bool = True
    ) -> DisplayResult:
        report = self._new_report()
        obj = render_volume(id_, volume, view, draw_portals=draw_portals, report=report)
        return self._result(obj, report)

    def render_detector(self, detector: Detector, view: View, id_: Optional[str] = None) -> DisplayResult:
        report = self._new_report()
        obj = render_detector(id_ or detector.name, detector, view, report)
        return self._result(obj, report)

    def render_eta_lines(
        self,
        id_: str,
        z_range: float,
        r_range: float,
        tracks: Sequence[EtaTrack],
        transform: Optional[Transform] = None,
    ) -> DisplayResult:
        obj = render_eta_lines(id_, z_range, r_range, tracks, transform)
        return self._result(obj, self._new_report())

    def to_svg(
        self,
        result: DisplayResult,
        width: Optional[float] = None,
        height: Optional[float] = None,
    ) -> str:
        return self.exporter.export(result.scene, width, height)


_default_service: Optional[DisplayService] = None


def get_display_service() -> DisplayService:
    global _default_service
    if _default_service is None:
        _default_service = DisplayService()
    return _default_service
