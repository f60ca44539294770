"""Tests for the render report and error taxonomy."""
import pytest

from detector_display.common.errors import (
    DisplayError,
    GeometryError,
    RenderReport,
    UnsupportedCombinationError,
    UnsupportedFeatureError,
    record_issue,
)
from detector_display.config import config_snapshot, get_arc_segments, is_strict_mode


def test_error_taxonomy():
    assert issubclass(GeometryError, DisplayError)
    assert issubclass(GeometryError, ValueError)
    assert UnsupportedCombinationError("x").code == "unsupported_combination"
    assert UnsupportedFeatureError("x").code == "unsupported_feature"


def test_report_collects_issues():
    report = RenderReport(strict=False)
    assert report.ok

    report.record(GeometryError("bad radii", "surface_1"))
    report.record(UnsupportedFeatureError("no boolean here", "surface_2"))

    assert not report.ok
    assert report.codes() == ["geometry", "unsupported_feature"]
    assert report.issues[0].object_id == "surface_1"
    assert report.issues[0].message == "bad radii"


def test_strict_report_raises():
    report = RenderReport(strict=True)
    with pytest.raises(GeometryError):
        report.record(GeometryError("bad radii"))
    assert report.issues == []


def test_strict_mode_from_env(monkeypatch):
    monkeypatch.setenv("DETECTOR_DISPLAY_STRICT", "true")
    assert is_strict_mode()
    assert RenderReport().strict
    with pytest.raises(UnsupportedCombinationError):
        record_issue(None, UnsupportedCombinationError("disc in z_phi"))


def test_record_without_report_only_logs(monkeypatch, caplog):
    monkeypatch.delenv("DETECTOR_DISPLAY_STRICT", raising=False)
    with caplog.at_level("WARNING"):
        record_issue(None, UnsupportedFeatureError("boolean in z_r", "plate"))
    assert "boolean in z_r" in caplog.text


def test_config_defaults(monkeypatch):
    monkeypatch.delenv("DETECTOR_DISPLAY_ARC_SEGMENTS", raising=False)
    monkeypatch.delenv("DETECTOR_DISPLAY_STRICT", raising=False)
    assert get_arc_segments() == 72
    assert config_snapshot() == {"strict": False, "arc_segments": 72, "label_precision": 3}


def test_config_ignores_bad_values(monkeypatch):
    monkeypatch.setenv("DETECTOR_DISPLAY_ARC_SEGMENTS", "lots")
    assert get_arc_segments() == 72
    monkeypatch.setenv("DETECTOR_DISPLAY_ARC_SEGMENTS", "36")
    assert get_arc_segments() == 36
