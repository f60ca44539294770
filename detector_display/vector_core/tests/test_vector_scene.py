import unittest

import pytest

from detector_display.vector_core import draw
from detector_display.vector_core.models import (
    Fill,
    Marker,
    SceneObject,
    Stroke,
    Transform,
)
from detector_display.vector_core.svg_export import SvgExporter, id_to_url


class TestDrawPrimitives(unittest.TestCase):
    def test_circle_attributes_and_bounds(self):
        c = draw.circle("c", (1.0, 2.0), 3.0, Fill(color="#00FF00"))

        self.assertEqual(c.tag, "circle")
        self.assertEqual(c.attributes, {"cx": "1", "cy": "2", "r": "3"})
        self.assertEqual(c.x_range, (-2.0, 4.0))
        self.assertEqual(c.y_range, (-1.0, 5.0))
        self.assertEqual(c.fill.color, "#00FF00")

    def test_line_is_not_filled(self):
        l = draw.line("l", (0.0, 0.0), (4.0, -2.0))

        self.assertTrue(l.fill.sterile)
        self.assertEqual(l.attributes["x2"], "4")
        self.assertEqual(l.attributes["y2"], "-2")
        self.assertEqual(l.y_range, (-2.0, 0.0))

    def test_polygon_points(self):
        p = draw.polygon("p", [(0.0, 0.0), (2.0, 0.0), (2.0, 1.5)])

        self.assertEqual(p.attributes["points"], "0,0 2,0 2,1.5")
        self.assertEqual(p.x_range, (0.0, 2.0))
        self.assertEqual(p.y_range, (0.0, 1.5))

    def test_arc_bounds_include_axis_crossing(self):
        # from -45 to +45 degrees crosses the positive x axis
        r = 10.0
        start = (r * 0.7071067811865476, -r * 0.7071067811865476)
        end = (r * 0.7071067811865476, r * 0.7071067811865476)
        a = draw.arc("a", r, start, end)

        self.assertEqual(a.tag, "path")
        self.assertTrue(a.attributes["d"].startswith("M 7.07107 -7.07107 A 10 10 0 0 1"))
        self.assertAlmostEqual(a.x_range[1], 10.0)

    def test_styles_are_copied(self):
        stroke = Stroke(color="#123456")
        l = draw.line("l", (0.0, 0.0), (1.0, 1.0), stroke)
        l.stroke.color = "#FFFFFF"
        self.assertEqual(stroke.color, "#123456")

    def test_text_placement(self):
        t = draw.text("t", (3.0, 4.0), ["1.5"])

        self.assertEqual(t.tag, "text")
        self.assertEqual(t.text, ["1.5"])
        self.assertEqual(t.attributes["x"], "3")
        self.assertTrue(t.stroke.sterile)


def test_arrow_with_markers():
    a = draw.arrow(
        "a",
        (0.0, 0.0),
        (10.0, 0.0),
        start_marker=Marker(kind="<"),
        end_marker=Marker(kind=">>"),
    )

    ids = [child.id for child in a.children]
    assert ids == ["a_line", "a_start_marker", "a_end_marker"]

    start_head = a.children[1]
    assert start_head.tag == "polygon"
    assert start_head.x_range[0] == pytest.approx(0.0, abs=1e-9)
    assert start_head.x_range[1] == pytest.approx(4.0)

    end_head = a.children[2]
    assert end_head.tag == "g"
    assert len(end_head.children) == 2
    assert end_head.children[0].x_range == pytest.approx((6.0, 10.0))


def test_arrow_skips_none_markers():
    a = draw.arrow("a", (0.0, 0.0), (0.0, 5.0), start_marker=Marker(), end_marker=Marker(kind="o"))

    assert [child.id for child in a.children] == ["a_line", "a_end_marker"]
    assert a.children[1].tag == "circle"


def test_from_template_is_an_independent_copy():
    template = draw.circle("tpl", (0.0, 0.0), 3.0)
    obj = draw.from_template("copy", template, Fill(color="red"), None, Transform(x=4.0))

    obj.attributes["r"] = "99"
    assert obj.id == "copy"
    assert obj.fill.color == "red"
    assert obj.transform.x == 4.0
    assert template.id == "tpl"
    assert template.attributes["r"] == "3"


def test_add_object_accumulates_bounds():
    group = SceneObject(tag="g", id="g")
    group.add_object(draw.circle("a", (0.0, 0.0), 1.0))
    group.add_object(draw.line("b", (5.0, 5.0), (6.0, 7.0)))
    group.add_object(SceneObject(id="empty"))

    assert group.x_range == (-1.0, 6.0)
    assert group.y_range == (-1.0, 7.0)
    assert group.find("b").tag == "line"
    assert group.find("missing") is None


def test_layout_hash_is_structural():
    first = draw.circle("c", (0.0, 0.0), 2.0)
    second = draw.circle("c", (0.0, 0.0), 2.0)
    renamed = draw.circle("d", (0.0, 0.0), 2.0)

    assert first.compute_layout_hash() == second.compute_layout_hash()
    assert first.compute_layout_hash() != renamed.compute_layout_hash()


def test_transform_matrix():
    assert Transform().is_identity()
    a, b, c, d, tx, ty = Transform(x=2.0, y=3.0, rotation=90.0).matrix()
    assert (a, b, c, d) == pytest.approx((0.0, 1.0, -1.0, 0.0), abs=1e-12)
    assert (tx, ty) == (2.0, 3.0)

    placed = Transform(x=1.0, rotation=10.0, scale_x=2.0, scale_y=3.0)
    assert placed.without_placement() == Transform(scale_x=2.0, scale_y=3.0)


def test_style_validation():
    with pytest.raises(ValueError):
        Fill(opacity=1.5)
    with pytest.raises(ValueError):
        Stroke(width=-1.0)


class TestSvgExport:
    def test_definitions_hoisted_and_referenced(self):
        target = draw.circle("ring", (0.0, 0.0), 10.0, Fill(color="#0000FF"))
        mask = SceneObject(tag="mask", id="ring_mask", fill=Fill(sterile=True), stroke=Stroke(sterile=True))
        mask.add_object(draw.circle("ring_outer", (0.0, 0.0), 10.0))
        target.definitions.append(mask)
        target.attributes["mask"] = id_to_url("ring_mask")

        group = SceneObject(tag="g", id="root", fill=Fill(sterile=True), stroke=Stroke(sterile=True))
        group.add_object(target)
        svg = SvgExporter().export(group)

        assert svg.startswith("<svg")
        assert '<mask id="ring_mask">' in svg
        assert 'mask="url(#ring_mask)"' in svg
        assert svg.index("<defs>") < svg.index('<circle id="ring"')
        assert '<g id="root">' in svg

    def test_undefined_objects_are_skipped(self):
        group = SceneObject(tag="g", id="root")
        group.add_object(SceneObject(id="nothing"))
        svg = SvgExporter().export(group, 100, 100)

        assert 'id="nothing"' not in svg
        assert 'width="100" height="100"' in svg

    def test_transform_and_text(self):
        t = draw.text("label", (1.0, 2.0), ["a<b"], transform=Transform(x=5.0, rotation=45.0))
        svg = SvgExporter().export(t)

        assert 'transform="translate(5,0) rotate(45,0,0)"' in svg
        assert ">a&lt;b</text>" in svg

    def test_view_box_follows_translation(self):
        c = draw.circle("c", (0.0, 0.0), 4.0, transform=Transform(x=100.0, y=50.0))
        svg = SvgExporter().export(c)

        assert 'viewBox="96 46 8 8"' in svg

    def test_view_box_composes_nested_transforms(self):
        rect = draw.polygon(
            "rect",
            [(0.0, 0.0), (2.0, 0.0), (2.0, 1.0), (0.0, 1.0)],
            transform=Transform(rotation=90.0),
        )
        group = SceneObject(tag="g", id="root", transform=Transform(x=10.0, scale_x=2.0, scale_y=2.0))
        group.add_object(rect)
        svg = SvgExporter().export(group)

        # rotated to x in [-1, 0], y in [0, 2], then scaled and shifted
        assert 'viewBox="8 0 2 4"' in svg
