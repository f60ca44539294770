import math
import unittest

from detector_display.common.errors import UnsupportedCombinationError
from detector_display.display.eta_lines import EtaTrack
from detector_display.display.service import DisplayService, get_display_service
from detector_display.geometry.schemas import Detector, Portal, Surface, SurfaceKind, Volume
from detector_display.geometry.views import XYView, ZPhiView, ZRView
from detector_display.vector_core.models import Transform


def _detector():
    beam_pipe = Volume(
        name="beam_pipe",
        depth_level=1,
        bound_values=[0.0, 25.0, 0.0, 3000.0, math.pi, 0.0],
        portals=[
            Portal(
                name="bp_outer",
                surface=Surface(kind=SurfaceKind.CYLINDER, radii=(0.0, 25.0), zparameters=(0.0, 3000.0)),
            )
        ],
    )
    pixel = Volume(
        name="pixel",
        depth_level=0,
        bound_values=[25.0, 200.0, 0.0, 3000.0, math.pi, 0.0],
        portals=[
            Portal(
                name="bp_outer",
                surface=Surface(kind=SurfaceKind.CYLINDER, radii=(0.0, 25.0), zparameters=(0.0, 3000.0)),
            )
        ],
    )
    return Detector(name="odd", volumes=[beam_pipe, pixel])


class TestDisplayService(unittest.TestCase):
    def setUp(self):
        self.service = DisplayService(strict=False)

    def test_render_detector_result(self):
        result = self.service.render_detector(_detector(), XYView())

        self.assertEqual(result.scene.id, "odd")
        self.assertEqual([c.id for c in result.scene.children], ["pixel", "beam_pipe", "bp_outer"])
        self.assertEqual(result.layout_hash, result.scene.compute_layout_hash())
        self.assertTrue(result.report.ok)

    def test_layout_hash_stable_across_calls(self):
        first = self.service.render_detector(_detector(), ZRView())
        second = self.service.render_detector(_detector(), ZRView(), id_="odd")
        self.assertEqual(first.layout_hash, second.layout_hash)

    def test_svg_export_of_ring_mask(self):
        result = self.service.render_detector(_detector(), XYView())
        svg = self.service.to_svg(result, 800, 800)

        self.assertIn("<defs>", svg)
        self.assertIn('<mask id="pixel_volume_mask">', svg)
        self.assertIn('mask="url(#pixel_volume_mask)"', svg)
        self.assertLess(svg.index("</defs>"), svg.index('<g id="odd">'))

    def test_degradations_are_reported(self):
        surface = Surface(kind=SurfaceKind.DISC, radii=(0.0, 5.0))
        result = self.service.render_surface("disc", surface, ZPhiView())

        self.assertFalse(result.scene.is_defined())
        self.assertEqual(result.report.codes(), ["unsupported_combination"])

    def test_strict_service_raises(self):
        strict = DisplayService(strict=True)
        surface = Surface(kind=SurfaceKind.CYLINDER, radii=(0.0, 5.0))
        with self.assertRaises(UnsupportedCombinationError):
            strict.render_surface("cyl", surface, ZPhiView())

    def test_render_surface_flags(self):
        surface = Surface(kind=SurfaceKind.DISC, radii=(0.0, 5.0))
        result = self.service.render_surface("disc", surface, XYView(), full_size=True)
        self.assertEqual(result.scene.tag, "circle")

    def test_svg_of_placed_disc_frames_the_disc(self):
        surface = Surface(kind=SurfaceKind.DISC, radii=(0.0, 4.0), transform=Transform(x=100.0, y=50.0))
        result = self.service.render_surface("d", surface, XYView())
        svg = self.service.to_svg(result)

        self.assertIn('transform="translate(100,50)"', svg)
        self.assertIn('viewBox="96 46 8 8"', svg)

    def test_render_portal_and_volume(self):
        detector = _detector()
        portal = self.service.render_portal("p", detector.volumes[0].portals[0], ZRView())
        self.assertEqual(portal.scene.children[0].id, "p_surface")

        volume = self.service.render_volume("v", detector.volumes[1], ZRView(), draw_portals=False)
        self.assertEqual([c.id for c in volume.scene.children], ["v_volume"])

    def test_render_eta_lines(self):
        result = self.service.render_eta_lines("eta", 3000.0, 200.0, [EtaTrack(values=[0.0, 1.0])])
        self.assertEqual(len(result.scene.children), 2)
        self.assertIn("<line", self.service.to_svg(result))

    def test_default_service_is_shared(self):
        self.assertIs(get_display_service(), get_display_service())


if __name__ == "__main__":
    unittest.main()
