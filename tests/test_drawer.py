"""Tests for pcbcanvas.graphics.drawer."""

import pytest
from PySide6.QtGui import QImage, QPainter

from pcbcanvas.core.primitives import (
    BrepRing,
    BrepVertex,
    CopperPour,
    PlatedHole,
    SmtPad,
    UnknownElement,
    Via,
)
from pcbcanvas.core.transform import CameraBounds, apply_to_point
from pcbcanvas.graphics.drawer import DrawerInitError, PcbCanvasDrawer
from pcbcanvas.graphics.elements import StylePrecedence
from pcbcanvas.graphics.layers import DEFAULT_PCB_COLOR_MAP


def square_pour(layer="top"):
    return CopperPour(
        id="p",
        layer=layer,
        outer_ring=BrepRing(vertices=tuple(
            BrepVertex(x, y) for x, y in ((0, 0), (10, 0), (10, 10), (0, 10))
        )),
    )


class ContextProvider:
    def __init__(self, painter):
        self._painter = painter

    def get_context(self):
        return self._painter


class TestConstruction:
    """Tests for the supported surfaces."""

    def test_from_image_owns_painter(self, make_image):
        drawer = PcbCanvasDrawer(make_image())
        assert drawer.owns_painter
        assert drawer.painter.isActive()
        drawer.close()
        assert not drawer.painter.isActive()

    def test_from_painter_does_not_own(self, make_image):
        image = make_image()
        painter = QPainter(image)
        try:
            drawer = PcbCanvasDrawer(painter)
            assert drawer.painter is painter
            assert not drawer.owns_painter
            drawer.close()
            assert painter.isActive()
        finally:
            painter.end()

    def test_from_context_provider(self, mock_painter):
        drawer = PcbCanvasDrawer(ContextProvider(mock_painter))
        assert drawer.painter is mock_painter
        assert not drawer.owns_painter

    def test_provider_without_context_fails(self):
        with pytest.raises(DrawerInitError):
            PcbCanvasDrawer(ContextProvider(None))

    def test_object_without_get_context_fails(self):
        with pytest.raises(DrawerInitError):
            PcbCanvasDrawer(object())

    def test_null_image_fails(self):
        with pytest.raises(DrawerInitError):
            PcbCanvasDrawer(QImage())

    def test_initial_state(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        assert drawer.transform.isIdentity()
        assert drawer.color_map == DEFAULT_PCB_COLOR_MAP
        assert drawer.style_precedence is StylePrecedence.POLICY

    def test_temporary_image_stays_alive(self):
        drawer = PcbCanvasDrawer(
            QImage(50, 50, QImage.Format.Format_ARGB32_Premultiplied),
            antialias=False,
        )
        drawer.set_camera_bounds(CameraBounds(0, 0, 10, 10))
        drawer.draw_elements([square_pour()])
        image = drawer.painter.device()
        assert image.width() == 50
        drawer.close()
        assert not drawer.painter.isActive()

    def test_inactive_painter_fails(self):
        with pytest.raises(DrawerInitError):
            PcbCanvasDrawer(QPainter())

    def test_provider_with_inactive_painter_fails(self):
        with pytest.raises(DrawerInitError):
            PcbCanvasDrawer(ContextProvider(QPainter()))

    def test_context_manager_closes(self, make_image):
        with PcbCanvasDrawer(make_image()) as drawer:
            painter = drawer.painter
        assert not painter.isActive()


class TestConfiguration:
    """Tests for configure and set_camera_bounds."""

    def test_configure_merges_overrides(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.configure(color_overrides={"copper": {"top": "#00ff00"}, "drill": "white"})
        assert drawer.color_map["copper"]["top"] == "#00ff00"
        assert drawer.color_map["copper"]["bottom"] == DEFAULT_PCB_COLOR_MAP["copper"]["bottom"]
        assert drawer.color_map["drill"] == "white"
        assert DEFAULT_PCB_COLOR_MAP["copper"]["top"] != "#00ff00"

    def test_color_map_is_read_only(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.color_map["copper"]["top"] = "#00ff00"
        drawer.color_map["drill"] = "white"
        assert drawer.color_map == DEFAULT_PCB_COLOR_MAP

    def test_configure_accumulates(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.configure(color_overrides={"copper": {"top": "red"}})
        drawer.configure(color_overrides={"copper": {"bottom": "blue"}})
        assert drawer.color_map["copper"] == {"top": "red", "bottom": "blue"}

    def test_configure_precedence(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.configure(style_precedence="declared")
        assert drawer.style_precedence is StylePrecedence.DECLARED

    def test_set_camera_bounds_from_dict(self, make_image):
        with PcbCanvasDrawer(make_image(200, 100)) as drawer:
            transform = drawer.set_camera_bounds({"minX": 0, "minY": 0, "maxX": 10, "maxY": 10})
            assert transform is drawer.transform
            assert apply_to_point(transform, 0, 0) == pytest.approx((50, 0))
            assert apply_to_point(transform, 10, 10) == pytest.approx((150, 100))


class TestDrawElements:
    """Tests for element dispatch."""

    def test_draws_pour_and_hole(self, make_image):
        image = make_image()
        with PcbCanvasDrawer(image, antialias=False) as drawer:
            drawer.set_camera_bounds(CameraBounds(-5, -5, 15, 15))
            drawer.draw_elements([
                square_pour(),
                PlatedHole(id="h", shape="circle", x=20, y=20, outer_diameter=2, hole_diameter=1),
            ])
        assert image.pixelColor(50, 50).alpha() > 0
        assert image.pixelColor(5, 5).alpha() == 0

    def test_layer_filter(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.draw_elements([square_pour("bottom")], layers=["top"])
        assert mock_painter.method_calls == []
        drawer.draw_elements([square_pour("bottom")], layers=["top", "bottom"])
        assert mock_painter.fillPath.called

    def test_plated_hole_layer_filter(self, mock_painter):
        hole = PlatedHole(id="h", shape="circle", x=0, y=0, outer_diameter=2,
                          hole_diameter=1, layers=("top",))
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.draw_elements([hole], layers=["bottom"])
        assert mock_painter.method_calls == []

    def test_position_only_kinds_are_not_drawn(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.draw_elements([
            SmtPad(id="s", x=0, y=0, width=1, height=1),
            Via(id="v", x=1, y=1, outer_diameter=1),
            UnknownElement(type="pcb_trace"),
        ])
        assert mock_painter.method_calls == []

    def test_raw_dicts_accepted(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.draw_elements([
            {"type": "pcb_plated_hole", "shape": "circle", "x": 0, "y": 0,
             "outer_diameter": 2, "hole_diameter": 1},
            {"type": "pcb_silkscreen_text", "text": "R1"},
        ])
        assert mock_painter.fillPath.call_count == 2

    def test_malformed_nested_record_does_not_abort(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.draw_elements([
            {"type": "pcb_copper_pour", "shape": "brep", "layer": "top",
             "brep_shape": {"outer_ring": [{"x": 0, "y": 0}]}},
            {"type": "pcb_brep_shape", "layer": "top", "geometry": [{"faces": []}]},
            {"type": "pcb_plated_hole", "shape": "circle", "x": 0, "y": 0,
             "outer_diameter": 2, "hole_diameter": 1},
        ])
        assert mock_painter.fillPath.call_count == 2

    def test_repeated_pass_is_idempotent(self, make_image):
        elements = [
            square_pour("top"),
            CopperPour(
                id="holed",
                layer="bottom",
                outer_ring=BrepRing(vertices=tuple(
                    BrepVertex(x, y) for x, y in ((2, 2), (8, 2), (8, 8), (2, 8))
                )),
                inner_rings=(BrepRing(vertices=tuple(
                    BrepVertex(x, y) for x, y in ((4, 4), (6, 4), (6, 6), (4, 6))
                )),),
            ),
            PlatedHole(id="h1", shape="circle", x=1, y=1, outer_diameter=1.5, hole_diameter=0.8),
            PlatedHole(id="h2", shape="pill", x=9, y=9, outer_width=1, outer_height=2,
                       hole_width=0.5, hole_height=1.2),
        ]
        images = []
        for _ in range(2):
            image = make_image()
            with PcbCanvasDrawer(image, antialias=False) as drawer:
                drawer.set_camera_bounds(CameraBounds(0, 0, 10, 10))
                drawer.draw_elements(elements)
            images.append(image)
        assert images[0] == images[1]
        assert images[0].pixelColor(50, 50).alpha() < images[0].pixelColor(30, 30).alpha()


class TestDrawerRatsNest:
    """Tests for the rats nest pass through the drawer."""

    def test_rats_nest_with_raw_elements(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawn = drawer.draw_rats_nest(
            [
                {"type": "pcb_smtpad", "pcb_smtpad_id": "a", "x": 0, "y": 0},
                {"type": "pcb_via", "pcb_via_id": "b", "x": 3, "y": 0},
            ],
            {"net1": ["a", "b"]},
        )
        assert drawn == 1
        assert mock_painter.drawLine.call_count == 1

    def test_rats_nest_uses_configured_colors(self, mock_painter):
        drawer = PcbCanvasDrawer(mock_painter)
        drawer.configure(color_overrides={"silkscreen": {"top": "#0000ff"}})
        drawer.draw_rats_nest(
            [SmtPad(id="a", x=0, y=0), SmtPad(id="b", x=1, y=0)],
            {"n": ["a", "b"]},
        )
        pen = mock_painter.setPen.call_args.args[0]
        assert pen.color().blue() == 255
