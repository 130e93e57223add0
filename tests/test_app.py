"""Tests for the pcbcanvas command line renderer and logging setup."""

import json
import logging

import pytest
from PySide6.QtGui import QImage

from pcbcanvas import logging_config
from pcbcanvas.app import EXIT_MISSING_INPUT, EXIT_OK, EXIT_UNRENDERABLE, run_app
from pcbcanvas.config import JsonConfigManager


BOARD = {
    "elements": [
        {
            "type": "pcb_copper_pour",
            "pcb_copper_pour_id": "pour",
            "layer": "top",
            "shape": "brep",
            "brep_shape": {"outer_ring": {"vertices": [
                {"x": 0, "y": 0}, {"x": 10, "y": 0}, {"x": 10, "y": 10}, {"x": 0, "y": 10},
            ]}},
        },
        {"type": "pcb_smtpad", "pcb_smtpad_id": "a", "x": 2, "y": 2, "width": 1, "height": 1},
        {"type": "pcb_smtpad", "pcb_smtpad_id": "b", "x": 8, "y": 8, "width": 1, "height": 1},
    ],
    "connectivity": {"net1": ["a", "b"]},
}


@pytest.fixture(autouse=True)
def clean_logging():
    yield
    logging_config.reset_logging()


@pytest.fixture
def board_file(tmp_path):
    path = tmp_path / "board.json"
    path.write_text(json.dumps(BOARD))
    return path


class TestRunApp:
    """Tests for run_app."""

    def test_renders_png(self, board_file, tmp_path):
        out = tmp_path / "out.png"
        rc = run_app([str(board_file), "-o", str(out), "--width", "64", "--height", "48"])
        assert rc == EXIT_OK
        image = QImage(str(out))
        assert (image.width(), image.height()) == (64, 48)
        assert image.pixelColor(32, 24).alpha() == 255

    def test_default_output_path(self, board_file):
        assert run_app([str(board_file), "--width", "32", "--height", "32"]) == EXIT_OK
        assert board_file.with_suffix(".png").exists()

    def test_size_from_config(self, board_file, tmp_path):
        config_dir = tmp_path / "config"
        config_dir.mkdir()
        (config_dir / "render.json").write_text(json.dumps({"width": 40, "height": 20}))

        out = tmp_path / "out.png"
        assert run_app([str(board_file), "-o", str(out)]) == EXIT_OK
        image = QImage(str(out))
        assert (image.width(), image.height()) == (40, 20)

    def test_layer_filter_and_no_rats_nest(self, board_file, tmp_path):
        out = tmp_path / "out.png"
        rc = run_app([str(board_file), "-o", str(out), "--width", "50", "--height", "50",
                      "--layers", "bottom", "--no-rats-nest"])
        assert rc == EXIT_OK
        image = QImage(str(out))
        background = JsonConfigManager().render_settings().background
        assert image.pixelColor(25, 25).name() == background

    def test_missing_input(self, tmp_path):
        assert run_app([str(tmp_path / "missing.json")]) == EXIT_MISSING_INPUT

    def test_no_geometry(self, tmp_path):
        path = tmp_path / "empty.json"
        path.write_text("[]")
        assert run_app([str(path)]) == EXIT_UNRENDERABLE

    def test_invalid_document(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text(json.dumps({"items": []}))
        assert run_app([str(path)]) == EXIT_UNRENDERABLE

    def test_unparseable_json(self, tmp_path):
        path = tmp_path / "bad.json"
        path.write_text("{")
        assert run_app([str(path)]) == EXIT_UNRENDERABLE


class TestLogging:
    """Tests for setup_logging."""

    def test_log_file_created(self, tmp_path):
        path = logging_config.setup_logging()
        assert path == tmp_path / "logs" / logging_config.LOG_FILE_NAME
        logging.getLogger("pcbcanvas.test").warning("hello")
        assert "hello" in path.read_text(encoding="utf-8")

    def test_idempotent(self):
        first = logging_config.setup_logging()
        handlers = list(logging.getLogger().handlers)
        assert logging_config.setup_logging("DEBUG") == first
        assert logging.getLogger().handlers == handlers
        assert logging_config.get_log_file_path() == first

    def test_reset(self):
        logging_config.setup_logging()
        logging_config.reset_logging()
        assert logging_config.get_log_file_path() is None
