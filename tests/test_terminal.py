import io

import pytest

from imprev.config import RenderConfig
from imprev.terminal import ColourMode, TargetGrid, TerminalGeometry, detect_colour_mode, get_terminal_size


@pytest.mark.parametrize(
    "environ, expected",
    [
        ({"COLORTERM": "truecolor", "TERM": "xterm-256color"}, ColourMode.TRUECOLOR),
        ({"COLORTERM": "24bit"}, ColourMode.TRUECOLOR),
        ({"TERM": "xterm-256color"}, ColourMode.INDEXED_256),
        ({"TERM": "screen-256color"}, ColourMode.INDEXED_256),
        ({"TERM": "xterm"}, ColourMode.INDEXED_16),
        ({}, ColourMode.INDEXED_16),
        ({"TERM": "dumb"}, ColourMode.MONOCHROME),
        ({"NO_COLOR": "1", "COLORTERM": "truecolor"}, ColourMode.MONOCHROME),
        ({"NO_COLOR": "", "TERM": "xterm-256color"}, ColourMode.INDEXED_256),
    ],
)
def test_detect_colour_mode(environ, expected):
    assert detect_colour_mode(environ) is expected


def test_not_a_tty_falls_back_to_80x24(monkeypatch):
    monkeypatch.setattr("sys.stdout", io.StringIO())
    assert get_terminal_size() == (80, 24)


def test_geometry_detect_uses_environment(monkeypatch):
    monkeypatch.setattr("sys.stdout", io.StringIO())
    geometry = TerminalGeometry.detect({"TERM": "xterm-256color"})
    assert geometry == TerminalGeometry(80, 24, ColourMode.INDEXED_256)


def test_target_grid_zero_size_falls_back_to_one_cell():
    grid = TargetGrid.from_geometry(TerminalGeometry(0, 0, ColourMode.INDEXED_16))
    assert grid == TargetGrid(1, 1)


def test_target_grid_reserves_rows():
    geometry = TerminalGeometry(80, 24, ColourMode.INDEXED_16)
    assert TargetGrid.from_geometry(geometry, reserve_rows=1) == TargetGrid(80, 23)
    assert TargetGrid.from_geometry(TerminalGeometry(80, 1, ColourMode.INDEXED_16), reserve_rows=1) == TargetGrid(80, 1)


def test_render_config_overrides_geometry():
    geometry = TerminalGeometry(80, 24, ColourMode.INDEXED_16)
    assert RenderConfig().apply(geometry) == geometry
    config = RenderConfig(colour_mode=ColourMode.TRUECOLOR, columns=40)
    assert config.apply(geometry) == TerminalGeometry(40, 24, ColourMode.TRUECOLOR)
