import numpy as np
import pytest

from imprev.colour import (
    ANSI_16,
    DEFAULT,
    XTERM_256,
    map_colour,
    map_grid,
    map_pixels,
    pack_rgb,
    palette,
    sgr_bg,
    sgr_fg,
    unpack_rgb,
)
from imprev.rescale import PixelGrid
from imprev.terminal import ColourMode


def _random_colours(n=500, seed=7):
    rng = np.random.default_rng(seed)
    corners = [(r, g, b) for r in (0, 255) for g in (0, 255) for b in (0, 255)]
    return corners + [tuple(int(v) for v in c) for c in rng.integers(0, 256, (n, 3))]


def _brute_force_nearest(rgb, entries):
    best_index, best_dist = None, None
    for i, entry in enumerate(entries.tolist()):
        dist = sum((a - b) ** 2 for a, b in zip(rgb, entry))
        if best_dist is None or dist < best_dist:
            best_index, best_dist = i, dist
    return best_index, best_dist


def test_truecolor_is_identity():
    for rgb in _random_colours():
        assert unpack_rgb(map_colour(rgb, ColourMode.TRUECOLOR)) == rgb


def test_truecolor_grid_is_identity():
    rng = np.random.default_rng(1)
    pixels = rng.integers(0, 256, (6, 9, 3), dtype=np.uint8)
    codes = map_pixels(pixels, ColourMode.TRUECOLOR)
    assert codes.shape == (6, 9)
    for (y, x), code in np.ndenumerate(codes):
        assert unpack_rgb(int(code)) == tuple(int(v) for v in pixels[y, x])


@pytest.mark.parametrize("mode", [ColourMode.INDEXED_256, ColourMode.INDEXED_16])
def test_indexed_choice_is_a_nearest_entry(mode):
    entries, offset = palette(mode)
    for rgb in _random_colours():
        index = map_colour(rgb, mode) - offset
        expected_index, best_dist = _brute_force_nearest(rgb, entries)
        dist = sum((a - b) ** 2 for a, b in zip(rgb, entries[index].tolist()))
        assert dist == best_dist
        # Ties resolve to the lowest index
        assert index == expected_index


def test_256_known_values():
    assert map_colour((0, 0, 0), ColourMode.INDEXED_256) == 16
    assert map_colour((255, 255, 255), ColourMode.INDEXED_256) == 231
    assert map_colour((255, 0, 0), ColourMode.INDEXED_256) == 196
    assert map_colour((95, 135, 175), ColourMode.INDEXED_256) == 16 + 36 * 1 + 6 * 2 + 3
    # Mid grey sits exactly on the grey ramp, closer than any cube entry
    assert map_colour((128, 128, 128), ColourMode.INDEXED_256) == 244


def test_256_palette_layout():
    assert len(XTERM_256) == 240
    assert tuple(XTERM_256[0]) == (0, 0, 0)
    assert tuple(XTERM_256[215]) == (255, 255, 255)
    assert tuple(XTERM_256[216]) == (8, 8, 8)
    assert tuple(XTERM_256[239]) == (238, 238, 238)


def test_16_known_values():
    assert map_colour((0, 0, 0), ColourMode.INDEXED_16) == 0
    assert map_colour((255, 255, 255), ColourMode.INDEXED_16) == 15
    assert map_colour((200, 0, 0), ColourMode.INDEXED_16) == 1
    assert map_colour((255, 0, 0), ColourMode.INDEXED_16) == 9
    assert len(ANSI_16) == 16


def test_16_tie_prefers_normal_variant():
    # Equidistant from white (7) and bright white (15)
    assert map_colour((242, 242, 242), ColourMode.INDEXED_16) == 7


def test_monochrome_threshold_on_luminance():
    assert map_colour((255, 255, 255), ColourMode.MONOCHROME) == 1
    assert map_colour((0, 0, 0), ColourMode.MONOCHROME) == 0
    # Pure blue is dark, pure green is bright
    assert map_colour((0, 0, 255), ColourMode.MONOCHROME) == 0
    assert map_colour((0, 255, 0), ColourMode.MONOCHROME) == 1


def test_map_grid_marks_margins_default():
    pixels = np.full((2, 3, 3), 255, dtype=np.uint8)
    mask = np.array([[False, True, True], [True, True, False]])
    codes = map_grid(PixelGrid(pixels=pixels, mask=mask), ColourMode.INDEXED_256)
    assert codes.tolist() == [[DEFAULT, 231, 231], [231, 231, DEFAULT]]


def test_pack_unpack():
    assert pack_rgb(1, 2, 3) == 0x010203
    assert unpack_rgb(0xFF8000) == (255, 128, 0)


def test_sgr_sequences():
    assert sgr_fg(pack_rgb(1, 2, 3), ColourMode.TRUECOLOR) == "38;2;1;2;3"
    assert sgr_bg(pack_rgb(1, 2, 3), ColourMode.TRUECOLOR) == "48;2;1;2;3"
    assert sgr_fg(196, ColourMode.INDEXED_256) == "38;5;196"
    assert sgr_bg(16, ColourMode.INDEXED_256) == "48;5;16"
    assert sgr_fg(1, ColourMode.INDEXED_16) == "31"
    assert sgr_fg(9, ColourMode.INDEXED_16) == "91"
    assert sgr_bg(0, ColourMode.INDEXED_16) == "40"
    assert sgr_bg(15, ColourMode.INDEXED_16) == "107"


def test_monochrome_has_no_palette_or_sequences():
    with pytest.raises(ValueError):
        palette(ColourMode.MONOCHROME)
    with pytest.raises(ValueError):
        sgr_fg(1, ColourMode.MONOCHROME)
