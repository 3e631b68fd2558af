import os

import numpy as np
import pytest
from PIL import Image

from imprev.terminal import ColourMode, TerminalGeometry

RED = (255, 0, 0)
GREEN = (0, 255, 0)
BLUE = (0, 0, 255)
WHITE = (255, 255, 255)


def make_pixels(rows):
    """Build an RGB array from nested lists of (r, g, b) tuples."""
    return np.array(rows, dtype=np.uint8)


def noise_image(width, height, seed=42):
    rng = np.random.default_rng(seed)
    return Image.fromarray(rng.integers(0, 256, (height, width, 3), dtype=np.uint8))


def geometry(columns=20, rows=10, mode=ColourMode.TRUECOLOR):
    return TerminalGeometry(columns=columns, rows=rows, colour_mode=mode)


@pytest.fixture
def pipe():
    """A (read_fd, write_fd) pair; ``drain`` closes the write end and returns everything written."""
    read_fd, write_fd = os.pipe()
    closed = set()

    def drain():
        os.close(write_fd)
        closed.add(write_fd)
        chunks = []
        while chunk := os.read(read_fd, 65536):
            chunks.append(chunk)
        return b"".join(chunks)

    yield read_fd, write_fd, drain
    for fd in (read_fd, write_fd):
        if fd not in closed:
            try:
                os.close(fd)
            except OSError:
                pass
