from pathlib import Path

import numpy as np
from PIL import Image, ImageOps, UnidentifiedImageError

from imprev.errors import DecodeError, InvalidDimensions

BACKGROUND = (0, 0, 0)


def flatten_alpha(image: Image.Image, background: tuple[int, int, int] = BACKGROUND) -> Image.Image:
    """Composite any transparency over a solid background and return an RGB image."""
    if image.mode in ("RGBA", "LA", "PA") or "transparency" in image.info:
        rgba = image.convert("RGBA")
        base = Image.new("RGBA", rgba.size, background + (255,))
        return Image.alpha_composite(base, rgba).convert("RGB")
    return image.convert("RGB")


def open_image(path: str | Path) -> Image.Image:
    path = Path(path)
    try:
        image = Image.open(path)
        # Force a full decode so truncated files fail here rather than mid-render
        image.load()
    except FileNotFoundError:
        raise DecodeError(path, "no such file") from None
    except UnidentifiedImageError:
        raise DecodeError(path, "not a recognised image format") from None
    except (OSError, ValueError, SyntaxError, EOFError, Image.DecompressionBombError) as e:
        raise DecodeError(path, str(e)) from e
    return image


def _array_to_image(pixels: np.ndarray) -> Image.Image:
    pixels = np.ascontiguousarray(pixels, dtype=np.uint8)
    if pixels.ndim == 3 and pixels.shape[2] == 1:
        pixels = pixels[:, :, 0]
    if pixels.ndim == 2 or (pixels.ndim == 3 and pixels.shape[2] in (3, 4)):
        return Image.fromarray(pixels)
    raise InvalidDimensions(f"Expected a greyscale, RGB or RGBA array, got shape {pixels.shape}")


def load_image(image: np.ndarray | Image.Image | str | Path) -> np.ndarray:
    """Decode an image into a (height, width, 3) uint8 RGB array.

    Only the first frame of a multi-frame file is used. EXIF orientation is
    applied and alpha is composited over black. Arrays that are already
    (height, width, 3) RGB pass through; grey or RGBA arrays are converted.
    """
    if isinstance(image, np.ndarray):
        if image.ndim == 3 and image.shape[2] == 3:
            return np.ascontiguousarray(image, dtype=np.uint8)
        image = _array_to_image(image)
    elif not isinstance(image, Image.Image):
        image = open_image(image)
    image = ImageOps.exif_transpose(image)
    return np.asarray(flatten_alpha(image), dtype=np.uint8)
