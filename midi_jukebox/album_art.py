"""Album art images with Pillow: thumbnails of image files, generated placeholders."""

from __future__ import annotations

import hashlib
import logging
from typing import TYPE_CHECKING

from PIL import Image, ImageDraw, UnidentifiedImageError

if TYPE_CHECKING:
    from PIL.ImageTk import PhotoImage

log = logging.getLogger(__name__)

ART_SIZE = 160
PLACEHOLDER_PREFIX = "placeholder:"


def placeholder_ref(seed) -> str:
    return f"{PLACEHOLDER_PREFIX}{seed}"


def _seed_colors(seed: str) -> tuple[tuple[int, int, int], tuple[int, int, int]]:
    digest = hashlib.sha1(seed.encode("utf-8")).digest()
    return (digest[0], digest[1], digest[2]), (digest[3], digest[4], digest[5])


def _placeholder(seed: str, size: int) -> Image.Image:
    """Vertical two-colour gradient, same colours for the same seed."""
    top, bottom = _seed_colors(seed)
    img = Image.new("RGB", (size, size))
    draw = ImageDraw.Draw(img)
    for y in range(size):
        t = y / max(1, size - 1)
        color = tuple(int(a + (b - a) * t) for a, b in zip(top, bottom))
        draw.line([(0, y), (size, y)], fill=color)
    return img


def render_album_art(ref: str, size: int = ART_SIZE) -> Image.Image:
    """Square RGB image for an album art ref (image path or placeholder)."""
    if not ref or ref.startswith(PLACEHOLDER_PREFIX):
        return _placeholder(ref[len(PLACEHOLDER_PREFIX):] if ref else "", size)
    try:
        with Image.open(ref) as src:
            img = src.convert("RGB")
    except (OSError, UnidentifiedImageError):
        log.warning("Cannot open album art %s; using placeholder", ref)
        return _placeholder(ref, size)
    # Center crop to square, then scale
    w, h = img.size
    side = min(w, h)
    left, top = (w - side) // 2, (h - side) // 2
    img = img.crop((left, top, left + side, top + side))
    return img.resize((size, size), Image.LANCZOS)


_cache: dict[tuple[str, int], "PhotoImage"] = {}


def get_photo_image(ref: str, size: int = ART_SIZE) -> "PhotoImage":
    """Tk image for the art ref (needs a Tk root). Cached per (ref, size)."""
    key = (ref, size)
    if key not in _cache:
        from PIL import ImageTk
        _cache[key] = ImageTk.PhotoImage(render_album_art(ref, size))
    return _cache[key]
