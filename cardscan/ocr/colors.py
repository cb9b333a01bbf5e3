"""
Dominant logo colors for UI theming.

Colors never feed contact extraction. Failures here are never fatal: an
image that cannot be read yields no colors.
"""

from __future__ import annotations

import logging
import math

from PIL import Image

from cardscan.exceptions import ImageLoadError
from cardscan.models import ColorInfo
from cardscan.ocr.recognizer import ImageInput, load_image

logger = logging.getLogger(__name__)

SAMPLE_STEP = 4
QUANTUM = 24
MIN_ALPHA = 128
MIN_BRIGHTNESS = 100  # r + g + b
MAX_BRIGHTNESS = 600


def _quantize(channel: int) -> int:
    return min(255, int(channel / QUANTUM + 0.5) * QUANTUM)


def extract_logo_colors(image: ImageInput, max_colors: int = 5) -> list[ColorInfo]:
    """
    Find the dominant colors of a card, favoring the logo area.

    Every 4th pixel in both directions is sampled. Transparent, very dark
    and very light pixels are skipped. Pixels near the top-centre (where
    logos usually sit) count double. Channels are quantized to multiples
    of 24 before counting.

    Args:
        image: Path, bytes or PIL image
        max_colors: Number of colors to return

    Returns:
        Most frequent colors first; frequency is weight / total pixels
    """
    try:
        loaded = load_image(image)
    except ImageLoadError as e:
        logger.warning("Logo color extraction skipped: %s", e)
        return []

    rgba: Image.Image = loaded.convert("RGBA")
    width, height = rgba.size
    total_pixels = width * height
    if total_pixels == 0:
        return []

    center_x, center_y = width / 2, height / 4
    radius = min(width, height) / 2
    pixels = rgba.load()
    counts: dict[tuple[int, int, int], int] = {}

    for y in range(0, height, SAMPLE_STEP):
        for x in range(0, width, SAMPLE_STEP):
            r, g, b, a = pixels[x, y]
            brightness = r + g + b
            if a < MIN_ALPHA or brightness < MIN_BRIGHTNESS or brightness > MAX_BRIGHTNESS:
                continue
            weight = 2 if math.hypot(x - center_x, y - center_y) < radius else 1
            key = (_quantize(r), _quantize(g), _quantize(b))
            counts[key] = counts.get(key, 0) + weight

    ranked = sorted(counts.items(), key=lambda item: item[1], reverse=True)[:max_colors]
    colors = [
        ColorInfo(
            hex="#{:02x}{:02x}{:02x}".format(*rgb),
            rgb="rgb({}, {}, {})".format(*rgb),
            frequency=weight / total_pixels,
        )
        for rgb, weight in ranked
    ]
    logger.debug("Logo colors: %s", [c.hex for c in colors])
    return colors
