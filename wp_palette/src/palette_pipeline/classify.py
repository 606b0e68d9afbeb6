from __future__ import annotations

import re

import numpy as np
from PIL import ImageColor
from skimage import color as skcolor

from .models import HSV, RGB, ClassifiedColor, ColorClass, ColorRecord

# Functional notations the baseline parser may reject (float alpha,
# space-separated args, units) but which are still colour expressions.
_FUNCTIONAL_PATTERN = re.compile(r"^(?:rgb|hsl)a?\(.+?\)$", re.IGNORECASE)


def parse_color(value: object) -> RGB | None:
    """Return the RGB components of ``value`` or None when it does not parse."""
    text = str(value).strip()
    if not text:
        return None
    try:
        components = ImageColor.getrgb(text)
    except ValueError:
        return None
    return int(components[0]), int(components[1]), int(components[2])


def is_functional_notation(value: object) -> bool:
    return bool(_FUNCTIONAL_PATTERN.match(str(value).strip()))


def rgb_to_hsv(rgb: RGB) -> HSV:
    rgb_arr = np.array(rgb, dtype=np.float64).reshape(1, 1, 3) / 255.0
    hsv = skcolor.rgb2hsv(rgb_arr).reshape(3)
    return float(hsv[0]), float(hsv[1]), float(hsv[2])


def is_grayscale(rgb: RGB) -> bool:
    r, g, b = rgb
    return r == g and r == b


def maybe_grayscale(rgb: RGB) -> bool:
    """Check whether a colour falls in the region of HSV space that reads as gray.

    HSV is a cylinder whose central axis holds the achromatic colours. The
    curve ``v = 1.3 / (1 + 8.5 * s)`` bounds the colours that still look
    gray: dark values pass at any saturation, while strongly saturated
    colours need a very low value to qualify.
    """
    _, saturation, value = rgb_to_hsv(rgb)
    return value < 1.3 / (1 + 8.5 * saturation)


def classify(color_value: object) -> ColorClass:
    rgb = parse_color(color_value)
    if rgb is None:
        if is_functional_notation(color_value):
            return ColorClass.AMBIGUOUS_FORMAT
        return ColorClass.NON_COLOR

    if is_grayscale(rgb) or maybe_grayscale(rgb):
        return ColorClass.GRAYSCALE
    return ColorClass.TRUE_COLOR


def classify_record(record: ColorRecord) -> ClassifiedColor:
    return ClassifiedColor(record=record, color_class=classify(record.color))
