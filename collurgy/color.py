import re
from collections import namedtuple

from .colorspace import Space, from_srgb, to_srgb
from .errors import InvalidParameter

# hex: 6 lowercase digits without '#', rgb: 8-bit triple,
# oklab: canonical uniform coordinates, luminance: WCAG relative luminance
Color = namedtuple("Color", ["hex", "rgb", "oklab", "luminance"])

_HEX_PATTERN = re.compile(r"#?([0-9a-fA-F]{3}|[0-9a-fA-F]{6})")


def rgb_to_hex(r, g, b):
    return f"{r:02x}{g:02x}{b:02x}"


def hex_to_rgb(hex_color):
    """Parse ``rrggbb``, ``#rrggbb`` or the 3-digit short forms."""
    match = _HEX_PATTERN.fullmatch(hex_color.strip()) if isinstance(hex_color, str) else None
    if match is None:
        raise InvalidParameter(f"not a hex color: {hex_color!r}")
    digits = match.group(1)
    if len(digits) == 3:
        digits = "".join(d * 2 for d in digits)
    return tuple(int(digits[i : i + 2], 16) for i in (0, 2, 4))


def relative_luminance(r, g, b):
    """Calculate relative luminance per WCAG 2.0"""

    def channel(c):
        c = c / 255
        return c / 12.92 if c <= 0.03928 else ((c + 0.055) / 1.055) ** 2.4

    return 0.2126 * channel(r) + 0.7152 * channel(g) + 0.0722 * channel(b)


def contrast_ratio(lum1, lum2):
    """Calculate contrast ratio between two luminances"""
    lighter = max(lum1, lum2)
    darker = min(lum1, lum2)
    return (lighter + 0.05) / (darker + 0.05)


def create_color(r, g, b):
    """Create a Color namedtuple with all representations"""
    r, g, b = (max(0, min(255, int(c))) for c in (r, g, b))
    return Color(
        hex=rgb_to_hex(r, g, b),
        rgb=(r, g, b),
        oklab=from_srgb(Space.OKLAB, r, g, b),
        luminance=relative_luminance(r, g, b),
    )


def color_from_hex(hex_color):
    return create_color(*hex_to_rgb(hex_color))


def color_from_space(space, coords):
    """Create a Color from coordinates in any supported space, gamut mapped."""
    return create_color(*to_srgb(space, coords))


def color_coords(color, space):
    """Return the coordinates of ``color`` in ``space``."""
    space = Space.from_name(space)
    if space is Space.OKLAB:
        return color.oklab
    return from_srgb(space, *color.rgb)
