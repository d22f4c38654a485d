"""
Conversions between device sRGB and the uniform color spaces used for
palette generation, with gamut mapping that keeps hue and lightness.
"""

import colorsys
import math
from collections import namedtuple
from enum import Enum

import numpy as np

from .errors import InvalidParameter

# sRGB transfer curve (IEC 61966-2-1)
SRGB_THRESHOLD = 0.04045
LINEAR_THRESHOLD = 0.0031308
SRGB_A = 0.055
SRGB_EXPONENT = 2.4

# Gamut mapping
GAMUT_EPSILON = 1e-7  # Slack on [0, 1] before a channel counts as out of gamut
GAMUT_TOLERANCE = 1e-9  # Bisection stops once the chroma scale is this precise
GAMUT_MAX_STEPS = 64
COORD_LIMIT = 1e9  # Inputs are bounded to this magnitude before conversion

# CIE Lab
LAB_EPSILON = 216 / 24389
LAB_KAPPA = 24389 / 27

# JzAzBz (Safdar et al. 2017)
JZ_B = 1.15
JZ_G = 0.66
JZ_C1 = 3424 / 4096
JZ_C2 = 2413 / 128
JZ_C3 = 2392 / 128
JZ_N = 2610 / 16384
JZ_P = 1.7 * 2523 / 32
JZ_D = -0.56
JZ_D0 = 1.6295499532821566e-11
JZ_WHITE_LUMINANCE = 203.0  # cd/m^2 assigned to sRGB white

_RGB_TO_XYZ = np.array(
    [
        [0.4124564, 0.3575761, 0.1804375],
        [0.2126729, 0.7151522, 0.0721750],
        [0.0193339, 0.1191920, 0.9503041],
    ]
)
_XYZ_TO_RGB = np.linalg.inv(_RGB_TO_XYZ)
_WHITE_XYZ = _RGB_TO_XYZ.sum(axis=1)

# Oklab (Ottosson), linear sRGB -> LMS and LMS' -> Lab
_OKLAB_M1 = np.array(
    [
        [0.4122214708, 0.5363325363, 0.0514459929],
        [0.2119034982, 0.6806995451, 0.1073969566],
        [0.0883024619, 0.2817188376, 0.6299787005],
    ]
)
_OKLAB_M2 = np.array(
    [
        [0.2104542553, 0.7936177850, -0.0040720468],
        [1.9779984951, -2.4285922050, 0.4505937099],
        [0.0259040371, 0.7827717662, -0.8086757660],
    ]
)
_OKLAB_M1_INV = np.linalg.inv(_OKLAB_M1)
_OKLAB_M2_INV = np.linalg.inv(_OKLAB_M2)

_JZ_M1 = np.array(
    [
        [0.41478972, 0.579999, 0.0146480],
        [-0.2015100, 1.120649, 0.0531008],
        [-0.0166008, 0.264800, 0.6684799],
    ]
)
_JZ_M2 = np.array(
    [
        [0.5, 0.5, 0.0],
        [3.524000, -4.066708, 0.542708],
        [0.199076, 1.096799, -1.295875],
    ]
)
_JZ_M1_INV = np.linalg.inv(_JZ_M1)
_JZ_M2_INV = np.linalg.inv(_JZ_M2)


class Space(Enum):
    """The closed set of uniform spaces a palette can be generated in."""

    CIELAB = "cielab"
    OKLAB = "oklab"
    JZAZBZ = "jzazbz"
    HSV = "hsv"

    @classmethod
    def from_name(cls, name):
        """Look up a space by its (case-insensitive) name."""
        if isinstance(name, cls):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            choices = ", ".join(s.value for s in cls)
            raise InvalidParameter(
                f"unknown color space {name!r} (expected one of: {choices})"
            ) from None


def _spow(x, exponent):
    """Sign-preserving power so negative intermediates stay finite."""
    return np.sign(x) * np.abs(x) ** exponent


def srgb_to_linear(rgb):
    rgb = np.asarray(rgb, dtype=np.float64)
    return np.where(
        rgb <= SRGB_THRESHOLD,
        rgb / 12.92,
        ((np.maximum(rgb, 0.0) + SRGB_A) / (1 + SRGB_A)) ** SRGB_EXPONENT,
    )


def linear_to_srgb(rgb_lin):
    rgb_lin = np.asarray(rgb_lin, dtype=np.float64)
    return np.where(
        rgb_lin <= LINEAR_THRESHOLD,
        rgb_lin * 12.92,
        (1 + SRGB_A) * np.maximum(rgb_lin, 0.0) ** (1 / SRGB_EXPONENT) - SRGB_A,
    )


# === CIE Lab ===


def _lab_f(t):
    return np.where(t > LAB_EPSILON, np.cbrt(t), (LAB_KAPPA * t + 16) / 116)


def _lab_f_inv(f):
    cube = f**3
    return np.where(cube > LAB_EPSILON, cube, (116 * f - 16) / LAB_KAPPA)


def _srgb_to_cielab(rgb):
    xyz = _RGB_TO_XYZ @ srgb_to_linear(rgb)
    fx, fy, fz = _lab_f(xyz / _WHITE_XYZ)
    return np.array([116 * fy - 16, 500 * (fx - fy), 200 * (fy - fz)])


def _cielab_to_srgb(lab):
    l, a, b = lab
    fy = (l + 16) / 116
    f = np.array([fy + a / 500, fy, fy - b / 200])
    xyz = _lab_f_inv(f) * _WHITE_XYZ
    return linear_to_srgb(_XYZ_TO_RGB @ xyz)


# === Oklab ===


def _srgb_to_oklab(rgb):
    lms = _OKLAB_M1 @ srgb_to_linear(rgb)
    return _OKLAB_M2 @ np.cbrt(lms)


def _oklab_to_srgb(lab):
    lms = (_OKLAB_M2_INV @ np.asarray(lab, dtype=np.float64)) ** 3
    return linear_to_srgb(_OKLAB_M1_INV @ lms)


# === JzAzBz ===


def _pq(v):
    vn = _spow(v, JZ_N)
    return _spow((JZ_C1 + JZ_C2 * vn) / (1 + JZ_C3 * vn), JZ_P)


def _pq_inv(v):
    vp = _spow(v, 1 / JZ_P)
    return _spow((JZ_C1 - vp) / (JZ_C3 * vp - JZ_C2), 1 / JZ_N)


def _srgb_to_jzazbz(rgb):
    x, y, z = (_RGB_TO_XYZ @ srgb_to_linear(rgb)) * JZ_WHITE_LUMINANCE
    xp = JZ_B * x - (JZ_B - 1) * z
    yp = JZ_G * y - (JZ_G - 1) * x
    lms = _JZ_M1 @ np.array([xp, yp, z])
    iz, az, bz = _JZ_M2 @ _pq(lms / 10000)
    jz = (1 + JZ_D) * iz / (1 + JZ_D * iz) - JZ_D0
    return np.array([jz, az, bz])


def _jzazbz_to_srgb(jab):
    jz, az, bz = jab
    jz = jz + JZ_D0
    iz = jz / (1 + JZ_D - JZ_D * jz)
    lms = 10000 * _pq_inv(_JZ_M2_INV @ np.array([iz, az, bz]))
    xp, yp, z = _JZ_M1_INV @ lms
    x = (xp + (JZ_B - 1) * z) / JZ_B
    y = (yp + (JZ_G - 1) * x) / JZ_G
    xyz = np.array([x, y, z]) / JZ_WHITE_LUMINANCE
    return linear_to_srgb(_XYZ_TO_RGB @ xyz)


# === HSV ===


def _srgb_to_hsv(rgb):
    h, s, v = colorsys.rgb_to_hsv(*(float(c) for c in rgb))
    return np.array([h * 360, s, v])


def _hsv_to_srgb(hsv):
    h, s, v = (float(c) for c in hsv)
    return np.array(colorsys.hsv_to_rgb((h / 360) % 1.0, s, v))


# === Polar forms ===


def _lab_to_lch(lab):
    l, a, b = (float(c) for c in lab)
    return l, math.hypot(a, b), math.degrees(math.atan2(b, a)) % 360


def _lch_to_lab(lch):
    l, c, h = (float(v) for v in lch)
    return np.array([l, c * math.cos(math.radians(h)), c * math.sin(math.radians(h))])


def _hsv_to_lch(hsv):
    h, s, v = (float(c) for c in hsv)
    return v, s, h % 360


def _lch_to_hsv(lch):
    v, s, h = (float(c) for c in lch)
    return np.array([h % 360, s, v])


_Transform = namedtuple("_Transform", ["forward", "inverse", "to_lch", "from_lch"])

_TRANSFORMS = {
    Space.CIELAB: _Transform(_srgb_to_cielab, _cielab_to_srgb, _lab_to_lch, _lch_to_lab),
    Space.OKLAB: _Transform(_srgb_to_oklab, _oklab_to_srgb, _lab_to_lch, _lch_to_lab),
    Space.JZAZBZ: _Transform(_srgb_to_jzazbz, _jzazbz_to_srgb, _lab_to_lch, _lch_to_lab),
    Space.HSV: _Transform(_srgb_to_hsv, _hsv_to_srgb, _hsv_to_lch, _lch_to_hsv),
}

# Lightness of sRGB black and white in each space
_LIGHTNESS_RANGE = {
    space: (
        t.to_lch(t.forward(np.zeros(3)))[0],
        t.to_lch(t.forward(np.ones(3)))[0],
    )
    for space, t in _TRANSFORMS.items()
}


def lightness_range(space):
    """Return the (black, white) lightness of the given space."""
    return _LIGHTNESS_RANGE[Space.from_name(space)]


def from_srgb(space, r, g, b):
    """Convert an 8-bit sRGB triple into coordinates of ``space``.

    Args:
        space: A ``Space`` member or its name
        r, g, b: Channel values; clamped to 0-255

    Returns:
        tuple: Three floats in the space's rectangular form
            (L, a, b) for the Lab-like spaces, (h, s, v) for HSV
    """
    transform = _TRANSFORMS[Space.from_name(space)]
    rgb = np.clip(np.array([r, g, b], dtype=np.float64), 0, 255) / 255
    return tuple(float(c) for c in transform.forward(rgb))


def to_srgb(space, coords):
    """Convert coordinates of ``space`` into an 8-bit sRGB triple.

    Colors outside the sRGB gamut have their chroma reduced toward the
    neutral axis at constant hue until they fit; lightness beyond black
    or white is clamped first. Never fails.

    Args:
        space: A ``Space`` member or its name
        coords: Three numbers in the space's rectangular form

    Returns:
        tuple: (r, g, b) ints, each in 0-255
    """
    space = Space.from_name(space)
    transform = _TRANSFORMS[space]
    coords = np.clip(
        np.nan_to_num(np.asarray(coords, dtype=np.float64)), -COORD_LIMIT, COORD_LIMIT
    )

    with np.errstate(all="ignore"):
        rgb = transform.inverse(coords)
        if not _in_gamut(rgb):
            rgb = _reduce_chroma(space, coords)

    return _quantize(rgb)


def _in_gamut(rgb):
    return bool(
        np.all(np.isfinite(rgb))
        and np.all(rgb >= -GAMUT_EPSILON)
        and np.all(rgb <= 1 + GAMUT_EPSILON)
    )


def _reduce_chroma(space, coords):
    """Bisect the largest chroma scale in [0, 1] that lands inside sRGB."""
    transform = _TRANSFORMS[space]
    lightness, chroma, hue = transform.to_lch(coords)
    black, white = _LIGHTNESS_RANGE[space]
    lightness = min(max(lightness, black), white)

    def attempt(scale):
        # scale 0 must give an exact gray even when chroma is infinite
        scaled = chroma * scale if scale > 0 else 0.0
        return transform.inverse(transform.from_lch((lightness, scaled, hue)))

    full = attempt(1.0)
    if _in_gamut(full):
        return full

    # The zero-chroma axis of some spaces (JzAzBz) is not exactly sRGB gray
    gray = attempt(0.0)
    if not _in_gamut(gray):
        gray = _neutral(space, lightness)

    low, high = 0.0, 1.0
    for _ in range(GAMUT_MAX_STEPS):
        mid = (low + high) / 2
        if _in_gamut(attempt(mid)):
            low = mid
        else:
            high = mid
        if high - low < GAMUT_TOLERANCE:
            break

    return attempt(low) if low > 0 else gray


def _neutral(space, lightness):
    """sRGB gray whose lightness in ``space`` equals ``lightness``."""
    transform = _TRANSFORMS[space]
    low, high = 0.0, 1.0
    for _ in range(GAMUT_MAX_STEPS):
        mid = (low + high) / 2
        if transform.to_lch(transform.forward(np.full(3, mid)))[0] < lightness:
            low = mid
        else:
            high = mid
        if high - low < GAMUT_TOLERANCE:
            break
    return np.full(3, (low + high) / 2)


def _quantize(rgb):
    rgb = np.clip(np.nan_to_num(rgb), 0.0, 1.0)
    return tuple(int(math.floor(c * 255 + 0.5)) for c in rgb)


def to_lch(space, coords):
    """Return (lightness, chroma, hue in degrees) for ``coords``."""
    return tuple(_TRANSFORMS[Space.from_name(space)].to_lch(coords))


def from_lch(space, lch):
    """Return rectangular coordinates for a (lightness, chroma, hue) triple."""
    return tuple(float(c) for c in _TRANSFORMS[Space.from_name(space)].from_lch(lch))


def delta_e(space, coords1, coords2):
    """Euclidean distance between two colors in the cylindrical form of ``space``."""
    points = []
    for coords in (coords1, coords2):
        l, c, h = to_lch(space, coords)
        points.append(
            (l, c * math.cos(math.radians(h)), c * math.sin(math.radians(h)))
        )
    return math.dist(*points)
