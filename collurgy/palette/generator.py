import math
from collections import namedtuple

from ..color import color_coords, color_from_space
from ..colorspace import Space, from_lch, lightness_range, to_lch
from ..errors import InvalidParameter

TERMINAL_SIZE = 16

# Spectrum rotations land in ANSI order: red, yellow, green, cyan, blue, magenta
SPECTRUM_SLOTS = (1, 3, 2, 6, 4, 5)
SPECTRUM_BRIGHT_SLOTS = (9, 11, 10, 14, 12, 13)


class EqualHueSteps(namedtuple("EqualHueSteps", ["offset"], defaults=[0.0])):
    """Spread slots at equal angles around the hue circle."""

    def offsets(self, n):
        return [self.offset + 360.0 * i / n for i in range(n)]


class HueOffsets(namedtuple("HueOffsets", ["values"])):
    """Explicit hue offset (degrees from the base hue) for every slot."""

    def offsets(self, n):
        values = list(self.values)
        if len(values) != n:
            raise InvalidParameter(f"expected {n} hue offsets, got {len(values)}")
        return [_finite(v, "hue offset") for v in values]


class ConstantChroma(namedtuple("ConstantChroma", ["value"])):
    """Same chroma for every slot."""

    def chroma(self, lightness, space):
        return self.value


class LightnessScaledChroma(namedtuple("LightnessScaledChroma", ["peak"])):
    """Chroma peaking at mid lightness and falling to zero at black and white.

    Near the ends of the lightness axis sRGB cannot hold much chroma, so
    scaling keeps the gamut mapper from flattening those slots.
    """

    def chroma(self, lightness, space):
        black, white = lightness_range(space)
        t = (lightness - black) / (white - black)
        t = min(max(t, 0.0), 1.0)
        return self.peak * 4 * t * (1 - t)


TerminalScheme = namedtuple(
    "TerminalScheme",
    ["foreground", "background", "spectrum", "spectrum_bright", "accent"],
)

# Polar (lightness, chroma, hue) triples in CIE LCh
DEFAULT_SCHEME = TerminalScheme(
    foreground=(100.0, 0.0, 0.0),
    background=(0.0, 0.0, 0.0),
    spectrum=(35.0, 35.0, 0.0),
    spectrum_bright=(65.0, 65.0, 0.0),
    accent=11,  # Bright yellow
)


def _finite(value, what):
    try:
        value = float(value)
    except (TypeError, ValueError):
        raise InvalidParameter(f"{what} must be a number, got {value!r}") from None
    if not math.isfinite(value):
        raise InvalidParameter(f"{what} must be finite, got {value!r}")
    return value


def _check_size(n):
    if isinstance(n, bool) or not isinstance(n, int):
        raise InvalidParameter(f"palette size must be an integer, got {n!r}")
    if n <= 0:
        raise InvalidParameter(f"palette size must be positive, got {n}")


def linear_lightness(n, start, stop):
    """Evenly spaced lightness targets from ``start`` to ``stop`` inclusive."""
    _check_size(n)
    start = _finite(start, "lightness")
    stop = _finite(stop, "lightness")
    if n == 1:
        return [start]
    step = (stop - start) / (n - 1)
    return [start + step * i for i in range(n)]


def generate_palette(
    base, space, n, lightness_curve, hue_policy=None, chroma_policy=None
):
    """Generate ``n`` perceptually spaced colors around a base color.

    Each slot takes its lightness from the curve, its chroma from the
    chroma policy and its hue from the base hue plus the policy offset.
    Slots are converted through the gamut mapper and never reordered.

    Args:
        base: Color whose hue (in ``space``) anchors the palette
        space: Space (or name) the slots are laid out in
        n: Number of slots
        lightness_curve: Sequence of ``n`` lightness targets
        hue_policy: EqualHueSteps (default) or HueOffsets
        chroma_policy: ConstantChroma or LightnessScaledChroma.
            Defaults to the base color's own chroma.

    Returns:
        tuple: ``n`` Color values, slot order preserved
    """
    _check_size(n)
    space = Space.from_name(space)

    curve = [_finite(v, "lightness") for v in lightness_curve]
    if len(curve) != n:
        raise InvalidParameter(f"expected {n} lightness values, got {len(curve)}")

    _, base_chroma, base_hue = to_lch(space, color_coords(base, space))
    if hue_policy is None:
        hue_policy = EqualHueSteps()
    if chroma_policy is None:
        chroma_policy = ConstantChroma(base_chroma)
    offsets = hue_policy.offsets(n)

    palette = []
    for lightness, offset in zip(curve, offsets):
        chroma = _finite(chroma_policy.chroma(lightness, space), "chroma")
        # Negative chroma means a gray slot
        chroma = max(chroma, 0.0)
        hue = (base_hue + offset) % 360
        palette.append(color_from_space(space, from_lch(space, (lightness, chroma, hue))))
    return tuple(palette)


def _mix(a, b, weight):
    """Move polar triple ``a`` toward ``b`` by ``weight``, hue along the short arc."""
    lightness = a[0] + (b[0] - a[0]) * weight
    chroma = a[1] + (b[1] - a[1]) * weight
    delta = (b[2] - a[2] + 180) % 360 - 180
    return (lightness, chroma, (a[2] + delta * weight) % 360)


def terminal_palette(scheme=DEFAULT_SCHEME, space=Space.CIELAB):
    """Build the 16-slot terminal layout from a TerminalScheme.

    Slot 0 is the background and 15 the foreground; 8 and 7 sit a third of
    the way between them. The normal and bright spectrum each contribute six
    hues 60 degrees apart.

    Returns:
        tuple: 16 Color values
    """
    space = Space.from_name(space)
    for field in ("foreground", "background", "spectrum", "spectrum_bright"):
        triple = getattr(scheme, field)
        if len(triple) != 3:
            raise InvalidParameter(f"{field} must be a (lightness, chroma, hue) triple")
        for value in triple:
            _finite(value, field)

    slots = [None] * TERMINAL_SIZE
    slots[0] = scheme.background
    slots[8] = _mix(scheme.background, scheme.foreground, 1 / 3)
    slots[7] = _mix(scheme.foreground, scheme.background, 1 / 3)
    slots[15] = scheme.foreground

    for base, targets in (
        (scheme.spectrum, SPECTRUM_SLOTS),
        (scheme.spectrum_bright, SPECTRUM_BRIGHT_SLOTS),
    ):
        lightness, chroma, hue = base
        for step, slot in enumerate(targets):
            slots[slot] = (lightness, max(chroma, 0.0), (hue + 60.0 * step) % 360)

    return tuple(
        color_from_space(space, from_lch(space, lch)) for lch in slots
    )
