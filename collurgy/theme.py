from collections import namedtuple
from collections.abc import Mapping
from types import MappingProxyType

from .color import Color
from .errors import DuplicateKey, InvalidExtras, InvalidParameter


class Theme(namedtuple("Theme", ["name", "palette", "accent", "extras"])):
    """A named palette, an accent color and named aliases into the palette.

    Themes are immutable; the ``with_*`` methods build a new theme through
    ``build_theme`` so every copy is validated again.
    """

    __slots__ = ()

    @property
    def size(self):
        return len(self.palette)

    def extra(self, name):
        """Return the palette color an extras name points at."""
        return self.palette[self.extras[name]]

    def with_color(self, index, color):
        if not 0 <= index < len(self.palette):
            raise InvalidParameter(
                f"slot {index} is outside a palette of {len(self.palette)} colors"
            )
        palette = list(self.palette)
        palette[index] = color
        return build_theme(self.name, palette, self.accent, self.extras)

    def with_accent(self, color):
        return build_theme(self.name, self.palette, color, self.extras)

    def with_name(self, name):
        return build_theme(name, self.palette, self.accent, self.extras)

    def with_extras(self, extras, overwrite=False):
        """Merge ``extras`` into this theme's mapping.

        Existing names win unless ``overwrite`` is set.
        """
        merged = dict(self.extras)
        for key, index in _extras_pairs(extras):
            if overwrite or key not in merged:
                merged[key] = index
        return build_theme(self.name, self.palette, self.accent, merged)


def _extras_pairs(extras):
    if extras is None:
        return []
    if isinstance(extras, Mapping):
        return list(extras.items())
    try:
        pairs = [tuple(pair) for pair in extras]
    except TypeError:
        raise InvalidExtras(f"extras must be a mapping, got {type(extras).__name__}") from None
    for pair in pairs:
        if len(pair) != 2:
            raise InvalidExtras(f"extras entries must be (name, index) pairs, got {pair!r}")
    return pairs


def build_theme(name, palette, accent, extras=None):
    """Validate and assemble a Theme.

    Args:
        name: Theme name
        palette: Sequence of Color values (N >= 1)
        accent: Color used for the accent slot
        extras: Mapping of name -> palette index, or an iterable of
            (name, index) pairs as read from an untyped source

    Returns:
        Theme

    Raises:
        InvalidParameter: Bad name, empty palette or non-Color entries
        InvalidExtras: An index that is not an int in [0, N)
        DuplicateKey: The same extras name given twice
    """
    if not isinstance(name, str):
        raise InvalidParameter(f"theme name must be a string, got {name!r}")

    palette = tuple(palette)
    if not palette:
        raise InvalidParameter("palette must contain at least one color")
    for i, color in enumerate(palette):
        if not isinstance(color, Color):
            raise InvalidParameter(f"palette slot {i} is not a Color: {color!r}")
    if not isinstance(accent, Color):
        raise InvalidParameter(f"accent is not a Color: {accent!r}")

    checked = {}
    for key, index in _extras_pairs(extras):
        if not isinstance(key, str):
            raise InvalidExtras(f"extras names must be strings, got {key!r}")
        if key in checked:
            raise DuplicateKey(key)
        if isinstance(index, bool) or not isinstance(index, int):
            raise InvalidExtras(f"extra {key!r} must map to an integer index, got {index!r}")
        if not 0 <= index < len(palette):
            raise InvalidExtras(
                f"extra {key!r} points at slot {index}, "
                f"outside a palette of {len(palette)} colors"
            )
        checked[key] = index

    return Theme(name, palette, accent, MappingProxyType(checked))
