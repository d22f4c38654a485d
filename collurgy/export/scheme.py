import json
import logging
import math
import tomllib
from collections.abc import Mapping
from pathlib import Path

from ..colorspace import Space
from ..errors import CollurgyError, InvalidPreset
from ..palette import TERMINAL_SIZE, TerminalScheme

logger = logging.getLogger(__name__)

SCHEME_SUFFIXES = {".json": "json", ".toml": "toml"}
SCHEME_TRIPLES = ("foreground", "background", "spectrum", "spectrum_bright")


def _triple(data, field):
    value = data[field]
    if (
        not isinstance(value, (list, tuple))
        or len(value) != 3
        or any(isinstance(v, bool) or not isinstance(v, (int, float)) for v in value)
        or not all(math.isfinite(v) for v in value)
    ):
        raise InvalidPreset(f"scheme {field} must be three finite numbers (lightness, chroma, hue)")
    return tuple(float(v) for v in value)


def scheme_from_document(data):
    """Read terminal scheme inputs from a decoded document.

    Args:
        data: Mapping with the polar triples ``foreground``, ``background``,
            ``spectrum`` and ``spectrum_bright``, an ``accent`` slot and an
            optional ``space`` name (CIE Lab when absent)

    Returns:
        tuple: (TerminalScheme, Space)
    """
    if not isinstance(data, Mapping):
        raise InvalidPreset("scheme must be a table of keys")

    missing = [key for key in SCHEME_TRIPLES + ("accent",) if key not in data]
    if missing:
        raise InvalidPreset(f"scheme is missing {', '.join(missing)}")

    triples = {field: _triple(data, field) for field in SCHEME_TRIPLES}

    accent = data["accent"]
    if isinstance(accent, bool) or not isinstance(accent, int) or not 0 <= accent < TERMINAL_SIZE:
        raise InvalidPreset(f"scheme accent must be a slot in 0-{TERMINAL_SIZE - 1}, got {accent!r}")

    try:
        space = Space.from_name(data.get("space", Space.CIELAB))
    except CollurgyError as e:
        raise InvalidPreset(str(e)) from e

    return TerminalScheme(accent=accent, **triples), space


def scheme_to_document(scheme, space=Space.CIELAB):
    document = {field: [float(v) for v in getattr(scheme, field)] for field in SCHEME_TRIPLES}
    document["accent"] = scheme.accent
    document["space"] = Space.from_name(space).value
    return document


def loads_scheme(text, fmt="json"):
    try:
        if fmt == "json":
            data = json.loads(text)
        elif fmt == "toml":
            data = tomllib.loads(text)
        else:
            raise InvalidPreset(f"unsupported scheme format {fmt!r}")
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise InvalidPreset(str(e)) from e
    return scheme_from_document(data)


def dumps_scheme(scheme, space=Space.CIELAB):
    return json.dumps(scheme_to_document(scheme, space), indent=2)


def load_scheme(path):
    """Load scheme inputs saved earlier (.json or .toml) to regenerate a palette."""
    path = Path(path)
    fmt = SCHEME_SUFFIXES.get(path.suffix.lower())
    if fmt is None:
        raise InvalidPreset(f"{path}: schemes must be .json or .toml")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidPreset(f"{path}: {e}") from e
    logger.debug("Loading scheme %s", path)
    return loads_scheme(text, fmt=fmt)


def save_scheme(scheme, path, space=Space.CIELAB):
    """Write scheme inputs as JSON."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_scheme(scheme, space))
        f.write("\n")
    logger.debug("Saved scheme %s", path)
    return path
