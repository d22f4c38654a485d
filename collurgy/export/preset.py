import json
import logging
import tomllib
from collections.abc import Mapping
from pathlib import Path

from ..color import color_from_hex
from ..errors import CollurgyError, InvalidPreset
from ..theme import build_theme

logger = logging.getLogger(__name__)

PRESET_SUFFIXES = {".json": "json", ".toml": "toml"}


class _Pairs(list):
    """JSON object kept as its ordered (key, value) pairs."""


def _keep_pairs(pairs):
    return _Pairs(pairs)


def _as_document(value):
    """Turn pair lists back into dicts, except where repeats must be checked."""
    if isinstance(value, _Pairs):
        document = {}
        for key, item in value:
            if key == "extras" and isinstance(item, _Pairs):
                document[key] = [(k, _as_document(v)) for k, v in item]
            else:
                document[key] = _as_document(item)
        return document
    if isinstance(value, list):
        return [_as_document(v) for v in value]
    return value


def theme_from_document(data):
    """Build a Theme from a decoded preset document.

    Args:
        data: Mapping with ``name``, ``palette`` (list of hex strings),
            ``accent`` (hex string) and optional ``extras``
            (name -> index mapping or list of pairs)

    Returns:
        Theme
    """
    if not isinstance(data, Mapping):
        raise InvalidPreset("preset must be a table of keys")

    missing = [key for key in ("name", "palette", "accent") if key not in data]
    if missing:
        raise InvalidPreset(f"preset is missing {', '.join(missing)}")

    palette = data["palette"]
    if not isinstance(palette, list) or not all(isinstance(h, str) for h in palette):
        raise InvalidPreset("preset palette must be a list of hex strings")
    if not isinstance(data["accent"], str):
        raise InvalidPreset("preset accent must be a hex string")

    try:
        colors = [color_from_hex(h) for h in palette]
        accent = color_from_hex(data["accent"])
    except CollurgyError as e:
        raise InvalidPreset(str(e)) from e

    # InvalidExtras / DuplicateKey propagate unchanged
    return build_theme(data["name"], colors, accent, data.get("extras", {}))


def theme_to_document(theme):
    return {
        "name": theme.name,
        "palette": [c.hex for c in theme.palette],
        "accent": theme.accent.hex,
        "extras": dict(theme.extras),
    }


def loads_preset(text, fmt="json"):
    """Parse preset text in ``json`` or ``toml`` format into a Theme."""
    try:
        if fmt == "json":
            data = _as_document(json.loads(text, object_pairs_hook=_keep_pairs))
        elif fmt == "toml":
            data = tomllib.loads(text)
        else:
            raise InvalidPreset(f"unsupported preset format {fmt!r}")
    except (json.JSONDecodeError, tomllib.TOMLDecodeError) as e:
        raise InvalidPreset(str(e)) from e
    return theme_from_document(data)


def dumps_preset(theme):
    return json.dumps(theme_to_document(theme), indent=2)


def load_preset(path):
    """Load a preset file, choosing the format by suffix (.json or .toml)."""
    path = Path(path)
    fmt = PRESET_SUFFIXES.get(path.suffix.lower())
    if fmt is None:
        raise InvalidPreset(f"{path}: presets must be .json or .toml")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise InvalidPreset(f"{path}: {e}") from e
    logger.debug("Loading preset %s", path)
    return loads_preset(text, fmt=fmt)


def save_preset(theme, path):
    """Write a theme as a JSON preset."""
    path = Path(path)
    with open(path, "w", encoding="utf-8") as f:
        f.write(dumps_preset(theme))
        f.write("\n")
    logger.debug("Saved preset %s", path)
    return path
