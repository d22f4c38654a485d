"""
Exporter templates: third-party config files with a fixed set of
placeholders that are filled in from a Theme.

Placeholders (case-sensitive):

    {NAME}          theme name
    {HEXk}          hex of palette slot k, 0 <= k < size
    {ACCHEX}        hex of the accent color
    {<EXTRA>HEX}    hex of the slot a declared extra points at

Any other brace-delimited text is copied through untouched, so formats
that use braces themselves (JSON, CSS, Lua tables) can be templated.
"""

import json
import re
import tomllib
from collections import namedtuple
from collections.abc import Mapping
from types import MappingProxyType

from ..errors import InvalidParameter, MissingExtra, TemplateParseError

DEFAULT_SIZE = 16

# A closed span on one line, or a bare word with no closing brace before
# the next "{", newline or end of text
_TOKEN = re.compile(r"\{([^{}\n]*)\}|\{([A-Za-z0-9_]+)")
_SLOT = re.compile(r"HEX([0-9]+)")
_EXTRA_NAME = re.compile(r"[A-Za-z0-9_]+")

# Extras whose {<EXTRA>HEX} token would collide with a fixed placeholder
_RESERVED_EXTRAS = frozenset({"ACC"})

Placeholder = namedtuple("Placeholder", ["kind", "key"])
Rendered = namedtuple("Rendered", ["text", "path"])


class ExporterTemplate(
    namedtuple(
        "ExporterTemplate",
        ["name", "path", "extras", "size", "body", "segments", "suggested_extras"],
    )
):
    """A parsed template; immutable and safe to share between renders."""

    __slots__ = ()

    def render(self, theme):
        return render(self, theme)

    def placeholders(self):
        return [s for s in self.segments if isinstance(s, Placeholder)]


def _classify(body, extras):
    if body == "NAME":
        return Placeholder("name", None)
    if body == "ACCHEX":
        return Placeholder("accent", None)
    slot = _SLOT.fullmatch(body)
    if slot:
        return Placeholder("hex", int(slot.group(1)))
    if body.endswith("HEX") and body[:-3] in extras:
        return Placeholder("extra", body[:-3])
    return None


def _check_extras(declared):
    extras = set()
    for name in declared:
        if not isinstance(name, str) or not _EXTRA_NAME.fullmatch(name):
            raise TemplateParseError(
                f"extra names must be letters, digits or underscores, got {name!r}"
            )
        if name in _RESERVED_EXTRAS:
            raise TemplateParseError(f"extra name {name!r} would shadow {{{name}HEX}}")
        extras.add(name)
    return frozenset(extras)


def _line_of(text, offset):
    return text.count("\n", 0, offset) + 1


def parse_template(
    raw_text,
    declared_extras,
    destination_path_hint=None,
    name="",
    size=DEFAULT_SIZE,
    suggested_extras=None,
):
    """Parse template text into literal and placeholder segments.

    Args:
        raw_text: Template body
        declared_extras: Extras names the template requires of a theme
        destination_path_hint: Where the rendered file usually lives
        name: Template name, used in error messages
        size: Palette size the template is written for
        suggested_extras: Optional name -> slot suggestions from the source

    Returns:
        ExporterTemplate

    Raises:
        TemplateParseError: Bad extras names, a slot past ``size`` or a
            placeholder that is never closed
    """
    if not isinstance(raw_text, str):
        raise TemplateParseError(f"template {name!r}: body must be a string")
    if isinstance(size, bool) or not isinstance(size, int) or size <= 0:
        raise TemplateParseError(f"template {name!r}: size must be a positive integer")
    extras = _check_extras(declared_extras)

    segments = []
    literal = []
    pos = 0
    for match in _TOKEN.finditer(raw_text):
        literal.append(raw_text[pos : match.start()])
        pos = match.end()
        unclosed = match.group(2) is not None
        body = match.group(2) if unclosed else match.group(1)
        placeholder = _classify(body, extras)

        if placeholder is None:
            literal.append(match.group(0))
            continue
        if unclosed:
            raise TemplateParseError(
                f"template {name!r}, line {_line_of(raw_text, match.start())}: "
                f"unterminated placeholder {{{body}"
            )
        if placeholder.kind == "hex" and placeholder.key >= size:
            raise TemplateParseError(
                f"template {name!r}, line {_line_of(raw_text, match.start())}: "
                f"{{{body}}} is outside a palette of {size} colors"
            )

        if literal:
            segments.append("".join(literal))
            literal = []
        segments.append(placeholder)

    literal.append(raw_text[pos:])
    tail = "".join(literal)
    if tail:
        segments.append(tail)

    return ExporterTemplate(
        name=name,
        path=destination_path_hint,
        extras=extras,
        size=size,
        body=raw_text,
        segments=tuple(segments),
        suggested_extras=MappingProxyType(dict(suggested_extras or {})),
    )


def render(template, theme):
    """Fill a template from a theme in one pass over its segments.

    Substituted values are never scanned again, so a theme name that
    looks like a placeholder is emitted as-is.

    Returns:
        Rendered: (text, path) where path is the template's path hint

    Raises:
        MissingExtra: The theme lacks an extra the template declares
        InvalidParameter: Theme and template disagree on palette size
    """
    if len(theme.palette) != template.size:
        raise InvalidParameter(
            f"template {template.name!r} expects {template.size} colors, "
            f"theme {theme.name!r} has {len(theme.palette)}"
        )
    for extra in sorted(template.extras):
        if extra not in theme.extras:
            raise MissingExtra(extra, template=template.name)

    parts = []
    for segment in template.segments:
        if isinstance(segment, str):
            parts.append(segment)
        elif segment.kind == "name":
            parts.append(theme.name)
        elif segment.kind == "accent":
            parts.append(theme.accent.hex)
        elif segment.kind == "hex":
            parts.append(theme.palette[segment.key].hex)
        else:
            parts.append(theme.palette[theme.extras[segment.key]].hex)

    return Rendered("".join(parts), template.path)


def template_from_document(data, default_name=""):
    """Build a template from a decoded source document.

    Expected keys: ``formatter`` (required), ``name``, ``path``,
    ``extras`` (name -> suggested slot) and ``size``.
    """
    if not isinstance(data, Mapping):
        raise TemplateParseError("template source must be a table of keys")

    name = data.get("name", default_name)
    if not isinstance(name, str):
        raise TemplateParseError(f"template name must be a string, got {name!r}")

    formatter = data.get("formatter")
    if not isinstance(formatter, str):
        raise TemplateParseError(f"template {name!r}: 'formatter' must be a string")

    path = data.get("path")
    if path is not None and not isinstance(path, str):
        raise TemplateParseError(f"template {name!r}: 'path' must be a string")

    extras = data.get("extras", {})
    if not isinstance(extras, Mapping):
        raise TemplateParseError(f"template {name!r}: 'extras' must be a table")
    for key, slot in extras.items():
        if isinstance(slot, bool) or not isinstance(slot, int):
            raise TemplateParseError(
                f"template {name!r}: extra {key!r} must suggest an integer slot"
            )

    size = data.get("size", DEFAULT_SIZE)
    template = parse_template(
        formatter,
        extras.keys(),
        path,
        name=name,
        size=size,
        suggested_extras=extras,
    )
    for key, slot in template.suggested_extras.items():
        if not 0 <= slot < template.size:
            raise TemplateParseError(
                f"template {name!r}: extra {key!r} suggests slot {slot}, "
                f"outside a palette of {template.size} colors"
            )
    return template


def template_from_source(text, fmt="toml", default_name=""):
    """Parse TOML or JSON template source text."""
    try:
        if fmt == "toml":
            data = tomllib.loads(text)
        elif fmt == "json":
            data = json.loads(text)
        else:
            raise TemplateParseError(f"unsupported template format {fmt!r}")
    except (tomllib.TOMLDecodeError, json.JSONDecodeError) as e:
        raise TemplateParseError(f"template {default_name!r}: {e}") from e
    return template_from_document(data, default_name=default_name)
