"""Perceptual color theme generator with template-based exporters."""

from .color import Color, color_from_hex, color_from_space, create_color
from .colorspace import Space, from_srgb, to_srgb
from .errors import (
    CollurgyError,
    DuplicateKey,
    InvalidExtras,
    InvalidParameter,
    InvalidPreset,
    MissingExtra,
    TemplateParseError,
    UnknownTemplate,
)
from .export import ExporterTemplate, parse_template, render
from .palette import generate_palette, terminal_palette
from .theme import Theme, build_theme

__version__ = "0.2.0"

__all__ = [
    "CollurgyError",
    "Color",
    "DuplicateKey",
    "ExporterTemplate",
    "InvalidExtras",
    "InvalidParameter",
    "InvalidPreset",
    "MissingExtra",
    "Space",
    "TemplateParseError",
    "Theme",
    "UnknownTemplate",
    "build_theme",
    "color_from_hex",
    "color_from_space",
    "create_color",
    "from_srgb",
    "generate_palette",
    "parse_template",
    "render",
    "terminal_palette",
    "to_srgb",
]
