from .preset import dumps_preset, load_preset, loads_preset, save_preset, theme_from_document
from .registry import ExporterRegistry, default_registry, load_template
from .report import generate_readability_report, print_palette
from .scheme import (
    dumps_scheme,
    load_scheme,
    loads_scheme,
    save_scheme,
    scheme_from_document,
    scheme_to_document,
)
from .template import (
    ExporterTemplate,
    Rendered,
    parse_template,
    render,
    template_from_source,
)

__all__ = [
    "ExporterRegistry",
    "ExporterTemplate",
    "Rendered",
    "default_registry",
    "dumps_preset",
    "dumps_scheme",
    "generate_readability_report",
    "load_preset",
    "load_scheme",
    "load_template",
    "loads_preset",
    "loads_scheme",
    "parse_template",
    "print_palette",
    "render",
    "save_preset",
    "save_scheme",
    "scheme_from_document",
    "scheme_to_document",
    "template_from_source",
    "theme_from_document",
]
