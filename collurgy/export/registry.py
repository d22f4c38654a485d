import logging
from importlib import resources
from pathlib import Path

from ..errors import CollurgyError, TemplateParseError, UnknownTemplate
from .template import template_from_source

logger = logging.getLogger(__name__)

TEMPLATE_SUFFIXES = {".toml": "toml", ".json": "json"}


def load_template(path):
    """Load an exporter template from a TOML or JSON source file.

    The file stem names the template when the source has no ``name``.
    """
    path = Path(path)
    fmt = TEMPLATE_SUFFIXES.get(path.suffix.lower())
    if fmt is None:
        raise TemplateParseError(f"{path}: template sources must be .toml or .json")
    try:
        text = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise TemplateParseError(f"{path}: {e}") from e
    return template_from_source(text, fmt=fmt, default_name=path.stem)


class ExporterRegistry:
    """Exporter templates by name. Later registrations replace earlier ones."""

    def __init__(self, templates=()):
        self._templates = {}
        for template in templates:
            self.register(template)

    def __contains__(self, name):
        return name in self._templates

    def __iter__(self):
        return iter(self._templates[name] for name in self.names())

    def __len__(self):
        return len(self._templates)

    def register(self, template):
        if template.name in self._templates:
            logger.debug("Template %r replaced", template.name)
        self._templates[template.name] = template
        return template

    def get(self, name):
        try:
            return self._templates[name]
        except KeyError:
            raise UnknownTemplate(name) from None

    def names(self):
        return sorted(self._templates)

    def load_builtins(self):
        """Register the templates shipped in ``collurgy/builtins``."""
        loaded = []
        builtins = resources.files("collurgy").joinpath("builtins")
        for entry in sorted(builtins.iterdir(), key=lambda e: e.name):
            if not entry.name.endswith(".toml"):
                continue
            template = template_from_source(
                entry.read_text(encoding="utf-8"),
                fmt="toml",
                default_name=entry.name[: -len(".toml")],
            )
            loaded.append(self.register(template))
        logger.debug("Loaded %d built-in templates", len(loaded))
        return loaded

    def load_directory(self, directory):
        """Register every user template in ``directory``.

        Sources that fail to parse are skipped with a warning so one broken
        file does not hide the rest.

        Returns:
            list: Templates that were registered
        """
        directory = Path(directory)
        loaded = []
        for path in sorted(directory.iterdir()):
            if path.suffix.lower() not in TEMPLATE_SUFFIXES or not path.is_file():
                continue
            try:
                template = load_template(path)
            except CollurgyError as e:
                logger.warning("Skipping template %s: %s", path, e)
                continue
            loaded.append(self.register(template))
        logger.debug("Loaded %d templates from %s", len(loaded), directory)
        return loaded


def default_registry(user_dirs=()):
    """A registry with the built-ins plus templates from ``user_dirs``."""
    registry = ExporterRegistry()
    registry.load_builtins()
    for directory in user_dirs:
        registry.load_directory(directory)
    return registry
