"""Exceptions raised by the theme engine."""


class CollurgyError(Exception):
    """Base class for every recoverable failure in collurgy."""


class InvalidParameter(CollurgyError, ValueError):
    """Raised when generation or construction inputs are unusable."""


class InvalidExtras(CollurgyError):
    """Raised when an extras index does not address a palette slot."""


class DuplicateKey(CollurgyError):
    """Raised when an extras name appears more than once."""

    def __init__(self, name):
        super().__init__(f"duplicate extras key {name!r}")
        self.name = name


class TemplateParseError(CollurgyError):
    """Raised when exporter template source cannot be parsed."""


class MissingExtra(CollurgyError):
    """Raised at render time when a theme lacks a required extra."""

    def __init__(self, name, template=""):
        where = f"template {template!r}" if template else "template"
        super().__init__(f"{where} requires extra {name!r}, which the theme does not define")
        self.name = name
        self.template = template


class InvalidPreset(CollurgyError):
    """Raised when a persisted preset document is malformed."""


class UnknownTemplate(CollurgyError, KeyError):
    """Raised when a registry lookup names no known template."""

    def __str__(self):
        return f"unknown exporter template {self.args[0]!r}"
