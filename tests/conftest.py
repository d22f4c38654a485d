"""pytest configuration and fixtures for collurgy tests."""

import pytest

from collurgy.color import color_from_hex
from collurgy.theme import build_theme


@pytest.fixture
def hex_palette():
    """Sixteen distinct hex strings; slot 0 black, 3 = 112233, 15 white."""
    palette = [f"{i * 16:02x}{i * 8:02x}{255 - i * 16:02x}" for i in range(16)]
    palette[0] = "000000"
    palette[3] = "112233"
    palette[15] = "ffffff"
    return palette


@pytest.fixture
def make_theme(hex_palette):
    """Factory building a 16-color theme from the shared hex palette."""

    def factory(name="Test", accent="ff00ff", extras=None, palette=None):
        colors = [color_from_hex(h) for h in (palette or hex_palette)]
        return build_theme(name, colors, color_from_hex(accent), extras or {})

    return factory
