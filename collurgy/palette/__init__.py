from .extract import extract_base_color, extract_colors
from .generator import (
    DEFAULT_SCHEME,
    TERMINAL_SIZE,
    ConstantChroma,
    EqualHueSteps,
    HueOffsets,
    LightnessScaledChroma,
    TerminalScheme,
    generate_palette,
    linear_lightness,
    terminal_palette,
)

__all__ = [
    "DEFAULT_SCHEME",
    "TERMINAL_SIZE",
    "ConstantChroma",
    "EqualHueSteps",
    "HueOffsets",
    "LightnessScaledChroma",
    "TerminalScheme",
    "extract_base_color",
    "extract_colors",
    "generate_palette",
    "linear_lightness",
    "terminal_palette",
]
