"""
Formatting Utilities
====================

Number rendering and Telegram MarkdownV2 helpers shared by the reporter,
the watcher and the command handler.
"""

import math
from decimal import Decimal


def round_pct(value: float) -> float:
    """
    Round a percentage to 2 decimal places, half away from zero.

    Rounding is applied to the binary float value, so midpoints that are not
    exactly representable may land either side. Negative zero is returned
    as 0.0.

    Args:
        value: Percentage to round

    Returns:
        Rounded percentage
    """
    scaled = math.floor(abs(value) * 100 + 0.5)
    rounded = math.copysign(scaled, value) / 100
    return rounded + 0.0


def format_number(value: float) -> str:
    """
    Render a float the short way: no trailing ".0", never exponent notation.

    50.0 -> "50", 0.045 -> "0.045", 1e-05 -> "0.00001"
    """
    value = float(value)
    if not math.isfinite(value):
        return str(value)

    text = format(Decimal(repr(value)), "f")
    if "." in text:
        text = text.rstrip("0").rstrip(".")
    if text == "-0":
        text = "0"
    return text


def escape_code(text: str) -> str:
    """Escape characters that are special inside a MarkdownV2 code block."""
    return text.replace("\\", "\\\\").replace("`", "\\`")


def code_block(text: str) -> str:
    """Wrap text in a MarkdownV2 monospace code block."""
    return f"```\n{escape_code(text)}\n```"
