"""
Color contrast helpers (WCAG 1.4.3).

Colors and font data are read from an element's inline ``style`` attribute.
Values that cannot be determined statically (inherited, ``transparent``,
named colors, stylesheet rules) resolve to None and callers skip them.
"""

import re
from typing import Dict, Optional, Tuple

from bs4 import Tag

RGB = Tuple[int, int, int]

NORMAL_TEXT_RATIO = 4.5
LARGE_TEXT_RATIO = 3.0

RGB_PATTERN = re.compile(r'(\d+)\s*,\s*(\d+)\s*,\s*(\d+)')
HEX_PATTERN = re.compile(r'^#([0-9a-fA-F]{3}|[0-9a-fA-F]{6})$')
FONT_SIZE_PATTERN = re.compile(r'^([\d.]+)\s*(px|pt|rem|em)?$')

# Multipliers to CSS pixels, assuming a 16px root font size
FONT_SIZE_UNITS = {'px': 1.0, 'pt': 4.0 / 3.0, 'rem': 16.0, 'em': 16.0}


def parse_inline_style(style: Optional[str]) -> Dict[str, str]:
    """Parse a ``style`` attribute into a lowercase property -> value map."""
    declarations = {}
    if not style:
        return declarations

    for declaration in style.split(';'):
        if ':' not in declaration:
            continue
        prop, value = declaration.split(':', 1)
        prop = prop.strip().lower()
        value = value.replace('!important', '').strip()
        if prop and value:
            declarations[prop] = value
    return declarations


def parse_color(color: Optional[str]) -> Optional[RGB]:
    """
    Parse a CSS color into an (r, g, b) triple of 0-255 integers.

    Supports ``rgb()``/``rgba()`` and 3- or 6-digit hex notation.

    Returns:
        The RGB triple, or None if the value cannot be parsed
    """
    if not color:
        return None

    color = color.strip().lower()

    if color.startswith('rgb'):
        match = RGB_PATTERN.search(color)
        if not match:
            return None
        rgb = tuple(int(part) for part in match.groups())
        if any(channel > 255 for channel in rgb):
            return None
        return rgb

    if color.startswith('#'):
        match = HEX_PATTERN.match(color)
        if not match:
            return None
        hex_digits = match.group(1)
        if len(hex_digits) == 3:
            hex_digits = ''.join(c * 2 for c in hex_digits)
        return (
            int(hex_digits[0:2], 16),
            int(hex_digits[2:4], 16),
            int(hex_digits[4:6], 16),
        )

    return None


def relative_luminance(rgb: RGB) -> float:
    """Relative luminance of an sRGB color, as defined by WCAG 2.x."""
    channels = []
    for value in rgb:
        c = value / 255.0
        if c <= 0.03928:
            channels.append(c / 12.92)
        else:
            channels.append(((c + 0.055) / 1.055) ** 2.4)
    r, g, b = channels
    return 0.2126 * r + 0.7152 * g + 0.0722 * b


def contrast_ratio(foreground: RGB, background: RGB) -> float:
    """Contrast ratio between two colors, from 1.0 to 21.0."""
    l1 = relative_luminance(foreground)
    l2 = relative_luminance(background)
    lighter, darker = max(l1, l2), min(l1, l2)
    return (lighter + 0.05) / (darker + 0.05)


def font_size_px(value: Optional[str]) -> Optional[float]:
    """Convert a font-size declaration to pixels, or None if unknown."""
    if not value:
        return None
    match = FONT_SIZE_PATTERN.match(value.strip().lower())
    if not match:
        return None
    unit = match.group(2) or 'px'
    try:
        return float(match.group(1)) * FONT_SIZE_UNITS[unit]
    except ValueError:
        return None


def font_weight(value: Optional[str]) -> int:
    """Convert a font-weight declaration to its numeric weight (default 400)."""
    if not value:
        return 400
    value = value.strip().lower()
    if value in ('bold', 'bolder'):
        return 700
    if value.isdigit():
        return int(value)
    return 400


def is_large_text(size_px: Optional[float], weight: int) -> bool:
    """Large text is at least 18px, or at least 14px when bold."""
    if size_px is None:
        return False
    return size_px >= 18 or (size_px >= 14 and weight >= 700)


def minimum_ratio(large_text: bool) -> float:
    """Minimum AA contrast ratio for normal or large text."""
    return LARGE_TEXT_RATIO if large_text else NORMAL_TEXT_RATIO


def element_colors(element: Tag) -> Tuple[Optional[str], Optional[str]]:
    """Return the raw (foreground, background) declarations of an element."""
    style = parse_inline_style(element.get('style'))
    background = style.get('background-color') or style.get('background')
    return style.get('color'), background


def evaluate_element(element: Tag) -> Optional[Dict]:
    """
    Compute the contrast result for one element.

    Returns:
        None when either color is unresolved or unparseable, otherwise a
        dict with the raw colors, the ratio, the required minimum and
        whether the ratio passes.
    """
    foreground_raw, background_raw = element_colors(element)
    if not foreground_raw or not background_raw:
        return None

    foreground = parse_color(foreground_raw)
    background = parse_color(background_raw)
    if not foreground or not background:
        return None

    style = parse_inline_style(element.get('style'))
    large = is_large_text(
        font_size_px(style.get('font-size')),
        font_weight(style.get('font-weight')),
    )
    ratio = contrast_ratio(foreground, background)
    required = minimum_ratio(large)

    return {
        'foreground': foreground_raw,
        'background': background_raw,
        'ratio': ratio,
        'required': required,
        'large_text': large,
        'passes': ratio >= required,
    }
