"""Named color presets for pivot tables."""

from dataclasses import dataclass, replace
from typing import Dict, Optional

from .config import StyleOptions


@dataclass(frozen=True)
class Theme:
    """Color profile applied on top of StyleOptions."""
    name: str
    background: str        # Header and row-label background
    foreground: str        # Header and row-label text
    border_color: Optional[str]
    separator_color: str
    zebra_color: str
    font_name: Optional[str] = None


THEMES: Dict[str, Theme] = {
    "nord": Theme(
        name="nord",
        background="#81A1C1",
        foreground="#FFFFFF",
        border_color="#FFFFFF",
        separator_color="#D8DEE9",
        zebra_color="#ECEFF4",
    ),
    "slate": Theme(
        name="slate",
        background="#4A5568",  # Gray-blue
        foreground="#FFFFFF",
        border_color="#DDDDDD",
        separator_color="#A0AEC0",
        zebra_color="#F7FAFC",
    ),
    "ocean": Theme(
        name="ocean",
        background="#2C5282",  # Dark blue
        foreground="#FFFFFF",
        border_color="#FFFFFF",
        separator_color="#90CDF4",
        zebra_color="#EBF8FF",
    ),
    "print": Theme(
        name="print",
        background="#E0E0E0",
        foreground="#000000",
        border_color="#999999",
        separator_color="#000000",
        zebra_color="#F5F5F5",
        font_name="Times-Roman",
    ),
}


def get_theme(name: str) -> Theme:
    """Get a theme by name, with fallback to nord."""
    return THEMES.get(name, THEMES["nord"])


def apply_theme(options: StyleOptions, theme: Theme) -> StyleOptions:
    """Return a copy of options with the theme's colors (and font, if set)."""
    updated = replace(
        options,
        background=theme.background,
        foreground=theme.foreground,
        border_color=theme.border_color,
        separator_color=theme.separator_color,
        zebra_color=theme.zebra_color,
    )
    if theme.font_name is not None:
        updated = replace(updated, font_name=theme.font_name)
    return updated


def get_bold_font(font_family: str) -> str:
    """Get the bold variant of a font family."""
    if font_family == "Times-Roman":
        return "Times-Bold"
    elif font_family.endswith("-Bold"):
        return font_family
    else:
        return f"{font_family}-Bold"
