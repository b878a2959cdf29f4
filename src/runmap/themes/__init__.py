"""Theme definitions for run maps."""

from runmap.themes.dark import DARK_THEME
from runmap.themes.light import LIGHT_THEME

THEMES = {
    "dark": DARK_THEME,
    "light": LIGHT_THEME,
}

__all__ = ["THEMES", "DARK_THEME", "LIGHT_THEME"]
