"""Color & style helpers plus the light/dark theme palettes.

Decisions:
- Truecolor preferred; falls back to 256-color cube if unsupported.
- Disables automatically when not a TTY unless FORCE_COLOR=1.
- Honors NO_COLOR for complete disable.
- Light and dark palettes differ only in hues picked for contrast against
  the terminal background; the accent can be overridden with TASKPAD_ACCENT.
"""
from __future__ import annotations
import os, re, sys
from dataclasses import dataclass

_FORCE = os.environ.get("FORCE_COLOR", "").lower() in {"1", "true", "yes", "on"}
_NO_COLOR = os.environ.get("NO_COLOR") is not None
_ENABLE = (_FORCE or sys.stdout.isatty()) and not _NO_COLOR
_COLORTERM = os.environ.get("COLORTERM", "").lower()
_USE_TRUECOLOR = _ENABLE and any(tok in _COLORTERM for tok in ("truecolor", "24bit"))

ANSI_RE = re.compile(r"\x1b\[[0-9;]*m")

THEMES = ("light", "dark")
DEFAULT_THEME = "light"

def _code(part: str) -> str:
    """Generate ANSI escape code for a given style part."""
    return f"\033[{part}m" if _ENABLE else ''

def _hex_to_rgb(hex_code: str) -> tuple[int,int,int]:
    """Convert a hex color code to an RGB tuple."""
    h = hex_code.lstrip('#')
    return int(h[0:2],16), int(h[2:4],16), int(h[4:6],16)

def _fg_256(r: int, g: int, b: int) -> str:
    """Approximate RGB to xterm 256-color cube."""
    def to_6(x: int) -> int:
        return int(round(x / 255 * 5))
    r6, g6, b6 = to_6(r), to_6(g), to_6(b)
    return f"\033[38;5;{16 + 36 * r6 + 6 * g6 + b6}m"

def _from_hex(hex_code: str) -> str:
    if not _ENABLE:
        return ''
    r, g, b = _hex_to_rgb(hex_code)
    if _USE_TRUECOLOR:
        return f"\033[38;2;{r};{g};{b}m"
    return _fg_256(r, g, b)

def _valid_hex(value: str) -> bool:
    h = value.lstrip('#')
    return len(h) == 6 and all(c in '0123456789abcdefABCDEF' for c in h)

RESET = _code('0')
BOLD = _code('1')
DIM = _code('2')
STRIKE = _code('9')

_HEX = {
    'light': {
        'accent': '#1F4E96', 'text': '#1A1A1A', 'muted': '#6B6B6B', 'done': '#2E7D32',
        'category': '#5B3E96', 'high': '#C62828', 'medium': '#B26A00', 'low': '#2E7D32',
        'due': '#1F4E96', 'overdue': '#C62828',
    },
    'dark': {
        'accent': '#7AA2F7', 'text': '#E6E6E6', 'muted': '#9A9A9A', 'done': '#A7E399',
        'category': '#BB9AF7', 'high': '#F7768E', 'medium': '#F6FF99', 'low': '#A7E399',
        'due': '#7DCFFF', 'overdue': '#FF5555',
    },
}


@dataclass(frozen=True)
class Palette:
    accent: str
    text: str
    muted: str
    done: str
    category: str
    high: str
    medium: str
    low: str
    due: str
    overdue: str

    def priority(self, level: str) -> str:
        return {'high': self.high, 'low': self.low}.get(level, self.medium)


def palette_for(theme: str) -> Palette:
    """ANSI palette for a theme; unknown names get the default theme."""
    hexes = dict(_HEX.get(theme, _HEX[DEFAULT_THEME]))
    accent = os.environ.get('TASKPAD_ACCENT', '')
    if accent and _valid_hex(accent):
        hexes['accent'] = '#' + accent.lstrip('#')
    return Palette(**{name: _from_hex(value) for name, value in hexes.items()})


def toggle_theme(theme: str) -> str:
    return "light" if theme == "dark" else "dark"


def color(text: str, *styles: str) -> str:
    """Apply ANSI styles to a given text."""
    if not _ENABLE:
        return text
    return ''.join(styles) + text + RESET


def strip_ansi(text: str) -> str:
    return ANSI_RE.sub('', text)


__all__ = [
    'color','strip_ansi','palette_for','toggle_theme','Palette','THEMES','DEFAULT_THEME',
    'RESET','BOLD','DIM','STRIKE','ANSI_RE',
]
