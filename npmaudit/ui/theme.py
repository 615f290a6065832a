"""
npmaudit visual design system.

All colors, styles, and icons as named constants.
Import from here — never hardcode markup strings in other modules.

CI log viewers render 24-bit color but have no light/dark query,
so a single palette tuned for dark backgrounds is used everywhere.
"""

from rich.style import Style
from rich.theme import Theme


# ── Brand ─────────────────────────────────────────────────────────────────────

from npmaudit import __version__

APP_NAME = "npmaudit"
APP_TAGLINE = "npm audit fix automation"
APP_VERSION = __version__


# ── Color palette ─────────────────────────────────────────────────────────────

COLOR_CRITICAL = "#E05252"      # Warm severity red
COLOR_WARNING  = "#D4870A"      # Amber
COLOR_PASS     = "#4DBD74"      # Calm sage-green
COLOR_INFO     = "#5BA3C9"      # Slate blue
COLOR_BRAND    = "#7B9FD4"      # Periwinkle blue
COLOR_DIM      = "#787878"      # Medium gray
COLOR_COMMAND  = "#C0C0C0"      # Light silver — commands stand out from dim text
COLOR_TEXT     = "#F0F0F0"      # Primary text — near-white


# ── Rich styles ───────────────────────────────────────────────────────────────

STYLE_CRITICAL = Style(color=COLOR_CRITICAL, bold=True)
STYLE_WARNING  = Style(color=COLOR_WARNING,  bold=True)
STYLE_PASS     = Style(color=COLOR_PASS,     bold=True)
STYLE_INFO     = Style(color=COLOR_INFO)
STYLE_DIM      = Style(color=COLOR_DIM)


# ── Status icons ──────────────────────────────────────────────────────────────

ICON_PASS = "✅"
ICON_WARNING = "⚠️ "
ICON_CRITICAL = "🔴"
ICON_INFO = "ℹ️ "
ICON_SKIP = "⏭️ "

STATUS_ICONS: dict[str, str] = {
    "pass": ICON_PASS,
    "warning": ICON_WARNING,
    "critical": ICON_CRITICAL,
    "info": ICON_INFO,
    "skip": ICON_SKIP,
}

STATUS_STYLES: dict[str, Style] = {
    "pass": STYLE_PASS,
    "warning": STYLE_WARNING,
    "critical": STYLE_CRITICAL,
    "info": STYLE_INFO,
    "skip": STYLE_DIM,
}


# ── Step icons ────────────────────────────────────────────────────────────────

STEP_ICONS: dict[str, str] = {
    "lockfile": "🔒",
    "fix": "🔧",
    "compare": "🔍",
    "pull_request": "🔀",
    "verify": "🛡️ ",
    "issue": "📝",
}


# ── Rich Theme ────────────────────────────────────────────────────────────────

NPMAUDIT_THEME = Theme(
    {
        "critical": f"{COLOR_CRITICAL} bold",
        "warning":  f"{COLOR_WARNING} bold",
        "pass":     f"{COLOR_PASS} bold",
        "info":     COLOR_INFO,
        "brand":    f"{COLOR_BRAND} bold",
        "dim":      COLOR_DIM,
        "section":  f"{COLOR_BRAND} bold",
        "command":  COLOR_COMMAND,
        "text":     COLOR_TEXT,        # primary text — use instead of hardcoded "white"
    }
)
