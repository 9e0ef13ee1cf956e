from rich.theme import Theme
from rich.console import Console
from rich.style import Style
from rich.text import Text

VIET_RED = "#DA251D"
VIET_GOLD = "#FFCD00"
SUCCESS_GREEN = "#27AE60"
ERROR_RED = "#C0392B"
INFO_BLUE = "#3498DB"
MUTED_GRAY = "#7F8C8D"
TEXT_WHITE = "#FFFFFF"

DEFAULT_THEME = Theme(
    {
        "primary": Style(color=VIET_RED, bold=True),
        "secondary": Style(color=VIET_GOLD, bold=True),
        "success": Style(color=SUCCESS_GREEN),
        "error": Style(color=ERROR_RED, bold=True),
        "info": Style(color=INFO_BLUE),
        "muted": Style(color=MUTED_GRAY),
        "score_high": Style(color=SUCCESS_GREEN, bold=True),
        "score_medium": Style(color=VIET_GOLD),
        "score_low": Style(color=ERROR_RED),
        "title": Style(color=VIET_RED, bold=True),
        "subtitle": Style(color=MUTED_GRAY),
    }
)

CONSOLE = Console(theme=DEFAULT_THEME)


def get_score_style(score: float) -> Style:
    """Get color style for a score in [0, 1]."""
    if score >= 0.8:
        return Style(color=SUCCESS_GREEN, bold=True)
    elif score >= 0.5:
        return Style(color=VIET_GOLD)
    else:
        return Style(color=ERROR_RED)


def create_success_header() -> Text:
    """Create a success/correct answer header."""
    header = Text()
    header.append("✓ ", Style(color=SUCCESS_GREEN, bold=True))
    header.append("Correct!", Style(color=SUCCESS_GREEN, bold=True))
    return header


def create_error_header() -> Text:
    """Create an error/incorrect answer header."""
    header = Text()
    header.append("✗ ", Style(color=ERROR_RED, bold=True))
    header.append("Not quite!", Style(color=ERROR_RED, bold=True))
    return header


def create_session_complete_header() -> Text:
    """Create session complete header."""
    header = Text()
    header.append("🎉 ", Style(color=VIET_GOLD))
    header.append("Exercise Complete!", Style(color=VIET_RED, bold=True))
    return header
