"""Console output module for colored messages and formatting.

This module provides colored console output functions that use Rich, with a
colorama fallback (or plain text) when Rich output is disabled. Messages are
printed without Rich markup so currency names and error messages containing
square brackets are shown as-is.
"""

import os
import sys
from typing import Optional

from colorama import init, Fore, Back, Style
from rich.console import Console
from rich.panel import Panel
from rich.text import Text

init(autoreset=True)  # Initialize colorama

console = Console()

_FORCE_FALLBACK = os.environ.get("FORCE_FALLBACK", "").lower() in ("true", "1", "yes", "on")
_FORCE_COLORAMA_ONLY = os.environ.get("FORCE_COLORAMA_ONLY", "").lower() in ("true", "1", "yes", "on")


class _NoColor:
    """Stands in for colorama's Fore/Back/Style when colors are turned off."""

    def __getattr__(self, name):
        return ""


_EMOJI_FALLBACKS = {
    "✅": "OK",
    "❌": "X",
    "⚠️": "!",
    "ℹ️": "i",
    "💱": "$",
    "📋": "[L]",
    "📅": "[D]",
    "🔄": "~",
}


def _safe_emoji(emoji: str) -> str:
    """Return emoji if the console can encode it, otherwise a safe alternative."""
    try:
        emoji.encode(sys.stdout.encoding or 'utf-8')
        return emoji
    except (UnicodeEncodeError, LookupError):
        return _EMOJI_FALLBACKS.get(emoji, "*")


def set_force_fallback(force_fallback: bool = True, colorama_only: bool = False) -> None:
    """Force fallback mode.

    Args:
        force_fallback: If True, disable Rich and use colorama/plain text
        colorama_only: If True, disable Rich but keep colorama (only works if force_fallback=True)
    """
    global _FORCE_FALLBACK, _FORCE_COLORAMA_ONLY, Fore, Back, Style

    _FORCE_FALLBACK = force_fallback
    _FORCE_COLORAMA_ONLY = colorama_only

    if force_fallback and not colorama_only:
        # Plain text: no escape codes at all
        Fore = Back = Style = _NoColor()
    else:
        from colorama import Fore, Back, Style


def _print_styled(message: str, emoji: str, style: str, color: str, label: str) -> None:
    safe_emoji = _safe_emoji(emoji)
    if has_rich_support():
        try:
            console.print(f"{safe_emoji} {message}", style=style, markup=False,
                          highlight=False, soft_wrap=True)
        except UnicodeEncodeError:
            print(f"{label}: {message}")
    else:
        print(f"{color}{safe_emoji} {message}{Style.RESET_ALL}")


def print_success(message: str, emoji: str = "✅") -> None:
    """Print a success message with green color and emoji.

    Args:
        message: The success message to display
        emoji: The emoji to display with the message (default: ✅)
    """
    _print_styled(message, emoji, "bold green", Fore.GREEN, "SUCCESS")


def print_error(message: str, emoji: str = "❌") -> None:
    """Print an error message with red color and emoji."""
    _print_styled(message, emoji, "bold red", Fore.RED, "ERROR")


def print_warning(message: str, emoji: str = "⚠️") -> None:
    """Print a warning message with yellow color and emoji."""
    _print_styled(message, emoji, "bold yellow", Fore.YELLOW, "WARNING")


def print_info(message: str, emoji: str = "ℹ️") -> None:
    """Print an info message with blue color and emoji."""
    _print_styled(message, emoji, "bold blue", Fore.BLUE, "INFO")


def print_exception(error: BaseException) -> None:
    """Print an exception as "ErrorType: [message]."

    Args:
        error: The exception to display
    """
    print_error(format_exception(error))


def format_exception(error: BaseException) -> str:
    return f"{type(error).__name__}: [{error}]."


def print_plain(message: str) -> None:
    """Print a line without emoji or styling."""
    if has_rich_support():
        console.print(message, markup=False, highlight=False, soft_wrap=True)
    else:
        print(message)


def print_header(title: str, emoji: str = "💱", width: int = 60) -> None:
    """Print a formatted header with emoji.

    Args:
        title: The header title to display
        emoji: The emoji to display with the title (default: 💱)
        width: The width of the header line (default: 60)
    """
    safe_emoji = _safe_emoji(emoji)
    header_text = f"{safe_emoji} {title} {safe_emoji}"

    if has_rich_support():
        panel = Panel(
            Text(header_text, style="bold bright_white", justify="center"),
            style="bright_cyan",
            padding=(0, 1),
            width=width
        )
        console.print(panel)
    else:
        print(f"{Fore.CYAN}{Style.BRIGHT}{'=' * width}{Style.RESET_ALL}")
        print(f"{Back.CYAN}{Fore.WHITE}{Style.BRIGHT}{header_text:^{width}}{Style.RESET_ALL}")
        print(f"{Fore.CYAN}{Style.BRIGHT}{'=' * width}{Style.RESET_ALL}")


def get_console() -> Optional[Console]:
    """Get the Rich console instance if Rich output is enabled.

    Returns:
        Rich Console instance or None in fallback mode
    """
    if has_rich_support():
        return console
    return None


def has_rich_support() -> bool:
    """Check if Rich formatting is enabled.

    Returns:
        True unless fallback mode is forced
    """
    return not _FORCE_FALLBACK
