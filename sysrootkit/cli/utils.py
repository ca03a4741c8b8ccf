"""
Shared utilities for the command line.

Provides consistent output formatting for messages shown to the user.
"""

import sys
from typing import Any, Dict, Optional


def format_success_message(
    title: str,
    details: Dict[str, Any],
    width: int = 70,
) -> str:
    """
    Format a standardized success message.

    Args:
        title: Success message title
        details: Key-value pairs to display
        width: Width of the rule lines

    Returns:
        Formatted message string
    """
    lines = ["=" * width, title, "=" * width, ""]
    for key, value in details.items():
        lines.append(f"{key}: {value}")
    lines.append("")
    return "\n".join(lines)


def print_error(message: str, details: Optional[str] = None):
    """
    Print error message to stderr in consistent format.

    Args:
        message: Main error message
        details: Optional additional details
    """
    safe_print(f"ERROR: {message}", file=sys.stderr)
    if details:
        safe_print(f"  {details}", file=sys.stderr)


def print_warning(message: str):
    """Print warning message to stderr."""
    safe_print(f"WARNING: {message}", file=sys.stderr)


def safe_print(message: str, file=None):
    """
    Print a message, replacing characters the stream cannot encode.

    Args:
        message: Text to print
        file: Stream (default stdout)
    """
    stream = file or sys.stdout
    try:
        print(message, file=stream)
    except UnicodeEncodeError:
        encoding = getattr(stream, "encoding", None) or "ascii"
        print(
            message.encode(encoding, errors="replace").decode(encoding), file=stream
        )
