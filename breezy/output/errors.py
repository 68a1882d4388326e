"""Error presentation utilities.

Centralized error formatting and exit code mapping for draft runs.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

from breezy.core.errors import ErrorCode
from breezy.output.console import Style
from breezy.release.errors import DraftError

if TYPE_CHECKING:
    from breezy.output.console import ConsoleProtocol

__all__ = ["print_draft_error", "draft_error_exit_code"]


def print_draft_error(error: DraftError, console: ConsoleProtocol) -> None:
    """Print a draft error with its hint and underlying cause."""
    console.error(error.message)
    if error.hint:
        console.print(f"hint: {error.hint}", Style.DIM)
    if error.cause:
        console.print(f"cause: {error.cause}", Style.DIM)


def draft_error_exit_code(error: DraftError) -> int:
    match error.kind:
        case "invalid_input":
            return int(ErrorCode.USER_ERROR)
        case "config_parse_error" | "manifest_parse_error":
            return int(ErrorCode.CONFIG_ERROR)
        case "version_not_found":
            return int(ErrorCode.VERSION_ERROR)
        case "platform_error":
            return int(ErrorCode.NETWORK_ERROR)
        case "ambiguous_draft_state":
            return int(ErrorCode.STATE_ERROR)
