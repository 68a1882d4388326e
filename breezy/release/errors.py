"""Error types for the draft release flow."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Literal

DraftErrorKind = Literal[
    "version_not_found",
    "manifest_parse_error",
    "ambiguous_draft_state",
    "platform_error",
    "config_parse_error",
    "invalid_input",
]


@dataclass(frozen=True, slots=True)
class DraftError:
    """Canonical error payload for a draft run.

    Every error is terminal for the run; ``cause`` carries the underlying
    transport or parser error text when there is one.
    """

    kind: DraftErrorKind
    message: str
    hint: str | None = None
    cause: str | None = None

    def pretty(self) -> str:
        if self.hint:
            return f"{self.message} (hint: {self.hint})"
        return self.message
