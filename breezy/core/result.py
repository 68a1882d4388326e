"""Result type for explicit error handling.

Every fallible step of a draft run (reading a manifest, parsing the config,
talking to GitHub) returns a ``Result`` instead of raising, so the CLI layer is
the only place that turns a failure into an exit code.

Usage:
    def read_version(path: Path) -> Result[str, DraftError]:
        if not path.exists():
            return Err(DraftError(kind="version_not_found", message=str(path)))
        return Ok(path.read_text().strip())

    match read_version(Path("VERSION")):
        case Ok(value):
            print(value)
        case Err(error):
            print(error.pretty())
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Generic, TypeAlias, TypeVar

T = TypeVar("T")
E = TypeVar("E")


@dataclass(frozen=True, slots=True)
class Ok(Generic[T]):
    """A successful result carrying ``value``."""

    value: T

    def __repr__(self) -> str:
        return f"Ok({self.value!r})"


@dataclass(frozen=True, slots=True)
class Err(Generic[E]):
    """A failed result carrying ``error``."""

    error: E

    def __repr__(self) -> str:
        return f"Err({self.error!r})"


Result: TypeAlias = Ok[T] | Err[E]
