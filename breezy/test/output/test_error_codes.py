from __future__ import annotations

import pytest

from breezy.core.errors import ErrorCode
from breezy.output.console import MockConsole, Style
from breezy.output.errors import draft_error_exit_code, print_draft_error
from breezy.release.errors import DraftError, DraftErrorKind


@pytest.mark.parametrize(
    ("kind", "code"),
    [
        ("invalid_input", ErrorCode.USER_ERROR),
        ("config_parse_error", ErrorCode.CONFIG_ERROR),
        ("manifest_parse_error", ErrorCode.CONFIG_ERROR),
        ("version_not_found", ErrorCode.VERSION_ERROR),
        ("platform_error", ErrorCode.NETWORK_ERROR),
        ("ambiguous_draft_state", ErrorCode.STATE_ERROR),
    ],
)
def test_exit_code_per_kind(kind: DraftErrorKind, code: ErrorCode) -> None:
    assert draft_error_exit_code(DraftError(kind=kind, message="x")) == int(code)


def test_exit_codes_are_distinct_from_success() -> None:
    assert int(ErrorCode.OK) == 0
    assert all(int(code) > 0 for code in ErrorCode if code is not ErrorCode.OK)


def test_print_draft_error_with_hint_and_cause() -> None:
    console = MockConsole()
    error = DraftError(
        kind="platform_error",
        message="failed to list releases for acme/widget",
        hint="https://api.github.com/repos/acme/widget/releases",
        cause="HTTP 401: Unauthorized",
    )

    print_draft_error(error, console)

    assert console.messages == [
        "error: failed to list releases for acme/widget",
        "hint: https://api.github.com/repos/acme/widget/releases",
        "cause: HTTP 401: Unauthorized",
    ]
    assert console.outputs[1].style == Style.DIM


def test_print_draft_error_message_only() -> None:
    console = MockConsole()
    print_draft_error(DraftError(kind="version_not_found", message="no version"), console)
    assert console.messages == ["error: no version"]


def test_pretty() -> None:
    assert DraftError(kind="invalid_input", message="m", hint="h").pretty() == "m (hint: h)"
    assert DraftError(kind="invalid_input", message="m").pretty() == "m"
