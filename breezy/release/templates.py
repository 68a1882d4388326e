"""Closed ``$VAR`` substitution for release templates.

Each template kind has its own fixed token set. Substitution is a single pass,
so a value that happens to contain ``$VERSION`` (a PR title, say) is inserted
literally and never expanded, and tokens from another scope stay as written.
"""

from __future__ import annotations

import re
from collections.abc import Mapping
from typing import Literal

TemplateScope = Literal["tag", "change", "body"]

SCOPE_TOKENS: dict[TemplateScope, tuple[str, ...]] = {
    "tag": ("VERSION", "DIRECTORY", "SCOPE"),
    "change": ("TITLE", "AUTHOR", "NUMBER", "PR_URL"),
    "body": ("VERSION", "CHANGES"),
}


def _pattern(tokens: tuple[str, ...]) -> re.Pattern[str]:
    # Longest first so that a token is never shadowed by a shorter prefix.
    alternatives = "|".join(re.escape(t) for t in sorted(tokens, key=len, reverse=True))
    return re.compile(rf"\$({alternatives})")


_PATTERNS: dict[TemplateScope, re.Pattern[str]] = {
    scope: _pattern(tokens) for scope, tokens in SCOPE_TOKENS.items()
}


def substitute(template: str, scope: TemplateScope, values: Mapping[str, str]) -> str:
    """Replace the tokens of ``scope`` in ``template`` with ``values``.

    Raises:
        KeyError: If ``values`` lacks a token of the scope that the template uses.
    """
    return _PATTERNS[scope].sub(lambda m: values[m.group(1)], template)


def render_tag(template: str, *, version: str, directory: str | None, scope: str) -> str:
    return substitute(
        template,
        "tag",
        {"VERSION": version, "DIRECTORY": directory or "", "SCOPE": scope},
    )


def render_change(template: str, *, title: str, author: str, url: str) -> str:
    # $NUMBER has always expanded to the PR URL; existing templates rely on it.
    return substitute(
        template,
        "change",
        {"TITLE": title, "AUTHOR": author, "NUMBER": url, "PR_URL": url},
    )


def render_body(template: str, *, version: str, changes: str) -> str:
    return substitute(template, "body", {"VERSION": version, "CHANGES": changes})
