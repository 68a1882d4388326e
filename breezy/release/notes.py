from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass

from breezy.core.config import Category, TemplateConfig
from breezy.release.model import PullRequestRecord
from breezy.release.templates import render_body, render_change


@dataclass(frozen=True, slots=True)
class NotesGroup:
    # None for the header-less group used when no categories are configured.
    title: str | None
    pull_requests: tuple[PullRequestRecord, ...]


def release_marker(branch: str, directory: str | None = None) -> str:
    """Hidden body marker tying a draft to a branch (and directory scope)."""
    if directory:
        return f"<!-- breezy:branch={branch}:dir={directory} -->"
    return f"<!-- breezy:branch={branch} -->"


def directory_marker_prefix(branch: str) -> str:
    """Start of every directory-scoped marker on ``branch``."""
    return f"<!-- breezy:branch={branch}:dir="


def _is_excluded(pr: PullRequestRecord, config: TemplateConfig) -> bool:
    return not pr.normalized_labels.isdisjoint(config.exclude_labels)


def _first_category(pr: PullRequestRecord, categories: Sequence[Category]) -> int | None:
    labels = pr.normalized_labels
    for index, category in enumerate(categories):
        if not labels.isdisjoint(category.labels):
            return index
    return None


def group_pull_requests(
    prs: Sequence[PullRequestRecord],
    config: TemplateConfig,
) -> list[NotesGroup]:
    """Split PRs into the non-empty groups that make up ``$CHANGES``.

    Excluded PRs are dropped before matching. A PR goes to the first category
    (declared order) sharing a label with it; the rest go to the trailing
    uncategorized group unless that group is disabled. Input order is kept.
    """
    seen: set[int] = set()
    buckets: list[list[PullRequestRecord]] = [[] for _ in config.categories]
    uncategorized: list[PullRequestRecord] = []

    for pr in prs:
        if pr.number in seen:
            continue
        seen.add(pr.number)

        if _is_excluded(pr, config):
            continue

        index = _first_category(pr, config.categories)
        if index is not None:
            buckets[index].append(pr)
        elif config.include_uncategorized:
            uncategorized.append(pr)

    groups = [
        NotesGroup(title=category.title, pull_requests=tuple(bucket))
        for category, bucket in zip(config.categories, buckets)
        if bucket
    ]
    if uncategorized:
        title = config.uncategorized_title if config.categories else None
        groups.append(NotesGroup(title=title, pull_requests=tuple(uncategorized)))
    return groups


def render_changes(prs: Sequence[PullRequestRecord], config: TemplateConfig) -> str:
    blocks: list[str] = []
    for group in group_pull_requests(prs, config):
        lines: list[str] = []
        if group.title is not None:
            lines.append(f"### {group.title}")
        for pr in group.pull_requests:
            lines.append(
                render_change(config.change_template, title=pr.title, author=pr.author, url=pr.url)
            )
        blocks.append("\n".join(lines))
    return "\n\n".join(blocks)


def render_notes(
    prs: Sequence[PullRequestRecord],
    *,
    version: str,
    config: TemplateConfig,
) -> str:
    """Render the release body for ``prs``.

    PRs must already be ordered oldest merge first; no sorting happens here.
    Rendering is deterministic: the same input always yields the same text.
    """
    changes = render_changes(prs, config)
    return render_body(config.template, version=version, changes=changes)
