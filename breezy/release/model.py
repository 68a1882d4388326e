from __future__ import annotations

from dataclasses import dataclass
from typing import Literal


DraftAction = Literal["create", "update"]


@dataclass(frozen=True, slots=True)
class PullRequestRecord:
    """A merged pull request as fetched for one run."""

    number: int
    title: str
    author: str
    url: str
    merged_at: str | None
    labels: tuple[str, ...] = ()

    @property
    def normalized_labels(self) -> frozenset[str]:
        return frozenset(
            label.strip().lower() for label in self.labels if label.strip()
        )


@dataclass(frozen=True, slots=True)
class ReleaseRecord:
    """A release as listed by the platform (draft or published)."""

    id: int
    tag_name: str
    name: str
    body: str
    draft: bool
    prerelease: bool
    target_commitish: str
    created_at: str
    published_at: str | None = None

    @property
    def sort_key(self) -> str:
        # ISO-8601 timestamps from the API sort lexicographically.
        return self.published_at or self.created_at


@dataclass(frozen=True, slots=True)
class ReleaseDraft:
    branch: str
    tag: str
    title: str
    body: str
    prerelease: bool = False
    is_draft: bool = True
    # None until the platform has created the release.
    release_id: int | None = None


@dataclass(frozen=True, slots=True)
class DraftPlan:
    action: DraftAction
    draft: ReleaseDraft
