from __future__ import annotations

from collections.abc import Sequence

from breezy.core.config import TemplateConfig
from breezy.core.result import Err, Ok, Result
from breezy.release.errors import DraftError
from breezy.release.model import DraftPlan, ReleaseDraft, ReleaseRecord
from breezy.release.notes import directory_marker_prefix, release_marker
from breezy.release.templates import render_tag
from breezy.release.version import is_prerelease


def scope_label(branch: str, directory: str | None = None) -> str:
    if directory:
        return f"{branch}/{directory}"
    return branch


def _in_scope(release: ReleaseRecord, branch: str, directory: str | None) -> bool:
    if release.target_commitish != branch:
        return False
    if directory:
        return release_marker(branch, directory) in release.body
    # Unscoped runs leave directory-scoped releases alone.
    return directory_marker_prefix(branch) not in release.body


def find_branch_drafts(
    releases: Sequence[ReleaseRecord],
    *,
    branch: str,
    directory: str | None = None,
) -> list[ReleaseRecord]:
    """Draft releases targeting ``branch`` (and ``directory``, when scoped)."""
    return [r for r in releases if r.draft and _in_scope(r, branch, directory)]


def latest_published(
    releases: Sequence[ReleaseRecord],
    *,
    branch: str,
    directory: str | None = None,
) -> ReleaseRecord | None:
    """Newest published release on ``branch``; its date bounds the PR window."""
    published = [r for r in releases if not r.draft and _in_scope(r, branch, directory)]
    if not published:
        return None
    return max(published, key=lambda r: r.sort_key)


def reconcile(
    *,
    branch: str,
    version: str,
    body: str,
    config: TemplateConfig,
    existing: Sequence[ReleaseRecord],
    directory: str | None = None,
) -> Result[DraftPlan, DraftError]:
    """Decide whether the branch draft is created or updated in place.

    At most one draft may exist per branch. More than one means the external
    state is corrupt; that is reported, never resolved by picking one.
    """
    scope = scope_label(branch, directory)
    tag = render_tag(config.tag_template, version=version, directory=directory, scope=scope)
    title = render_tag(config.name_template, version=version, directory=directory, scope=scope)

    drafts = find_branch_drafts(existing, branch=branch, directory=directory)
    if len(drafts) > 1:
        ids = ", ".join(str(d.id) for d in sorted(drafts, key=lambda d: d.id))
        return Err(
            DraftError(
                kind="ambiguous_draft_state",
                message=f"found {len(drafts)} draft releases for {scope}: {ids}",
                hint="Delete the extra drafts so that only one remains",
            )
        )

    release_id = drafts[0].id if drafts else None
    draft = ReleaseDraft(
        branch=branch,
        tag=tag,
        title=title,
        body=body,
        prerelease=is_prerelease(version),
        release_id=release_id,
    )
    return Ok(DraftPlan(action="create" if release_id is None else "update", draft=draft))
