from __future__ import annotations

from breezy.core.config import TemplateConfig
from breezy.core.result import Err, Ok
from breezy.release.model import ReleaseRecord
from breezy.release.notes import release_marker
from breezy.release.reconcile import find_branch_drafts, latest_published, reconcile


def _release(
    release_id: int,
    *,
    draft: bool = True,
    branch: str = "main",
    body: str = "",
    tag: str = "v0.0.1",
    created_at: str = "2024-01-01T00:00:00Z",
    published_at: str | None = None,
) -> ReleaseRecord:
    return ReleaseRecord(
        id=release_id,
        tag_name=tag,
        name=tag,
        body=body,
        draft=draft,
        prerelease=False,
        target_commitish=branch,
        created_at=created_at,
        published_at=published_at,
    )


def test_no_draft_creates() -> None:
    result = reconcile(
        branch="main",
        version="1.2.0",
        body="notes",
        config=TemplateConfig.default(),
        existing=[_release(1, draft=False), _release(2, branch="dev")],
    )
    assert isinstance(result, Ok)
    plan = result.value
    assert plan.action == "create"
    assert plan.draft.release_id is None
    assert plan.draft.tag == "v1.2.0"
    assert plan.draft.title == "v1.2.0 (main)"
    assert plan.draft.body == "notes"
    assert plan.draft.is_draft


def test_single_draft_updates_in_place() -> None:
    result = reconcile(
        branch="main",
        version="1.3.0-rc.1",
        body="new notes",
        config=TemplateConfig.from_dict({"name-template": "Release $VERSION"}),
        existing=[_release(42, body="old notes", tag="v1.2.0")],
    )
    assert isinstance(result, Ok)
    plan = result.value
    assert plan.action == "update"
    assert plan.draft.release_id == 42
    assert plan.draft.tag == "v1.3.0-rc.1"
    assert plan.draft.title == "Release 1.3.0-rc.1"
    assert plan.draft.body == "new notes"
    assert plan.draft.prerelease


def test_multiple_drafts_is_ambiguous() -> None:
    result = reconcile(
        branch="main",
        version="1.0.0",
        body="",
        config=TemplateConfig.default(),
        existing=[_release(9), _release(3)],
    )
    assert isinstance(result, Err)
    assert result.error.kind == "ambiguous_draft_state"
    assert "3, 9" in result.error.message


def test_branch_matching_uses_target_not_title() -> None:
    other = _release(5, branch="release/1.x", tag="main")
    assert find_branch_drafts([other], branch="main") == []


def test_tag_prefix_default() -> None:
    result = reconcile(
        branch="main",
        version="1.2.0",
        body="",
        config=TemplateConfig.default(tag_prefix="v"),
        existing=[],
    )
    assert isinstance(result, Ok)
    assert result.value.draft.tag == "v1.2.0"


def test_directory_scope_requires_marker() -> None:
    api = _release(1, body=f"{release_marker('main', 'api')}\n\nnotes")
    web = _release(2, body=f"{release_marker('main', 'web')}\n\nnotes")

    result = reconcile(
        branch="main",
        version="1.0.0",
        body="",
        config=TemplateConfig.from_dict({"tag-template": "$DIRECTORY-v$VERSION"}),
        existing=[api, web],
        directory="api",
    )

    assert isinstance(result, Ok)
    assert result.value.action == "update"
    assert result.value.draft.release_id == 1
    assert result.value.draft.tag == "api-v1.0.0"
    assert result.value.draft.title == "api-v1.0.0 (main/api)"


def test_reconcile_is_idempotent() -> None:
    existing = [_release(7, body="notes")]
    config = TemplateConfig.default()
    kwargs = {"branch": "main", "version": "1.0.0", "body": "notes"}
    first = reconcile(**kwargs, config=config, existing=existing)
    second = reconcile(**kwargs, config=config, existing=existing)
    assert first == second


def test_latest_published_prefers_published_at() -> None:
    releases = [
        _release(1, draft=False, published_at="2024-03-01T00:00:00Z"),
        _release(2, draft=False, created_at="2024-04-01T00:00:00Z"),
        _release(3, draft=False, branch="dev", published_at="2024-05-01T00:00:00Z"),
        _release(4, draft=True, created_at="2024-06-01T00:00:00Z"),
    ]
    latest = latest_published(releases, branch="main")
    assert latest is not None
    assert latest.id == 2


def test_latest_published_none() -> None:
    assert latest_published([_release(1)], branch="main") is None


def test_unscoped_run_ignores_directory_scoped_draft() -> None:
    api = _release(1, body=f"{release_marker('main', 'api')}\n\nnotes")

    result = reconcile(
        branch="main",
        version="1.0.0",
        body="",
        config=TemplateConfig.default(),
        existing=[api],
    )

    assert isinstance(result, Ok)
    assert result.value.action == "create"
    assert result.value.draft.release_id is None
    assert find_branch_drafts([api], branch="main") == []


def test_unscoped_and_scoped_drafts_coexist() -> None:
    root = _release(1, body="notes")
    api = _release(2, body=f"{release_marker('main', 'api')}\n\nnotes")

    assert find_branch_drafts([root, api], branch="main") == [root]
    assert find_branch_drafts([root, api], branch="main", directory="api") == [api]


def test_latest_published_ignores_directory_scoped_releases() -> None:
    api = _release(
        2,
        draft=False,
        body=release_marker("main", "api"),
        published_at="2024-05-01T00:00:00Z",
    )
    root = _release(1, draft=False, published_at="2024-03-01T00:00:00Z")

    assert latest_published([api], branch="main") is None
    assert latest_published([api, root], branch="main") == root
    assert latest_published([api, root], branch="main", directory="api") == api
