"""Draft release orchestration.

One run keeps the single draft release of a branch in sync:

    resolve version -> list releases -> fetch merged PRs since the last
    published release -> render notes -> create or update the draft

Every step returns a Result; the first Err ends the run untouched.
"""

from __future__ import annotations

from dataclasses import dataclass, replace
from pathlib import Path
from typing import Literal

from breezy.core.config import TemplateConfig
from breezy.core.result import Err, Ok, Result
from breezy.output.console import ConsoleProtocol, Style
from breezy.platform.github import SEARCH_RESULT_LIMIT, PlatformClient
from breezy.release.errors import DraftError
from breezy.release.model import DraftAction, ReleaseDraft, ReleaseRecord
from breezy.release.notes import release_marker, render_notes
from breezy.release.reconcile import latest_published, reconcile, scope_label
from breezy.release.version import resolve_version

__all__ = ["DraftRequest", "DraftOutcome", "DraftService"]


@dataclass(frozen=True, slots=True)
class DraftRequest:
    """Everything one run needs, already resolved from inputs and config."""

    root: Path
    branch: str
    config: TemplateConfig
    languages: tuple[str, ...] = ()
    directory: str | None = None
    commit_sha: str | None = None
    dry_run: bool = False

    @property
    def scope(self) -> str:
        return scope_label(self.branch, self.directory)

    @property
    def version_root(self) -> Path:
        if self.directory:
            return self.root / self.directory
        return self.root


@dataclass(frozen=True, slots=True)
class DraftOutcome:
    action: Literal["create", "update", "skipped"]
    version: str
    draft: ReleaseDraft | None = None
    release: ReleaseRecord | None = None
    pull_request_count: int = 0


class DraftService:
    """Create or update the branch draft release through a platform client."""

    def __init__(self, *, client: PlatformClient, console: ConsoleProtocol) -> None:
        self._client = client
        self._console = console

    def _published_matches_commit(
        self, release: ReleaseRecord, sha: str
    ) -> Result[bool, DraftError]:
        if release.target_commitish == sha:
            return Ok(True)
        if not release.tag_name.strip():
            return Ok(False)
        resolved = self._client.resolve_commit_sha(release.tag_name.strip())
        if isinstance(resolved, Err):
            return resolved
        return Ok(resolved.value == sha)

    def _should_skip(
        self,
        request: DraftRequest,
        action: DraftAction,
        published: ReleaseRecord | None,
    ) -> Result[bool, DraftError]:
        # An existing draft is always kept up to date; only creation is skipped.
        if action == "update":
            return Ok(False)
        if request.commit_sha is None or published is None:
            return Ok(False)
        return self._published_matches_commit(published, request.commit_sha)

    def plan(self, request: DraftRequest) -> Result[DraftOutcome, DraftError]:
        """Compute the write for this run without performing it.

        The outcome action is ``skipped`` when the current commit is already
        published, otherwise ``create`` or ``update`` with the draft to write.
        """
        version = resolve_version(root=request.version_root, languages=request.languages)
        if isinstance(version, Err):
            return version
        self._console.print(f"version: {version.value}", Style.DIM)

        releases = self._client.list_releases()
        if isinstance(releases, Err):
            return releases

        # Reconcile before fetching so an ambiguous draft state fails early.
        planned = reconcile(
            branch=request.branch,
            version=version.value,
            body="",
            config=request.config,
            existing=releases.value,
            directory=request.directory,
        )
        if isinstance(planned, Err):
            return planned

        published = latest_published(
            releases.value, branch=request.branch, directory=request.directory
        )

        skip = self._should_skip(request, planned.value.action, published)
        if isinstance(skip, Err):
            return skip
        if skip.value:
            return Ok(DraftOutcome(action="skipped", version=version.value))

        since = published.sort_key if published is not None else None
        if since:
            self._console.print(f"collecting pull requests merged since {since}", Style.DIM)

        prs = self._client.fetch_merged_pull_requests(branch=request.branch, since=since)
        if isinstance(prs, Err):
            return prs
        if len(prs.value) >= SEARCH_RESULT_LIMIT:
            self._console.warning(
                f"GitHub search returned its maximum of {SEARCH_RESULT_LIMIT} pull requests; "
                "later matches are missing from the notes"
            )

        body = render_notes(prs.value, version=version.value, config=request.config)
        if request.directory:
            body = f"{release_marker(request.branch, request.directory)}\n\n{body}"

        return Ok(
            DraftOutcome(
                action=planned.value.action,
                version=version.value,
                draft=replace(planned.value.draft, body=body),
                pull_request_count=len(prs.value),
            )
        )

    def run(self, request: DraftRequest) -> Result[DraftOutcome, DraftError]:
        planned = self.plan(request)
        if isinstance(planned, Err):
            return planned

        outcome = planned.value
        if outcome.action == "skipped" or outcome.draft is None:
            self._console.info(
                f"skipping draft release for {request.scope}: a published release "
                f"already exists for commit {request.commit_sha}"
            )
            return Ok(outcome)

        draft = outcome.draft
        if request.dry_run:
            self._console.info(f"dry run: would {outcome.action} draft {draft.tag}")
            self._console.print(draft.body)
            return Ok(outcome)

        if outcome.action == "update":
            written = self._client.update_release(draft)
        else:
            written = self._client.create_release(draft)
        if isinstance(written, Err):
            return written

        verb = "Updated" if outcome.action == "update" else "Created"
        self._console.success(
            f"{verb} draft release {written.value.id} ({draft.tag}) for {request.scope}"
        )
        return Ok(
            DraftOutcome(
                action=outcome.action,
                version=outcome.version,
                draft=draft,
                release=written.value,
                pull_request_count=outcome.pull_request_count,
            )
        )
