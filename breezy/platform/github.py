from __future__ import annotations

from collections.abc import Callable
from dataclasses import dataclass
from typing import Protocol
from urllib.parse import quote, urlencode

from breezy.core.result import Err, Ok, Result
from breezy.core.structured import (
    as_obj_list,
    as_str_dict,
    get_bool,
    get_int,
    get_list,
    get_str,
    get_table,
)
from breezy.platform.http import HttpClient, HttpError, RealHttpClient
from breezy.release.errors import DraftError
from breezy.release.model import PullRequestRecord, ReleaseDraft, ReleaseRecord


API_BASE = "https://api.github.com"
API_VERSION = "2022-11-28"
MAX_PER_PAGE = 100
# The search API serves at most this many results per query; later pages fail with 422.
SEARCH_RESULT_LIMIT = 1000


class PlatformClient(Protocol):
    """What the draft flow needs from the release-hosting platform."""

    def list_releases(self) -> Result[list[ReleaseRecord], DraftError]: ...

    def fetch_merged_pull_requests(
        self, *, branch: str, since: str | None
    ) -> Result[list[PullRequestRecord], DraftError]: ...

    def create_release(self, draft: ReleaseDraft) -> Result[ReleaseRecord, DraftError]: ...

    def update_release(self, draft: ReleaseDraft) -> Result[ReleaseRecord, DraftError]: ...

    def resolve_commit_sha(self, ref: str) -> Result[str, DraftError]: ...


def github_http_client(token: str) -> RealHttpClient:
    return RealHttpClient(
        token=token,
        user_agent="breezy",
        headers={
            "Accept": "application/vnd.github+json",
            "X-GitHub-Api-Version": API_VERSION,
        },
    )


def _platform_error(message: str, error: HttpError) -> DraftError:
    return DraftError(kind="platform_error", message=message, hint=error.url, cause=str(error))


def _payload_error(message: str, url: str) -> DraftError:
    return DraftError(kind="platform_error", message=message, hint=url)


def parse_release(obj: object) -> ReleaseRecord | None:
    d = as_str_dict(obj)
    if d is None:
        return None

    release_id = get_int(d, "id")
    draft = get_bool(d, "draft")
    if release_id is None or draft is None:
        return None

    body = d.get("body")
    name = d.get("name")
    return ReleaseRecord(
        id=release_id,
        tag_name=get_str(d, "tag_name") or "",
        name=name if isinstance(name, str) else "",
        body=body if isinstance(body, str) else "",
        draft=draft,
        prerelease=get_bool(d, "prerelease") or False,
        target_commitish=get_str(d, "target_commitish") or "",
        created_at=get_str(d, "created_at") or "",
        published_at=get_str(d, "published_at"),
    )


@dataclass(frozen=True, slots=True)
class GitHubClient:
    """GitHub REST client for one repository."""

    http: HttpClient
    owner: str
    repo: str
    per_page: int = MAX_PER_PAGE
    api_base: str = API_BASE
    search_limit: int = SEARCH_RESULT_LIMIT

    @property
    def slug(self) -> str:
        return f"{self.owner}/{self.repo}"

    def _url(self, path: str, **query: str | int) -> str:
        url = f"{self.api_base}/{path.lstrip('/')}"
        if query:
            url += "?" + urlencode(query)
        return url

    def _paginate(
        self,
        path: str,
        *,
        items: Callable[[object], list[object] | None],
        message: str,
        limit: int | None = None,
        **query: str | int,
    ) -> Result[list[object], DraftError]:
        out: list[object] = []
        page = 1
        while True:
            url = self._url(path, **query, per_page=self.per_page, page=page)
            result = self.http.request_json("GET", url)
            if isinstance(result, Err):
                return Err(_platform_error(message, result.error))

            page_items = items(result.value)
            if page_items is None:
                return Err(_payload_error(f"unexpected payload: {message}", url))
            out.extend(page_items)

            if limit is not None and len(out) >= limit:
                return Ok(out[:limit])
            if len(page_items) < self.per_page:
                return Ok(out)
            page += 1

    def list_releases(self) -> Result[list[ReleaseRecord], DraftError]:
        raw = self._paginate(
            f"repos/{self.slug}/releases",
            items=as_obj_list,
            message=f"failed to list releases for {self.slug}",
        )
        if isinstance(raw, Err):
            return raw

        out: list[ReleaseRecord] = []
        for item in raw.value:
            release = parse_release(item)
            if release is not None:
                out.append(release)
        return Ok(out)

    def _pull_request(self, obj: object) -> PullRequestRecord | None:
        d = as_str_dict(obj)
        if d is None:
            return None

        number = get_int(d, "number")
        title = d.get("title")
        if number is None or not isinstance(title, str):
            return None

        user = get_table(d, "user")
        author = (get_str(user, "login") if user is not None else None) or "unknown"

        labels: list[str] = []
        for label in get_list(d, "labels") or []:
            label_tbl = as_str_dict(label)
            name = get_str(label_tbl, "name") if label_tbl is not None else None
            if name is not None:
                labels.append(name)

        pr_tbl = get_table(d, "pull_request") or {}
        merged_at = get_str(pr_tbl, "merged_at") or get_str(d, "closed_at")
        url = get_str(d, "html_url") or f"https://github.com/{self.slug}/pull/{number}"

        return PullRequestRecord(
            number=number,
            title=title.strip(),
            author=author,
            url=url,
            merged_at=merged_at,
            labels=tuple(labels),
        )

    def fetch_merged_pull_requests(
        self, *, branch: str, since: str | None
    ) -> Result[list[PullRequestRecord], DraftError]:
        """PRs merged into ``branch`` (since ``since``), oldest merge first.

        The search API stops at ``search_limit`` results; anything past that is
        not returned.
        """
        parts = [f"repo:{self.slug}", "is:pr", "is:merged", f"base:{branch}"]
        if since:
            parts.append(f"merged:>={since}")

        def _items(obj: object) -> list[object] | None:
            data = as_str_dict(obj)
            return get_list(data, "items") if data is not None else None

        raw = self._paginate(
            "search/issues",
            items=_items,
            message=f"failed to search merged pull requests for {self.slug}@{branch}",
            limit=self.search_limit,
            q=" ".join(parts),
        )
        if isinstance(raw, Err):
            return raw

        by_number: dict[int, PullRequestRecord] = {}
        for item in raw.value:
            pr = self._pull_request(item)
            if pr is not None and pr.number not in by_number:
                by_number[pr.number] = pr

        # Stable sort; PRs without a merge date go last.
        ordered = sorted(
            by_number.values(),
            key=lambda pr: (pr.merged_at is None, pr.merged_at or "", pr.number),
        )
        return Ok(ordered)

    def _write(
        self, method: str, url: str, draft: ReleaseDraft, message: str
    ) -> Result[ReleaseRecord, DraftError]:
        payload = {
            "tag_name": draft.tag,
            "name": draft.title,
            "body": draft.body,
            "draft": draft.is_draft,
            "prerelease": draft.prerelease,
            "target_commitish": draft.branch,
        }
        result = self.http.request_json(method, url, payload)
        if isinstance(result, Err):
            return Err(_platform_error(message, result.error))

        release = parse_release(result.value)
        if release is None:
            return Err(_payload_error(f"unexpected payload: {message}", url))
        return Ok(release)

    def create_release(self, draft: ReleaseDraft) -> Result[ReleaseRecord, DraftError]:
        return self._write(
            "POST",
            self._url(f"repos/{self.slug}/releases"),
            draft,
            f"failed to create draft release {draft.tag}",
        )

    def update_release(self, draft: ReleaseDraft) -> Result[ReleaseRecord, DraftError]:
        if draft.release_id is None:
            return Err(
                DraftError(kind="invalid_input", message="cannot update a release without an id")
            )
        return self._write(
            "PATCH",
            self._url(f"repos/{self.slug}/releases/{draft.release_id}"),
            draft,
            f"failed to update draft release {draft.release_id}",
        )

    def resolve_commit_sha(self, ref: str) -> Result[str, DraftError]:
        url = self._url(f"repos/{self.slug}/commits/{quote(ref, safe='')}")
        result = self.http.request_json("GET", url)
        if isinstance(result, Err):
            return Err(_platform_error(f"failed to resolve commit for {ref}", result.error))

        data = as_str_dict(result.value)
        sha = get_str(data, "sha") if data is not None else None
        if sha is None:
            return Err(_payload_error(f"missing sha for {ref}", url))
        return Ok(sha)
