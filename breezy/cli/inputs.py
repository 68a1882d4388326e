"""GitHub Actions input and environment resolution.

Action inputs arrive as ``INPUT_<NAME>`` environment variables. Runners
differ on whether dashes in the name survive, so both spellings are read.
"""

from __future__ import annotations

from collections.abc import Mapping
from pathlib import Path, PureWindowsPath

from breezy.core.config import TemplateConfig, discover_config, load_config
from breezy.core.result import Err, Ok, Result
from breezy.release.errors import DraftError


def input_key(name: str) -> str:
    return f"INPUT_{name.replace(' ', '_').upper()}"


def read_input(name: str, env: Mapping[str, str]) -> str | None:
    key = input_key(name)
    if key in env:
        return env[key]
    alternate = key.replace("-", "_")
    if alternate != key and alternate in env:
        return env[alternate]
    return None


def _env_value(env: Mapping[str, str], key: str) -> str | None:
    value = env.get(key, "").strip()
    return value or None


def resolve_branch(env: Mapping[str, str]) -> Result[str, DraftError]:
    """Branch the run is for: PR head, then ref name, then ``refs/heads/*``."""
    for key in ("GITHUB_HEAD_REF", "GITHUB_REF_NAME"):
        value = _env_value(env, key)
        if value is not None:
            return Ok(value)

    ref = _env_value(env, "GITHUB_REF")
    if ref is not None and ref.startswith("refs/heads/"):
        return Ok(ref.removeprefix("refs/heads/"))

    return Err(
        DraftError(
            kind="invalid_input",
            message="Unable to determine branch name from GitHub environment.",
            hint="Set GITHUB_REF_NAME or pass --branch",
        )
    )


def resolve_repository(env: Mapping[str, str]) -> Result[tuple[str, str], DraftError]:
    repository = _env_value(env, "GITHUB_REPOSITORY")
    if repository is None:
        return Err(
            DraftError(
                kind="invalid_input",
                message="Missing GITHUB_REPOSITORY environment variable.",
                hint="Expected owner/repo",
            )
        )
    owner, _, repo = repository.partition("/")
    if not owner or not repo:
        return Err(
            DraftError(
                kind="invalid_input",
                message=f"Invalid GITHUB_REPOSITORY value: {repository}",
                hint="Expected owner/repo",
            )
        )
    return Ok((owner, repo))


def resolve_token(explicit: str | None, env: Mapping[str, str]) -> Result[str, DraftError]:
    for candidate in (explicit, read_input("github-token", env), env.get("GITHUB_TOKEN")):
        if candidate is not None and candidate.strip():
            return Ok(candidate.strip())
    return Err(
        DraftError(
            kind="invalid_input",
            message="Missing GitHub token.",
            hint="Set the github-token input or GITHUB_TOKEN env",
        )
    )


def resolve_commit_sha(env: Mapping[str, str]) -> str | None:
    return _env_value(env, "GITHUB_SHA")


def resolve_directory(raw: str | None) -> Result[str | None, DraftError]:
    """Normalize the directory input to a clean relative path (None for root)."""
    if raw is None or not raw.strip():
        return Ok(None)

    value = raw.strip().rstrip("/\\")
    if Path(value).is_absolute() or PureWindowsPath(value).is_absolute():
        return Err(
            DraftError(
                kind="invalid_input",
                message="Directory input must be a relative path within the repository.",
                hint=raw,
            )
        )

    while value.startswith("./"):
        value = value[2:]
    if not value or value == ".":
        return Ok(None)
    return Ok(value)


def load_template_config(
    explicit: str | None,
    *,
    cwd: Path,
    home: Path | None,
    tag_prefix: str,
) -> Result[TemplateConfig, DraftError]:
    """Discover and load breezy.yml; defaults apply when there is none."""
    found = discover_config(explicit, cwd=cwd, home=home)
    if isinstance(found, Err):
        return Err(
            DraftError(
                kind="config_parse_error",
                message=found.error.message,
                hint=str(found.error.path) if found.error.path else None,
            )
        )
    if found.value is None:
        return Ok(TemplateConfig.default(tag_prefix=tag_prefix))

    loaded = load_config(found.value, tag_prefix=tag_prefix)
    if isinstance(loaded, Err):
        return Err(
            DraftError(
                kind="config_parse_error",
                message=loaded.error.message,
                hint=str(found.value),
            )
        )
    return loaded
