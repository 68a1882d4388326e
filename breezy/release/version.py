from __future__ import annotations

import json
import re
import tomllib
from collections.abc import Callable, Iterator, Sequence
from dataclasses import dataclass
from pathlib import Path

from breezy.core.result import Err, Ok, Result
from breezy.core.structured import StrDict, as_str_dict, get_str, get_table
from breezy.release.errors import DraftError


# Ok(None) means "manifest parsed, but it declares no version".
ExtractRule = Callable[[str], Result[str | None, str]]


@dataclass(frozen=True, slots=True)
class ManifestArchetype:
    """Where and how a language stores its version."""

    language: str
    path: str
    extract: ExtractRule


def _load_toml(text: str) -> Result[StrDict, str]:
    try:
        return Ok(tomllib.loads(text))
    except tomllib.TOMLDecodeError as e:
        return Err(f"invalid TOML: {e}")


def _cargo_version(text: str) -> Result[str | None, str]:
    doc = _load_toml(text)
    if isinstance(doc, Err):
        return doc

    package = get_table(doc.value, "package")
    if package is not None:
        version = get_str(package, "version")
        if version is not None:
            return Ok(version)
        inherited = get_table(package, "version")
        if inherited is None or inherited.get("workspace") is not True:
            return Ok(None)

    # `version.workspace = true`, or a virtual manifest: use [workspace.package].
    workspace_package = get_table(get_table(doc.value, "workspace") or {}, "package")
    if workspace_package is None:
        return Ok(None)
    return Ok(get_str(workspace_package, "version"))


def _package_json_version(text: str) -> Result[str | None, str]:
    try:
        obj: object = json.loads(text)
    except json.JSONDecodeError as e:
        return Err(f"invalid JSON: {e}")

    data = as_str_dict(obj)
    if data is None:
        return Err("JSON root must be an object")
    return Ok(get_str(data, "version"))


def _pyproject_version(text: str) -> Result[str | None, str]:
    doc = _load_toml(text)
    if isinstance(doc, Err):
        return doc

    project = get_table(doc.value, "project")
    if project is not None:
        version = get_str(project, "version")
        if version is not None:
            return Ok(version)

    poetry = get_table(get_table(doc.value, "tool") or {}, "poetry")
    if poetry is not None:
        return Ok(get_str(poetry, "version"))
    return Ok(None)


ARCHETYPES: tuple[ManifestArchetype, ...] = (
    ManifestArchetype(language="rust", path="Cargo.toml", extract=_cargo_version),
    ManifestArchetype(language="node", path="package.json", extract=_package_json_version),
    ManifestArchetype(language="python", path="pyproject.toml", extract=_pyproject_version),
)

LANGUAGE_ALIASES: dict[str, str] = {
    "cargo": "rust",
    "javascript": "node",
    "js": "node",
    "typescript": "node",
    "ts": "node",
    "py": "python",
}

_BY_LANGUAGE: dict[str, ManifestArchetype] = {a.language: a for a in ARCHETYPES}

_SPLIT_RE = re.compile(r"[\s,+]+")


def parse_languages(text: str) -> list[str]:
    """Split a language selector like ``"rust, node"`` or ``"rust+node"``."""
    return [v.lower() for v in _SPLIT_RE.split(text.strip()) if v]


def is_prerelease(version: str) -> bool:
    """True for versions with a pre-release suffix, e.g. ``1.2.0-beta.1``."""
    core = version.split("+", 1)[0]
    return "-" in core


def _select_archetypes(
    languages: Sequence[str],
) -> Result[tuple[ManifestArchetype, ...], DraftError]:
    if not languages:
        return Ok(ARCHETYPES)

    selected: list[ManifestArchetype] = []
    unknown: list[str] = []
    for language in languages:
        key = language.strip().lower()
        archetype = _BY_LANGUAGE.get(LANGUAGE_ALIASES.get(key, key))
        if archetype is None:
            unknown.append(language)
        elif archetype not in selected:
            selected.append(archetype)

    if unknown:
        return Err(
            DraftError(
                kind="invalid_input",
                message=f"Unknown language archetype(s): {', '.join(unknown)}",
                hint=f"Known: {', '.join(a.language for a in ARCHETYPES)}",
            )
        )
    return Ok(tuple(selected))


def iter_attempts(
    root: Path, archetypes: Sequence[ManifestArchetype]
) -> Iterator[tuple[ManifestArchetype, Path]]:
    """Yield each archetype whose manifest exists under ``root``, in order."""
    for archetype in archetypes:
        path = root / archetype.path
        if path.is_file():
            yield archetype, path


def resolve_version(*, root: Path, languages: Sequence[str]) -> Result[str, DraftError]:
    """Read the project version from the first manifest that declares one.

    A manifest that exists but cannot be parsed is a hard error; it is never
    skipped in favour of the next archetype.
    """
    selected = _select_archetypes(languages)
    if isinstance(selected, Err):
        return selected

    for archetype, path in iter_attempts(root, selected.value):
        try:
            text = path.read_text(encoding="utf-8")
        except (OSError, UnicodeDecodeError) as e:
            return Err(
                DraftError(
                    kind="manifest_parse_error",
                    message=f"failed to read {archetype.path}: {e}",
                    hint=str(path),
                    cause=str(e),
                )
            )

        extracted = archetype.extract(text)
        if isinstance(extracted, Err):
            return Err(
                DraftError(
                    kind="manifest_parse_error",
                    message=f"{archetype.path} could not be parsed",
                    hint=str(path),
                    cause=extracted.error,
                )
            )
        if extracted.value:
            return Ok(extracted.value)

    attempted = ", ".join(f"{a.language} ({a.path})" for a in selected.value)
    return Err(
        DraftError(
            kind="version_not_found",
            message=f"Unable to determine version from {attempted}",
            hint=f"Ensure the expected version file exists in {root}",
        )
    )
