"""Typed configuration loading and access.

This module turns ``.github/breezy.yml`` into a frozen ``TemplateConfig``.
Every optional knob is resolved here, once, so the renderer and reconciler
only ever see concrete values.
"""

from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass
from pathlib import Path

import yaml

from .result import Err, Ok, Result
from .structured import StrDict, as_str_dict, get_bool, get_list, get_raw_str, get_str, get_str_list

__all__ = [
    "Category",
    "TemplateConfig",
    "ConfigError",
    "load_config",
    "discover_config",
    "CONFIG_RELATIVE_PATH",
    "DEFAULT_TAG_PREFIX",
    "DEFAULT_CHANGE_TEMPLATE",
    "DEFAULT_TEMPLATE",
    "DEFAULT_UNCATEGORIZED_TITLE",
]

# -----------------------------------------------------------------------------
# Defaults
# -----------------------------------------------------------------------------

CONFIG_RELATIVE_PATH = Path(".github") / "breezy.yml"

DEFAULT_TAG_PREFIX = "v"
DEFAULT_CHANGE_TEMPLATE = "$TITLE"
DEFAULT_TEMPLATE = "## Changes\n\n$CHANGES"
DEFAULT_UNCATEGORIZED_TITLE = "Other Changes"


@dataclass(frozen=True, slots=True)
class ConfigError:
    """Error when config cannot be found or parsed."""

    message: str
    path: Path | None = None


@dataclass(frozen=True, slots=True)
class Category:
    """A titled group of release notes, matched by label."""

    title: str
    labels: tuple[str, ...] = ()


def normalize_labels(labels: list[str]) -> tuple[str, ...]:
    """Trim, lowercase and de-duplicate labels, keeping first-seen order."""
    out: list[str] = []
    for label in labels:
        value = label.strip().lower()
        if value and value not in out:
            out.append(value)
    return tuple(out)


def _template(data: Mapping[str, object], key: str) -> str | None:
    value = data.get(key)
    if value is None:
        return None
    text = get_raw_str(data, key)
    if text is None:
        raise ValueError(f"'{key}' must be a string")
    text = text.strip()
    return text or None


def _labels(data: Mapping[str, object], key: str) -> list[str]:
    if data.get(key) is None:
        return []
    labels = get_str_list(data, key)
    if labels is None:
        raise ValueError(f"'{key}' must be a string or a list of strings")
    return labels


def _category(obj: object, index: int) -> Category:
    data = as_str_dict(obj)
    if data is None:
        raise ValueError(f"categories[{index}] must be a mapping")
    title = get_str(data, "title")
    if title is None:
        raise ValueError(f"categories[{index}] is missing 'title'")
    # `labels` and `label` are two spellings of the same thing; accept both.
    labels = _labels(data, "labels") + _labels(data, "label")
    return Category(title=title, labels=normalize_labels(labels))


@dataclass(frozen=True, slots=True)
class TemplateConfig:
    """Fully resolved release template configuration.

    Attributes:
        language: Raw language selector (e.g. ``"rust"`` or ``"node, rust"``);
            empty means every known manifest archetype.
        tag_prefix: Prefix used by the default tag template.
        tag_template: Tag template (``$VERSION``, ``$DIRECTORY``, ``$SCOPE``).
        name_template: Release title template (same tokens as the tag).
        change_template: Per-PR line template (``$TITLE``, ``$AUTHOR``, ``$NUMBER``).
        template: Body template (``$VERSION``, ``$CHANGES``).
        categories: Ordered categories; a PR lands in the first that matches.
        exclude_labels: PRs with any of these labels are dropped.
        include_uncategorized: Whether unmatched PRs are kept in a trailing group.
        uncategorized_title: Header for the trailing group.
    """

    language: str = ""
    tag_prefix: str = DEFAULT_TAG_PREFIX
    tag_template: str = f"{DEFAULT_TAG_PREFIX}$VERSION"
    name_template: str = f"{DEFAULT_TAG_PREFIX}$VERSION ($SCOPE)"
    change_template: str = DEFAULT_CHANGE_TEMPLATE
    template: str = DEFAULT_TEMPLATE
    categories: tuple[Category, ...] = ()
    exclude_labels: tuple[str, ...] = ()
    include_uncategorized: bool = True
    uncategorized_title: str = DEFAULT_UNCATEGORIZED_TITLE

    @classmethod
    def default(cls, *, tag_prefix: str = DEFAULT_TAG_PREFIX) -> TemplateConfig:
        """Config used when no config file is present."""
        return cls.from_dict({}, tag_prefix=tag_prefix)

    @classmethod
    def from_dict(
        cls,
        data: Mapping[str, object],
        *,
        tag_prefix: str = DEFAULT_TAG_PREFIX,
    ) -> TemplateConfig:
        """Create a TemplateConfig from a mapping (parsed YAML).

        Raises:
            ValueError: If a recognized key has the wrong shape.
        """
        prefix = tag_prefix.strip()

        language_list = _labels(data, "language")
        language = ", ".join(v.strip().lower() for v in language_list if v.strip())

        tag_template = _template(data, "tag-template") or f"{prefix}$VERSION"
        name_template = _template(data, "name-template") or f"{tag_template} ($SCOPE)"

        raw_categories = get_list(data, "categories")
        if raw_categories is None and data.get("categories") is not None:
            raise ValueError("'categories' must be a list")
        categories = tuple(_category(c, i) for i, c in enumerate(raw_categories or []))

        include_uncategorized = get_bool(data, "include-uncategorized")
        if include_uncategorized is None and data.get("include-uncategorized") is not None:
            raise ValueError("'include-uncategorized' must be a boolean")

        return cls(
            language=language,
            tag_prefix=prefix,
            tag_template=tag_template,
            name_template=name_template,
            change_template=_template(data, "change-template") or DEFAULT_CHANGE_TEMPLATE,
            template=_template(data, "template") or DEFAULT_TEMPLATE,
            categories=categories,
            exclude_labels=normalize_labels(_labels(data, "exclude-labels")),
            include_uncategorized=True if include_uncategorized is None else include_uncategorized,
            uncategorized_title=get_str(data, "uncategorized-title")
            or DEFAULT_UNCATEGORIZED_TITLE,
        )


def _parse_yaml(path: Path) -> Result[StrDict, ConfigError]:
    """Parse a YAML file, handling read and parse errors."""
    try:
        content = path.read_text(encoding="utf-8")
    except FileNotFoundError:
        return Err(ConfigError(f"Config file not found: {path}", path=path))
    except PermissionError:
        return Err(ConfigError(f"Permission denied reading: {path}", path=path))
    except (OSError, UnicodeDecodeError) as e:
        return Err(ConfigError(f"Error reading config: {e}", path=path))

    try:
        data_obj: object = yaml.safe_load(content)
    except yaml.YAMLError as e:
        return Err(ConfigError(f"Invalid config YAML: {e}", path=path))

    # An empty file is a valid, empty config.
    if data_obj is None:
        return Ok({})
    data = as_str_dict(data_obj)
    if data is None:
        return Err(ConfigError("Config root must be a YAML mapping", path=path))
    return Ok(data)


def load_config(
    path: Path,
    *,
    tag_prefix: str = DEFAULT_TAG_PREFIX,
) -> Result[TemplateConfig, ConfigError]:
    """Load and resolve configuration from a YAML file.

    Args:
        path: Path to the breezy.yml file
        tag_prefix: Prefix for the default tag template

    Returns:
        Ok(TemplateConfig) on success, Err(ConfigError) on failure
    """
    result = _parse_yaml(path)
    if isinstance(result, Err):
        return result

    try:
        return Ok(TemplateConfig.from_dict(result.value, tag_prefix=tag_prefix))
    except (KeyError, TypeError, ValueError) as e:
        return Err(ConfigError(f"Invalid config structure: {e}", path=path))


def _expand_path(raw: str, *, cwd: Path, home: Path | None) -> Result[Path, ConfigError]:
    if raw == "~" or raw.startswith("~/"):
        if home is None:
            return Err(ConfigError("HOME is not set."))
        return Ok(home / raw[2:] if raw != "~" else home)
    path = Path(raw)
    if path.is_absolute():
        return Ok(path)
    return Ok(cwd / path)


def discover_config(
    explicit: str | None,
    *,
    cwd: Path,
    home: Path | None,
) -> Result[Path | None, ConfigError]:
    """Find the config file to use, if any.

    Order: an explicit path (must exist), ``$HOME/.github/breezy.yml``, then
    ``<cwd>/.github/breezy.yml``. Returns Ok(None) when nothing is found.
    """
    if explicit is not None and explicit.strip():
        expanded = _expand_path(explicit.strip(), cwd=cwd, home=home)
        if isinstance(expanded, Err):
            return expanded
        if not expanded.value.exists():
            return Err(
                ConfigError(f"Config file not found: {expanded.value}", path=expanded.value)
            )
        return Ok(expanded.value)

    candidates: list[Path] = []
    if home is not None:
        candidates.append(home / CONFIG_RELATIVE_PATH)
    candidates.append(cwd / CONFIG_RELATIVE_PATH)

    for candidate in candidates:
        if candidate.is_file():
            return Ok(candidate)
    return Ok(None)
