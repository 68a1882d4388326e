from __future__ import annotations

from pathlib import Path

from breezy.cli.inputs import (
    input_key,
    load_template_config,
    read_input,
    resolve_branch,
    resolve_commit_sha,
    resolve_directory,
    resolve_repository,
    resolve_token,
)
from breezy.core.result import Err, Ok


def test_input_key() -> None:
    assert input_key("tag-prefix") == "INPUT_TAG-PREFIX"
    assert input_key("config file") == "INPUT_CONFIG_FILE"


def test_read_input_accepts_both_spellings() -> None:
    assert read_input("tag-prefix", {"INPUT_TAG-PREFIX": "rel-"}) == "rel-"
    assert read_input("tag-prefix", {"INPUT_TAG_PREFIX": "rel-"}) == "rel-"
    assert read_input("tag-prefix", {}) is None


def test_resolve_branch_prefers_head_ref() -> None:
    env = {"GITHUB_HEAD_REF": "feature/x", "GITHUB_REF_NAME": "42/merge"}
    assert resolve_branch(env) == Ok("feature/x")


def test_resolve_branch_from_ref_name() -> None:
    assert resolve_branch({"GITHUB_HEAD_REF": "", "GITHUB_REF_NAME": "main"}) == Ok("main")


def test_resolve_branch_from_full_ref() -> None:
    assert resolve_branch({"GITHUB_REF": "refs/heads/release/2.x"}) == Ok("release/2.x")


def test_resolve_branch_missing() -> None:
    result = resolve_branch({"GITHUB_REF": "refs/tags/v1.0.0"})
    assert isinstance(result, Err)
    assert result.error.kind == "invalid_input"


def test_resolve_repository() -> None:
    assert resolve_repository({"GITHUB_REPOSITORY": "acme/widget"}) == Ok(("acme", "widget"))
    for bad in ({}, {"GITHUB_REPOSITORY": "acme"}, {"GITHUB_REPOSITORY": "/widget"}):
        result = resolve_repository(bad)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_input"


def test_resolve_token_order() -> None:
    env = {"INPUT_GITHUB-TOKEN": "from-input", "GITHUB_TOKEN": "from-env"}
    assert resolve_token(" explicit ", env) == Ok("explicit")
    assert resolve_token(None, env) == Ok("from-input")
    assert resolve_token(None, {"GITHUB_TOKEN": "from-env"}) == Ok("from-env")
    assert isinstance(resolve_token("  ", {}), Err)


def test_resolve_commit_sha() -> None:
    assert resolve_commit_sha({"GITHUB_SHA": "abc"}) == "abc"
    assert resolve_commit_sha({}) is None


def test_resolve_directory() -> None:
    assert resolve_directory(None) == Ok(None)
    assert resolve_directory("  ") == Ok(None)
    assert resolve_directory(".") == Ok(None)
    assert resolve_directory("./") == Ok(None)
    assert resolve_directory("./packages/api/") == Ok("packages/api")


def test_resolve_directory_rejects_absolute() -> None:
    for raw in ("/srv/app", "C:\\work\\app"):
        result = resolve_directory(raw)
        assert isinstance(result, Err)
        assert result.error.kind == "invalid_input"


def test_load_template_config_defaults(tmp_path: Path) -> None:
    result = load_template_config(None, cwd=tmp_path, home=None, tag_prefix="rel-")
    assert isinstance(result, Ok)
    assert result.value.tag_template == "rel-$VERSION"


def test_load_template_config_from_repo(tmp_path: Path) -> None:
    (tmp_path / ".github").mkdir()
    (tmp_path / ".github" / "breezy.yml").write_text("change-template: '* $TITLE'\n")

    result = load_template_config(None, cwd=tmp_path, home=None, tag_prefix="v")

    assert isinstance(result, Ok)
    assert result.value.change_template == "* $TITLE"


def test_load_template_config_errors_are_config_errors(tmp_path: Path) -> None:
    missing = load_template_config("nope.yml", cwd=tmp_path, home=None, tag_prefix="v")
    assert isinstance(missing, Err)
    assert missing.error.kind == "config_parse_error"

    (tmp_path / "bad.yml").write_text("categories: 3\n")
    bad = load_template_config("bad.yml", cwd=tmp_path, home=None, tag_prefix="v")
    assert isinstance(bad, Err)
    assert bad.error.kind == "config_parse_error"
    assert bad.error.hint is not None and bad.error.hint.endswith("bad.yml")
