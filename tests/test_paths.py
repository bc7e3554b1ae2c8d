import os

import pytest

from agentteam.paths import PathResolutionError, PathResolver


def test_empty_path_raises():
    with pytest.raises(PathResolutionError, match="empty path"):
        PathResolver("").resolve_path("")


def test_expand_plain_and_braced_variables(monkeypatch):
    monkeypatch.setenv("AGENTTEAM_DIR", "alpha")
    resolver = PathResolver()
    assert resolver.expand_environment_variables("$AGENTTEAM_DIR/x") == "alpha/x"
    assert resolver.expand_environment_variables("${AGENTTEAM_DIR}y") == "alphay"


def test_unset_variable_expands_to_empty(monkeypatch):
    monkeypatch.delenv("AGENTTEAM_UNSET_VAR", raising=False)
    resolver = PathResolver()
    assert resolver.expand_environment_variables("a/$AGENTTEAM_UNSET_VAR/b") == "a//b"


def test_trailing_dollar_is_kept():
    assert PathResolver().expand_environment_variables("cost$") == "cost$"


def test_unterminated_brace_is_dropped():
    assert PathResolver().expand_environment_variables("a${b") == "ab"


def test_tilde_expansion(monkeypatch, tmp_path):
    monkeypatch.setenv("HOME", str(tmp_path))
    monkeypatch.setenv("USERPROFILE", str(tmp_path))
    resolver = PathResolver()
    assert resolver.resolve_tilde_path("~/docs/po.md") == os.path.join(str(tmp_path), "docs", "po.md")


def test_tilde_without_slash_unchanged():
    resolver = PathResolver()
    assert resolver.resolve_tilde_path("~other/file") == "~other/file"
    assert resolver.resolve_tilde_path("plain/file") == "plain/file"


def test_absolute_path_unchanged(tmp_path):
    resolver = PathResolver()
    absolute = str(tmp_path / "file.md")
    assert resolver.make_absolute_path(absolute, "/somewhere") == absolute


def test_relative_path_joined_to_base(tmp_path):
    resolver = PathResolver()
    assert resolver.make_absolute_path("po.md", str(tmp_path)) == os.path.join(str(tmp_path), "po.md")


def test_relative_path_with_empty_base_uses_cwd(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    resolver = PathResolver()
    assert resolver.make_absolute_path("po.md", "") == os.path.join(os.getcwd(), "po.md")


def test_resolve_path_full_pipeline(tmp_path, monkeypatch):
    monkeypatch.setenv("AGENTTEAM_SUB", "inner")
    resolver = PathResolver(str(tmp_path))
    result = resolver.resolve_path("$AGENTTEAM_SUB/../other/./po.md")
    assert result == os.path.join(str(tmp_path), "other", "po.md")
    assert os.path.isabs(result)


def test_resolve_path_is_idempotent(tmp_path):
    resolver = PathResolver(str(tmp_path))
    once = resolver.resolve_path("a/b/../c.md")
    assert resolver.resolve_path(once) == once