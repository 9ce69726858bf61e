"""Tests for fs/utils.py: path helpers, URI splitting, LIKE translation."""

from __future__ import annotations

import pytest

from omnifs.fs.utils import (
    glob_to_sql_like,
    has_scheme,
    has_wildcard,
    join_virtual,
    normalize_path,
    split_path,
    split_scheme,
)

# ---------------------------------------------------------------------------
# Path Utilities
# ---------------------------------------------------------------------------


class TestNormalizePath:
    @pytest.mark.parametrize(
        ("input_path", "expected"),
        [
            pytest.param("", "/", id="empty"),
            pytest.param("foo.txt", "/foo.txt", id="no-leading-slash"),
            pytest.param("/foo//bar.txt", "/foo/bar.txt", id="double-slashes"),
            pytest.param("//foo", "/foo", id="leading-double-slash"),
            pytest.param("/foo/./bar", "/foo/bar", id="dot-segment"),
            pytest.param("/foo/../bar.txt", "/bar.txt", id="dotdot"),
            pytest.param("/../bar.txt", "/bar.txt", id="dotdot-above-root"),
            pytest.param("/foo/", "/foo", id="trailing-slash"),
            pytest.param("/", "/", id="root"),
        ],
    )
    def test_normalize(self, input_path: str, expected: str):
        assert normalize_path(input_path) == expected


class TestSplitPath:
    @pytest.mark.parametrize(
        ("path", "expected"),
        [
            pytest.param("/foo/bar.txt", ("/foo", "bar.txt"), id="nested-file"),
            pytest.param("/foo.txt", ("/", "foo.txt"), id="root-file"),
            pytest.param("/", ("/", ""), id="root"),
        ],
    )
    def test_split(self, path: str, expected: tuple[str, str]):
        assert split_path(path) == expected


class TestJoinVirtual:
    def test_joins_and_normalizes(self):
        assert join_virtual("/a", "b", "c.txt") == "/a/b/c.txt"

    def test_skips_empty_parts(self):
        assert join_virtual("", "/a", "", "b") == "/a/b"

    def test_parent(self):
        assert join_virtual("/a/b", "..") == "/a"

    def test_no_parts_is_root(self):
        assert join_virtual() == "/"


# ---------------------------------------------------------------------------
# URI helpers
# ---------------------------------------------------------------------------


class TestSchemes:
    @pytest.mark.parametrize(
        ("uri", "expected"),
        [
            pytest.param("mem://abc/x", ("mem://", "abc/x"), id="memory"),
            pytest.param("file:///tmp", ("file://", "/tmp"), id="file"),
            pytest.param("/tmp/x", ("", "/tmp/x"), id="plain-path"),
            pytest.param("", ("", ""), id="empty"),
        ],
    )
    def test_split_scheme(self, uri: str, expected: tuple[str, str]):
        assert split_scheme(uri) == expected

    def test_has_scheme(self):
        assert has_scheme("db://main/x") is True
        assert has_scheme("relative/path") is False

    def test_has_wildcard(self):
        assert has_wildcard("*.txt") is True
        assert has_wildcard("file[12]") is True
        assert has_wildcard("plain.txt") is False


# ---------------------------------------------------------------------------
# SQL Pushdown
# ---------------------------------------------------------------------------


class TestGlobToSqlLike:
    @pytest.mark.parametrize(
        ("pattern", "expected"),
        [
            pytest.param("*.txt", "%.txt", id="star"),
            pytest.param("file?", "file_", id="question"),
            pytest.param("100%", "100\\%", id="escape-percent"),
            pytest.param("a_b*", "a\\_b%", id="escape-underscore"),
            pytest.param("plain", "plain", id="literal"),
        ],
    )
    def test_translates(self, pattern: str, expected: str):
        assert glob_to_sql_like(pattern) == expected

    @pytest.mark.parametrize(
        "pattern",
        [
            pytest.param("file[12].txt", id="class"),
            pytest.param("a\\*b", id="escape"),
        ],
    )
    def test_untranslatable(self, pattern: str):
        assert glob_to_sql_like(pattern) is None
