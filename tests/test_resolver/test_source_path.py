"""Tests for SourcePath normalization and glob matching.

Covers:
- Segment parsing and normalization
- Equality, ordering and string forms
- Single-segment wildcard matching
- Multi-segment ``**`` matching with backtracking
- Include/exclude composition and filtering
- Directory scanning
"""

from __future__ import annotations

from pathlib import Path

import pytest

from archetype_engine.resolver.source_path import (
    SourcePath,
    matches,
    parse_pattern,
    parse_segments,
    wildcard_match,
)


pytestmark = pytest.mark.unit


# ---------------------------------------------------------------------------
# Normalization
# ---------------------------------------------------------------------------


class TestNormalization:
    @pytest.mark.parametrize(
        "raw",
        [
            "./abc/def/index.html",
            "/abc/def/index.html",
            "//abc/def/index.html",
            ".//abc//def/index.html",
            "/././abc//def/index.html",
            "abc/def/index.html/",
        ],
    )
    def test_equivalent_forms(self, raw):
        assert SourcePath(raw) == SourcePath("abc/def/index.html")

    def test_parent_segment_is_kept(self):
        assert SourcePath("../abc/def/index.html") != SourcePath("abc/def/index.html")

    def test_parse_segments(self):
        assert parse_segments("/./a//b/c") == ["a", "b", "c"]
        assert parse_segments("") == []
        assert parse_segments("./") == []

    def test_trailing_slash_pattern_becomes_double_wildcard(self):
        assert parse_pattern("src/") == ["src", "**"]
        assert parse_pattern("src") == ["src"]

    def test_string_round_trip(self):
        path = SourcePath(["a", "b", "c"])
        assert path.as_string() == "/a/b/c"
        assert SourcePath(path.as_string()) == path
        assert str(path) == "a/b/c"

    def test_from_pathlib(self):
        assert SourcePath(Path("a") / "b") == SourcePath("a/b")

    def test_relative_to(self, tmp_path):
        file = tmp_path / "x" / "y.txt"
        assert SourcePath.relative_to(tmp_path, file) == SourcePath("x/y.txt")

    def test_hashable(self):
        assert len({SourcePath("a/b"), SourcePath("/a/b"), SourcePath("a/c")}) == 2

    def test_ordering_is_segment_wise(self):
        paths = [SourcePath("b"), SourcePath("a/z"), SourcePath("a/b/c"), SourcePath("a")]
        assert SourcePath.sort(paths) == [
            SourcePath("a"),
            SourcePath("a/b/c"),
            SourcePath("a/z"),
            SourcePath("b"),
        ]


# ---------------------------------------------------------------------------
# Segment wildcard
# ---------------------------------------------------------------------------


class TestWildcardMatch:
    @pytest.mark.parametrize(
        "pattern",
        [
            "index.html", "*", "**", "***", "*.html", "index.*", "index*", "i*",
            "in*", "i*l", "in*ml", "index*html", "index*.html", "*html", "*ml",
            "*l", "*index.html", "index.html*", "**index.html", "i**",
            "index.html**", "*.*", "*.*ml", "*.*ml*", "i*x.h*ml",
        ],
    )
    def test_matches(self, pattern):
        assert wildcard_match("index.html", pattern) is True

    @pytest.mark.parametrize(
        "pattern",
        [
            "", "something-else", "id*", "*x", "*dex", "ii*", "*ll",
            "index.html*bad", "**index.htm", "i**ndex.htm", ".**",
            "index.**whatever", "*.*.*", "i*x.h*ml*a",
        ],
    )
    def test_does_not_match(self, pattern):
        assert wildcard_match("index.html", pattern) is False

    def test_both_empty(self):
        assert wildcard_match("", "") is True


# ---------------------------------------------------------------------------
# Path matching
# ---------------------------------------------------------------------------


class TestPatternMatching:
    PATH = SourcePath("abc/def/ghi/index.html")

    @pytest.mark.parametrize(
        "pattern",
        [
            "abc/def/ghi/index.html",
            "abc/def/ghi/index.html*",
            "*abc/def/ghi/index.html*",
            "abc/def/ghi/index.html**",
            "abc/*/ghi/index.html",
            "*/def/ghi/index.html",
            "abc/def/ghi/*",
            "abc/def/*/*.html",
            "*/*/*/*",
            "**",
            "**/*.html",
            "**/ghi/*.html",
            "**/*/*.html",
            "abc/**/*.html",
            "abc/**/ghi/**",
        ],
    )
    def test_matches(self, pattern):
        assert self.PATH.matches_pattern(pattern) is True

    @pytest.mark.parametrize(
        "pattern",
        [
            "",
            "abc/def/ghi/foo.html",
            "**/def/*.html",
            "**h*/*.html",
            "**h/*.html",
            "**h*j/*.html",
            "ab**/*.html",
        ],
    )
    def test_does_not_match(self, pattern):
        assert self.PATH.matches_pattern(pattern) is False

    def test_double_wildcard_suffix(self):
        assert SourcePath("a/b/c.txt").matches_pattern("**/*.txt")
        assert not SourcePath("a/b/c.md").matches_pattern("**/*.txt")

    def test_double_wildcard_matches_zero_segments(self):
        assert SourcePath("src").matches_pattern("src/**")
        assert SourcePath("src/a/b").matches_pattern("src/**")

    def test_trailing_slash_pattern(self):
        assert SourcePath("src/a/b").matches_pattern("src/")
        assert not SourcePath("lib/a").matches_pattern("src/")

    def test_double_wildcard_does_not_look_behind(self):
        # "a" was already consumed by the first segment
        assert not SourcePath("a/b").matches_pattern("a/**/a")
        assert SourcePath("a/b/a").matches_pattern("a/**/a")

    def test_multiple_double_wildcards(self):
        path = SourcePath("src/main/java/com/acme/App.java")
        assert path.matches_pattern("**/java/**/*.java")
        assert path.matches_pattern("src/**/acme/**")
        assert not path.matches_pattern("**/test/**/*.java")

    def test_pattern_shorter_than_path_matches_below_it(self):
        assert SourcePath("src/main/a.txt").matches_pattern("src/main")
        assert not SourcePath("src/test/a.txt").matches_pattern("src/main")

    def test_empty_pattern_matches_only_empty_path(self):
        assert SourcePath("").matches_pattern("")
        assert not SourcePath("a").matches_pattern("")

    def test_empty_path(self):
        for raw in ("", "./"):
            assert SourcePath(raw).matches_pattern("*")
            assert SourcePath(raw).matches_pattern("**")

    def test_none_pattern(self):
        assert SourcePath("a").matches_pattern(None) is False
        assert SourcePath("a").matches_any(None) is False


# ---------------------------------------------------------------------------
# Include / exclude composition
# ---------------------------------------------------------------------------


class TestIncludeExclude:
    def test_empty_lists_match_everything(self):
        for raw in ("a", "a/b/c.txt", ""):
            assert matches(raw, [], []) is True
            assert matches(raw) is True

    def test_include_then_exclude(self):
        path = SourcePath("src/main/App.java.mustache")
        assert path.matches(["**/*.mustache"], []) is True
        assert path.matches(["**/*.mustache"], ["src/main/**"]) is False
        assert path.matches([], ["**/*.mustache"]) is False

    def test_any_include_suffices(self):
        assert matches("a/b.md", ["**/*.txt", "**/*.md"], [])

    def test_filter_preserves_order(self):
        paths = [SourcePath(p) for p in ("b.txt", "a.md", "c/d.txt")]
        assert SourcePath.filter(paths, ["**/*.txt"], []) == [
            SourcePath("b.txt"),
            SourcePath("c/d.txt"),
        ]

    def test_filter_with_excludes_only(self):
        paths = [SourcePath(p) for p in ("b.txt", "a.md")]
        assert SourcePath.filter(paths, None, ["*.md"]) == [SourcePath("b.txt")]


# ---------------------------------------------------------------------------
# Scanning
# ---------------------------------------------------------------------------


class TestScan:
    def test_scan_lists_sorted_files(self, tmp_path):
        (tmp_path / "b").mkdir()
        (tmp_path / "b" / "x.txt").write_text("x")
        (tmp_path / "a.txt").write_text("a")
        assert SourcePath.scan(tmp_path) == [SourcePath("a.txt"), SourcePath("b/x.txt")]

    def test_scan_missing_directory(self, tmp_path):
        assert SourcePath.scan(tmp_path / "missing") == []
