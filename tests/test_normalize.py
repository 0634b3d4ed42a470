"""
Unit tests for importvars/normalize.py - glob normalization.
"""
import pytest

from importvars.config import DEFAULT_EXTENSIONS
from importvars.normalize import (
    expand_depth,
    has_extension,
    infer_extension,
    normalize_glob,
    repair_slash,
)

EXTS = "mjs,js,mts,ts,jsx,tsx,json"


class TestRepairSlash:
    """Tests for the missing-slash repair."""

    def test_missing_slash(self):
        assert repair_slash("./views*") == ["./views/*", "./views*"]

    def test_missing_slash_with_extension(self):
        assert repair_slash("./views*.js") == ["./views/*.js", "./views*.js"]

    def test_slash_present(self):
        assert repair_slash("./views/*") == ["./views/*"]

    def test_only_last_wildcard(self):
        assert repair_slash("./views/*/index*") == ["./views/*/index/*", "./views/*/index*"]


class TestExpandDepth:
    """Tests for loose-mode depth expansion."""

    @pytest.mark.parametrize("glob,expected", [
        ("foo/*", ["foo/*", "foo/**/*"]),
        ("foo/*.js", ["foo/*.js", "foo/**/*.js"]),
        ("foo*", ["foo*", "foo*/**/*"]),
        ("foo*bar.js", ["foo*bar.js", "foo*/**/*bar.js"]),
        ("foo*/bar.js", ["foo*/bar.js", "foo*/**/bar.js"]),
        ("./views/*/index.js", ["./views/*/index.js", "./views/**/*/index.js"]),
    ])
    def test_expand(self, glob, expected):
        assert expand_depth(glob) == expected

    def test_already_recursive(self):
        assert expand_depth("foo/**/*") == ["foo/**/*"]

    def test_no_wildcard(self):
        assert expand_depth("foo/bar.js") == ["foo/bar.js"]


class TestInferExtension:
    """Tests for extension inference."""

    def test_without_extension(self):
        assert infer_extension("./views/*", [".js", ".ts"]) == [
            "./views/*.{js,ts}",
            "./views/*/index.{js,ts}",
        ]

    def test_with_extension(self):
        assert infer_extension("./views/*.js", [".js", ".ts"]) == ["./views/*.js"]

    def test_recursive_has_no_index_variant(self):
        assert infer_extension("./views/**/*", [".js"]) == ["./views/**/*.{js}"]

    def test_has_extension(self):
        assert has_extension("./views/*.tsx")
        assert has_extension("./views/*.{js,ts}")
        assert not has_extension("./views.d/*")
        assert not has_extension("./views*")

    def test_wildcard_is_not_an_extension(self):
        """`foo.bar*` may be foo.bar1.js, foo.barbaz.ts, ..."""
        assert not has_extension("./foo.bar*")
        assert normalize_glob("./foo.bar*", [".js"], loose=False) == [
            "./foo.bar/*.{js}",
            "./foo.bar/*/index.{js}",
            "./foo.bar*.{js}",
            "./foo.bar*/index.{js}",
        ]


class TestNormalizeGlob:
    """Tests for the whole pipeline."""

    def test_missing_slash(self):
        """`./views${id}` reaches files and index files under views/."""
        globs = normalize_glob("./views*", DEFAULT_EXTENSIONS)
        assert f"./views/*.{{{EXTS}}}" in globs
        assert f"./views/*/index.{{{EXTS}}}" in globs
        assert f"./views/**/*.{{{EXTS}}}" in globs

    def test_loose_with_extension(self):
        assert normalize_glob("./views/*.js", DEFAULT_EXTENSIONS) == ["./views/*.js", "./views/**/*.js"]

    def test_strict(self):
        assert normalize_glob("./views/*.js", DEFAULT_EXTENSIONS, loose=False) == ["./views/*.js"]

    def test_strict_without_extension(self):
        assert normalize_glob("./views/*", [".js"], loose=False) == [
            "./views/*.{js}",
            "./views/*/index.{js}",
        ]

    def test_no_duplicates(self):
        globs = normalize_glob("./views*", DEFAULT_EXTENSIONS)
        assert len(globs) == len(set(globs))

    @pytest.mark.parametrize("glob,loose", [
        ("./views/**/*.js", True),
        ("./views/**/*.{js,ts}", True),
        ("./views/*.js", False),
        ("../a/*/b/*.json", False),
    ])
    def test_fixed_points(self, glob, loose):
        """Normalizing an already normalized glob changes nothing."""
        assert normalize_glob(glob, DEFAULT_EXTENSIONS, loose=loose) == [glob]
