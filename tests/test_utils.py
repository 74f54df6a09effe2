"""Tests for path normalisation and small helpers."""

from wikisite.utils import (
    copy_file,
    encode_path,
    is_url,
    join_url,
    normalize_path,
    parse_bool,
    stringify_value,
)


class TestNormalizePath:
    def test_lowercases_and_hyphenates_spaces(self):
        assert normalize_path("About US") == "about-us"

    def test_trims_surrounding_whitespace(self):
        assert normalize_path("  Home  ") == "home"

    def test_collapses_whitespace_runs(self):
        assert normalize_path("a   b\tc") == "a-b-c"

    def test_replaces_encoded_spaces(self):
        assert normalize_path("Second%20Level") == "second-level"

    def test_keeps_underscores(self):
        assert normalize_path("About_US") == "about_us"

    def test_leaves_separators_alone(self):
        assert normalize_path("Second Level/Nested Page") == "second-level/nested-page"


class TestIsUrl:
    def test_absolute_urls(self):
        assert is_url("https://example.com/a.png")
        assert is_url("mailto:someone@example.com")
        assert is_url("data:image/png;base64,AAAA")

    def test_relative_paths(self):
        assert not is_url("./assets/a.png")
        assert not is_url("a.png")
        assert not is_url("/favicon.ico")
        assert not is_url("")


class TestEncodePath:
    def test_encodes_each_segment(self):
        assert encode_path("dir name/image with space.png") == "dir%20name/image%20with%20space.png"

    def test_plain_path_unchanged(self):
        assert encode_path("assets/a.png") == "assets/a.png"


class TestValues:
    def test_stringify_booleans_like_yaml(self):
        assert stringify_value(True) == "true"
        assert stringify_value(False) == "false"

    def test_stringify_none_and_numbers(self):
        assert stringify_value(None) == ""
        assert stringify_value(3) == "3"

    def test_parse_bool(self):
        assert parse_bool("yes")
        assert not parse_bool("off")
        assert not parse_bool(None)

    def test_join_url(self):
        assert join_url("https://example.com/", "/docs/a") == "https://example.com/docs/a"
        assert join_url("https://example.com", "") == "https://example.com"


class TestCopyFile:
    def test_copies_and_creates_directories(self, tmp_path):
        source = tmp_path / "a.txt"
        source.write_text("data", encoding="utf-8")
        target = tmp_path / "out" / "deep" / "a.txt"
        assert copy_file(source, target)
        assert target.read_text(encoding="utf-8") == "data"

    def test_missing_source_reports(self, tmp_path, capsys):
        assert not copy_file(tmp_path / "missing.png", tmp_path / "out.png")
        assert "missing.png" in capsys.readouterr().err
