"""Tests for opaque address parsing (pure, no storage)."""

from __future__ import annotations

from imgcast.models import ParsedAddress
from imgcast.resolve.address import parse_address


class TestLocalScheme:
    def test_app_local_prefix_stripped(self):
        parsed = parse_address("app://local/abc/def/photo.JPG")
        assert parsed == ParsedAddress(
            scheme="app", path="abc/def/photo.JPG", filename="photo.JPG", is_local=True,
        )

    def test_bare_app_scheme_stripped(self):
        parsed = parse_address("app:///attachments/cat.png")
        assert parsed.is_local
        assert parsed.path == "attachments/cat.png"

    def test_only_one_leading_separator_removed(self):
        parsed = parse_address("app://local//cat.png")
        assert parsed.path == "/cat.png"

    def test_scheme_is_case_insensitive(self):
        parsed = parse_address("APP://LOCAL/x/cat.png")
        assert parsed.is_local
        assert parsed.path == "x/cat.png"

    def test_cache_busting_query_removed(self):
        parsed = parse_address("app://local/attachments/cat.png?1718000000")
        assert parsed.path == "attachments/cat.png"
        assert parsed.filename == "cat.png"

    def test_percent_encoding_decoded(self):
        parsed = parse_address("app://local/my%20folder/a%20cat.png")
        assert parsed.path == "my folder/a cat.png"
        assert parsed.filename == "a cat.png"

    def test_local_prefix_must_end_at_separator(self):
        parsed = parse_address("app://localhost/cat.png")
        assert parsed.is_local
        assert parsed.path == "localhost/cat.png"


class TestOtherAddresses:
    def test_https_url_filename(self):
        parsed = parse_address("https://cdn.example.com/img/cat.png?w=300")
        assert not parsed.is_local
        assert parsed.scheme == "https"
        assert parsed.path == "/img/cat.png"
        assert parsed.filename == "cat.png"

    def test_relative_path_has_no_scheme(self):
        parsed = parse_address("images/cat.png")
        assert parsed.scheme == ""
        assert parsed.filename == "cat.png"
        assert not parsed.is_local

    def test_trailing_slash_uses_last_non_empty_segment(self):
        assert parse_address("https://example.com/dir/").filename == "dir"

    def test_bare_filename(self):
        assert parse_address("cat.png").filename == "cat.png"

    def test_empty_address(self):
        parsed = parse_address("")
        assert parsed.filename == ""
        assert not parsed.is_local

    def test_whitespace_trimmed(self):
        assert parse_address("  app://local/a.png  ").path == "a.png"
