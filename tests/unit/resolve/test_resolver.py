"""Tests for ResourceResolver strategy ordering and outcomes."""

from __future__ import annotations

from unittest.mock import MagicMock

import pytest
from conftest import MemoryStorage

from imgcast.errors import ErrorCode, ImgcastNotFoundError
from imgcast.models import InvocationContext, ResolveStrategy, ResourceHandle
from imgcast.resolve import ResourceResolver


def _resolver(storage, metrics=None) -> ResourceResolver:
    return ResourceResolver(storage, metrics=metrics)


# =========================================================================
# Strategy 1: active identifier
# =========================================================================


class TestActiveIdentifier:
    def test_valid_active_path_used_directly(self, storage):
        handle = _resolver(storage).resolve(InvocationContext(active_path="attachments/cat.png"))
        assert handle == ResourceHandle("attachments/cat.png", "cat.png", "png")

    def test_active_path_never_scans(self, storage):
        _resolver(storage).resolve(InvocationContext(active_path="attachments/cat.png"))
        assert ("list", "") not in storage.calls

    def test_non_image_active_path_falls_through(self, storage):
        ctx = InvocationContext(active_path="notes/readme.md", text="![x](folder/pic.png)")
        result = _resolver(storage).try_resolve(ctx)
        assert result is not None
        assert result[1] is ResolveStrategy.EMBEDDED_LINK
        assert result[0].path == "folder/pic.png"

    def test_active_directory_rejected(self, storage):
        assert _resolver(storage).from_active("attachments") is None

    def test_active_missing_resource_rejected(self, storage):
        assert _resolver(storage).from_active("attachments/gone.png") is None


# =========================================================================
# Strategy 2: embedded link
# =========================================================================


class TestEmbeddedLink:
    def test_link_looked_up_as_storage_path(self, storage):
        handle = _resolver(storage).resolve(
            InvocationContext(text="see ![alt](folder/pic.png) here"),
        )
        assert handle.path == "folder/pic.png"
        assert ("get", "folder/pic.png") in storage.calls

    def test_link_to_missing_file_not_found(self, storage):
        with pytest.raises(ImgcastNotFoundError):
            _resolver(storage).resolve(InvocationContext(text="![x](nowhere/pic.png)"))

    def test_link_lookup_is_direct_not_scanned(self, storage):
        # Same filename exists elsewhere, but an explicit link only does a direct lookup.
        with pytest.raises(ImgcastNotFoundError):
            _resolver(storage).resolve(InvocationContext(text="![x](other/cat.png)"))
        assert ("list", "") not in storage.calls

    def test_link_to_directory_rejected(self, storage):
        assert _resolver(storage).from_text("![x](folder.png)") is None

    def test_text_without_link_inapplicable(self, storage):
        assert _resolver(storage).from_text("no image here") is None


# =========================================================================
# Strategy 3: opaque source
# =========================================================================


class TestOpaqueSource:
    def test_local_scheme_exact_handle(self, storage):
        handle = _resolver(storage).resolve(
            InvocationContext(source="app://local/abc/def/photo.JPG"),
        )
        assert handle == ResourceHandle("abc/def/photo.JPG", "photo.JPG", "jpg")

    def test_local_scheme_reports_strategy(self, storage):
        _, strategy = _resolver(storage).try_resolve(
            InvocationContext(source="app://local/abc/def/photo.JPG"),
        )
        assert strategy is ResolveStrategy.LOCAL_SCHEME

    def test_filename_scan_skips_invalid_extension(self):
        storage = MemoryStorage({"a/cat.txt": b"t", "b/cat.png": b"p"})
        handle = _resolver(storage).resolve(
            InvocationContext(source="https://example.com/x/y/cat.png"),
        )
        assert handle.path == "b/cat.png"

    @pytest.mark.parametrize("source", [
        "https://example.com/x/cat.png",
        "http://localhost:8080/cat.png",
        "capacitor://host/assets/cat.png",
        "some/relative/cat.png",
    ])
    def test_filename_scan_regardless_of_scheme(self, source):
        storage = MemoryStorage({"img/cat.png": b"p", "img/cat.txt": b"t"})
        handle = _resolver(storage).resolve(InvocationContext(source=source))
        assert handle.name == "cat.png"
        assert handle.path == "img/cat.png"

    def test_local_scheme_miss_falls_back_to_scan(self, storage):
        # Absolute file-system path that does not match a vault path.
        ctx = InvocationContext(source="app://local/Users/me/vault/attachments/cat.png?123")
        result = _resolver(storage).try_resolve(ctx)
        assert result is not None
        assert result[0].path == "attachments/cat.png"
        assert result[1] is ResolveStrategy.FILENAME_SCAN

    def test_scan_tie_break_smallest_path(self):
        storage = MemoryStorage({
            "z/cat.png": b"z",
            "a/cat.png": b"a",
            "m/cat.png": b"m",
        })
        handle = _resolver(storage).find_by_filename("cat.png")
        assert handle.path == "a/cat.png"

    def test_scan_name_match_is_exact(self):
        storage = MemoryStorage({"a/Cat.png": b"x"})
        assert _resolver(storage).find_by_filename("cat.png") is None

    def test_scan_empty_filename(self, storage):
        assert _resolver(storage).find_by_filename("") is None


# =========================================================================
# Ordering and failure
# =========================================================================


class TestOrderingAndFailure:
    def test_active_beats_link_and_source(self, storage):
        ctx = InvocationContext(
            active_path="abc/def/photo.JPG",
            text="![x](folder/pic.png)",
            source="app://local/attachments/cat.png",
        )
        assert _resolver(storage).resolve(ctx).path == "abc/def/photo.JPG"

    def test_link_beats_source(self, storage):
        ctx = InvocationContext(
            text="![x](folder/pic.png)", source="app://local/attachments/cat.png",
        )
        assert _resolver(storage).resolve(ctx).path == "folder/pic.png"

    def test_not_found_carries_original_address(self, storage):
        src = "https://example.com/missing/dog.png"
        with pytest.raises(ImgcastNotFoundError) as excinfo:
            _resolver(storage).resolve(InvocationContext(source=src))
        assert src in excinfo.value.message
        assert excinfo.value.context["address"] == src
        assert excinfo.value.code == ErrorCode.NOT_FOUND

    def test_empty_context_not_found(self, storage):
        with pytest.raises(ImgcastNotFoundError):
            _resolver(storage).resolve(InvocationContext())

    def test_resolver_never_reads_content(self, storage):
        _resolver(storage).resolve(InvocationContext(source="https://x/cat.png"))
        assert storage.reads == []


class TestResolverMetrics:
    def test_success_increments_strategy_counter(self, storage):
        metrics = MagicMock()
        _resolver(storage, metrics).resolve(InvocationContext(active_path="folder/pic.png"))
        metrics.increment.assert_called_once_with(
            "imgcast.resolve_total", tags={"strategy": "active"},
        )

    def test_failure_increments_failure_counter(self, storage):
        metrics = MagicMock()
        with pytest.raises(ImgcastNotFoundError):
            _resolver(storage, metrics).resolve(InvocationContext(source="nope.png"))
        metrics.increment.assert_called_once_with("imgcast.resolve_failure_total")
