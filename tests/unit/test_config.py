"""Tests for ImgcastConfig validation and defaults."""

from __future__ import annotations

import pytest
from conftest import WEBHOOK_URL

from imgcast.config import (
    CONTENT_TYPES,
    DEFAULT_USERNAME,
    IMAGE_EXTENSIONS,
    ImgcastConfig,
)


class TestDefaults:
    def test_unconfigured_by_default(self):
        config = ImgcastConfig()
        assert config.webhook_url == ""
        assert config.username == DEFAULT_USERNAME
        assert not config.is_configured

    def test_whitespace_url_is_unconfigured(self):
        config = ImgcastConfig()
        config.webhook_url = "   "
        assert not config.is_configured

    def test_configured(self):
        assert ImgcastConfig(webhook_url=WEBHOOK_URL).is_configured


class TestValidation:
    @pytest.mark.parametrize("url", ["ftp://example.com/x", "not a url", "/relative/path"])
    def test_rejects_non_http_url(self, url):
        with pytest.raises(ValueError, match="webhook_url"):
            ImgcastConfig(webhook_url=url)

    @pytest.mark.parametrize("timeout", [0, -1.5])
    def test_rejects_non_positive_timeout(self, timeout):
        with pytest.raises(ValueError, match="timeout_seconds"):
            ImgcastConfig(timeout_seconds=timeout)

    def test_http_allowed(self):
        assert ImgcastConfig(webhook_url="http://localhost:8080/hook").is_configured


class TestImageConstants:
    def test_every_extension_has_a_content_type(self):
        assert IMAGE_EXTENSIONS == set(CONTENT_TYPES)

    def test_extensions_are_lowercase(self):
        assert all(ext == ext.lower() and not ext.startswith(".") for ext in IMAGE_EXTENSIONS)
