"""Shared test fixtures for the imgcast test suite."""

from __future__ import annotations

import httpx
import pytest

from imgcast.config import ImgcastConfig
from imgcast.errors import ImgcastStorageError
from imgcast.models import StorageEntry
from imgcast.notify import CollectingNotifier

WEBHOOK_URL = "https://hooks.example.com/api/webhooks/42/s3cr3t-t0ken-value"


def _entry(path: str, is_dir: bool = False) -> StorageEntry:
    name = path.rsplit("/", 1)[-1]
    ext = "" if is_dir or "." not in name else name.rsplit(".", 1)[-1]
    return StorageEntry(path=path, name=name, extension=ext, is_dir=is_dir)


class MemoryStorage:
    """In-memory storage that records every call it receives."""

    def __init__(
        self,
        files: dict[str, bytes] | None = None,
        dirs: tuple[str, ...] = (),
    ) -> None:
        self.files = dict(files or {})
        self.dirs = set(dirs)
        self.calls: list[tuple[str, str]] = []

    def get(self, path: str) -> StorageEntry | None:
        self.calls.append(("get", path))
        if path in self.files:
            return _entry(path)
        if path in self.dirs:
            return _entry(path, is_dir=True)
        return None

    def list_entries(self) -> list[StorageEntry]:
        self.calls.append(("list", ""))
        return [_entry(p) for p in self.files]

    def read_bytes(self, path: str) -> bytes:
        self.calls.append(("read", path))
        if path not in self.files:
            raise ImgcastStorageError(
                message=f"No such resource: {path}", context={"path": path},
            )
        return self.files[path]

    @property
    def reads(self) -> list[str]:
        return [p for op, p in self.calls if op == "read"]


class HttpRecorder:
    """httpx.MockTransport handler returning a canned response."""

    def __init__(self, status: int = 200, body: bytes = b"") -> None:
        self.status = status
        self.body = body
        self.error: Exception | None = None
        self.requests: list[httpx.Request] = []

    def __call__(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if self.error is not None:
            raise self.error
        return httpx.Response(self.status, content=self.body)

    def client(self) -> httpx.Client:
        return httpx.Client(transport=httpx.MockTransport(self))

    def async_client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(transport=httpx.MockTransport(self))


@pytest.fixture
def config() -> ImgcastConfig:
    """Configured test config pointing at a fake webhook."""
    return ImgcastConfig(webhook_url=WEBHOOK_URL, username="Test Bot")


@pytest.fixture
def storage() -> MemoryStorage:
    return MemoryStorage({
        "attachments/cat.png": b"\x89PNG cat",
        "folder/pic.png": b"\x89PNG pic",
        "abc/def/photo.JPG": b"\xff\xd8\xff photo",
        "notes/readme.md": b"# readme",
        "misc/cat.txt": b"not an image",
    }, dirs=("attachments", "folder.png"))


@pytest.fixture
def notifier() -> CollectingNotifier:
    return CollectingNotifier()


@pytest.fixture
def http() -> HttpRecorder:
    return HttpRecorder()
