"""Shared fixtures: a store in tmp_path and in-memory remote/CDN fakes."""
import json
from pathlib import Path
from typing import List, Optional

import pytest

from dimagram.core.album_store import AlbumStore
from dimagram.core.cdn import CdnConfig, CdnInvalidator
from dimagram.core.errors import CacheInvalidationError, RemoteIOError
from dimagram.core.ingest import ContentIngestor
from dimagram.core.publisher import Publisher
from dimagram.core.remote_sync import RemoteSync, SftpConfig

CDN_BASE = "https://cdn.example.test"


class FakeRemote(RemoteSync):
    """Records pointer and content uploads instead of talking SFTP."""

    def __init__(self) -> None:
        super().__init__(SftpConfig(host="sftp.example.test", user="u", password="p"))
        self.pointer: Optional[dict] = None
        self.pointer_writes = 0
        self.content: dict = {}
        self.fail_pointer = False
        self.fail_content = False

    def put_pointer(self, data: bytes) -> None:
        if self.fail_pointer:
            raise RemoteIOError("failed to connect to SSH server: refused")
        self.pointer = json.loads(data)
        self.pointer_writes += 1

    def put_content(self, local_path: Path, address: str) -> str:
        if self.fail_content:
            raise RemoteIOError("failed to write to remote file")
        self.content[address] = Path(local_path).read_bytes()
        return f"{self.config.content_dir}/{address}"


class FakeCdn(CdnInvalidator):
    def __init__(self) -> None:
        super().__init__(CdnConfig(api_key="key", cdn_base_url=CDN_BASE))
        self.purged: List[str] = []
        self.fail = False

    def purge(self, url: str) -> None:
        if self.fail:
            raise CacheInvalidationError("API error (status 500): boom")
        self.purged.append(url)


def write_items(path: Path, items: list) -> None:
    path.write_text(json.dumps(items), encoding="utf-8")


@pytest.fixture
def store(tmp_path: Path) -> AlbumStore:
    return AlbumStore(tmp_path / "data")


@pytest.fixture
def remote() -> FakeRemote:
    return FakeRemote()


@pytest.fixture
def cdn() -> FakeCdn:
    return FakeCdn()


@pytest.fixture
def publisher(store: AlbumStore, remote: FakeRemote, cdn: FakeCdn) -> Publisher:
    return Publisher(store, remote, cdn)


@pytest.fixture
def ingestor(tmp_path: Path, remote: FakeRemote, cdn: FakeCdn) -> ContentIngestor:
    return ContentIngestor(tmp_path / "uploads", remote, cdn.config)
