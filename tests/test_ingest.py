"""Tests for content-addressable ingestion."""
import hashlib
import io
from pathlib import Path
from unittest.mock import patch

import pytest

from conftest import CDN_BASE
from dimagram.core.errors import IngestionError, LocalIOError, RemoteIOError
from dimagram.core.ingest import CHUNK_SIZE, address_for, normalize_extension

PAYLOAD = b"\x89PNG fake image bytes" * 1000


class TestNormalizeExtension:
    @pytest.mark.parametrize(
        "hint,expected",
        [
            ("photo.JPG", ".jpg"),
            (".png", ".png"),
            ("png", ".png"),
            ("../../etc/x.we/b", ".b"),
            ("archive.tar.gz", ".gz"),
            ("", ""),
            (None, ""),
            ("weird.p$n%g", ".png"),
        ],
    )
    def test_hints(self, hint, expected):
        assert normalize_extension(hint) == expected


class TestIngest:
    def test_address_is_sha256_plus_extension(self, ingestor, remote):
        ref = ingestor.ingest(io.BytesIO(PAYLOAD), "photo.png")

        digest = hashlib.sha256(PAYLOAD).hexdigest()
        assert ref.address == f"{digest}.png"
        assert ref.url == f"{CDN_BASE}/content/{digest}.png"
        assert remote.content[ref.address] == PAYLOAD

    def test_same_bytes_same_address(self, ingestor):
        first = ingestor.ingest(io.BytesIO(PAYLOAD), "a.png")
        second = ingestor.ingest(io.BytesIO(PAYLOAD), "b.png")
        assert first.address == second.address
        assert first.address == address_for(io.BytesIO(PAYLOAD), "c.png")

    def test_different_bytes_different_address(self, ingestor):
        a = ingestor.ingest(io.BytesIO(b"one"), "x.jpg")
        b = ingestor.ingest(io.BytesIO(b"two"), "x.jpg")
        assert a.address != b.address

    def test_streams_in_chunks(self, ingestor):
        stream = io.BytesIO(b"x" * (CHUNK_SIZE * 3 + 5))
        with patch.object(stream, "read", wraps=stream.read) as read:
            ingestor.ingest(stream, "bin")
        assert all(call.args == (CHUNK_SIZE,) for call in read.call_args_list)
        assert read.call_count == 5

    def test_local_copy_removed_on_success(self, ingestor):
        ingestor.ingest(io.BytesIO(PAYLOAD), "a.png")
        assert list(Path(ingestor.uploads_dir).iterdir()) == []

    def test_remote_failure(self, ingestor, remote):
        remote.fail_content = True

        with pytest.raises(IngestionError) as excinfo:
            ingestor.ingest(io.BytesIO(PAYLOAD), "a.png")

        assert excinfo.value.source == "remote"
        assert isinstance(excinfo.value.__cause__, RemoteIOError)
        assert list(Path(ingestor.uploads_dir).iterdir()) == []

    def test_read_failure_is_local(self, ingestor, remote):
        class Broken(io.RawIOBase):
            def read(self, n=-1):
                raise OSError("connection reset")

        with pytest.raises(IngestionError) as excinfo:
            ingestor.ingest(Broken(), "a.png")

        assert excinfo.value.source == "local"
        assert isinstance(excinfo.value.__cause__, LocalIOError)
        assert remote.content == {}
        assert list(Path(ingestor.uploads_dir).iterdir()) == []
