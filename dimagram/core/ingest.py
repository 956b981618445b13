"""Content-addressable ingestion: stream upload -> sha256 address -> remote blob.

Local storage is a relay only: the local file is removed on every exit path.
An existing destination with the same address is overwritten without
re-verifying its content.
"""
import hashlib
import logging
import os
import re
import tempfile
from pathlib import Path
from typing import BinaryIO

from dimagram.core.cdn import CdnConfig
from dimagram.core.errors import IngestionError, LocalIOError, RemoteIOError
from dimagram.core.remote_sync import RemoteSync
from dimagram.models.album import ContentRef

logger = logging.getLogger(__name__)

CHUNK_SIZE = 64 * 1024

_EXT_UNSAFE = re.compile(r"[^a-z0-9]")


def normalize_extension(hint: str | None) -> str:
    """Return ".ext" from a filename or extension hint, or "" if none."""
    if not hint:
        return ""
    name = os.path.basename(hint.strip())
    if "." in name:
        ext = name.rsplit(".", 1)[1]
    else:
        ext = name
    ext = _EXT_UNSAFE.sub("", ext.lower())
    return f".{ext}" if ext else ""


def address_for(stream: BinaryIO, extension_hint: str | None = None) -> str:
    """Content address of stream without storing anything."""
    hasher = hashlib.sha256()
    for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
        hasher.update(chunk)
    return hasher.hexdigest() + normalize_extension(extension_hint)


class ContentIngestor:
    """Turns uploaded byte streams into content-addressed remote blobs."""

    def __init__(self, uploads_dir: Path, remote: RemoteSync, cdn_config: CdnConfig) -> None:
        self.uploads_dir = Path(uploads_dir)
        self.remote = remote
        self.cdn_config = cdn_config

    def _spool(self, stream: BinaryIO, extension: str) -> tuple[Path, str]:
        """Copy stream to a temp file while hashing it; returns (path, hex digest)."""
        self.uploads_dir.mkdir(parents=True, exist_ok=True)
        fd, tmp_name = tempfile.mkstemp(prefix="temp-", suffix=extension, dir=self.uploads_dir)
        tmp_path = Path(tmp_name)
        hasher = hashlib.sha256()
        try:
            with os.fdopen(fd, "wb") as dst:
                for chunk in iter(lambda: stream.read(CHUNK_SIZE), b""):
                    hasher.update(chunk)
                    dst.write(chunk)
        except BaseException:
            tmp_path.unlink(missing_ok=True)
            raise
        return tmp_path, hasher.hexdigest()

    def ingest(self, stream: BinaryIO, extension_hint: str | None = None) -> ContentRef:
        """Store stream remotely under its content address and return its CDN URL."""
        extension = normalize_extension(extension_hint)
        local_path = None
        try:
            try:
                local_path, digest = self._spool(stream, extension)
                address = digest + extension
                final_path = self.uploads_dir / address
                os.replace(local_path, final_path)
                local_path = final_path
            except OSError as e:
                cause = LocalIOError(f"error saving upload: {e}")
                raise IngestionError("local", str(cause)) from cause

            try:
                self.remote.put_content(local_path, address)
            except RemoteIOError as e:
                raise IngestionError("remote", str(e)) from e
        finally:
            if local_path is not None:
                local_path.unlink(missing_ok=True)

        ref = ContentRef(
            address=address,
            url=self.cdn_config.content_url(address, self.remote.config.content_dir),
        )
        logger.info("Ingested %s -> %s", address, ref.url)
        return ref
