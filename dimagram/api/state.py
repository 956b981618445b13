"""Shared application state (injected into routes)."""
from typing import Optional

from dimagram.config import DATA_DIR, UPLOADS_DIR
from dimagram.core.album_store import AlbumStore
from dimagram.core.cdn import CdnConfig, CdnInvalidator
from dimagram.core.ingest import ContentIngestor
from dimagram.core.publisher import Publisher
from dimagram.core.remote_sync import RemoteSync, SftpConfig


class AppState:
    """Owns the one AlbumStore every handler and trigger goes through."""

    def __init__(
        self,
        store: Optional[AlbumStore] = None,
        remote: Optional[RemoteSync] = None,
        cdn: Optional[CdnInvalidator] = None,
        ingestor: Optional[ContentIngestor] = None,
    ) -> None:
        self.store = store or AlbumStore(DATA_DIR)
        self._remote = remote
        self._cdn = cdn
        self._ingestor = ingestor
        self._publisher: Optional[Publisher] = None

    @property
    def remote(self) -> RemoteSync:
        if self._remote is None:
            self._remote = RemoteSync(SftpConfig.from_env())
        return self._remote

    @property
    def cdn(self) -> CdnInvalidator:
        if self._cdn is None:
            self._cdn = CdnInvalidator(CdnConfig.from_env())
        return self._cdn

    @property
    def ingestor(self) -> ContentIngestor:
        if self._ingestor is None:
            self._ingestor = ContentIngestor(UPLOADS_DIR, self.remote, self.cdn.config)
        return self._ingestor

    @property
    def publisher(self) -> Publisher:
        if self._publisher is None:
            self._publisher = Publisher(self.store, self.remote, self.cdn)
        return self._publisher


_state = AppState()


def get_state() -> AppState:
    return _state
