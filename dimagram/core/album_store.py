"""Persist and load the album queue and archive (JSON arrays).

Every read-modify-write goes through AlbumStore.transaction(), which holds
the store locks for the whole cycle so that publish, unpublish and queue edits
cannot interleave, whether they come from one process or several.
"""
import json
import logging
import os
import tempfile
import threading
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import Iterator, List, Sequence

from filelock import FileLock

from dimagram.core.errors import DuplicateItemError, LocalIOError, SerializationError
from dimagram.models.album import AlbumItem, StoreKind

logger = logging.getLogger(__name__)

FILENAMES = {
    StoreKind.QUEUE: "album.json",
    StoreKind.ARCHIVE: "archive.json",
}
LOCK_FILENAME = ".store.lock"


@dataclass
class AlbumSnapshot:
    """Queue and archive loaded together under the store lock."""
    queue: List[AlbumItem] = field(default_factory=list)
    archive: List[AlbumItem] = field(default_factory=list)


def check_unique_ids(*collections: Sequence[AlbumItem], scope: str = "queue and archive") -> None:
    """Raise DuplicateItemError if any id appears twice across collections."""
    seen = set()
    for items in collections:
        for item in items:
            if item.id in seen:
                raise DuplicateItemError(item.id, scope)
            seen.add(item.id)


def parse_items(raw: str, source: str = "document") -> List[AlbumItem]:
    """Parse a JSON array of album items, normalizing ids."""
    try:
        data = json.loads(raw)
    except json.JSONDecodeError as e:
        raise SerializationError(f"error parsing {source}: {e}") from e
    if not isinstance(data, list):
        raise SerializationError(f"{source} must be a JSON array")
    items = [AlbumItem.from_dict(entry) for entry in data]
    try:
        check_unique_ids(items, scope=source)
    except DuplicateItemError as e:
        raise SerializationError(str(e)) from e
    return items


def dump_items(items: Sequence[AlbumItem]) -> str:
    return json.dumps([item.to_dict() for item in items], indent=2)


class AlbumStore:
    """Single owner of album.json and archive.json in a data directory.

    The thread lock serializes callers in this process; the lock file
    serializes every process using the same data directory (server, CLI
    trigger).
    """

    def __init__(self, data_dir: Path) -> None:
        self.data_dir = Path(data_dir)
        self.lock = threading.RLock()
        self._file_lock = FileLock(str(self.data_dir / LOCK_FILENAME))

    def path(self, kind: StoreKind) -> Path:
        return self.data_dir / FILENAMES[StoreKind(kind)]

    @contextmanager
    def locked(self) -> Iterator[None]:
        """Hold both the in-process and the inter-process lock."""
        with self.lock:
            try:
                self.data_dir.mkdir(parents=True, exist_ok=True)
                self._file_lock.acquire()
            except OSError as e:
                raise LocalIOError(f"error locking {self.data_dir}: {e}") from e
            try:
                yield
            finally:
                self._file_lock.release()

    def load(self, kind: StoreKind) -> List[AlbumItem]:
        """Load a collection; a missing file is an empty collection."""
        p = self.path(kind)
        try:
            raw = p.read_text(encoding="utf-8")
        except FileNotFoundError:
            return []
        except OSError as e:
            raise LocalIOError(f"error reading {p.name}: {e}") from e
        return parse_items(raw, source=p.name)

    def save(self, kind: StoreKind, items: Sequence[AlbumItem]) -> None:
        """Replace the whole document with a single atomic rename.

        A document with duplicate ids is refused rather than written, so the
        store never holds a file it cannot load back.
        """
        p = self.path(kind)
        check_unique_ids(items, scope=p.name)
        payload = dump_items(items)
        with self.locked():
            tmp_name = None
            try:
                fd, tmp_name = tempfile.mkstemp(prefix=f".{p.name}.", dir=self.data_dir)
                with os.fdopen(fd, "w", encoding="utf-8") as f:
                    f.write(payload)
                    f.flush()
                    os.fsync(f.fileno())
                os.replace(tmp_name, p)
                tmp_name = None
            except OSError as e:
                raise LocalIOError(f"error writing {p.name}: {e}") from e
            finally:
                if tmp_name is not None:
                    Path(tmp_name).unlink(missing_ok=True)

    @contextmanager
    def transaction(self) -> Iterator[AlbumSnapshot]:
        """Hold the locks and yield both collections loaded under them.

        Callers persist their changes with save() before leaving the block.
        """
        with self.locked():
            yield AlbumSnapshot(
                queue=self.load(StoreKind.QUEUE),
                archive=self.load(StoreKind.ARCHIVE),
            )

    def read(self, kind: StoreKind) -> List[AlbumItem]:
        with self.locked():
            return self.load(kind)

    def replace_queue(self, items: Sequence[AlbumItem]) -> List[AlbumItem]:
        """Replace the queue wholesale (album editor save)."""
        items = list(items)
        with self.transaction() as snap:
            check_unique_ids(items, snap.archive)
            self.save(StoreKind.QUEUE, items)
        logger.info("Album queue replaced (%d items)", len(items))
        return items
