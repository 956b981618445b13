"""Publish / unpublish: move items between queue and archive and keep the
remote "today" pointer in step with the archive's last item.

Remote pointer upload is the gate: nothing local changes before it succeeds.
CDN purge is advisory. Local persistence failing after the pointer upload
leaves remote and local diverged; that is reported, not rolled back.

Each transition saves the document that gains the item first, so a failed
second save leaves the item in both documents. Re-running the same
transition finishes that commit instead of duplicating the item.
"""
import json
import logging
from dataclasses import dataclass, field
from typing import List, Optional

from dimagram.core.album_store import AlbumStore
from dimagram.core.cdn import CdnInvalidator
from dimagram.core.errors import (
    DuplicateItemError,
    EmptyArchiveError,
    EmptyQueueError,
    Severity,
    StepOutcome,
    run_step,
)
from dimagram.core.remote_sync import RemoteSync
from dimagram.models.album import AlbumItem, StoreKind

logger = logging.getLogger(__name__)


def serialize_pointer(item: AlbumItem) -> bytes:
    return json.dumps(item.to_dict()).encode("utf-8")


@dataclass
class PublishReport:
    """What a transition did."""
    item: AlbumItem
    pointer: Optional[AlbumItem]
    warnings: List[StepOutcome] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.warnings

    def to_dict(self) -> dict:
        return {
            "item": self.item.to_dict(),
            "pointer": self.pointer.to_dict() if self.pointer else None,
            "warnings": [w.describe() for w in self.warnings],
        }


class Publisher:
    """Publish Orchestrator."""

    def __init__(self, store: AlbumStore, remote: RemoteSync, cdn: CdnInvalidator) -> None:
        self.store = store
        self.remote = remote
        self.cdn = cdn

    def _sync_pointer(self, item: AlbumItem, warnings: List[StepOutcome]) -> None:
        run_step(
            "upload pointer",
            Severity.FATAL,
            lambda: self.remote.put_pointer(serialize_pointer(item)),
        )
        pointer_url = self.cdn.config.pointer_url(self.remote.config.pointer_name)
        run_step(
            "invalidate CDN cache",
            Severity.ADVISORY,
            lambda: self.cdn.purge(pointer_url),
            warnings,
        )

    def publish(self) -> PublishReport:
        """Publish the queue's first item as today's pointer and archive it."""
        warnings: List[StepOutcome] = []
        with self.store.transaction() as snap:
            if not snap.queue:
                raise EmptyQueueError()
            item = snap.queue[0]
            resumed = bool(snap.archive) and snap.archive[-1].id == item.id
            if not resumed and any(a.id == item.id for a in snap.archive):
                raise DuplicateItemError(item.id)
            logger.info("Publishing item: %s with URL: %s", item.id, item.url)

            self._sync_pointer(item, warnings)

            if resumed:
                logger.info("Item %s already archived; finishing earlier commit", item.id)
                archive = snap.archive
            else:
                archive = snap.archive + [item]
            queue = snap.queue[1:]
            self.store.save(StoreKind.ARCHIVE, archive)
            self.store.save(StoreKind.QUEUE, queue)

        logger.info(
            "Published %s (queue %d, archive %d)", item.id, len(queue), len(archive)
        )
        return PublishReport(item=item, pointer=item, warnings=warnings)

    def unpublish(self) -> PublishReport:
        """Move the last archived item back to the queue front.

        The item returns to the head of the queue, not to the position it
        was published from. When the archive still has items, the new last
        one becomes the pointer; an emptied archive leaves the remote
        pointer untouched.
        """
        warnings: List[StepOutcome] = []
        with self.store.transaction() as snap:
            if not snap.archive:
                raise EmptyArchiveError()
            item = snap.archive[-1]
            resumed = bool(snap.queue) and snap.queue[0].id == item.id
            if not resumed and any(q.id == item.id for q in snap.queue):
                raise DuplicateItemError(item.id)
            logger.info("Unpublishing item: %s with URL: %s", item.id, item.url)

            archive = snap.archive[:-1]
            if resumed:
                logger.info("Item %s already queued; finishing earlier commit", item.id)
                queue = snap.queue
            else:
                queue = [item] + snap.queue
            pointer = archive[-1] if archive else None
            if pointer is not None:
                self._sync_pointer(pointer, warnings)
                logger.info("Updated pointer to the new last item: %s", pointer.id)
            else:
                logger.info("Archive is now empty; remote pointer left as is")

            self.store.save(StoreKind.QUEUE, queue)
            self.store.save(StoreKind.ARCHIVE, archive)

        return PublishReport(item=item, pointer=pointer, warnings=warnings)
