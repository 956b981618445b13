"""Error taxonomy and step severities for publish/unpublish."""
import logging
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional, TypeVar

logger = logging.getLogger(__name__)

T = TypeVar("T")


class DimagramError(Exception):
    """Base class for every error the core reports to callers."""


class ValidationError(DimagramError):
    """A transition or edit was rejected before any state changed."""


class EmptyQueueError(ValidationError):
    def __init__(self) -> None:
        super().__init__("no items in album queue")


class EmptyArchiveError(ValidationError):
    def __init__(self) -> None:
        super().__init__("no items in archive")


class DuplicateItemError(ValidationError):
    def __init__(self, item_id: str, scope: str = "queue and archive") -> None:
        super().__init__(f"duplicate item id {item_id!r} in {scope}")
        self.item_id = item_id
        self.scope = scope


class LocalIOError(DimagramError):
    """Reading or writing local disk failed."""


class RemoteIOError(DimagramError):
    """Connecting, authenticating or transferring to the remote store failed."""


class CacheInvalidationError(DimagramError):
    """CDN purge failed. Always advisory."""


class SerializationError(DimagramError):
    """Persisted JSON is malformed or holds invalid items."""


class IngestionError(DimagramError):
    """Upload ingestion failed; source is "local" or "remote"."""

    def __init__(self, source: str, message: str) -> None:
        super().__init__(f"{source} ingestion failure: {message}")
        self.source = source


class Severity(str, Enum):
    FATAL = "fatal"
    ADVISORY = "advisory"


@dataclass
class StepOutcome:
    """Result of one external call inside a transition."""
    step: str
    severity: Severity
    error: Optional[Exception] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def describe(self) -> str:
        if self.ok:
            return f"{self.step}: ok"
        return f"{self.step}: {self.error}"


def run_step(
    step: str,
    severity: Severity,
    fn: Callable[[], T],
    warnings: Optional[List[StepOutcome]] = None,
) -> StepOutcome:
    """Run fn as a transition step.

    FATAL failures propagate unmodified. ADVISORY failures of any kind are
    logged, appended to warnings and returned.
    """
    try:
        fn()
    except Exception as e:
        if severity is Severity.FATAL:
            raise
        outcome = StepOutcome(step=step, severity=severity, error=e)
        logger.warning("Warning: %s failed (advisory): %s", step, e)
        if warnings is not None:
            warnings.append(outcome)
        return outcome
    return StepOutcome(step=step, severity=severity)
