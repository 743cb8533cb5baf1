"""
Progress reporting for replication runs.

Components report through an injected observer instead of writing to a
module-level logger, so tests can run silently (NullObserver) or record every
report, and the service layer can send everything to logging.
"""
import logging
from dataclasses import dataclass
from typing import Optional, Protocol


@dataclass(frozen=True)
class SyncProgress:
    """Point-in-time counters for one document copy."""
    collection_name: str
    processed: int
    total: int

    @property
    def percent(self) -> float:
        """Share of the snapshotted total processed so far."""
        if self.total <= 0:
            return 100.0
        return round(self.processed / self.total * 100, 2)

    @property
    def approximate(self) -> bool:
        """True once the scan has visited more documents than were counted at start."""
        return self.processed > self.total

    def format(self) -> str:
        return (
            f"Upserting -> {self.collection_name}: "
            f"{self.processed}/{self.total} ~ {self.percent:.2f}%"
        )


class SyncObserver(Protocol):
    """Receives progress and timing events from the replication engine."""

    def on_progress(self, progress: SyncProgress) -> None: ...

    def on_step_started(self, step: str, collection_name: str) -> None: ...

    def on_step_finished(self, step: str, collection_name: str, elapsed_seconds: float) -> None: ...

    def on_warning(self, message: str) -> None: ...


class NullObserver:
    """Observer that discards everything."""

    def on_progress(self, progress: SyncProgress) -> None:
        pass

    def on_step_started(self, step: str, collection_name: str) -> None:
        pass

    def on_step_finished(self, step: str, collection_name: str, elapsed_seconds: float) -> None:
        pass

    def on_warning(self, message: str) -> None:
        pass


class LoggingObserver:
    """
    Observer that writes progress lines and timing markers to a logger.

    Every progress report is logged at DEBUG. One in ``progress_every``
    reports, and the last one of a scan, is also logged at INFO so a large
    collection does not flood operational logs.
    """

    def __init__(self, logger: Optional[logging.Logger] = None, progress_every: int = 1000):
        self.logger = logger or logging.getLogger("dbsync.replication")
        self.progress_every = max(1, progress_every)

    def on_progress(self, progress: SyncProgress) -> None:
        if progress.processed % self.progress_every == 0 or progress.processed == progress.total:
            self.logger.info(progress.format())
        else:
            self.logger.debug(progress.format())

    def on_step_started(self, step: str, collection_name: str) -> None:
        self.logger.info(f"{step} -> {collection_name}: started")

    def on_step_finished(self, step: str, collection_name: str, elapsed_seconds: float) -> None:
        self.logger.info(f"{step} -> {collection_name}: finished in {elapsed_seconds:.3f}s")

    def on_warning(self, message: str) -> None:
        self.logger.warning(message)
