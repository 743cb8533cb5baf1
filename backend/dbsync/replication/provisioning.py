"""
Database provisioning: create locally-missing collections of a remote database.

Each missing collection is created and recorded independently. Failures are
collected per collection and never stop the others.
"""
import asyncio
import time
from dataclasses import dataclass, field
from datetime import datetime, timezone
from typing import Any, Optional, Protocol

from motor.motor_asyncio import AsyncIOMotorDatabase

from dbsync.replication.errors import ProvisioningItemError
from dbsync.replication.progress import NullObserver, SyncObserver

DEFAULT_MAX_CONCURRENCY = 8


class CollectionRecordStore(Protocol):
    """Metadata collaborator that records a provisioned collection."""

    async def create_collection_record(self, fields: dict[str, Any]) -> Any: ...


@dataclass
class ProvisioningReport:
    """Outcome of one provisioning run."""
    created: set[str] = field(default_factory=set)
    failed: dict[str, ProvisioningItemError] = field(default_factory=dict)
    skipped: set[str] = field(default_factory=set)

    @property
    def ok(self) -> bool:
        return not self.failed


async def diff_collection_names(
    source: AsyncIOMotorDatabase,
    destination: AsyncIOMotorDatabase,
) -> tuple[list[str], set[str]]:
    """
    Compare collection names of both databases.

    Returns:
        (missing, present): names only in the source, sorted, and names
        found in both. Plain set difference, no case folding.
    """
    source_names, destination_names = await asyncio.gather(
        source.list_collection_names(),
        destination.list_collection_names(),
    )
    source_set = set(source_names)
    destination_set = set(destination_names)
    return sorted(source_set - destination_set), source_set & destination_set


class DatabaseProvisioner:
    """Creates and records collections present in the source but not the destination."""

    STEP_PROVISION = "provision_collections"

    def __init__(
        self,
        record_store: CollectionRecordStore,
        max_concurrency: int = DEFAULT_MAX_CONCURRENCY,
        observer: Optional[SyncObserver] = None,
    ):
        if max_concurrency < 1:
            raise ValueError("max_concurrency must be at least 1")
        self.record_store = record_store
        self.max_concurrency = max_concurrency
        self.observer = observer or NullObserver()

    async def provision_missing_collections(
        self,
        source: AsyncIOMotorDatabase,
        destination: AsyncIOMotorDatabase,
        database_id: str,
        database_label: Optional[str] = None,
    ) -> ProvisioningReport:
        """
        Create every missing collection and record it in the metadata store.

        Items run concurrently, at most ``max_concurrency`` at a time, and
        every outcome is collected. A failed item is reported in
        ``report.failed``; nothing is retried or rolled back.
        """
        label_prefix = database_label or database_id
        self.observer.on_step_started(self.STEP_PROVISION, label_prefix)
        started = time.perf_counter()

        missing, present = await diff_collection_names(source, destination)
        report = ProvisioningReport(skipped=present)
        if missing:
            await self._provision_all(destination, missing, database_id, label_prefix, report)

        for name, error in sorted(report.failed.items()):
            self.observer.on_warning(f"Provisioning failed for '{name}': {error}")
        self.observer.on_step_finished(
            self.STEP_PROVISION, label_prefix, time.perf_counter() - started
        )
        return report

    async def _provision_all(
        self,
        destination: AsyncIOMotorDatabase,
        missing: list[str],
        database_id: str,
        label_prefix: str,
        report: ProvisioningReport,
    ) -> None:
        semaphore = asyncio.Semaphore(self.max_concurrency)

        async def provision_one(name: str) -> str:
            async with semaphore:
                await self._provision(destination, name, database_id, label_prefix)
            return name

        outcomes = await asyncio.gather(
            *(provision_one(name) for name in missing),
            return_exceptions=True,
        )

        for name, outcome in zip(missing, outcomes):
            if isinstance(outcome, ProvisioningItemError):
                report.failed[name] = outcome
            elif isinstance(outcome, BaseException):
                # Wrap anything unexpected so one bad item cannot escape the report
                report.failed[name] = ProvisioningItemError(name, "unknown", outcome)
            else:
                report.created.add(name)

    async def _provision(
        self,
        destination: AsyncIOMotorDatabase,
        name: str,
        database_id: str,
        label_prefix: str,
    ) -> None:
        try:
            await destination.create_collection(name)
        except Exception as e:
            raise ProvisioningItemError(name, ProvisioningItemError.STAGE_CREATE, e) from e

        now = datetime.now(timezone.utc)
        fields = {
            "label": f"{label_prefix}.{name}",
            "collection_name": name,
            "database_id": database_id,
            "last_sync_at": now,
            "created_at": now,
            "updated_at": now,
        }
        try:
            await self.record_store.create_collection_record(fields)
        except Exception as e:
            raise ProvisioningItemError(name, ProvisioningItemError.STAGE_RECORD, e) from e
