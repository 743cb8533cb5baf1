"""
Collection sync orchestration: documents, then schema, then indexes.
"""
import time
from typing import Awaitable, Callable, Optional

from dbsync.replication.copier import DocumentCopier
from dbsync.replication.indexes import IndexMirror
from dbsync.replication.progress import NullObserver, SyncObserver
from dbsync.replication.resolver import StoreHandleResolver
from dbsync.replication.schema import SchemaMirror
from dbsync.replication.targets import SyncTarget


class CollectionSyncOrchestrator:
    """Runs a full one-shot sync of one collection."""

    STEP_DOCUMENTS = "sync_documents"
    STEP_SCHEMA = "sync_schema"
    STEP_INDEXES = "sync_indexes"

    def __init__(
        self,
        resolver: StoreHandleResolver,
        copier: Optional[DocumentCopier] = None,
        schema_mirror: Optional[SchemaMirror] = None,
        index_mirror: Optional[IndexMirror] = None,
        observer: Optional[SyncObserver] = None,
    ):
        self.observer = observer or NullObserver()
        self.resolver = resolver
        self.copier = copier or DocumentCopier(observer=self.observer)
        self.schema_mirror = schema_mirror or SchemaMirror(observer=self.observer)
        self.index_mirror = index_mirror or IndexMirror(observer=self.observer)

    async def sync_collection(self, target: SyncTarget) -> int:
        """
        Copy documents, validation rules and indexes for ``target``.

        Steps run strictly in order on the same pair of handles. The first
        failure stops the sync and propagates; steps already done stay done.

        Returns:
            The record count reported by the document copy.
        """
        name = target.collection_name
        async with await self.resolver.resolve(target) as stores:
            records = await self._timed(
                self.STEP_DOCUMENTS, name,
                lambda: self.copier.copy_documents(stores.source, stores.destination, name),
            )
            await self._timed(
                self.STEP_SCHEMA, name,
                lambda: self.schema_mirror.copy_schema(stores.source, stores.destination, name),
            )
            await self._timed(
                self.STEP_INDEXES, name,
                lambda: self.index_mirror.copy_indexes(stores.source, stores.destination, name),
            )
        return records

    async def _timed(self, step: str, collection_name: str, run: Callable[[], Awaitable]):
        self.observer.on_step_started(step, collection_name)
        started = time.perf_counter()
        result = await run()
        self.observer.on_step_finished(step, collection_name, time.perf_counter() - started)
        return result
