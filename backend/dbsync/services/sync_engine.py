"""
Wires the replication engine from settings.
"""
from functools import lru_cache
from typing import Optional

from dbsync.config import Settings, get_settings
from dbsync.replication import (
    CollectionSyncOrchestrator,
    DatabaseProvisioner,
    DocumentCopier,
    IndexMirror,
    LoggingObserver,
    SchemaMirror,
    StoreHandleResolver,
    SyncObserver,
)
from dbsync.replication.provisioning import CollectionRecordStore


class SyncEngine:
    """Resolver, collection orchestrator and provisioner factory sharing one observer."""

    def __init__(self, settings: Settings, observer: Optional[SyncObserver] = None):
        self.settings = settings
        self.observer = observer or LoggingObserver(progress_every=settings.progress_log_every)
        self.resolver = StoreHandleResolver(
            settings.local_db_uri,
            server_selection_timeout_ms=settings.server_selection_timeout_ms,
        )
        self.orchestrator = CollectionSyncOrchestrator(
            self.resolver,
            copier=DocumentCopier(batch_size=settings.sync_batch_size, observer=self.observer),
            schema_mirror=SchemaMirror(observer=self.observer),
            index_mirror=IndexMirror(observer=self.observer),
            observer=self.observer,
        )

    def provisioner(self, record_store: CollectionRecordStore) -> DatabaseProvisioner:
        """Build a provisioner that records created collections in ``record_store``."""
        return DatabaseProvisioner(
            record_store,
            max_concurrency=self.settings.provisioning_concurrency,
            observer=self.observer,
        )


@lru_cache
def get_sync_engine() -> SyncEngine:
    """Get cached sync engine instance."""
    return SyncEngine(get_settings())
