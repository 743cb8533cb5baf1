"""
Backend-specific test fixtures and configuration.

These fixtures extend the global fixtures with in-memory stand-ins for the
remote and local MongoDB databases the replication engine talks to, and with
mocked services for router tests.
"""

import asyncio
import sys
from pathlib import Path
from typing import Any, Optional
from unittest.mock import AsyncMock, MagicMock

import pytest
from pymongo.errors import CollectionInvalid, OperationFailure

# Add backend to path
sys.path.insert(0, str(Path(__file__).parent.parent.parent / "backend"))


# =============================================================================
# In-memory databases
# =============================================================================

class FakeCursor:
    """Async cursor over a snapshot of documents."""

    def __init__(self, documents):
        self._documents = [dict(d) for d in documents]

    def __aiter__(self):
        return self._iterate()

    async def _iterate(self):
        for document in self._documents:
            yield document

    async def to_list(self, length=None):
        return list(self._documents)


class FakeCollection:
    """
    Collection handle supporting what the replication engine uses.

    mongomock does not implement collMod, collection options or index
    conflicts, so the engine is tested against these doubles instead.
    """

    def __init__(self, name: str, database: "FakeDatabase"):
        self.name = name
        self.database = database
        self.documents: dict[Any, dict] = {}
        self.options_doc: dict[str, Any] = {}
        self.indexes: list[dict] = [{"v": 2, "key": {"_id": 1}, "name": "_id_"}]
        self.batch_sizes: list[int] = []
        self.fail_on_batch: Optional[int] = None
        self.extra_documents_during_scan: list[dict] = []

    async def count_documents(self, filter):
        return len(self.documents)

    def find(self, filter=None):
        # Documents inserted after the count but before the scan
        for document in self.extra_documents_during_scan:
            self.documents[document["_id"]] = document
        return FakeCursor(self.documents.values())

    async def bulk_write(self, requests, ordered=True):
        self.batch_sizes.append(len(requests))
        if self.fail_on_batch == len(self.batch_sizes):
            raise OperationFailure("simulated write failure", code=11000)
        self.database.existing.add(self.name)
        for request in requests:
            document = self.documents.setdefault(request._filter["_id"], {})
            document.update(request._doc["$set"])
        return MagicMock(bulk_api_result={})

    async def options(self):
        return dict(self.options_doc)

    def list_indexes(self):
        return FakeCursor(self.indexes)

    async def create_indexes(self, models):
        names = []
        for model in models:
            spec = dict(model.document)
            spec["key"] = dict(spec["key"])
            existing = next((i for i in self.indexes if i["name"] == spec["name"]), None)
            if existing is not None:
                comparable = {k: v for k, v in existing.items() if k not in ("v", "ns")}
                if comparable != spec:
                    raise OperationFailure(
                        f"Index with name: {spec['name']} already exists with different options",
                        code=85,
                    )
            else:
                self.indexes.append({"v": 2, **spec})
            names.append(spec["name"])
        self.database.existing.add(self.name)
        return names


class FakeDatabase:
    """Database handle; collections only show up once something created them."""

    def __init__(self, name: str = "db"):
        self.name = name
        self.handles: dict[str, FakeCollection] = {}
        self.existing: set[str] = set()
        self.commands: list[dict] = []
        self.create_calls: list[tuple[str, dict]] = []
        self.fail_create: set[str] = set()
        self.create_delay: float = 0.0
        self.in_flight = 0
        self.max_in_flight = 0

    def __getitem__(self, name: str) -> FakeCollection:
        if name not in self.handles:
            self.handles[name] = FakeCollection(name, self)
        return self.handles[name]

    def seed(self, name: str, documents=(), **options) -> FakeCollection:
        collection = self[name]
        self.existing.add(name)
        for document in documents:
            collection.documents[document["_id"]] = dict(document)
        collection.options_doc.update(options)
        return collection

    async def list_collection_names(self, filter=None):
        names = sorted(self.existing)
        if filter and "name" in filter:
            names = [n for n in names if n == filter["name"]]
        return names

    async def create_collection(self, name: str, **options):
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.create_delay:
                await asyncio.sleep(self.create_delay)
            if name in self.fail_create:
                raise OperationFailure(f"cannot create {name}")
            if name in self.existing:
                raise CollectionInvalid(f"collection {name} already exists")
            self.create_calls.append((name, options))
            self.existing.add(name)
            self[name].options_doc.update(options)
            return self[name]
        finally:
            self.in_flight -= 1

    async def command(self, command: dict):
        self.commands.append(command)
        if "collMod" in command:
            collection = self[command["collMod"]]
            collection.options_doc.update(
                {k: v for k, v in command.items() if k != "collMod"}
            )
        return {"ok": 1}


class FakeClient:
    """Client returned by a fake client factory."""

    def __init__(self, uri: str, fail_ping: bool = False):
        self.uri = uri
        self.databases: dict[str, FakeDatabase] = {}
        self.closed = False
        self.admin = MagicMock()
        if fail_ping:
            self.admin.command = AsyncMock(side_effect=OperationFailure("auth failed"))
        else:
            self.admin.command = AsyncMock(return_value={"ok": 1})

    def __getitem__(self, name: str) -> FakeDatabase:
        if name not in self.databases:
            self.databases[name] = FakeDatabase(name)
        return self.databases[name]

    def close(self):
        self.closed = True


class RecordingObserver:
    """Observer that keeps every event for assertions."""

    def __init__(self):
        self.progress = []
        self.events: list[tuple[str, str, str]] = []
        self.warnings: list[str] = []

    def on_progress(self, progress):
        self.progress.append(progress)

    def on_step_started(self, step, collection_name):
        self.events.append(("started", step, collection_name))

    def on_step_finished(self, step, collection_name, elapsed_seconds):
        self.events.append(("finished", step, collection_name))

    def on_warning(self, message):
        self.warnings.append(message)


@pytest.fixture
def source_db() -> FakeDatabase:
    """Remote database the sync reads from."""
    return FakeDatabase("remote_shop")


@pytest.fixture
def destination_db() -> FakeDatabase:
    """Local database the sync writes to."""
    return FakeDatabase("local_shop")


@pytest.fixture
def recording_observer() -> RecordingObserver:
    return RecordingObserver()


@pytest.fixture
def fake_client_factory():
    """
    Client factory for StoreHandleResolver that records created clients.

    URIs listed in ``factory.unreachable`` fail their ping.
    """
    class Factory:
        def __init__(self):
            self.clients: list[FakeClient] = []
            self.unreachable: set[str] = set()
            self.prepared: dict[str, FakeClient] = {}

        def prepare(self, uri: str) -> FakeClient:
            """Pre-create the client handed out for ``uri`` so tests can seed it."""
            self.prepared[uri] = FakeClient(uri)
            return self.prepared[uri]

        def __call__(self, uri, **kwargs):
            client = self.prepared.pop(uri, None) or FakeClient(uri, fail_ping=uri in self.unreachable)
            client.kwargs = kwargs
            self.clients.append(client)
            return client

    return Factory()


@pytest.fixture
def make_documents():
    """Factory for documents with distinct string ids."""
    def _make(count: int, prefix: str = "doc") -> list[dict]:
        return [{"_id": f"{prefix}-{i:05d}", "n": i} for i in range(count)]
    return _make


# =============================================================================
# Service Fixtures
# =============================================================================

@pytest.fixture
def mock_connection_service():
    """
    Create a fully mocked ConnectionService.

    All methods are AsyncMock, allowing you to configure return values:

        mock_connection_service.get_connection.return_value = {...}
    """
    service = MagicMock()
    service.list_connections = AsyncMock(return_value=[])
    service.get_connection = AsyncMock()
    service.create_connection = AsyncMock()
    service.delete_connection = AsyncMock()
    return service


@pytest.fixture
def mock_database_service():
    """Create a fully mocked DatabaseService."""
    service = MagicMock()
    service.list_databases = AsyncMock(return_value=[])
    service.list_databases_by_connection = AsyncMock(return_value=[])
    service.get_database = AsyncMock()
    service.create_database = AsyncMock()
    service.get_collections_to_create = AsyncMock()
    service.provision_collections = AsyncMock()
    service.sync_database = AsyncMock()
    return service


@pytest.fixture
def mock_collection_service():
    """Create a fully mocked CollectionService."""
    service = MagicMock()
    service.list_collections = AsyncMock(return_value=[])
    service.list_collections_by_database = AsyncMock(return_value=[])
    service.get_collection = AsyncMock()
    service.create_collection = AsyncMock()
    service.sync_records = AsyncMock()
    service.update_last_sync = AsyncMock()
    return service


@pytest.fixture
def sync_engine(recording_observer):
    """Real sync engine with a small batch size and a recording observer."""
    from dbsync.config import Settings
    from dbsync.services.sync_engine import SyncEngine

    settings = Settings(
        local_db_uri="mongodb://localhost:27017",
        sync_batch_size=2,
        provisioning_concurrency=2,
    )
    return SyncEngine(settings, observer=recording_observer)
