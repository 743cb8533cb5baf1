"""
Document copier: streams a whole collection from source to destination.

Documents are turned into upsert-by-_id operations and applied in unordered
bulk batches, so memory stays bounded by the batch size no matter how large
the collection is and a failure only concerns one batch.
"""
import logging
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorCollection, AsyncIOMotorDatabase
from pymongo import UpdateOne
from pymongo.errors import PyMongoError

from dbsync.replication.errors import BatchExecutionError
from dbsync.replication.progress import NullObserver, SyncObserver, SyncProgress

logger = logging.getLogger(__name__)

DEFAULT_BATCH_SIZE = 1000


def build_upsert(document: dict[str, Any]) -> UpdateOne:
    """
    Set every source field on the destination document with the same _id.

    Fields that only exist on the destination are kept. Missing documents
    are inserted.
    """
    return UpdateOne({"_id": document["_id"]}, {"$set": document}, upsert=True)


class DocumentCopier:
    """Copies every document of one collection in bounded batches."""

    def __init__(self, batch_size: int = DEFAULT_BATCH_SIZE, observer: Optional[SyncObserver] = None):
        if batch_size < 1:
            raise ValueError("batch_size must be at least 1")
        self.batch_size = batch_size
        self.observer = observer or NullObserver()

    async def copy_documents(
        self,
        source: AsyncIOMotorDatabase,
        destination: AsyncIOMotorDatabase,
        collection_name: str,
    ) -> int:
        """
        Upsert all documents of ``collection_name`` into the destination.

        Args:
            source: Database handle to read from
            destination: Database handle to write to
            collection_name: Collection to copy

        Returns:
            Document count snapshotted before the scan started. It is the
            nominal number of records synced; the scan may visit more or
            fewer documents if the source changes meanwhile.

        Raises:
            BatchExecutionError: If a batch fails. The copy stops there;
                earlier batches stay applied.
        """
        source_collection = source[collection_name]
        destination_collection = destination[collection_name]

        total = await source_collection.count_documents({})
        cursor = source_collection.find({})

        batch: list[UpdateOne] = []
        batch_number = 0
        flushed = 0
        processed = 0

        async for document in cursor:
            batch.append(build_upsert(document))
            processed += 1

            progress = SyncProgress(collection_name, processed, total)
            if not progress.approximate:
                self.observer.on_progress(progress)
            elif processed == total + 1:
                self.observer.on_warning(
                    f"Collection '{collection_name}' grew during the scan; "
                    f"progress is not reported beyond {total} documents"
                )

            if len(batch) >= self.batch_size:
                batch_number += 1
                await self._flush(destination_collection, collection_name, batch, batch_number, flushed)
                flushed += len(batch)
                batch = []

        if batch:
            batch_number += 1
            await self._flush(destination_collection, collection_name, batch, batch_number, flushed)
            flushed += len(batch)

        logger.debug(
            f"Copied {processed} documents of '{collection_name}' in {batch_number} batches "
            f"(snapshot total {total})"
        )
        return total

    async def _flush(
        self,
        collection: AsyncIOMotorCollection,
        collection_name: str,
        batch: list[UpdateOne],
        batch_number: int,
        flushed: int,
    ) -> None:
        try:
            await collection.bulk_write(batch, ordered=False)
        except PyMongoError as e:
            raise BatchExecutionError(
                collection_name,
                batch_number=batch_number,
                batch_size=len(batch),
                documents_flushed=flushed,
                cause=e,
            ) from e
