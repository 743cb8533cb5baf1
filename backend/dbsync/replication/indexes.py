"""
Index mirror: recreates the source collection's indexes on the destination.
"""
import re
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase
from pymongo import IndexModel
from pymongo.errors import OperationFailure

from dbsync.replication.errors import IndexConflictError
from dbsync.replication.progress import NullObserver, SyncObserver

# Server error codes for "same name, different definition"
INDEX_OPTIONS_CONFLICT = 85
INDEX_KEY_SPECS_CONFLICT = 86
CONFLICT_CODES = (INDEX_OPTIONS_CONFLICT, INDEX_KEY_SPECS_CONFLICT)

# Fields reported by listIndexes that are not creation options
_SERVER_FIELDS = ("key", "v", "ns")

# "Index with name: sku_1 already ..." (85) or "... name: \"sku_1\" ..." (86)
_INDEX_NAME_RE = re.compile(r"""name: "?([^\s",}]+)"?""")


def to_index_model(index: dict[str, Any]) -> IndexModel:
    """Convert a listIndexes entry into an IndexModel with the same name and options."""
    keys = list(index["key"].items())
    options = {k: v for k, v in index.items() if k not in _SERVER_FIELDS}
    return IndexModel(keys, **options)


class IndexMirror:
    """Copies every index definition from source to destination."""

    def __init__(self, observer: Optional[SyncObserver] = None):
        self.observer = observer or NullObserver()

    async def copy_indexes(
        self,
        source: AsyncIOMotorDatabase,
        destination: AsyncIOMotorDatabase,
        collection_name: str,
    ) -> None:
        """
        Create each source index on the destination collection.

        Re-creating an identical index is a no-op on the server.

        Raises:
            IndexConflictError: If the destination has an index with the same
                name and a different definition.
        """
        indexes = await source[collection_name].list_indexes().to_list(length=None)
        if not indexes:
            return

        models = [to_index_model(index) for index in indexes]
        try:
            await destination[collection_name].create_indexes(models)
        except OperationFailure as e:
            if e.code in CONFLICT_CODES:
                index_name = conflicting_index_name(e, indexes)
                self.observer.on_warning(
                    f"Index '{index_name}' of '{collection_name}' differs between source and destination"
                )
                raise IndexConflictError(collection_name, index_name, e) from e
            raise


def conflicting_index_name(error: OperationFailure, indexes: list[dict[str, Any]]) -> str:
    """
    Name of the source index the server rejected.

    The name quoted in the server message wins when it is one of the source
    indexes. Otherwise the longest source name found in the message is used.
    """
    details = error.details or {}
    message = details.get("errmsg") or str(error)
    names = [index["name"] for index in indexes if index.get("name")]

    for match in _INDEX_NAME_RE.finditer(message):
        if match.group(1) in names:
            return match.group(1)

    for name in sorted(names, key=len, reverse=True):
        if name in message:
            return name
    return "<unknown>"
