"""
Schema mirror: copies a collection's validation rules forward.
"""
from typing import Any, Optional

from motor.motor_asyncio import AsyncIOMotorDatabase

from dbsync.replication.progress import NullObserver, SyncObserver

# Options that together make up a collection's validation ruleset
VALIDATION_OPTIONS = ("validator", "validationLevel", "validationAction")


def extract_ruleset(options: dict[str, Any]) -> Optional[dict[str, Any]]:
    """Return the validation options of a collection, or None without a validator."""
    if not options or not options.get("validator"):
        return None
    return {key: options[key] for key in VALIDATION_OPTIONS if key in options}


class SchemaMirror:
    """Pushes the source validator onto the destination collection."""

    def __init__(self, observer: Optional[SyncObserver] = None):
        self.observer = observer or NullObserver()

    async def copy_schema(
        self,
        source: AsyncIOMotorDatabase,
        destination: AsyncIOMotorDatabase,
        collection_name: str,
    ) -> None:
        """
        Replace the destination ruleset with the source one.

        When the source has no validator the destination is not touched, even
        if it has rules of its own. That divergence is reported as a warning.
        """
        options = await source[collection_name].options()
        ruleset = extract_ruleset(options)
        if ruleset is None:
            if extract_ruleset(await destination[collection_name].options()) is not None:
                self.observer.on_warning(
                    f"Collection '{collection_name}' has no validator on the source; "
                    f"keeping the destination's validation rules"
                )
            return

        existing = await destination.list_collection_names(filter={"name": collection_name})
        if collection_name in existing:
            await destination.command({"collMod": collection_name, **ruleset})
        else:
            await destination.create_collection(collection_name, **ruleset)
