"""
Sync targets: what to replicate and where the handles come from.

A target is one of two variants. ``RawCoordinates`` names the stores by URI and
database name, so the resolver opens fresh clients. ``ResolvedHandles`` carries
already-open database handles that a batch operation shares across many
collections.
"""
from dataclasses import dataclass, field
from typing import Union

from motor.motor_asyncio import AsyncIOMotorDatabase


@dataclass(frozen=True)
class RawCoordinates:
    """Remote URI + database names; the destination lives on the local store."""
    collection_name: str
    source_uri: str = field(repr=False)
    source_db_name: str
    destination_db_name: str


@dataclass(frozen=True)
class ResolvedHandles:
    """Handles opened by the caller and passed through unchanged."""
    collection_name: str
    source: AsyncIOMotorDatabase = field(repr=False)
    destination: AsyncIOMotorDatabase = field(repr=False)


SyncTarget = Union[RawCoordinates, ResolvedHandles]
