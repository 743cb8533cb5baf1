"""
Store handle resolution.

Turns a sync target into a (source, destination) pair of motor database
handles. Raw coordinates open two new clients concurrently; resolved handles
pass straight through.
"""
import asyncio
import logging
import re
from typing import Any, Callable, Optional

from motor.motor_asyncio import AsyncIOMotorClient, AsyncIOMotorDatabase
from pymongo.errors import PyMongoError

from dbsync.replication.errors import StoreConnectionError
from dbsync.replication.targets import RawCoordinates, ResolvedHandles, SyncTarget

logger = logging.getLogger(__name__)

_CREDENTIALS_RE = re.compile(r"(?<=://)[^@/]+@")


def redact_uri(uri: str) -> str:
    """Hide the user:password part of a MongoDB URI."""
    return _CREDENTIALS_RE.sub("***@", uri)


class ResolvedStores:
    """
    A source/destination pair plus the clients that were opened to get it.

    Use as an async context manager; on exit only the clients opened by the
    resolver are closed. Pass-through handles are left alone.
    """

    def __init__(
        self,
        source: AsyncIOMotorDatabase,
        destination: AsyncIOMotorDatabase,
        owned_clients: tuple = (),
    ):
        self.source = source
        self.destination = destination
        self._owned_clients = owned_clients

    @property
    def owns_clients(self) -> bool:
        return bool(self._owned_clients)

    def close(self) -> None:
        for client in self._owned_clients:
            client.close()
        self._owned_clients = ()

    async def __aenter__(self) -> "ResolvedStores":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        self.close()


class StoreHandleResolver:
    """Opens source and destination handles for a sync target."""

    def __init__(
        self,
        local_uri: str,
        client_factory: Callable[..., Any] = AsyncIOMotorClient,
        server_selection_timeout_ms: Optional[int] = None,
    ):
        self.local_uri = local_uri
        self.client_factory = client_factory
        self.server_selection_timeout_ms = server_selection_timeout_ms

    async def resolve(self, target: SyncTarget) -> ResolvedStores:
        """Return live handles for either kind of target."""
        match target:
            case ResolvedHandles():
                return ResolvedStores(target.source, target.destination)
            case RawCoordinates():
                return await self.open_pair(
                    target.source_uri,
                    target.source_db_name,
                    target.destination_db_name,
                )
            case _:
                raise TypeError(f"Unsupported sync target: {type(target).__name__}")

    async def open_pair(
        self,
        source_uri: str,
        source_db_name: str,
        destination_db_name: str,
    ) -> ResolvedStores:
        """
        Open the remote source and the local destination concurrently.

        Raises:
            StoreConnectionError: If either store cannot be reached. Any client
                that did open is closed before the error propagates.
        """
        results = await asyncio.gather(
            self._connect(source_uri, "source"),
            self._connect(self.local_uri, "destination"),
            return_exceptions=True,
        )
        failures = [r for r in results if isinstance(r, BaseException)]
        if failures:
            for result in results:
                if not isinstance(result, BaseException):
                    result.close()
            raise failures[0]

        source_client, destination_client = results
        logger.debug(
            f"Opened source {redact_uri(source_uri)}/{source_db_name} and "
            f"destination {redact_uri(self.local_uri)}/{destination_db_name}"
        )
        return ResolvedStores(
            source_client[source_db_name],
            destination_client[destination_db_name],
            owned_clients=(source_client, destination_client),
        )

    async def _connect(self, uri: str, role: str):
        kwargs = {}
        if self.server_selection_timeout_ms is not None:
            kwargs["serverSelectionTimeoutMS"] = self.server_selection_timeout_ms

        try:
            client = self.client_factory(uri, **kwargs)
        except PyMongoError as e:
            raise StoreConnectionError(role, redact_uri(uri), e) from e

        # Motor connects lazily; ping so bad hosts and credentials fail here
        try:
            await client.admin.command("ping")
        except PyMongoError as e:
            client.close()
            raise StoreConnectionError(role, redact_uri(uri), e) from e
        return client
