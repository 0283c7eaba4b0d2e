from __future__ import annotations

import logging
from typing import Any

from pymongo import MongoClient

logger = logging.getLogger(__name__)


class DocumentStore:
    """Holds the process-wide MongoDB client and the database handlers work in."""

    def __init__(self, client: Any, database: str) -> None:
        self._client = client
        self.database = database

    @classmethod
    def connect(cls, uri: str, database: str, timeout_s: float = 10.0) -> DocumentStore:
        """Open a client and ping the server.

        Raises ``pymongo.errors.PyMongoError`` when the server cannot be reached
        within ``timeout_s``; the caller decides whether that aborts startup.
        """

        timeout_ms = int(timeout_s * 1000)
        client = MongoClient(
            uri,
            serverSelectionTimeoutMS=timeout_ms,
            connectTimeoutMS=timeout_ms,
        )
        try:
            client.admin.command("ping")
        except Exception:
            client.close()
            raise

        logger.info("mongo.connected", extra={"database": database})
        return cls(client=client, database=database)

    def collection(self, name: str) -> Any:
        return self._client[self.database][name]

    def close(self) -> None:
        self._client.close()
