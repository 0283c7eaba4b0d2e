from __future__ import annotations

from collections.abc import AsyncIterator
from typing import Any

import pytest
from bson import ObjectId
from httpx import ASGITransport, AsyncClient
from pymongo.errors import PyMongoError

from webapp.config import get_settings
from webapp.db.mongo import DocumentStore
from webapp.main import create_app
from webapp.observability.metrics import MetricsSink


class _InsertManyResult:
    def __init__(self, inserted_ids: list[Any]) -> None:
        self.inserted_ids = inserted_ids


class _DeleteResult:
    def __init__(self, deleted_count: int) -> None:
        self.deleted_count = deleted_count


class MockCollection:
    def __init__(self) -> None:
        self.rows: list[dict] = []
        self.fail = False
        self.fail_with: Exception | None = None

    def _check(self) -> None:
        if self.fail_with is not None:
            raise self.fail_with
        if self.fail:
            raise PyMongoError("connection refused: mongodb:27017")

    def find(self, filter: dict) -> list[dict]:
        self._check()
        assert filter == {}
        return [dict(row) for row in self.rows]

    def insert_many(self, documents: list[dict]) -> _InsertManyResult:
        self._check()
        ids = []
        for doc in documents:
            doc.setdefault("_id", ObjectId())
            self.rows.append(dict(doc))
            ids.append(doc["_id"])
        return _InsertManyResult(ids)

    def delete_many(self, filter: dict) -> _DeleteResult:
        self._check()
        assert filter == {}
        deleted = len(self.rows)
        self.rows = []
        return _DeleteResult(deleted)


class MockDatabase:
    def __init__(self) -> None:
        self.collections: dict[str, MockCollection] = {}

    def __getitem__(self, name: str) -> MockCollection:
        return self.collections.setdefault(name, MockCollection())


class MockMongoClient:
    def __init__(self) -> None:
        self.databases: dict[str, MockDatabase] = {}
        self.closed = False

    def __getitem__(self, name: str) -> MockDatabase:
        return self.databases.setdefault(name, MockDatabase())

    def close(self) -> None:
        self.closed = True


class MockInfluxClient:
    def __init__(self) -> None:
        self.points: list[dict] = []
        self.calls: list[dict] = []
        self.fail = False
        self.closed = False

    def write_points(self, points: list[dict], time_precision: str | None = None, database: str | None = None) -> bool:
        if self.fail:
            raise ConnectionError("influxdb:8086 unreachable")
        self.calls.append({"points": points, "time_precision": time_precision, "database": database})
        self.points.extend(points)
        return True

    def close(self) -> None:
        self.closed = True

    def by_measurement(self, measurement: str) -> list[dict]:
        return [p for p in self.points if p["measurement"] == measurement]


@pytest.fixture(autouse=True)
def test_environment() -> None:
    get_settings.cache_clear()
    yield
    get_settings.cache_clear()


@pytest.fixture
def mongo_client() -> MockMongoClient:
    return MockMongoClient()


@pytest.fixture
def influx_client() -> MockInfluxClient:
    return MockInfluxClient()


@pytest.fixture
def users_collection(mongo_client: MockMongoClient) -> MockCollection:
    settings = get_settings()
    return mongo_client[settings.mongo_database][settings.mongo_collection]


@pytest.fixture
def app(mongo_client: MockMongoClient, influx_client: MockInfluxClient):
    settings = get_settings()
    return create_app(
        document_store=DocumentStore(client=mongo_client, database=settings.mongo_database),
        metrics_sink=MetricsSink(client=influx_client, database=settings.influx_database),
    )


@pytest.fixture
async def api_client(app) -> AsyncIterator[AsyncClient]:
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as client:
        yield client
