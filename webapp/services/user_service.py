from __future__ import annotations

import logging
from collections.abc import Mapping
from typing import Any

from bson import ObjectId

from webapp.observability.metrics import MetricsSink

logger = logging.getLogger(__name__)

USER_OPERATIONS_MEASUREMENT = "user_operations"

# The fixed batch written by every create call.
SEED_USERS: tuple[Mapping[str, str], ...] = tuple(
    {
        "name": f"User {i}",
        "email": f"user{i}@example.com",
        "username": f"user{i}",
    }
    for i in range(1, 11)
)


def _to_jsonable(value: Any) -> Any:
    if isinstance(value, ObjectId):
        return str(value)
    if isinstance(value, Mapping):
        return {key: _to_jsonable(item) for key, item in value.items()}
    if isinstance(value, list):
        return [_to_jsonable(item) for item in value]
    return value


def list_users(collection: Any) -> list[dict[str, Any]]:
    return [_to_jsonable(doc) for doc in collection.find({})]


def create_users(collection: Any, sink: MetricsSink) -> list[str]:
    # insert_many stamps `_id` onto the dicts it is given, so hand it copies.
    documents = [dict(user) for user in SEED_USERS]
    result = collection.insert_many(documents)
    user_ids = [str(inserted_id) for inserted_id in result.inserted_ids]

    sink.write(USER_OPERATIONS_MEASUREMENT, {"operation": "insert"}, {"count": len(documents)})
    logger.info("users.inserted", extra={"count": len(user_ids)})
    return user_ids


def delete_all_users(collection: Any, sink: MetricsSink) -> int:
    result = collection.delete_many({})
    deleted_count = int(result.deleted_count)

    sink.write(USER_OPERATIONS_MEASUREMENT, {"operation": "delete"}, {"count": deleted_count})
    logger.info("users.deleted", extra={"count": deleted_count})
    return deleted_count
