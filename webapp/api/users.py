from __future__ import annotations

import logging
from typing import Any

from bson.errors import BSONError
from fastapi import APIRouter, Depends, HTTPException
from pymongo.errors import PyMongoError

from webapp.models.schemas import CreateUsersResponse, DeleteUsersResponse
from webapp.observability.metrics import MetricsSink
from webapp.services.dependencies import get_metrics_sink, get_users_collection
from webapp.services.user_service import SEED_USERS, create_users, delete_all_users, list_users

router = APIRouter(tags=["users"])

logger = logging.getLogger(__name__)

_INTERNAL_ERROR = "Internal server error"


@router.get("/users")
def get_users(collection: Any = Depends(get_users_collection)) -> list[dict[str, Any]]:
    try:
        return list_users(collection)
    except (PyMongoError, BSONError) as exc:
        logger.exception("users.find_failed")
        raise HTTPException(status_code=500, detail=_INTERNAL_ERROR) from exc


@router.post("/users", response_model=CreateUsersResponse)
def post_users(
    collection: Any = Depends(get_users_collection),
    sink: MetricsSink = Depends(get_metrics_sink),
) -> CreateUsersResponse:
    try:
        user_ids = create_users(collection, sink)
    except PyMongoError as exc:
        logger.exception("users.insert_failed")
        raise HTTPException(status_code=500, detail=_INTERNAL_ERROR) from exc

    return CreateUsersResponse(
        message=f"{len(SEED_USERS)} users inserted successfully",
        user_ids=user_ids,
    )


@router.delete("/users", response_model=DeleteUsersResponse)
def delete_users(
    collection: Any = Depends(get_users_collection),
    sink: MetricsSink = Depends(get_metrics_sink),
) -> DeleteUsersResponse:
    try:
        deleted_count = delete_all_users(collection, sink)
    except PyMongoError as exc:
        logger.exception("users.delete_failed")
        raise HTTPException(status_code=500, detail=_INTERNAL_ERROR) from exc

    return DeleteUsersResponse(message="All users deleted successfully", deleted_count=deleted_count)
