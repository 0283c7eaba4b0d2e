from __future__ import annotations

from typing import Any

from fastapi import Depends, Request

from webapp.config import get_settings
from webapp.db.mongo import DocumentStore
from webapp.observability.metrics import MetricsSink


def get_document_store(request: Request) -> DocumentStore:
    return request.app.state.document_store


def get_metrics_sink(request: Request) -> MetricsSink:
    return request.app.state.metrics_sink


def get_users_collection(store: DocumentStore = Depends(get_document_store)) -> Any:
    return store.collection(get_settings().mongo_collection)
