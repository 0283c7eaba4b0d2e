from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class CreateUsersResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    user_ids: list[str] = Field(alias="userIds")


class DeleteUsersResponse(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    message: str
    deleted_count: int = Field(alias="deletedCount")


class HealthResponse(BaseModel):
    status: str = "up"
