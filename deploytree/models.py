from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class DeploymentFile(BaseModel):
    model_config = ConfigDict(populate_by_name=True)

    deployment_id: str
    file_id: int
    path: str = Field(..., alias="file_path", description="Path inside the deployment like 'assets/app.js'")
    mime_type: str = "application/octet-stream"


class HealthResponse(BaseModel):
    ok: bool
    version: str


class ReadyResponse(BaseModel):
    ready: bool
    reason: Optional[str] = None


class ErrorResponse(BaseModel):
    code: str
    message: str
    details: Optional[dict[str, Any]] = None


class CollisionInfo(BaseModel):
    path: str
    discarded: str = Field(..., description="'file' or 'directory'")
    replaced_by: str = Field(..., description="Path of the record that caused the overwrite")


class TreeStats(BaseModel):
    record_count: int
    file_count: int
    directory_count: int
    max_depth: int
    skipped_count: int
    collision_count: int


class DeploymentTreeResponse(BaseModel):
    site_id: str
    deployment_id: str
    root: dict[str, Any]
    stats: TreeStats
    skipped: list[str] = Field(default_factory=list)
    collisions: list[CollisionInfo] = Field(default_factory=list)
