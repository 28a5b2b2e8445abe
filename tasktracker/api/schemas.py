"""
Request/response models for the task HTTP API.
Records travel with camelCase keys and integer epoch-millisecond timestamps.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel

from ..core.schema import Record


class TaskResponse(BaseModel):
    id: str
    createdAt: int
    updatedAt: int
    title: Optional[str] = None
    description: Optional[str] = None
    status: Optional[str] = None
    priority: Optional[str] = None

    @classmethod
    def from_record(cls, record: Record) -> "TaskResponse":
        return cls(**record.to_dict())


class TaskCollectionResponse(BaseModel):
    """Batch read envelope: found tasks and per-id error codes."""
    results: Dict[str, TaskResponse]
    errors: Dict[str, int]


class TaskListResponse(BaseModel):
    tasks: List[TaskResponse]
    count: int


class ServiceHealthResponse(BaseModel):
    status: str
    service: str


class ErrorResponse(BaseModel):
    error: str
    message: Optional[str] = None
    details: Optional[Dict[str, str]] = None
