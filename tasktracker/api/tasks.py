"""
Task resource endpoints: upsert, get, batch get, filtered list, patch, delete.
"""

from typing import Any, List

from fastapi import APIRouter, Body, Depends, Query, Request, Response
from fastapi.responses import JSONResponse

from ..core.validation import RecordValidationError
from ..tasks.models import Task
from ..tasks.store import TaskStore
from ..tasks.validator import TaskValidator
from .schemas import (
    ErrorResponse,
    ServiceHealthResponse,
    TaskCollectionResponse,
    TaskListResponse,
    TaskResponse,
)

router = APIRouter()

# One store per entity type for the lifetime of the process
_task_store = TaskStore()
_task_validator = TaskValidator()


def get_task_store() -> TaskStore:
    return _task_store


def get_task_validator() -> TaskValidator:
    return _task_validator


def _not_found() -> JSONResponse:
    return JSONResponse(status_code=404, content=ErrorResponse(error="Task not found").model_dump(exclude_none=True))


def _split_ids(ids: List[str]) -> List[str]:
    """Accept both ?ids=a&ids=b and ?ids=a,b."""
    return [part.strip() for value in ids for part in value.split(",") if part.strip()]


# Define fixed paths BEFORE /{task_id} to avoid path parameter conflict
@router.get("/health", response_model=ServiceHealthResponse)
def task_service_health():
    """Liveness probe for the task service."""
    return ServiceHealthResponse(status="UP", service="Task Tracker API")


@router.get("/all", response_model=TaskListResponse)
def list_tasks(request: Request, store: TaskStore = Depends(get_task_store)):
    """List tasks. Any query parameter is treated as a field filter."""
    filters = dict(request.query_params)
    tasks = store.list_all(filters)
    return TaskListResponse(
        tasks=[TaskResponse.from_record(task) for task in tasks],
        count=len(tasks)
    )


@router.get("", response_model=TaskCollectionResponse)
def batch_get_tasks(ids: List[str] = Query(...), store: TaskStore = Depends(get_task_store)):
    """Fetch several tasks at once; missing ids are reported under errors."""
    collection = store.batch_get(_split_ids(ids))
    return TaskCollectionResponse(
        results={key: TaskResponse.from_record(task) for key, task in collection.results.items()},
        errors=collection.errors
    )


@router.post("", response_model=TaskResponse, status_code=201)
def create_task(
    response: Response,
    body: Any = Body(...),
    store: TaskStore = Depends(get_task_store),
    validator: TaskValidator = Depends(get_task_validator),
):
    """Create a task, or replace it when the body names an existing id.

    201 for a new task, 200 for a replacement.
    """
    if not isinstance(body, dict):
        raise RecordValidationError({"body": "Request body must be a JSON object"})

    task = Task.from_dict(body)
    validator.validate_record(task)

    if task.id and store.exists(task.id):
        replaced = store.update(task.id, task)
        if replaced is not None:
            response.status_code = 200
            return TaskResponse.from_record(replaced)
        # Deleted between the two calls: fall through and create with the same id

    created = store.create(task)
    return TaskResponse.from_record(created)


@router.get("/{task_id}", response_model=TaskResponse)
def get_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    task = store.get(task_id)
    if task is None:
        return _not_found()
    return TaskResponse.from_record(task)


@router.patch("/{task_id}", response_model=TaskResponse)
def patch_task(
    task_id: str,
    body: Any = Body(...),
    store: TaskStore = Depends(get_task_store),
    validator: TaskValidator = Depends(get_task_validator),
):
    """Apply a partial update. Unknown or mistyped fields are rejected before anything changes."""
    validator.validate_patch(body)

    patched = store.patch(task_id, body)
    if patched is None:
        return _not_found()
    return TaskResponse.from_record(patched)


@router.delete("/{task_id}", status_code=204)
def delete_task(task_id: str, store: TaskStore = Depends(get_task_store)):
    if not store.delete(task_id):
        return _not_found()
    return Response(status_code=204)
