from typing import List
from fastapi import APIRouter, Depends, Query, Request, status
from taskapi.repositories.tasks import TaskRepository
from taskapi.schemas.task import (
    DeleteResponse,
    ErrorResponse,
    TaskCreate,
    TaskResponse,
    TaskUpdate,
    ValidationErrorResponse,
)

router = APIRouter(
    prefix="/tasks",
    tags=["tasks"],
    responses={
        400: {
            "model": ValidationErrorResponse,
            "description": "Invalid request: malformed body, missing title, or non-integer or negative id, limit or offset",
        },
        404: {"model": ErrorResponse, "description": "Not found"},
        500: {"model": ErrorResponse, "description": "Database error"},
    },
)

def get_repository(request: Request) -> TaskRepository:
    return request.app.state.repository

@router.get("", response_model=List[TaskResponse])
async def list_tasks(
    q: str = "",
    limit: int = Query(20, ge=0),
    offset: int = Query(0, ge=0),
    repository: TaskRepository = Depends(get_repository),
):
    return await repository.list_tasks(q, limit, offset)

@router.get("/{task_id}", response_model=TaskResponse)
async def get_task(task_id: int, repository: TaskRepository = Depends(get_repository)):
    return await repository.get_task(task_id)

@router.post("", response_model=TaskResponse, status_code=status.HTTP_201_CREATED)
async def create_task(task_in: TaskCreate, repository: TaskRepository = Depends(get_repository)):
    return await repository.create_task(
        title=task_in.title,
        description=task_in.description,
        status=task_in.status,
        priority=task_in.priority,
    )

@router.put("/{task_id}", response_model=TaskResponse)
async def update_task(
    task_id: int,
    task_in: TaskUpdate,
    repository: TaskRepository = Depends(get_repository),
):
    return await repository.update_task(
        task_id,
        title=task_in.title,
        description=task_in.description,
        status=task_in.status,
        priority=task_in.priority,
    )

@router.delete("/{task_id}", response_model=DeleteResponse)
async def delete_task(task_id: int, repository: TaskRepository = Depends(get_repository)):
    return {"success": await repository.delete_task(task_id)}
