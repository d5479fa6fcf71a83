"""Task management routes for the ContactDesk API."""

from typing import List, Optional

from fastapi import APIRouter, Depends, Query, status
from loguru import logger
from sqlalchemy.orm import Session

from . import crud, mailer, schemas
from .auth import get_current_user
from .database import get_db
from .models import TaskStatus, User

router = APIRouter(prefix="/api/tasks", tags=["tasks"])


@router.get("", response_model=List[schemas.TaskOut])
def list_tasks(
    status_filter: Optional[TaskStatus] = Query(None, alias="status"),
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Retrieve the current user's tasks, newest first.

    Args:
        status_filter (TaskStatus | None): Only return tasks in this status.
        db (Session): Database session.
        current_user (User): Authenticated user.

    Returns:
        list[TaskOut]: Tasks with the number of their linked contact.
    """
    return crud.get_tasks(db, current_user, status=status_filter)


@router.post("", response_model=schemas.TaskOut, status_code=status.HTTP_201_CREATED)
def create_task(
    task_in: schemas.TaskCreate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Create a task for one of the current user's contacts and notify the user.

    Raises:
        Forbidden: If the contact does not belong to the user.
    """
    task = crud.create_task(db, task_in, current_user)
    logger.info("User {} created task {}", current_user.id, task.id)
    mailer.send_task_created_email(db, current_user, task)
    return task


@router.get("/{task_id}", response_model=schemas.TaskOut)
def get_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    return crud.get_owned_task(db, task_id, current_user)


@router.put("/{task_id}", response_model=schemas.TaskOut)
def update_task(
    task_id: int,
    task_in: schemas.TaskUpdate,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    """
    Replace an existing task.

    Raises:
        Forbidden: If the task or the new contact does not belong to the user.
    """
    task = crud.get_owned_task(db, task_id, current_user)
    return crud.update_task(db, task, task_in, current_user)


@router.delete("/{task_id}", response_model=schemas.Message)
def remove_task(
    task_id: int,
    db: Session = Depends(get_db),
    current_user: User = Depends(get_current_user),
):
    task = crud.get_owned_task(db, task_id, current_user)
    crud.delete_task(db, task)
    return {"message": "Task deleted successfully"}
