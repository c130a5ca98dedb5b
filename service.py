from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from datetime import datetime
import logging

import crud
from config.settings import Settings, get_settings
from database import get_db
from schemas import Task, TaskCreate, TaskId, TaskList, TaskUpdate
from utils.auth import require_auth
from utils.error_handler import RecurrenceError, error_response
from utils.recurrence_calculator import next_date
from utils.validators import validate_task

logger = logging.getLogger("app")

router = APIRouter(dependencies=[Depends(require_auth)])


# API Routes
@router.get("/tasks", response_model=TaskList)
async def get_tasks(
    search: str = "",
    db: Session = Depends(get_db),
    settings: Settings = Depends(get_settings),
):
    """Get tasks ordered by date, optionally filtered by a word or a DD.MM.YYYY date."""
    tasks = crud.get_tasks(db, settings.TASKS_LIMIT, search.strip())
    logger.info(f"Retrieved {len(tasks)} tasks (search={search!r})")
    return TaskList(tasks=[Task.from_model(task) for task in tasks])

@router.get("/task", response_model=Task)
async def get_task(id: str = "", db: Session = Depends(get_db)):
    """Get a specific task by ID."""
    return Task.from_model(crud.get_task(db, id))

@router.post("/task", response_model=TaskId)
async def add_task(task: TaskCreate, db: Session = Depends(get_db)):
    """Create a new task."""
    validate_task(task, datetime.now())
    task_id = crud.add_task(db, task)
    logger.info(f"Added task: {task_id} - {task.title}")
    return TaskId(id=str(task_id))

@router.put("/task")
async def update_task(task: TaskUpdate, db: Session = Depends(get_db)):
    """Replace every field of an existing task."""
    validate_task(task, datetime.now())
    crud.update_task(db, task)
    logger.info(f"Updated task: {task.id} - {task.title}")
    return {}

@router.delete("/task")
async def delete_task(id: str = "", db: Session = Depends(get_db)):
    """Delete a task."""
    crud.delete_task(db, id)
    logger.info(f"Deleted task: {id}")
    return {}

@router.post("/task/done")
async def complete_task(id: str = "", db: Session = Depends(get_db)):
    """Mark a task as done.

    A one-off task is deleted. A repeating task moves to its next date.
    """
    task = crud.get_task(db, id)

    if not task.repeat:
        crud.delete_task(db, id)
        logger.info(f"Completed one-off task {id}, deleted")
        return {}

    try:
        new_date = next_date(datetime.now(), task.date, task.repeat)
    except RecurrenceError as e:
        logger.warning(f"complete_task: failed to compute the new date for task {id}: {e.message}")
        return error_response(f"failed to compute the new date: {e.message}", 400)

    crud.update_date(db, id, new_date)
    logger.info(f"Completed repeating task {id}, next date {new_date}")
    return {}
