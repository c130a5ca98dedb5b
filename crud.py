import logging
from sqlalchemy import or_
from sqlalchemy.orm import Session
import models, schemas
from utils.date_utils import format_date, parse_search_date
from utils.error_handler import EmptyTaskIdError, TaskNotFoundError

logger = logging.getLogger("app")

def _task_id(task_id) -> int:
    if task_id is None or str(task_id).strip() == "":
        raise EmptyTaskIdError()
    try:
        return int(task_id)
    except (TypeError, ValueError):
        # Non-numeric ids can never match a row
        raise TaskNotFoundError()

def get_tasks(db: Session, limit: int, search: str = ""):
    """
    Tasks ordered by date. A search string is either a DD.MM.YYYY date,
    matched exactly, or a word matched against title and comment.
    """
    query = db.query(models.Task)
    if search:
        search_date = parse_search_date(search)
        if search_date is not None:
            query = query.filter(models.Task.date == format_date(search_date))
        else:
            pattern = f"%{search}%"
            query = query.filter(or_(models.Task.title.like(pattern), models.Task.comment.like(pattern)))
    return query.order_by(models.Task.date.asc()).limit(limit).all()

def get_task(db: Session, task_id):
    db_task = db.query(models.Task).filter(models.Task.id == _task_id(task_id)).first()
    if db_task is None:
        raise TaskNotFoundError()
    return db_task

def add_task(db: Session, task: schemas.TaskCreate) -> int:
    try:
        db_task = models.Task(**task.model_dump())
        db.add(db_task)
        db.commit()
        db.refresh(db_task)
        return db_task.id
    except Exception as e:
        logger.error(f"Error adding task with title '{task.title}': {e}")
        db.rollback()
        raise e

def update_task(db: Session, task: schemas.TaskUpdate):
    db_task = get_task(db, task.id)
    try:
        update_data = task.model_dump(exclude={"id"})
        for key, value in update_data.items():
            setattr(db_task, key, value)
        db.commit()
        db.refresh(db_task)
    except Exception as e:
        logger.error(f"Error updating task with id '{task.id}': {e}")
        db.rollback()
        raise e
    return db_task

def update_date(db: Session, task_id, next_date: str):
    db_task = get_task(db, task_id)
    try:
        db_task.date = next_date
        db.commit()
        db.refresh(db_task)
    except Exception as e:
        logger.error(f"Error updating date for task with id '{task_id}': {e}")
        db.rollback()
        raise e
    return db_task

def delete_task(db: Session, task_id):
    db_task = get_task(db, task_id)
    try:
        db.delete(db_task)
        db.commit()
    except Exception as e:
        logger.error(f"Error deleting task with id '{task_id}': {e}")
        db.rollback()
        raise e
    return db_task
