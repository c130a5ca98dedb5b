from pydantic import BaseModel
from typing import List


class TaskBase(BaseModel):
    date: str = ""
    title: str = ""
    comment: str = ""
    repeat: str = ""


class TaskCreate(TaskBase):
    pass


class TaskUpdate(TaskBase):
    id: str = ""


class Task(TaskBase):
    id: str

    @classmethod
    def from_model(cls, task) -> "Task":
        return cls(
            id=str(task.id),
            date=task.date,
            title=task.title,
            comment=task.comment,
            repeat=task.repeat,
        )


class TaskList(BaseModel):
    tasks: List[Task]


class TaskId(BaseModel):
    id: str


class SignInRequest(BaseModel):
    password: str = ""


class TokenResponse(BaseModel):
    token: str
