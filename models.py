from sqlalchemy import Column, Integer, String, Text
from sqlalchemy.orm import declarative_base

Base = declarative_base()


class Task(Base):
    """A scheduled task; ``date`` is stored as YYYYMMDD so it sorts as text."""
    __tablename__ = "scheduler"

    id = Column(Integer, primary_key=True, autoincrement=True)
    date = Column(String(8), nullable=False, default="", index=True)
    title = Column(String(64), nullable=False, default="")
    comment = Column(Text, nullable=False, default="")
    repeat = Column(String(128), nullable=False, default="")
