from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
import logging

from config.settings import settings
from models import Base

logger = logging.getLogger("app")

DATABASE_URL = settings.DATABASE_URL

engine = create_engine(DATABASE_URL, connect_args={"check_same_thread": False})
SessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)

def get_db():
    """
    Dependency to get a DB session for each request.
    """
    db = SessionLocal()
    try:
        yield db
    finally:
        db.close()

def create_tables():
    """
    Create all tables defined by models that inherit from Base.
    """
    try:
        Base.metadata.create_all(bind=engine)
        logger.info(f"Database tables created or already exist in {DATABASE_URL}.")
    except Exception as e:
        logger.error(f"Error creating database tables: {e}")
        raise
