# database.py
"""
SQLAlchemy database connection and session management.

This module provides:
- A Database handle (engine + session factory) created once at startup
- Session dependency for FastAPI routes
- Session context manager for scripts and background work

Usage:
     db = Database(settings.sqlalchemy_url)
     app.state.db = db

     # In FastAPI routes:
     @router.get("/items")
     def get_items(session: Session = Depends(get_session)):
          return session.query(Item).all()
"""
import logging
from contextlib import contextmanager
from typing import Generator

from fastapi import Request
from sqlalchemy import create_engine, event, text
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker

logger = logging.getLogger(__name__)


class Database:
     """
     Storage handle owning the engine and the session factory.

     Opened once when the application starts and disposed on shutdown.
     """

     def __init__(self, url: str, echo: bool = False):
          self.url = url
          self.engine = _create_engine(url, echo)
          self.session_factory = sessionmaker(
               bind=self.engine,
               autocommit=False,
               autoflush=False,
               expire_on_commit=False,
          )

     @contextmanager
     def session(self) -> Generator[Session, None, None]:
          """
          Context manager for database sessions.

          Usage:
               with db.session() as session:
                    users = session.query(User).all()
          """
          session = self.session_factory()
          try:
               yield session
               session.commit()
          except Exception:
               session.rollback()
               raise
          finally:
               session.close()

     def create_all(self) -> None:
          """
          Create all tables defined in the models if they don't exist.
          For production, use Alembic migrations instead.
          """
          from models import Base
          Base.metadata.create_all(bind=self.engine)

     def check_connection(self) -> bool:
          try:
               with self.engine.connect() as conn:
                    conn.execute(text("SELECT 1"))
               return True
          except Exception as e:
               logger.error(f"Database connection failed: {e}")
               return False

     def dispose(self) -> None:
          self.engine.dispose()


def _create_engine(url: str, echo: bool) -> Engine:
     if url.startswith("sqlite"):
          engine = create_engine(
               url,
               echo=echo,
               connect_args={
                    "timeout": 30,  # seconds to wait on a locked database
                    "check_same_thread": False,
               },
          )

          @event.listens_for(engine, "connect")
          def _enable_foreign_keys(dbapi_connection, connection_record):
               cursor = dbapi_connection.cursor()
               cursor.execute("PRAGMA foreign_keys=ON")
               cursor.close()

          return engine

     return create_engine(
          url,
          echo=echo,
          pool_size=5,
          max_overflow=10,
          pool_timeout=30,
          pool_recycle=1800,  # Recycle connections after 30 minutes
          pool_pre_ping=True,
     )


def get_session(request: Request) -> Generator[Session, None, None]:
     """
     FastAPI dependency that provides a database session from the app's Database.

     Commits when the route returns, rolls back if it raises.
     """
     database: Database = request.app.state.db
     session = database.session_factory()
     try:
          yield session
          session.commit()
     except Exception:
          session.rollback()
          raise
     finally:
          session.close()
