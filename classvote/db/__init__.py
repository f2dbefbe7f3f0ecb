"""Database package."""
from classvote.db.session import engine, SessionLocal, get_db, get_db_context
from classvote.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "get_db_context", "Base"]
