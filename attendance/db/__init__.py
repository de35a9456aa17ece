"""Database package."""
from attendance.db.session import engine, SessionLocal, get_db
from attendance.db.base import Base

__all__ = ["engine", "SessionLocal", "get_db", "Base"]
