"""
Database connection

Owns the SQLModel engine (connection pool). Request handlers get sessions from
``airctt.api.deps.get_db``; scripts and workers open their own with
``Session(engine)``.

Notes:
- The schema is managed by Alembic migrations, never created here
- Import ``airctt.models`` before using the engine so every table and foreign
  key is registered on the metadata
"""
from sqlmodel import create_engine

from airctt.core.config import settings

engine = create_engine(str(settings.SQLALCHEMY_DATABASE_URI), pool_pre_ping=True)
