# db.py
# Role: Database bootstrap for the study cards app.
#       Builds the SQLAlchemy engine and session factory from a database URL,
#       and defines the declarative Base shared by the ORM models.

"""
Database setup for the study cards app.

- Default: SQLite database at <project_root>/database/cards.db
- Any SQLAlchemy URL works via DATABASE_URL (Postgres in production).
- Engine and session factory are created by the app factory (main.create_app),
  not at import time, so tests can point the app at an in-memory database.
"""

import os
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import sessionmaker, declarative_base
from sqlalchemy.pool import StaticPool

# Declarative base class for ORM models
Base = declarative_base()

IN_MEMORY_URLS = {"sqlite://", "sqlite:///:memory:"}


def make_engine(database_url: str) -> Engine:
    """
    Create an engine for the given URL.

    For SQLite we need check_same_thread=False (FastAPI runs sync routes in a
    thread pool). In-memory SQLite also needs a single shared connection,
    otherwise every session would see its own empty database.
    """
    if not database_url.startswith("sqlite"):
        return create_engine(database_url, pool_pre_ping=True)

    if database_url in IN_MEMORY_URLS:
        return create_engine(
            database_url,
            connect_args={"check_same_thread": False},
            poolclass=StaticPool,
        )

    # File-backed SQLite: make sure the folder exists before first connect
    db_path = database_url[len("sqlite:///"):]
    db_dir = os.path.dirname(db_path)
    if db_dir:
        os.makedirs(db_dir, exist_ok=True)

    return create_engine(
        database_url,
        connect_args={"check_same_thread": False},
    )


def make_session_factory(engine: Engine) -> sessionmaker:
    # Standard session factory used via dependency injection (see app/deps.py:get_db)
    return sessionmaker(
        autocommit=False,
        autoflush=False,
        bind=engine,
    )
