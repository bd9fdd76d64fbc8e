# /classroom-backend/tests/conftest.py

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from app.db.base import Base
from app.models.class_model import ClassCreate
from app.services.class_helpers import crud
from app.services.database_service import DatabaseService

TEACHER_ID = "teacher_1"


@pytest.fixture
def engine():
    """A fresh in-memory SQLite database per test, shared by every connection."""
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield engine
    engine.dispose()


@pytest.fixture
def session(engine):
    session = sessionmaker(autocommit=False, autoflush=False, bind=engine)()
    yield session
    session.close()


@pytest.fixture
def db_service(session):
    return DatabaseService(db_session=session)


@pytest.fixture
def file_session_factory(tmp_path):
    """
    A file-backed SQLite database for tests that need several independent
    connections writing at once.
    """
    engine = create_engine(
        f"sqlite:///{tmp_path / 'matrix.db'}",
        connect_args={"check_same_thread": False, "timeout": 30},
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    engine.dispose()


@pytest.fixture
def make_class():
    """Creates a class owned by TEACHER_ID (or the given teacher) and returns its ID."""
    def _make(db: DatabaseService, name: str = "Physics 101", teacher_id: str = TEACHER_ID) -> str:
        return crud.create_class(ClassCreate(name=name), db=db, teacher_id=teacher_id).id
    return _make
