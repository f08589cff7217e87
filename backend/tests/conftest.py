"""
Test configuration and shared fixtures for the study scheduler test suite.

Database tests run against an in-memory SQLite database created per test,
so every test starts from empty tables.
"""

import pytest
from typing import Generator

from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session
from sqlalchemy.pool import StaticPool

from core.database import Base, create_session_factory
from models.study_block import StudyBlock  # noqa: F401  # registers the table
from services.schedule_cache import InMemoryScheduleCache, JsonFileScheduleCache
from services.study_block_store import InMemoryStudyBlockStore, SqlAlchemyStudyBlockStore
from shared_types.availability import DayOfWeek, DaySchedule, TimeSlot, WeeklySchedule


@pytest.fixture
def db_engine() -> Generator[Engine, None, None]:
    """
    Create an in-memory SQLite engine with the schema installed.

    StaticPool keeps a single connection so every session sees the same
    in-memory database.
    """
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
        future=True,
    )
    Base.metadata.create_all(bind=engine)

    yield engine

    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def db_session(db_engine: Engine) -> Generator[Session, None, None]:
    """Provide a database session bound to the test engine."""
    factory = create_session_factory(db_engine)
    session = factory()
    yield session
    session.close()


@pytest.fixture
def sql_store(db_session: Session) -> SqlAlchemyStudyBlockStore:
    return SqlAlchemyStudyBlockStore(db_session)


@pytest.fixture
def memory_store() -> InMemoryStudyBlockStore:
    return InMemoryStudyBlockStore()


@pytest.fixture
def memory_cache() -> InMemoryScheduleCache:
    return InMemoryScheduleCache()


@pytest.fixture
def file_cache(tmp_path) -> JsonFileScheduleCache:
    return JsonFileScheduleCache(tmp_path / "schedule_cache")


@pytest.fixture
def sample_schedule() -> WeeklySchedule:
    """Monday 09:00-12:00 and Wednesday 14:00-17:00 (six hours)."""
    return WeeklySchedule((
        DaySchedule(day=DayOfWeek.MONDAY, slots=(TimeSlot(540, 720),)),
        DaySchedule(day=DayOfWeek.WEDNESDAY, slots=(TimeSlot(840, 1020),)),
    ))
