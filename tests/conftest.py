"""Pytest configuration and fixtures."""

import os

os.environ["DATABASE_URL"] = "sqlite:///:memory:"
os.environ["ENVIRONMENT"] = "test"

from collections.abc import Generator  # noqa: E402
from dataclasses import dataclass, field  # noqa: E402
from datetime import UTC, datetime, timedelta  # noqa: E402
from typing import Any  # noqa: E402

import pytest  # noqa: E402
from dependency_injector import providers  # noqa: E402
from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import Session, sessionmaker  # noqa: E402
from sqlalchemy.pool import StaticPool  # noqa: E402

from progression import models  # noqa: E402
from progression.application.common.message_bus import MessageBus  # noqa: E402
from progression.core import container  # noqa: E402
from progression.database import Base, get_db  # noqa: E402
from progression.main import app  # noqa: E402

# Test database URL (in-memory SQLite)
TEST_DATABASE_URL = "sqlite:///:memory:"

# Create test engine
test_engine = create_engine(
    TEST_DATABASE_URL, connect_args={"check_same_thread": False}, poolclass=StaticPool
)

# Create test session factory
TestSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)

# A Tuesday
START = datetime(2026, 3, 10, 12, 0, tzinfo=UTC)

USER_ID = 1
OTHER_USER_ID = 2


class FixedClock:
    """Clock under test control."""

    def __init__(self, now: datetime = START) -> None:
        self.current = now

    def now(self) -> datetime:
        return self.current

    def advance(self, **kwargs: float) -> datetime:
        self.current += timedelta(**kwargs)
        return self.current


@dataclass
class Course:
    """
    Seeded hierarchy::

        domain
        ├── path_a
        │   ├── unit_1: lesson_1 (cards_1), lesson_2 (cards_2)
        │   └── unit_2: lesson_3 (cards_3)
        ├── path_b
        │   └── unit_3: lesson_4 (cards_4)
        └── path_locked (is_locked)
            └── unit_4: lesson_5
    """

    domain: int
    path_a: int
    path_b: int
    path_locked: int
    unit_1: int
    unit_2: int
    unit_3: int
    unit_4: int
    lesson_1: int
    lesson_2: int
    lesson_3: int
    lesson_4: int
    lesson_5: int
    cards: dict[int, list[int]] = field(default_factory=dict)


def add_node(
    db: Session, kind: str, parent_id: int | None, position: int, **values: Any
) -> models.ContentNode:
    node = models.ContentNode(
        kind=kind,
        parent_id=parent_id,
        ordinal_position=position,
        title=values.pop("title", f"{kind} {position}"),
        **values,
    )
    db.add(node)
    db.flush()
    return node


def add_lesson(db: Session, unit_id: int, position: int, cards: int = 2, **values: Any) -> tuple[int, list[int]]:
    lesson = add_node(db, "lesson", unit_id, position, **values)
    card_ids = [
        add_node(
            db,
            "flashcard",
            lesson.id,
            index,
            question=f"Question {lesson.id}.{index}",
            answer=f"Answer {lesson.id}.{index}",
            difficulty="easy",
        ).id
        for index in range(cards)
    ]
    return lesson.id, card_ids


@pytest.fixture
def db_session() -> Generator[Session, None, None]:
    """Create a fresh database session for each test."""
    # Create all tables
    Base.metadata.create_all(bind=test_engine)

    session = TestSessionLocal()
    try:
        yield session
    finally:
        session.close()
        # Drop all tables after test
        Base.metadata.drop_all(bind=test_engine)


@pytest.fixture
def clock() -> FixedClock:
    return FixedClock()


@pytest.fixture
def course(db_session: Session) -> Course:
    """Seed the learning hierarchy used across tests."""
    domain = add_node(db_session, "domain", None, 0, title="Languages")
    path_a = add_node(db_session, "path", domain.id, 0, title="Spanish")
    path_b = add_node(db_session, "path", domain.id, 1, title="Italian")
    path_locked = add_node(db_session, "path", domain.id, 2, title="Premium", is_locked=True)
    unit_1 = add_node(db_session, "unit", path_a.id, 0)
    unit_2 = add_node(db_session, "unit", path_a.id, 1)
    unit_3 = add_node(db_session, "unit", path_b.id, 0)
    unit_4 = add_node(db_session, "unit", path_locked.id, 0)

    lesson_1, cards_1 = add_lesson(db_session, unit_1.id, 0, xp_reward=20)
    lesson_2, cards_2 = add_lesson(db_session, unit_1.id, 1)
    lesson_3, cards_3 = add_lesson(db_session, unit_2.id, 0)
    lesson_4, cards_4 = add_lesson(db_session, unit_3.id, 0)
    lesson_5, cards_5 = add_lesson(db_session, unit_4.id, 0)
    db_session.commit()

    return Course(
        domain=domain.id,
        path_a=path_a.id,
        path_b=path_b.id,
        path_locked=path_locked.id,
        unit_1=unit_1.id,
        unit_2=unit_2.id,
        unit_3=unit_3.id,
        unit_4=unit_4.id,
        lesson_1=lesson_1,
        lesson_2=lesson_2,
        lesson_3=lesson_3,
        lesson_4=lesson_4,
        lesson_5=lesson_5,
        cards={
            lesson_1: cards_1,
            lesson_2: cards_2,
            lesson_3: cards_3,
            lesson_4: cards_4,
            lesson_5: cards_5,
        },
    )


@pytest.fixture
def bus(db_session: Session, clock: FixedClock) -> Generator[MessageBus, None, None]:
    """Message bus wired to the test session and clock."""
    container.db.override(db_session)
    container.clock.override(providers.Object(clock))
    try:
        yield container.message_bus()
    finally:
        container.clock.reset_override()
        container.db.reset_override()


@pytest.fixture
def client(db_session: Session, clock: FixedClock) -> Generator[TestClient, Any, None]:
    """Create a test client with database session."""

    def override_get_db() -> Generator[Session, None, None]:
        try:
            yield db_session
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    container.clock.override(providers.Object(clock))

    with TestClient(app) as test_client:
        test_client.headers.update({"X-User-Id": str(USER_ID)})
        yield test_client

    container.clock.reset_override()
    app.dependency_overrides.clear()
