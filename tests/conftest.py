# tests/conftest.py
from __future__ import annotations

import os
from collections.abc import Callable, Generator, Iterator
from itertools import count

import pytest
from fastapi import FastAPI
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.engine import Engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

os.environ.setdefault("SECRET_KEY", "stackit-test-secret")
os.environ.setdefault("DATABASE_URL", "sqlite://")

from stackit import main as main_module
from stackit.core.security import create_access_token
from stackit.db.session import Base, install_sqlite_pragmas
from stackit.db.session import get_db as app_get_session
from stackit.main import app as fastapi_app
from stackit.models import ROLE_ADMIN, ROLE_USER, Answer, Question, User
from stackit.schemas.answer import AnswerCreate
from stackit.schemas.question import QuestionCreate
from stackit.services import answers as answer_service
from stackit.services import questions as question_service

TEST_DB_URL = "sqlite://"

_EMAIL_COUNTER = count(1)


@pytest.fixture(scope="session")
def engine() -> Generator[Engine, None, None]:
    engine = create_engine(
        TEST_DB_URL,
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    install_sqlite_pragmas(engine)
    Base.metadata.create_all(bind=engine)
    try:
        yield engine
    finally:
        Base.metadata.drop_all(bind=engine)
        engine.dispose()


@pytest.fixture()
def db_session(engine: Engine) -> Iterator[Session]:
    connection = engine.connect()
    transaction = connection.begin()
    # Service commits release a SAVEPOINT and service rollbacks return to the
    # last one, so the outer transaction survives both.
    SessionLocal = sessionmaker(
        bind=connection,
        autoflush=False,
        join_transaction_mode="create_savepoint",
    )
    session = SessionLocal()

    try:
        yield session
    finally:
        session.close()

        if transaction.is_active:
            transaction.rollback()
        connection.close()

        # Ensure each test sees a clean database even if commits reached SQLite.
        with engine.begin() as cleanup_conn:
            for table in reversed(Base.metadata.sorted_tables):
                cleanup_conn.execute(table.delete())


@pytest.fixture(scope="session")
def app() -> FastAPI:
    return fastapi_app


@pytest.fixture(autouse=True)
def override_session_dependency(app: FastAPI, db_session: Session) -> Iterator[None]:
    def _get_session_override() -> Generator[Session, None, None]:
        yield db_session

    app.dependency_overrides[app_get_session] = _get_session_override
    try:
        yield
    finally:
        app.dependency_overrides.pop(app_get_session, None)


@pytest.fixture()
def client(
    app: FastAPI,
    db_session: Session,
    monkeypatch: pytest.MonkeyPatch,
) -> Iterator[TestClient]:
    # The startup schema check inspects the test connection instead of the
    # configured database.
    monkeypatch.setattr(main_module, "engine", db_session.get_bind())
    with TestClient(app, base_url="http://test") as test_client:
        yield test_client


def _make_user(db: Session, name: str, role: str = ROLE_USER) -> User:
    user = User(
        name=name,
        email=f"{name.lower().replace(' ', '.')}.{next(_EMAIL_COUNTER)}@example.com",
        role=role,
    )
    db.add(user)
    db.commit()
    db.refresh(user)
    return user


def _bearer(user: User) -> dict[str, str]:
    return {"Authorization": f"Bearer {create_access_token(user.id)}"}


@pytest.fixture()
def test_user(db_session: Session) -> User:
    """Primary user; asks the default question."""
    return _make_user(db_session, "Test User")


@pytest.fixture()
def other_user(db_session: Session) -> User:
    """Second regular user; answers and votes."""
    return _make_user(db_session, "Other User")


@pytest.fixture()
def third_user(db_session: Session) -> User:
    return _make_user(db_session, "Third User")


@pytest.fixture()
def admin_user(db_session: Session) -> User:
    return _make_user(db_session, "Admin User", role=ROLE_ADMIN)


@pytest.fixture()
def auth_headers(test_user: User) -> dict[str, str]:
    return _bearer(test_user)


@pytest.fixture()
def other_headers(other_user: User) -> dict[str, str]:
    return _bearer(other_user)


@pytest.fixture()
def third_headers(third_user: User) -> dict[str, str]:
    return _bearer(third_user)


@pytest.fixture()
def admin_headers(admin_user: User) -> dict[str, str]:
    return _bearer(admin_user)


@pytest.fixture()
def question(db_session: Session, test_user: User) -> Question:
    """A question asked by ``test_user``."""
    return question_service.create_question(
        db_session,
        test_user,
        QuestionCreate(
            title="How do I roll back a SQLAlchemy session?",
            description="My transaction fails half way and leaves rows behind.",
            tags=["python", "sqlalchemy"],
        ),
    )


@pytest.fixture()
def answer(db_session: Session, other_user: User, question: Question) -> Answer:
    """First answer to ``question``, posted by ``other_user``."""
    return answer_service.create_answer(
        db_session,
        other_user,
        AnswerCreate(question_id=question.id, content="Call session.rollback() in an except block."),
    )


@pytest.fixture()
def second_answer(db_session: Session, third_user: User, question: Question) -> Answer:
    """Second answer to ``question``, posted by ``third_user``."""
    return answer_service.create_answer(
        db_session,
        third_user,
        AnswerCreate(question_id=question.id, content="Use a `with session.begin():` block instead."),
    )


@pytest.fixture()
def user_factory(db_session: Session) -> Callable[..., User]:
    """Return a callable creating extra persisted users."""

    def _factory(name: str, role: str = ROLE_USER) -> User:
        return _make_user(db_session, name, role)

    return _factory


@pytest.fixture()
def headers_for() -> Callable[[User], dict[str, str]]:
    """Return a callable building bearer headers for any user."""
    return _bearer
