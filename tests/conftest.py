import os

# Must be set before coursequiz.core.config is imported
os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("SECRET_KEY", "test-secret-key")

import pytest
from fastapi.testclient import TestClient
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

from coursequiz.db.base import Base
from coursequiz.db.session import get_db
from coursequiz.main import app
from coursequiz.schemas.quiz import Quiz
from coursequiz.services.catalog import QuizCatalog


def make_quiz(**overrides) -> Quiz:
    """Two questions: Q1 single choice worth 10, Q2 true/false worth 5."""
    data = {
        "id": "quiz-1",
        "module_id": "m1",
        "title": "Sample quiz",
        "description": "Two question sample",
        "passing_score": 70,
        "questions": [
            {
                "id": "Q1",
                "text": "Pick B",
                "kind": "multiple-choice",
                "options": ["A", "B", "C"],
                "correct_answer": "B",
                "explanation": "B is right",
                "points": 10,
            },
            {
                "id": "Q2",
                "text": "The sky is green.",
                "kind": "true-false",
                "options": ["True", "False"],
                "correct_answer": "False",
                "explanation": "It is not",
                "points": 5,
            },
        ],
    }
    data.update(overrides)
    return Quiz.model_validate(data)


@pytest.fixture
def quiz():
    return make_quiz()


@pytest.fixture
def catalog(quiz):
    return QuizCatalog([quiz])


@pytest.fixture
def session_factory():
    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(bind=engine)
    yield sessionmaker(autocommit=False, autoflush=False, bind=engine)
    Base.metadata.drop_all(bind=engine)
    engine.dispose()


@pytest.fixture
def client(session_factory):
    def override_get_db():
        db = session_factory()
        try:
            yield db
        finally:
            db.close()

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture
def auth_headers(client):
    client.post(
        "/users/register",
        json={"name": "Ada", "email": "ada@example.com", "password": "s3cret-pass"},
    )
    response = client.post(
        "/auth/login",
        data={"username": "ada@example.com", "password": "s3cret-pass"},
    )
    token = response.json()["access_token"]
    return {"Authorization": f"Bearer {token}"}
