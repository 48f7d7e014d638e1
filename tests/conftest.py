"""
Shared fixtures.

Every API test runs against its own SQLite file through aiosqlite, so no
PostgreSQL instance is required.
"""

from collections.abc import Iterator

import pytest
from fastapi.testclient import TestClient

from modelview.core.config import Settings
from modelview.demo.entities import Student
from modelview.infrastructure.database import DatabasePool
from modelview.interfaces.model_view import ModelView
from modelview.main import create_app

STUDENTS_URL = "/api/student/"


def student_body(index: int = 1, **overrides) -> dict:
    """Return a valid Student creation body."""
    body = {
        "name": f"student-{index}",
        "region": "china",
        "age": 18 + index,
        "create_time": "2023-03-01T08:30:00",
        "score": 80.5 + index,
        "gender": index % 2 == 0,
    }
    body.update(overrides)
    return body


@pytest.fixture
def settings(tmp_path) -> Settings:
    return Settings(
        database_url=f"sqlite+aiosqlite:///{tmp_path / 'modelview.db'}",
        create_tables=True,
        rate_limit_enabled=False,
        db_pool_min_size=1,
        db_pool_max_size=5,
    )


def build_client(settings: Settings, prefix: str = "/student", **client_options) -> TestClient:
    view = ModelView(Student, prefix=prefix, order_by="id")
    app = create_app([view], settings=settings, database=DatabasePool(settings))
    return TestClient(app, **client_options)


@pytest.fixture
def client(settings: Settings) -> Iterator[TestClient]:
    with build_client(settings) as test_client:
        yield test_client


@pytest.fixture
def ten_students(client: TestClient) -> list[dict]:
    """Create ten students; the store assigns ids 1 through 10."""
    created = []
    for index in range(1, 11):
        response = client.post(STUDENTS_URL, json=student_body(index))
        assert response.status_code == 201
        created.append(response.json())
    return created
