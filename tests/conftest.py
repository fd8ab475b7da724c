from __future__ import annotations

import io
from typing import Any, Callable

import mongomock
import pytest
from flask import Flask
from flask.testing import FlaskClient

from app import create_app

TEST_DB = "project_review_test"


@pytest.fixture
def mongo_client() -> mongomock.MongoClient:
    return mongomock.MongoClient()


@pytest.fixture
def make_app(mongo_client, tmp_path) -> Callable[..., Flask]:
    """Build an app over the shared in-memory store; extra settings override the defaults."""

    def _make(**overrides: Any) -> Flask:
        settings = {
            "TESTING": True,
            "MONGO_CLIENT": mongo_client,
            "MONGO_DB_NAME": TEST_DB,
            "UPLOAD_DIR": str(tmp_path / "public"),
            "MAX_REVIEWS": 3,
            "LOG_LEVEL": "DEBUG",
        }
        settings.update(overrides)
        return create_app(settings)

    return _make


@pytest.fixture
def app(make_app) -> Flask:
    return make_app()


@pytest.fixture
def client(app: Flask) -> FlaskClient:
    return app.test_client()


@pytest.fixture
def database(mongo_client):
    return mongo_client[TEST_DB]


def register(client: FlaskClient, email: str, role: str, password: str = "s3cret", name: str = "Test User"):
    return client.post(
        "/register",
        json={"name": name, "email": email, "password": password, "role": role},
    )


def submit(client: FlaskClient, student_id: str, title: str = "Report", filename: str = "report.pdf"):
    return client.post(
        "/project/submit",
        data={
            "studentId": student_id,
            "title": title,
            "description": "Project write-up",
            "document": (io.BytesIO(b"%PDF-1.4 test"), filename, "application/pdf"),
        },
        content_type="multipart/form-data",
    )


@pytest.fixture
def student(client: FlaskClient) -> dict[str, Any]:
    response = register(client, "asha@college.edu", "student", name="Asha")
    assert response.status_code == 201, response.get_json()
    return response.get_json()["user"]
