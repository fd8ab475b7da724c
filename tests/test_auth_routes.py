"""Registration and login endpoint tests."""

from __future__ import annotations

import pytest

from conftest import register


def test_register_returns_public_fields(client, database) -> None:
    response = register(client, "Asha@College.edu ", "student", name="Asha")

    assert response.status_code == 201
    payload = response.get_json()
    assert payload["message"] == "Registered successfully"
    user = payload["user"]
    assert set(user) == {"id", "name", "email", "role"}
    assert user["email"] == "asha@college.edu"
    assert user["role"] == "student"

    stored = database.students.find_one({"email": "asha@college.edu"})
    assert stored["password"] != "s3cret"
    assert stored["createdAt"] is not None


def test_register_same_email_and_role_conflicts(client) -> None:
    assert register(client, "ravi@college.edu", "faculty").status_code == 201

    second = register(client, "ravi@college.edu", "faculty")

    assert second.status_code == 400
    assert second.get_json() == {"message": "Email already exists"}


def test_same_email_allowed_in_other_role(client) -> None:
    assert register(client, "ravi@college.edu", "faculty").status_code == 201
    assert register(client, "ravi@college.edu", "student").status_code == 201


def test_register_without_name_defaults_to_empty(client) -> None:
    response = client.post(
        "/register",
        json={"email": "noname@college.edu", "password": "pw", "role": "student"},
    )

    assert response.status_code == 201
    assert response.get_json()["user"]["name"] == ""


@pytest.mark.parametrize(
    ("body", "message"),
    [
        ({"password": "pw", "role": "student"}, "Missing fields"),
        ({"email": "a@b.c", "role": "student"}, "Missing fields"),
        ({"email": "a@b.c", "password": "pw"}, "Missing fields"),
        ({"email": "a@b.c", "password": "pw", "role": "admin"}, "Invalid role"),
    ],
)
def test_register_rejects_bad_input(client, body, message) -> None:
    response = client.post("/register", json=body)

    assert response.status_code == 400
    assert response.get_json() == {"message": message}


def test_login_success(client) -> None:
    created = register(client, "asha@college.edu", "student", name="Asha").get_json()["user"]

    response = client.post(
        "/login",
        json={"email": "asha@college.edu", "password": "s3cret", "role": "student"},
    )

    assert response.status_code == 200
    payload = response.get_json()
    assert payload["message"] == "Login successful"
    assert payload["user"] == created


def test_login_wrong_password_matches_unknown_email(client) -> None:
    """Failed logins must not reveal whether the account exists."""

    register(client, "asha@college.edu", "student")

    wrong_password = client.post(
        "/login",
        json={"email": "asha@college.edu", "password": "nope", "role": "student"},
    )
    unknown_email = client.post(
        "/login",
        json={"email": "ghost@college.edu", "password": "s3cret", "role": "student"},
    )

    assert wrong_password.status_code == unknown_email.status_code == 400
    assert wrong_password.get_json() == unknown_email.get_json() == {"message": "Invalid credentials"}


def test_login_checks_role_partition(client) -> None:
    register(client, "asha@college.edu", "student")

    response = client.post(
        "/login",
        json={"email": "asha@college.edu", "password": "s3cret", "role": "faculty"},
    )

    assert response.status_code == 400
    assert response.get_json() == {"message": "Invalid credentials"}


def test_login_missing_fields(client) -> None:
    response = client.post("/login", json={"email": "asha@college.edu"})

    assert response.status_code == 400
    assert response.get_json() == {"message": "Missing fields"}


@pytest.mark.parametrize("path", ["/register", "/login"])
@pytest.mark.parametrize("body", [["asha@college.edu", "s3cret", "student"], "student", 42, None])
def test_non_object_body_is_missing_fields(client, path, body) -> None:
    response = client.post(path, json=body)

    assert response.status_code == 400
    assert response.get_json() == {"message": "Missing fields"}
