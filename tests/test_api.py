"""Tests for the HTTP API."""

import io

import pytest
from docx import Document
from fastapi import status
from fastapi.testclient import TestClient

from tests.conftest import register


@pytest.fixture
def teacher_headers(client: TestClient) -> dict:
    return register(client, "teacher@school.edu", role="teacher")


@pytest.fixture
def student_headers(client: TestClient) -> dict:
    return register(client, "student@school.edu", role="student")


@pytest.fixture
def module_id(client: TestClient, teacher_headers: dict) -> str:
    response = client.post(
        "/api/modules",
        json={"title": "Photosynthesis", "description": "Light reactions", "content": "<p>Chlorophyll</p>"},
        headers=teacher_headers,
    )
    assert response.status_code == status.HTTP_201_CREATED
    return response.json()["id"]


class TestInfo:
    def test_health(self, client: TestClient) -> None:
        response = client.get("/api/health")

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["status"] == "ok"

    def test_root(self, client: TestClient) -> None:
        assert client.get("/").json()["health"] == "/api/health"


class TestAuth:
    def test_register_returns_public_user_and_token(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/register",
            json={"email": "Ada@Example.com", "password": "pw", "username": "Ada", "role": "teacher"},
        )

        assert response.status_code == status.HTTP_201_CREATED
        data = response.json()
        assert data["token"]
        assert data["user"]["email"] == "ada@example.com"
        assert data["user"]["role"] == "teacher"
        assert "password_hash" not in data["user"]

    def test_register_duplicate(self, client: TestClient, student_headers: dict) -> None:
        response = client.post(
            "/api/auth/register",
            json={"email": "student@school.edu", "password": "pw", "username": "x"},
        )

        assert response.status_code == status.HTTP_409_CONFLICT
        assert response.json()["detail"] == "User already exists with this email."

    def test_register_bad_email(self, client: TestClient) -> None:
        response = client.post(
            "/api/auth/register",
            json={"email": "nope", "password": "pw", "username": "x"},
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST

    def test_login(self, client: TestClient, student_headers: dict) -> None:
        response = client.post(
            "/api/auth/login", json={"email": "student@school.edu", "password": "secret"}
        )

        assert response.status_code == status.HTTP_200_OK
        me = client.get("/api/auth/me", headers={"Authorization": f"Bearer {response.json()['token']}"})
        assert me.json()["user"]["email"] == "student@school.edu"

    def test_login_wrong_password(self, client: TestClient, student_headers: dict) -> None:
        response = client.post(
            "/api/auth/login", json={"email": "student@school.edu", "password": "wrong"}
        )

        assert response.status_code == status.HTTP_401_UNAUTHORIZED
        assert response.json()["detail"] == "Invalid email or password."

    def test_me_requires_token(self, client: TestClient) -> None:
        response = client.get("/api/auth/me")
        assert response.status_code in (status.HTTP_401_UNAUTHORIZED, status.HTTP_403_FORBIDDEN)

    def test_me_rejects_bad_token(self, client: TestClient) -> None:
        response = client.get("/api/auth/me", headers={"Authorization": "Bearer not-a-jwt"})
        assert response.status_code == status.HTTP_401_UNAUTHORIZED

    def test_update_me(self, client: TestClient, student_headers: dict, teacher_headers: dict) -> None:
        response = client.patch("/api/auth/me", json={"username": "Grace"}, headers=student_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["user"]["username"] == "Grace"

        taken = client.patch("/api/auth/me", json={"email": "teacher@school.edu"}, headers=student_headers)
        assert taken.status_code == status.HTTP_409_CONFLICT

    def test_logout(self, client: TestClient) -> None:
        assert client.post("/api/auth/logout").json()["success"] is True


class TestModules:
    def test_list_includes_seed_and_created(self, client: TestClient, student_headers: dict, module_id: str) -> None:
        response = client.get("/api/modules", headers=student_headers)

        assert response.status_code == status.HTTP_200_OK
        modules = response.json()
        assert modules[0]["id"] == module_id
        assert modules[0]["content_type"] == "markup"
        assert {"1", "2"} <= {m["id"] for m in modules}

    def test_list_filters_by_title(self, client: TestClient, student_headers: dict, module_id: str) -> None:
        response = client.get("/api/modules", params={"q": "photo"}, headers=student_headers)

        assert response.status_code == status.HTTP_200_OK
        assert [m["id"] for m in response.json()] == [module_id]

    def test_student_cannot_create(self, client: TestClient, student_headers: dict) -> None:
        response = client.post("/api/modules", json={"title": "Mine"}, headers=student_headers)
        assert response.status_code == status.HTTP_403_FORBIDDEN

    def test_owner_updates(self, client: TestClient, teacher_headers: dict, module_id: str) -> None:
        response = client.patch(
            f"/api/modules/{module_id}", json={"content": "https://example.com/light"}, headers=teacher_headers
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["content_type"] == "url"
        assert response.json()["title"] == "Photosynthesis"

    def test_non_owner_cannot_update_or_delete(self, client: TestClient, module_id: str) -> None:
        other = register(client, "other@school.edu", role="teacher")

        assert client.patch(f"/api/modules/{module_id}", json={"title": "x"}, headers=other).status_code == 403
        assert client.delete(f"/api/modules/{module_id}", headers=other).status_code == 403

    def test_delete(self, client: TestClient, teacher_headers: dict, module_id: str) -> None:
        response = client.delete(f"/api/modules/{module_id}", headers=teacher_headers)

        assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get(f"/api/modules/{module_id}", headers=teacher_headers).status_code == 404

    def test_download(self, client: TestClient, student_headers: dict, module_id: str) -> None:
        response = client.get(f"/api/modules/{module_id}/download", headers=student_headers)

        assert response.status_code == status.HTTP_200_OK
        assert 'filename="Photosynthesis.txt"' in response.headers["content-disposition"]
        assert response.text == "TITLE: Photosynthesis\n\nDESCRIPTION: Light reactions\n\nCONTENT:\nChlorophyll"

    def test_import_docx(self, client: TestClient, teacher_headers: dict) -> None:
        doc = Document()
        doc.add_paragraph("Stomata")
        doc.add_paragraph("Guard cells")
        buffer = io.BytesIO()
        doc.save(buffer)

        response = client.post(
            "/api/modules/import-docx",
            files={"file": ("leaf.docx", buffer.getvalue(), "application/octet-stream")},
            headers=teacher_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json() == {"filename": "leaf.docx", "content": "Stomata\nGuard cells"}

    def test_import_invalid_docx(self, client: TestClient, teacher_headers: dict) -> None:
        response = client.post(
            "/api/modules/import-docx",
            files={"file": ("notes.docx", b"not a document", "application/octet-stream")},
            headers=teacher_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestSessionsAndMetrics:
    def test_record_and_history(self, client: TestClient, student_headers: dict, module_id: str) -> None:
        short = client.post("/api/sessions", json={"module_id": module_id, "elapsed_seconds": 5}, headers=student_headers)
        long = client.post("/api/sessions", json={"module_id": module_id, "elapsed_seconds": 130}, headers=student_headers)

        assert short.json() == {"recorded": False, "session": None}
        assert long.json()["recorded"] is True
        assert long.json()["session"]["duration"] == 130

        history = client.get("/api/sessions", headers=student_headers).json()
        assert [(h["module_title"], h["duration"]) for h in history] == [("Photosynthesis", 130)]

    def test_record_unknown_module(self, client: TestClient, student_headers: dict) -> None:
        response = client.post("/api/sessions", json={"module_id": "missing", "elapsed_seconds": 60}, headers=student_headers)
        assert response.status_code == status.HTTP_404_NOT_FOUND

    def test_student_metrics(self, client: TestClient, student_headers: dict, module_id: str) -> None:
        for seconds in (70, 125, 10):
            client.post("/api/sessions", json={"module_id": module_id, "elapsed_seconds": seconds}, headers=student_headers)

        data = client.get("/api/profile/metrics", headers=student_headers).json()

        assert data["student"]["total_focus_minutes"] == 3
        assert data["student"]["modules_studied"] == 1
        assert data["teacher"] is None
        assert len(data["history"]) == 3

    def test_teacher_metrics(
        self, client: TestClient, teacher_headers: dict, student_headers: dict, module_id: str
    ) -> None:
        client.post("/api/sessions", json={"module_id": module_id, "elapsed_seconds": 60}, headers=student_headers)
        client.post("/api/sessions", json={"module_id": "1", "elapsed_seconds": 60}, headers=student_headers)

        data = client.get("/api/profile/metrics", headers=teacher_headers).json()

        assert data["teacher"] == {"modules_published": 1, "total_views": 1}
        assert data["student"] is None


class TestReminders:
    def test_schedule_list_delete(self, client: TestClient, student_headers: dict, module_id: str) -> None:
        created = client.post(
            "/api/reminders",
            json={"module_id": module_id, "scheduled_time": "2030-03-01T09:00:00Z"},
            headers=student_headers,
        )

        assert created.status_code == status.HTTP_201_CREATED
        reminder = created.json()
        assert reminder["module_title"] == "Photosynthesis"
        assert client.get("/api/reminders", headers=student_headers).json() == [reminder]

        for _ in range(2):
            response = client.delete(f"/api/reminders/{reminder['id']}", headers=student_headers)
            assert response.status_code == status.HTTP_204_NO_CONTENT
        assert client.get("/api/reminders", headers=student_headers).json() == []

    def test_schedule_bad_time(self, client: TestClient, student_headers: dict, module_id: str) -> None:
        response = client.post(
            "/api/reminders",
            json={"module_id": module_id, "scheduled_time": "soon"},
            headers=student_headers,
        )
        assert response.status_code == status.HTTP_400_BAD_REQUEST


class TestTutor:
    def test_chat_with_module_context(self, client: TestClient, fake_llm, student_headers: dict, module_id: str) -> None:
        response = client.post(
            "/api/tutor/chat",
            json={"prompt": "Explain this", "module_id": module_id},
            headers=student_headers,
        )

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["reply"] == {"role": "assistant", "text": "Cells are the basic unit of life."}
        assert "<p>Chlorophyll</p>" in fake_llm.calls[0][0].content

    def test_chat_error_is_reply(self, client: TestClient, fake_llm, student_headers: dict) -> None:
        fake_llm.error = RuntimeError("quota")

        response = client.post("/api/tutor/chat", json={"prompt": "Hi"}, headers=student_headers)

        assert response.status_code == status.HTTP_200_OK
        assert response.json()["reply"]["text"].startswith("There was an error")
