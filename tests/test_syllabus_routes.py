import asyncio

import pytest
from fastapi.testclient import TestClient

from studyvault.api.routes import syllabus as syllabus_routes
from studyvault.core.config import get_settings
from studyvault.main import app
from studyvault.services.pipeline import SyllabusPipeline
from studyvault.services.syllabus_store import SyllabusStore, get_store


SAMPLE_SYLLABUS = """CS 101 Introduction to Programming
State University
Fall 2025

Course Description
This course introduces the fundamentals of programming in Python.

Schedule
9/3 Homework 1 due
9/10/25 Quiz 1
"""


class FakeAIExtractor:
    def __init__(self):
        self.calls = 0

    def extract(self, text, course):
        self.calls += 1
        return []


class FakeStore(SyllabusStore):
    def __init__(self, known_course_ids=("1",)):
        self.known_course_ids = set(known_course_ids)
        self.saved = []

    def save(self, course_id, user_id, filename, result):
        if course_id not in self.known_course_ids:
            raise LookupError(course_id)
        self.saved.append((course_id, user_id, filename, result))
        return len(result.assignments)


@pytest.fixture
def store():
    return FakeStore()


@pytest.fixture
def client(store):
    pipeline = SyllabusPipeline(ai_extractor=FakeAIExtractor(), min_text_length=100)
    app.dependency_overrides[syllabus_routes.get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_store] = lambda: store
    yield TestClient(app)
    app.dependency_overrides.clear()


def test_health(client):
    response = client.get("/health")
    assert response.status_code == 200
    assert response.json() == {"status": "ok"}


def test_analyze_text(client):
    response = client.post(
        "/api/syllabus/analyze",
        json={"courseId": "1", "userId": "u1", "fileName": "cs101.pdf", "text": SAMPLE_SYLLABUS},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["success"] is True
    assert data["course"]["code"] == "CS 101"
    assert data["assignmentsCount"] == 2
    assert data["assignments"][1] == {
        "title": "Quiz 1",
        "description": "Quiz assessment: Quiz 1",
        "dueDate": "2025-09-10",
        "status": "pending",
        "tags": ["Quiz"],
    }


def test_analyze_with_preparsed_assignments(client):
    response = client.post(
        "/api/syllabus/analyze",
        json={
            "courseId": "1",
            "userId": "u1",
            "text": SAMPLE_SYLLABUS,
            "assignments": [{"title": "Essay 1", "dueDate": "2025-10-01"}],
        },
    )

    assert response.status_code == 200
    assert response.json()["assignments"] == [{
        "title": "Essay 1",
        "description": "Assignment: Essay 1",
        "dueDate": "2025-10-01",
        "status": "pending",
        "tags": [],
    }]


def test_analyze_requires_identifiers(client):
    response = client.post("/api/syllabus/analyze", json={"userId": "u1", "text": SAMPLE_SYLLABUS})

    assert response.status_code == 400
    assert response.json()["detail"]["error"] == "ValidationFailed"


def test_parse_upload_saves_results(client, store):
    response = client.post(
        "/api/syllabus/parse",
        data={"courseId": "1", "userId": "u1"},
        files={"syllabus": ("cs101.txt", SAMPLE_SYLLABUS.encode("utf-8"), "text/plain")},
    )

    assert response.status_code == 200
    data = response.json()
    assert data["courseId"] == "1"
    assert data["assignmentsCount"] == 2
    assert len(store.saved) == 1
    course_id, user_id, filename, result = store.saved[0]
    assert (course_id, user_id, filename) == ("1", "u1", "cs101.txt")
    assert result.course.term == "Fall 2025"


def test_parse_unsupported_format(client, store):
    response = client.post(
        "/api/syllabus/parse",
        data={"courseId": "1", "userId": "u1"},
        files={"syllabus": ("grades.xlsx", b"binary", "application/octet-stream")},
    )

    assert response.status_code == 415
    detail = response.json()["detail"]
    assert detail["error"] == "UnsupportedFormat"
    assert ".pdf" in detail["supportedFormats"]
    assert store.saved == []


def test_parse_text_too_short(client):
    response = client.post(
        "/api/syllabus/parse",
        data={"courseId": "1", "userId": "u1"},
        files={"syllabus": ("notes.txt", b"CS 101", "text/plain")},
    )

    assert response.status_code == 422
    assert response.json()["detail"]["error"] == "ExtractionFailed"


def test_parse_requires_user(client):
    response = client.post(
        "/api/syllabus/parse",
        data={"courseId": "1"},
        files={"syllabus": ("cs101.txt", SAMPLE_SYLLABUS.encode("utf-8"), "text/plain")},
    )

    assert response.status_code == 400


def test_parse_unknown_course(client):
    response = client.post(
        "/api/syllabus/parse",
        data={"courseId": "999", "userId": "u1"},
        files={"syllabus": ("cs101.txt", SAMPLE_SYLLABUS.encode("utf-8"), "text/plain")},
    )

    assert response.status_code == 404


def _running_on_event_loop():
    try:
        asyncio.get_running_loop()
    except RuntimeError:
        return False
    return True


class ThreadRecordingPipeline(SyllabusPipeline):
    def __init__(self):
        super().__init__(ai_extractor=FakeAIExtractor(), min_text_length=100)
        self.on_event_loop = None

    def run(self, file_content, filename):
        self.on_event_loop = _running_on_event_loop()
        return super().run(file_content, filename)


class ThreadRecordingStore(FakeStore):
    def save(self, course_id, user_id, filename, result):
        self.on_event_loop = _running_on_event_loop()
        return super().save(course_id, user_id, filename, result)


def test_parse_runs_blocking_work_off_the_event_loop():
    pipeline = ThreadRecordingPipeline()
    store = ThreadRecordingStore()
    app.dependency_overrides[syllabus_routes.get_pipeline] = lambda: pipeline
    app.dependency_overrides[get_store] = lambda: store
    try:
        response = TestClient(app).post(
            "/api/syllabus/parse",
            data={"courseId": "1", "userId": "u1"},
            files={"syllabus": ("cs101.txt", SAMPLE_SYLLABUS.encode("utf-8"), "text/plain")},
        )
    finally:
        app.dependency_overrides.clear()

    assert response.status_code == 200
    assert pipeline.on_event_loop is False
    assert store.on_event_loop is False


def test_app_debug_follows_settings():
    assert app.debug is get_settings().debug
