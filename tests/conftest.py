"""
Shared test fixtures for the Vividclass backend.
Monkeypatches all storage path constants to a temporary directory and
switches Supabase off. Zero network calls.
"""
import os
import time

import jwt
import pytest

JWT_SECRET = "test-jwt-secret-with-enough-length-for-hs256"

# Czech passage that trips two phrase checks and nothing else
AI_TEXT = (
    "Já si myslím, že jako umělá inteligence bych tuto úlohu vyřešil úplně jinak, "
    "ale je důležité poznamenat, že můj bratr a my všichni ostatní jsme o tom "
    "dlouho mluvili při večeři u babičky na chalupě v horách"
)

# Personal, unstructured passage that trips nothing
HUMAN_TEXT = (
    "Já a můj bratr jsme v sobotu vyrazili na dlouhý výlet do hor a cestou "
    "jsme potkali spoustu lidí, kteří šli stejným směrem jako my"
)


@pytest.fixture(autouse=True)
def isolated_storage(monkeypatch, tmp_path):
    """Point the local store and audit log at tmp_path; disable Supabase."""
    from classroom_backend import audit
    from classroom_backend.config import config
    from classroom_backend.services import assignment_service

    monkeypatch.setattr(assignment_service, "ASSIGNMENTS_FILE",
                        os.path.join(tmp_path, "student_assignments.json"))
    monkeypatch.setattr(assignment_service, "SUBMISSIONS_FILE",
                        os.path.join(tmp_path, "student_submissions.json"))
    monkeypatch.setattr(audit, "AUDIT_LOG_FILE", os.path.join(tmp_path, "audit.log"))
    monkeypatch.setattr(config, "use_supabase", False)
    monkeypatch.delenv("VIVIDCLASS_AUTH_DISABLED", raising=False)
    monkeypatch.setenv("SUPABASE_JWT_SECRET", JWT_SECRET)
    return tmp_path


@pytest.fixture
def app():
    from classroom_backend.app import create_app
    return create_app({"TESTING": True})


@pytest.fixture
def client(app):
    return app.test_client()


@pytest.fixture
def teacher_headers():
    """Authorization header carrying a valid Supabase-style teacher JWT."""
    token = jwt.encode(
        {
            "sub": "teacher-1",
            "email": "ucitel@skola.cz",
            "aud": "authenticated",
            "exp": int(time.time()) + 3600,
        },
        JWT_SECRET,
        algorithm="HS256",
    )
    return {"Authorization": f"Bearer {token}"}


@pytest.fixture
def assignment():
    """A no-AI document assignment in class 'class-1'."""
    from classroom_backend.services import assignment_service
    return assignment_service.create_assignment(
        class_id="class-1",
        title="Sloh: Můj výlet",
        description="Napiš slohovou práci o svém výletu.",
        type="document",
        allow_ai=False,
        created_by="teacher-1",
        max_points=20,
    )


@pytest.fixture
def submission(assignment):
    from classroom_backend.services import assignment_service
    return assignment_service.start_assignment("student-1", assignment.id, "document", "doc-1")


@pytest.fixture
def ai_text():
    return AI_TEXT


@pytest.fixture
def human_text():
    return HUMAN_TEXT
