import os
import tempfile
from unittest.mock import MagicMock

import pytest

# Set env vars BEFORE importing app code so Settings and the engine pick them up.
# File-backed SQLite: cache reads/writes run on executor threads.
_db_dir = tempfile.mkdtemp(prefix="careerpilot-tests-")
os.environ["DATABASE_URL"] = f"sqlite:///{_db_dir}/test.db"
os.environ["SECRET_KEY"] = "test-secret-key"
os.environ["GEMINI_API_KEY"] = "test-gemini-key"
os.environ["ANALYSIS_CACHE_ENABLED"] = "true"

from fastapi.testclient import TestClient  # noqa: E402
from sqlalchemy import create_engine  # noqa: E402
from sqlalchemy.orm import sessionmaker  # noqa: E402

import careerpilot.models  # noqa: E402,F401 - register tables
from careerpilot.database import Base, engine  # noqa: E402
from careerpilot.main import app  # noqa: E402
from careerpilot.routers.deps import get_resume_service  # noqa: E402
from careerpilot.schemas.resume import ResumeAnalysis  # noqa: E402
from careerpilot.services.analysis_cache import get_analysis_cache  # noqa: E402
from careerpilot.services.resume_service import ResumeAnalysisService  # noqa: E402


@pytest.fixture(autouse=True)
def reset_db():
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)
    yield


@pytest.fixture
def session_factory(tmp_path):
    """Isolated file database for cache-level tests."""
    test_engine = create_engine(
        f"sqlite:///{tmp_path}/cache.db",
        connect_args={"check_same_thread": False},
    )
    Base.metadata.create_all(bind=test_engine)
    factory = sessionmaker(autocommit=False, autoflush=False, bind=test_engine)
    yield factory
    test_engine.dispose()


def make_analysis(ats_score: float = 72, skills: list[str] | None = None) -> ResumeAnalysis:
    return ResumeAnalysis(
        ats_score=ats_score,
        extracted_skills=skills if skills is not None else ["Python", "React"],
        missing_skills=["Kubernetes"],
        strengths=["Python"],
        improvements=["Quantify project impact"],
    )


@pytest.fixture
def analysis_factory():
    return make_analysis


@pytest.fixture
def fake_analyzer():
    """Stands in for Gemini in the resume endpoints; call_count = external calls."""
    analyzer = MagicMock(return_value=make_analysis())
    app.dependency_overrides[get_resume_service] = lambda: ResumeAnalysisService(
        cache=get_analysis_cache(), analyze=analyzer
    )
    yield analyzer
    app.dependency_overrides.pop(get_resume_service, None)


@pytest.fixture
def client():
    with TestClient(app) as c:
        yield c


@pytest.fixture
def auth_headers(client):
    resp = client.post("/api/auth/signup", json={"name": "Ada Lovelace", "email": "ada@example.com"})
    assert resp.status_code == 200
    return {"Authorization": f"Bearer {resp.json()['access_token']}"}
