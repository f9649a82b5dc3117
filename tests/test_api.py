from unittest.mock import patch

from careerpilot.database import SessionLocal
from careerpilot.models.ai_usage_log import AiUsageLog
from careerpilot.repositories.resume_repository import insert_analysis
from careerpilot.schemas.roadmap import LearningRoadmap, RoadmapModule
from careerpilot.services.ai_service import AnalysisAuthError, AnalysisUnavailableError
from careerpilot.services.ai_usage import FEATURE_RESUME

RESUME = "Skilled in Python and React."


def _analyze(client, headers=None, text=RESUME, role="Backend Engineer"):
    return client.post(
        "/api/resume/analyze",
        json={"resume_text": text, "target_role": role},
        headers=headers or {},
    )


# ---------- auth / profile ----------


def test_root(client):
    resp = client.get("/")
    assert resp.status_code == 200
    assert resp.json()["docs"] == "/docs"


def test_signup_returns_token_and_profile(client):
    resp = client.post("/api/auth/signup", json={"name": "Grace", "email": "Grace@Example.com"})
    assert resp.status_code == 200
    data = resp.json()
    assert data["token_type"] == "bearer"
    assert data["profile"]["email"] == "grace@example.com"
    assert data["profile"]["resume_text"] == ""


def test_login_unknown_email_is_404(client):
    resp = client.post("/api/auth/login", json={"email": "nobody@example.com"})
    assert resp.status_code == 404
    assert "sign up" in resp.json()["detail"]


def test_login_existing_profile(client, auth_headers):
    resp = client.post("/api/auth/login", json={"email": "ADA@example.com"})
    assert resp.status_code == 200
    assert resp.json()["profile"]["name"] == "Ada Lovelace"


def test_me_requires_token(client):
    assert client.get("/api/profile/me").status_code == 401
    bad = client.get("/api/profile/me", headers={"Authorization": "Bearer not-a-jwt"})
    assert bad.status_code == 401


def test_update_me(client, auth_headers):
    resp = client.patch("/api/profile/me", json={"target_role": "Data Engineer"}, headers=auth_headers)
    assert resp.status_code == 200
    assert resp.json()["target_role"] == "Data Engineer"
    assert resp.json()["name"] == "Ada Lovelace"


# ---------- resume ----------


def test_repeat_analysis_is_served_from_cache(client, auth_headers, fake_analyzer):
    first = _analyze(client, auth_headers)
    assert first.status_code == 200
    assert first.json()["from_cache"] is False
    assert first.json()["analysis"]["atsScore"] == 72

    second = _analyze(client, auth_headers)
    assert second.status_code == 200
    assert second.json()["from_cache"] is True
    assert second.json()["analysis"] == first.json()["analysis"]

    third = _analyze(client, auth_headers, role="Frontend Engineer")
    assert third.json()["from_cache"] is False
    assert fake_analyzer.call_count == 2


def test_only_provider_calls_are_logged_as_usage(client, auth_headers, fake_analyzer):
    _analyze(client, auth_headers)
    _analyze(client, auth_headers)

    db = SessionLocal()
    try:
        logs = db.query(AiUsageLog).filter(AiUsageLog.feature == FEATURE_RESUME).all()
    finally:
        db.close()
    assert len(logs) == 1


def test_analysis_updates_profile(client, auth_headers, fake_analyzer):
    _analyze(client, auth_headers)
    me = client.get("/api/profile/me", headers=auth_headers).json()
    assert me["target_role"] == "Backend Engineer"
    assert me["skills"] == ["Python", "React"]
    assert me["resume_text"] == RESUME


def test_guest_analysis_is_cached_under_guest_owner(client, fake_analyzer):
    assert _analyze(client).json()["from_cache"] is False
    assert _analyze(client).json()["from_cache"] is True
    assert fake_analyzer.call_count == 1


def test_guest_and_user_caches_are_separate(client, auth_headers, fake_analyzer):
    _analyze(client)
    resp = _analyze(client, auth_headers)
    assert resp.json()["from_cache"] is False
    assert fake_analyzer.call_count == 2


def test_blank_resume_text_is_rejected(client, fake_analyzer):
    resp = _analyze(client, text="   ")
    assert resp.status_code == 400
    fake_analyzer.assert_not_called()


def test_analyze_file(client, auth_headers, fake_analyzer):
    files = {"file": ("cv.pdf", b"%PDF-1.4 resume", "application/pdf")}
    resp = client.post(
        "/api/resume/analyze-file",
        data={"target_role": "Data Engineer"},
        files=files,
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["from_cache"] is False
    args = fake_analyzer.call_args.args
    assert args[1:] == ("Data Engineer", "application/pdf")

    latest = client.get("/api/resume/latest", headers=auth_headers).json()
    assert latest["content"] == "PDF Upload: cv.pdf"
    assert latest["target_role"] == "Data Engineer"

    again = client.post(
        "/api/resume/analyze-file",
        data={"target_role": "Data Engineer"},
        files=files,
        headers=auth_headers,
    )
    assert again.json()["from_cache"] is True


def test_analyze_file_rejects_other_types(client, fake_analyzer):
    resp = client.post(
        "/api/resume/analyze-file",
        data={"target_role": "Data Engineer"},
        files={"file": ("cv.docx", b"PK..", "application/vnd.openxmlformats-officedocument.wordprocessingml.document")},
    )
    assert resp.status_code == 400
    fake_analyzer.assert_not_called()


def test_latest_without_analysis_is_404(client, auth_headers):
    assert client.get("/api/resume/latest", headers=auth_headers).status_code == 404


def test_latest_with_unreadable_analysis_is_404(client):
    db = SessionLocal()
    try:
        insert_analysis(db, "guest", "0" * 64, "Backend Engineer", {"unexpected": True}, content=RESUME)
    finally:
        db.close()

    resp = client.get("/api/resume/latest")
    assert resp.status_code == 404
    assert resp.json()["detail"] == "No readable resume analysis yet"


def test_auth_error_maps_to_401(client, fake_analyzer):
    fake_analyzer.side_effect = AnalysisAuthError("API key not valid")
    resp = _analyze(client)
    assert resp.status_code == 401
    assert "select another API key" in resp.json()["detail"]


def test_unavailable_maps_to_503(client, fake_analyzer):
    fake_analyzer.side_effect = AnalysisUnavailableError("quota")
    assert _analyze(client).status_code == 503


# ---------- roadmap ----------


def _roadmap(target_role: str = "") -> LearningRoadmap:
    return LearningRoadmap(
        title="Backend Path",
        duration="12 weeks",
        modules=[RoadmapModule(name="APIs", description="REST with FastAPI", resources=["fastapi crash course"])],
        target_role=target_role,
    )


def test_roadmap_uses_profile_skills_and_keeps_history(client, auth_headers):
    client.patch("/api/profile/me", json={"skills": ["Python"]}, headers=auth_headers)
    with patch("careerpilot.routers.roadmap.generate_roadmap", return_value=_roadmap("Backend Engineer")) as gen:
        created = client.post("/api/roadmap", json={"target_role": "Backend Engineer"}, headers=auth_headers)
        client.post("/api/roadmap", json={"target_role": "Backend Engineer", "skills": []}, headers=auth_headers)

    assert created.status_code == 200
    assert created.json()["id"]
    assert gen.call_args_list[0].args == (["Python"], "Backend Engineer")
    assert gen.call_args_list[1].args == ([], "Backend Engineer")

    history = client.get("/api/roadmap/history", headers=auth_headers).json()
    assert len(history) == 2
    latest = client.get("/api/roadmap", headers=auth_headers).json()
    assert latest["id"] == history[0]["id"]


def test_roadmap_without_plan_is_404(client, auth_headers):
    assert client.get("/api/roadmap", headers=auth_headers).status_code == 404


# ---------- quiz ----------


def test_quiz_submit_and_history(client, auth_headers):
    questions = [
        {"id": f"q{i}", "question": "?", "options": ["a", "b", "c", "d"], "correctAnswer": i % 4, "explanation": ""}
        for i in range(5)
    ]
    resp = client.post(
        "/api/quiz/submit",
        json={
            "topic": "Python",
            "difficulty": "Beginner",
            "questions": questions,
            "answers": {"0": 0, "1": 1, "2": 0},
        },
        headers=auth_headers,
    )
    assert resp.status_code == 200
    assert resp.json()["score"] == 2
    assert resp.json()["total"] == 5

    history = client.get("/api/quiz/history", headers=auth_headers).json()
    assert [h["topic"] for h in history] == ["Python"]


# ---------- interview ----------


def test_interview_rounds_unlock_in_order(client, auth_headers):
    rounds = client.get("/api/interview/rounds", headers=auth_headers).json()
    assert [r["unlocked"] for r in rounds] == [True, False, False]

    locked = client.post(
        "/api/interview/complete",
        json={"round": "Managerial", "scores": [90, 90, 90, 90]},
        headers=auth_headers,
    )
    assert locked.status_code == 409

    done = client.post(
        "/api/interview/complete",
        json={"round": "Technical", "scores": [70, 70, 70, 70, 70], "role": "Backend Engineer"},
        headers=auth_headers,
    )
    assert done.status_code == 200
    assert done.json()["passed"] is True
    assert done.json()["feedback"] == "Round Complete. Status: PASSED"

    rounds = client.get("/api/interview/rounds", headers=auth_headers).json()
    assert [r["unlocked"] for r in rounds] == [True, True, False]


def test_round_greeting(client):
    resp = client.get("/api/interview/rounds/hr/greeting")
    assert resp.status_code == 200
    assert resp.json()["round"] == "HR"
    assert client.get("/api/interview/rounds/final/greeting").status_code == 404


def test_speech_failure_returns_null_audio(client):
    with patch("careerpilot.routers.interview.text_to_speech", return_value=None):
        resp = client.post("/api/interview/speech", json={"text": "Tell me about yourself."})
    assert resp.status_code == 200
    assert resp.json() == {"audio": None, "sample_rate": 24000}


# ---------- progress / jobs / ai ----------


def test_progress(client, auth_headers, fake_analyzer):
    _analyze(client, auth_headers)
    client.post(
        "/api/interview/complete",
        json={"round": "Technical", "scores": [80, 80, 80, 80, 80]},
        headers=auth_headers,
    )
    data = client.get("/api/progress", headers=auth_headers).json()
    assert data["stats"]["ats"] == 72
    assert data["stats"]["avg_interview"] == 80
    assert data["stats"]["readiness"] == 80
    assert len(data["interview_history"]) == 1
    assert data["quiz_history"] == []


def test_job_search(client):
    assert len(client.get("/api/jobs").json()) == 4
    hits = client.get("/api/jobs", params={"q": "python"}).json()
    assert [j["id"] for j in hits] == ["4"]
    assert hits[0]["matchScore"] == 88


def test_ai_health(client):
    with patch("careerpilot.routers.ai.check_connectivity", return_value=False):
        resp = client.get("/api/ai/health")
    assert resp.json()["status"] == "failed"

    with patch("careerpilot.routers.ai.check_connectivity", return_value=True):
        resp = client.get("/api/ai/health")
    assert resp.json()["status"] == "ok"


def test_ai_reset_client(client):
    with patch("careerpilot.routers.ai.reset_client") as reset:
        resp = client.post("/api/ai/reset-client")
    assert resp.status_code == 200
    reset.assert_called_once_with()
