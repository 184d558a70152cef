import time
from datetime import datetime, timedelta

from jose import jwt

from edubox.auth import decode_token
from edubox.models import Assignment, Course, StoredFile, User, UserPlan
from edubox.services.entitlements import (
    AI_CONTENT_GENERATION,
    COURSE_ANALYTICS,
    UNLIMITED_STORAGE,
    evaluate_access,
    resolve_plan,
)
from tests.conftest import TEST_USER_ID


def _token(secret="test-secret", **claims):
    payload = {"sub": TEST_USER_ID, "exp": int(time.time()) + 300, "email": "student@example.edu"}
    payload.update(claims)
    return jwt.encode(payload, secret, algorithm="HS256")


def test_decode_token_accepts_signed_session():
    payload = decode_token(_token(name="Sam Student"))
    assert payload.sub == TEST_USER_ID
    assert payload.email == "student@example.edu"
    assert payload.name == "Sam Student"


def test_decode_token_rejects_bad_tokens():
    assert decode_token(_token(secret="wrong-secret")) is None
    assert decode_token(_token(exp=int(time.time()) - 10)) is None
    assert decode_token("not-a-jwt") is None
    no_sub = jwt.encode({"exp": int(time.time()) + 300}, "test-secret", algorithm="HS256")
    assert decode_token(no_sub) is None


def test_prefetch_user_context_with_bearer_token(client, seed):
    now = datetime.utcnow()
    weekday = now.strftime("%A")
    seed(
        User(clerk_id=TEST_USER_ID, full_name="Sam Student", major="Biology", gpa=3.6),
        Course(
            user_id=TEST_USER_ID, course_code="BIO101", course_name="Intro Biology",
            schedule=[{"dayOfWeek": weekday, "startTime": "09:00", "endTime": "10:00"}],
        ),
        Assignment(user_id=TEST_USER_ID, title="Lab report", due_date=now + timedelta(days=2)),
        Assignment(user_id=TEST_USER_ID, title="Late quiz", due_date=now - timedelta(days=2)),
        Assignment(user_id="user_2", title="Not mine", due_date=now + timedelta(days=1)),
        StoredFile(user_id=TEST_USER_ID, file_name="notes.pdf", url="https://files.example/notes.pdf"),
        StoredFile(user_id=TEST_USER_ID, file_name="old.pdf", is_archived=True),
    )

    response = client.post(
        "/api/prefetch/user-context",
        json={"userId": "user_2"},
        headers={"Authorization": f"Bearer {_token()}"},
    )

    assert response.status_code == 200
    data = response.json()["data"]
    assert data["user"]["name"] == "Sam Student"
    assert [a["title"] for a in data["assignments"]["upcoming"]] == ["Lab report"]
    assert [a["title"] for a in data["assignments"]["overdue"]] == ["Late quiz"]
    assert data["todaySchedule"][0]["course"] == "BIO101"
    assert [f["name"] for f in data["recentFiles"]] == ["notes.pdf"]
    assert data["statistics"]["totalCourses"] == 1
    assert data["performance"]["currentGPA"] == 3.6


def test_prefetch_requires_sign_in(client):
    assert client.post("/api/prefetch/user-context").status_code == 401
    assert client.post(
        "/api/prefetch/user-context", headers={"Authorization": "Bearer garbage"},
    ).status_code == 401


def test_prefetch_get_is_400(client):
    assert client.get("/api/prefetch/user-context").status_code == 400


def test_entitlements_route(client, signed_in, seed):
    seed(User(clerk_id=TEST_USER_ID, full_name="Sam", plan=UserPlan.STARTER.value))

    response = client.get(f"/api/entitlements/{COURSE_ANALYTICS}")

    assert response.status_code == 200
    assert response.json() == {
        "feature": COURSE_ANALYTICS,
        "plan": "STARTER",
        "hasAccess": True,
        "usage": 0,
        "limit": 0,
        "hasReachedLimit": False,
    }


def test_entitlements_default_to_free_plan(client, signed_in):
    body = client.get(f"/api/entitlements/{AI_CONTENT_GENERATION}").json()
    assert body["plan"] == "FREE"
    assert body["limit"] == 25
    assert body["hasAccess"] is True


def test_evaluate_access():
    free = resolve_plan(None)
    assert evaluate_access(free, AI_CONTENT_GENERATION, 24).has_access is True
    reached = evaluate_access(free, AI_CONTENT_GENERATION, 25)
    assert reached.has_access is False
    assert reached.has_reached_limit is True
    assert evaluate_access(free, UNLIMITED_STORAGE, 0).has_access is False

    pro = resolve_plan("PRO")
    unlimited = evaluate_access(pro, AI_CONTENT_GENERATION, 10_000)
    assert unlimited.has_access is True
    assert unlimited.has_reached_limit is False
    assert resolve_plan("ENTERPRISE") is free


def test_cors_preflight_on_api_routes(client):
    response = client.options("/api/ai-content/generate")
    assert response.status_code == 200
    assert response.headers["access-control-allow-origin"] == "*"
