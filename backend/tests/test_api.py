import json
import uuid
import httpx
import pytest
import pytest_asyncio
from ainotes.config import settings
from ainotes.main import app, get_summarizer
from ainotes.summarization import FALLBACK_SUMMARY, SummaryConfig, summarize

BASE_URL = "http://testserver"

SUMMARY_CALLS = []


async def fake_summarizer(content: str):
    SUMMARY_CALLS.append(content)
    if not content.strip():
        return [FALLBACK_SUMMARY]
    return [f"Summary of {len(content.split())} words"]


@pytest.fixture(autouse=True)
def override_summarizer():
    SUMMARY_CALLS.clear()
    app.dependency_overrides[get_summarizer] = lambda: fake_summarizer
    yield
    app.dependency_overrides.pop(get_summarizer, None)


@pytest_asyncio.fixture
async def client():
    """Async client talking to the app in-process"""
    async with httpx.AsyncClient(transport=httpx.ASGITransport(app=app), base_url=BASE_URL) as c:
        yield c


async def register(client, name="Test User"):
    email = f"{uuid.uuid4().hex[:10]}@example.com"
    r = await client.post("/api/auth/register", json={"name": name, "email": email, "password": "hunter22"})
    assert r.status_code == 201
    body = r.json()
    return {"Authorization": f"Bearer {body['token']}"}, body["user"], email


class TestHealthEndpoints:
    """Basic health and info endpoints"""

    @pytest.mark.asyncio
    async def test_healthz(self, client):
        response = await client.get("/healthz")
        assert response.status_code == 200
        data = response.json()
        assert data["status"] == "ok"
        assert data["summary_model"] == "bart-large-cnn"
        assert "version" in data

    @pytest.mark.asyncio
    async def test_metrics_endpoint(self, client):
        response = await client.get("/metrics")
        assert response.status_code == 200
        assert "text/plain" in response.headers["content-type"]


class TestAuthEndpoints:
    """Registration and login"""

    @pytest.mark.asyncio
    async def test_register_then_login(self, client):
        _, user, email = await register(client, name="Ada")
        assert user["name"] == "Ada"
        assert "password_hash" not in user

        r = await client.post("/api/auth/login", json={"email": email.upper(), "password": "hunter22"})
        assert r.status_code == 200
        assert r.json()["user"]["id"] == user["id"]
        assert r.json()["token"]

    @pytest.mark.asyncio
    async def test_duplicate_email_is_conflict(self, client):
        _, _, email = await register(client)
        r = await client.post("/api/auth/register", json={"name": "Other", "email": email, "password": "secret99"})
        assert r.status_code == 409
        assert r.json()["message"] == "User already exists"

    @pytest.mark.asyncio
    async def test_wrong_password(self, client):
        _, _, email = await register(client)
        r = await client.post("/api/auth/login", json={"email": email, "password": "nope-nope"})
        assert r.status_code == 401

    @pytest.mark.asyncio
    async def test_notes_require_token(self, client):
        r = await client.get("/api/notes")
        assert r.status_code == 401
        r = await client.get("/api/notes", headers={"Authorization": "Bearer not.a.token"})
        assert r.status_code == 401


class TestNoteEndpoints:
    """Note CRUD, search and export"""

    @pytest.mark.asyncio
    async def test_create_note_gets_summary(self, client):
        headers, user, _ = await register(client)
        payload = {"title": "Test Note", "content": "This is a test note content.", "tags": ["test", "api"]}
        r = await client.post("/api/notes", json=payload, headers=headers)
        assert r.status_code == 201
        note = r.json()
        assert note["title"] == "Test Note"
        assert note["tags"] == ["test", "api"]
        assert note["user"] == user["id"]
        assert note["summary"] == ["Summary of 6 words"]
        assert SUMMARY_CALLS == ["This is a test note content."]

    @pytest.mark.asyncio
    async def test_empty_title_is_bad_request(self, client):
        headers, _, _ = await register(client)
        r = await client.post("/api/notes", json={"title": "", "content": "x"}, headers=headers)
        assert r.status_code == 400
        assert r.json()["message"] == "Invalid request"
        assert SUMMARY_CALLS == []

    @pytest.mark.asyncio
    async def test_empty_content_still_has_summary(self, client):
        headers, _, _ = await register(client)
        r = await client.post("/api/notes", json={"title": "Blank"}, headers=headers)
        assert r.status_code == 201
        assert r.json()["summary"] == [FALLBACK_SUMMARY]

    @pytest.mark.asyncio
    async def test_list_only_own_notes(self, client):
        alice, _, _ = await register(client, name="Alice")
        bob, _, _ = await register(client, name="Bob")
        await client.post("/api/notes", json={"title": "Alice note", "content": "a b"}, headers=alice)
        await client.post("/api/notes", json={"title": "Bob note", "content": "c d"}, headers=bob)

        r = await client.get("/api/notes", headers=alice)
        assert r.status_code == 200
        assert [n["title"] for n in r.json()] == ["Alice note"]

    @pytest.mark.asyncio
    async def test_update_resummarizes(self, client):
        headers, _, _ = await register(client)
        created = (await client.post("/api/notes", json={"title": "Draft", "content": "one two"}, headers=headers)).json()

        r = await client.put(
            f"/api/notes/{created['id']}",
            json={"title": "Final", "content": "one two three four"},
            headers=headers,
        )
        assert r.status_code == 200
        note = r.json()
        assert note["title"] == "Final"
        assert note["tags"] == []
        assert note["summary"] == ["Summary of 4 words"]
        assert SUMMARY_CALLS[-1] == "one two three four"

    @pytest.mark.asyncio
    async def test_update_without_content_keeps_it(self, client):
        headers, _, _ = await register(client)
        created = (await client.post("/api/notes", json={"title": "T", "content": "keep me"}, headers=headers)).json()
        r = await client.put(f"/api/notes/{created['id']}", json={"tags": ["x"]}, headers=headers)
        assert r.status_code == 200
        assert r.json()["content"] == "keep me"
        assert r.json()["tags"] == ["x"]

    @pytest.mark.asyncio
    async def test_update_other_users_note_is_404(self, client):
        alice, _, _ = await register(client)
        bob, _, _ = await register(client)
        created = (await client.post("/api/notes", json={"title": "Mine", "content": "x"}, headers=alice)).json()
        r = await client.put(f"/api/notes/{created['id']}", json={"title": "Stolen"}, headers=bob)
        assert r.status_code == 404
        assert r.json()["message"] == "Note not found"

    @pytest.mark.asyncio
    async def test_delete_note(self, client):
        headers, _, _ = await register(client)
        created = (await client.post("/api/notes", json={"title": "Gone", "content": "x"}, headers=headers)).json()
        r = await client.delete(f"/api/notes/{created['id']}", headers=headers)
        assert r.status_code == 200
        assert r.json() == {"message": "Note deleted"}
        r = await client.delete(f"/api/notes/{created['id']}", headers=headers)
        assert r.status_code == 404

    @pytest.mark.asyncio
    async def test_search(self, client):
        headers, _, _ = await register(client)
        await client.post("/api/notes", json={"title": "JavaScript basics", "content": "x", "tags": ["web"]}, headers=headers)
        await client.post("/api/notes", json={"title": "Python tips", "content": "y", "tags": ["python"]}, headers=headers)

        r = await client.get("/api/notes/search", params={"q": "javascript"}, headers=headers)
        assert [n["title"] for n in r.json()] == ["JavaScript basics"]

        r = await client.get("/api/notes/search", params={"tag": "python"}, headers=headers)
        assert [n["title"] for n in r.json()] == ["Python tips"]

        r = await client.get("/api/notes/search", headers=headers)
        assert r.json() == []

        r = await client.get("/api/notes/search", params={"q": "   "}, headers=headers)
        assert r.json() == []

    @pytest.mark.asyncio
    async def test_summarize_preview(self, client):
        headers, _, _ = await register(client)
        r = await client.post("/api/notes/summarize", json={"content": "alpha beta gamma"}, headers=headers)
        assert r.status_code == 200
        assert r.json() == {"summary": ["Summary of 3 words"]}

    @pytest.mark.asyncio
    async def test_export_formats(self, client):
        headers, _, _ = await register(client)
        await client.post("/api/notes", json={"title": "Export me", "content": "body text", "tags": ["a", "b"]}, headers=headers)

        r = await client.get("/api/notes/export", params={"format": "markdown"}, headers=headers)
        assert r.status_code == 200
        assert r.text.startswith("# My Notes Export")
        assert "## Export me" in r.text
        assert "**Tags:** a, b" in r.text
        assert "- Summary of 2 words" in r.text

        r = await client.get("/api/notes/export", params={"format": "json"}, headers=headers)
        data = json.loads(r.text)
        assert data["notesCount"] == 1
        assert data["notes"][0]["title"] == "Export me"
        assert data["notes"][0]["summary"] == ["Summary of 2 words"]

        r = await client.get("/api/notes/export", params={"format": "pdf"}, headers=headers)
        assert r.status_code == 400


def unreachable_endpoint(request: httpx.Request) -> httpx.Response:
    raise httpx.ConnectError("connection refused", request=request)


def model_loading(request: httpx.Request) -> httpx.Response:
    return httpx.Response(503, json={"error": "Model facebook/bart-large-cnn is currently loading"})


def summarizer_against(handler):
    """The real pipeline, built from settings, pointed at a faked endpoint"""
    def _dependency():
        config = SummaryConfig.from_settings(settings)

        async def _summarize(content: str):
            async with httpx.AsyncClient(transport=httpx.MockTransport(handler)) as hf:
                return await summarize(content, config, client=hf)

        return _summarize

    return _dependency


class TestSummarizationFailures:
    """A broken summarization endpoint never fails a note save"""

    @pytest.mark.asyncio
    @pytest.mark.parametrize("handler", [unreachable_endpoint, model_loading])
    async def test_create_and_update_fall_back(self, client, handler):
        app.dependency_overrides[get_summarizer] = summarizer_against(handler)
        headers, _, _ = await register(client)

        r = await client.post(
            "/api/notes",
            json={"title": "Offline", "content": "word " * 1200, "tags": ["x"]},
            headers=headers,
        )
        assert r.status_code == 201
        note = r.json()
        assert note["summary"] == [FALLBACK_SUMMARY]

        r = await client.put(f"/api/notes/{note['id']}", json={"content": "edited text"}, headers=headers)
        assert r.status_code == 200
        assert r.json()["content"] == "edited text"
        assert r.json()["summary"] == [FALLBACK_SUMMARY]

    @pytest.mark.asyncio
    async def test_preview_uses_real_pipeline(self, client):
        def handler(request: httpx.Request) -> httpx.Response:
            return httpx.Response(200, json=[{"summary_text": "Alpha was discussed. Beta was decided."}])

        app.dependency_overrides[get_summarizer] = summarizer_against(handler)
        headers, _, _ = await register(client)
        r = await client.post("/api/notes/summarize", json={"content": "alpha beta"}, headers=headers)
        assert r.status_code == 200
        assert r.json() == {"summary": ["Alpha was discussed", "Beta was decided"]}


class TestErrorShape:
    """Every error body carries a message"""

    @pytest.mark.asyncio
    async def test_unknown_route(self, client):
        r = await client.get("/nope")
        assert r.status_code == 404
        assert r.json() == {"message": "Not Found"}

    @pytest.mark.asyncio
    async def test_method_not_allowed(self, client):
        r = await client.patch("/healthz")
        assert r.status_code == 405
        assert r.json() == {"message": "Method Not Allowed"}
