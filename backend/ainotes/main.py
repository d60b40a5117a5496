from typing import Awaitable, Callable, List

from fastapi import Depends, FastAPI, HTTPException, Query
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse

from .auth import check_auth_secret, current_user, issue_token
from .config import settings
from .errors import install_error_handlers
from .observability.metrics import init_metrics
from .observability.logger import setup_json_logging
from .models import (
    AuthResponse,
    ExportFormat,
    LoginRequest,
    MessageResponse,
    Note,
    NoteCreate,
    NoteUpdate,
    RegisterRequest,
    SummarizeRequest,
    SummarizeResponse,
    User,
    UserOut,
)
from .storage.export import to_json, to_markdown
from .storage.notes import store
from .storage.users import users
from .summarization import SummaryConfig, summarize
import logging

# Configure logging early
setup_json_logging(settings.LOG_LEVEL)
logger = logging.getLogger(__name__)
check_auth_secret(settings)

VERSION = "0.1.0"

app = FastAPI(
    title="AI Notes",
    version=VERSION,
    docs_url="/docs",
    redoc_url="/redoc",
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.CORS_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

install_error_handlers(app)

# Expose /metrics (must be before startup)
init_metrics(app)

Summarizer = Callable[[str], Awaitable[List[str]]]


def get_summarizer() -> Summarizer:
    config = SummaryConfig.from_settings(settings)

    async def _summarize(content: str) -> List[str]:
        return await summarize(content, config)

    return _summarize


@app.get("/healthz")
def healthz():
    return {
        "status": "ok",
        "service": "ai-notes-backend",
        "version": VERSION,
        "summary_model": SummaryConfig.from_settings(settings).model,
    }


@app.get("/")
def root():
    return {"message": "AI Notes backend is running. See /healthz and /docs."}


# ---------- Auth ----------
def _auth_response(user: User) -> AuthResponse:
    return AuthResponse(token=issue_token(user.id), user=UserOut(id=user.id, name=user.name, email=user.email))


@app.post("/api/auth/register", response_model=AuthResponse, status_code=201)
def register(req: RegisterRequest):
    user = users.create(name=req.name, email=req.email, password=req.password)
    if user is None:
        raise HTTPException(status_code=409, detail="User already exists")
    logger.info("user registered", extra={"user_id": user.id})
    return _auth_response(user)


@app.post("/api/auth/login", response_model=AuthResponse)
def login(req: LoginRequest):
    user = users.authenticate(req.email, req.password)
    if user is None:
        raise HTTPException(status_code=401, detail="Invalid credentials")
    return _auth_response(user)


# ---------- Notes ----------
@app.post("/api/notes/summarize", response_model=SummarizeResponse)
async def summarize_preview(
    req: SummarizeRequest,
    user: User = Depends(current_user),
    summarizer: Summarizer = Depends(get_summarizer),
):
    """Summarize arbitrary text without saving a note."""
    return SummarizeResponse(summary=await summarizer(req.content))


@app.post("/api/notes", response_model=Note, status_code=201)
async def create_note(
    req: NoteCreate,
    user: User = Depends(current_user),
    summarizer: Summarizer = Depends(get_summarizer),
):
    summary = await summarizer(req.content)
    note = store.create(user=user.id, title=req.title, content=req.content, tags=req.tags, summary=summary)
    logger.info("note created", extra={"note_id": note.id, "bullets": len(summary)})
    return note


@app.get("/api/notes", response_model=List[Note])
def list_notes(user: User = Depends(current_user)):
    return store.list_for_user(user.id)


@app.get("/api/notes/search", response_model=List[Note])
def search_notes(
    q: str | None = None,
    tag: str | None = None,
    user: User = Depends(current_user),
):
    return store.search(user.id, q=q, tag=tag)


@app.get("/api/notes/export")
def export_notes(
    format: ExportFormat = Query("markdown"),
    user: User = Depends(current_user),
):
    notes = store.list_for_user(user.id)
    if format == "json":
        return PlainTextResponse(to_json(notes), media_type="application/json")
    return PlainTextResponse(to_markdown(notes), media_type="text/markdown")


@app.put("/api/notes/{note_id}", response_model=Note)
async def update_note(
    note_id: str,
    req: NoteUpdate,
    user: User = Depends(current_user),
    summarizer: Summarizer = Depends(get_summarizer),
):
    note = store.get(note_id, user=user.id)
    if note is None:
        raise HTTPException(status_code=404, detail="Note not found")
    content = req.content if req.content is not None else note.content
    summary = await summarizer(content)
    updated = store.update(
        note_id,
        user=user.id,
        title=req.title,
        content=req.content,
        tags=req.tags,
        summary=summary,
    )
    if updated is None:
        # deleted while the summary was being fetched
        raise HTTPException(status_code=404, detail="Note not found")
    return updated


@app.delete("/api/notes/{note_id}", response_model=MessageResponse)
def delete_note(note_id: str, user: User = Depends(current_user)):
    if store.delete(note_id, user=user.id) is None:
        raise HTTPException(status_code=404, detail="Note not found")
    return MessageResponse(message="Note deleted")
