"""FastAPI application — Eisenhower board + ruleset/compendium builders.

Architecture layers:
  1. Settings      (settings.py)   — centralized configuration
  2. Text builders (outline.py, chunker.py, text_utils.py) — pure transforms
  3. Exporters     (exporters.py)  — Markdown / JSON / JSON Lines output
  4. Storage       (storage.py)    — key-value persistence (memory or Redis)
  5. Host state    (tasks.py, workspace.py) — task board + stored raw text
  6. API           (this file)

The text builders never touch storage; every endpoint below reads or
writes the store and hands raw text to them.
"""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager
from typing import Literal, Optional

from fastapi import Depends, FastAPI, HTTPException
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import Response
from pydantic import BaseModel

from chunker import InvalidChunkSizeError, segment
from exporters import NothingToExportError, UnsupportedFormatError
from outline import structure
from settings import settings
from storage import KeyValueStore, build_store
from tasks import QUADRANTS, TaskBoard, TaskNotFoundError
from workspace import Workspace

_log_level = logging.DEBUG if settings.DEBUG_MODE else getattr(logging, settings.LOG_LEVEL.upper(), logging.INFO)
logging.basicConfig(level=_log_level)
logger = logging.getLogger(__name__)

# ---------------------------------------------------------------------------
#  Application lifespan
# ---------------------------------------------------------------------------
_store: Optional[KeyValueStore] = None


@asynccontextmanager
async def lifespan(app: FastAPI):  # noqa: D401
    """Open the key-value store; yield to serve requests."""
    global _store
    _store = build_store()
    logger.info(f"Store ready ({type(_store).__name__})")
    yield


def get_store() -> KeyValueStore:
    global _store
    if _store is None:
        _store = build_store()
    return _store


def get_board(store: KeyValueStore = Depends(get_store)) -> TaskBoard:
    return TaskBoard(store)


def get_workspace(store: KeyValueStore = Depends(get_store)) -> Workspace:
    try:
        return Workspace(store)
    except InvalidChunkSizeError as exc:
        logger.error(f"Invalid KCS_MAX_CHUNK_CHARS: {exc}")
        raise HTTPException(500, f"Invalid KCS_MAX_CHUNK_CHARS setting: {exc}")


# ---------------------------------------------------------------------------
#  App
# ---------------------------------------------------------------------------
app = FastAPI(title="Focus Board", version="1.0.0", lifespan=lifespan)
_raw_origins = [o.strip() for o in settings.ALLOWED_ORIGINS.split(",") if o.strip()]
_allowed_origins = _raw_origins if _raw_origins else ["*"]
app.add_middleware(
    CORSMiddleware,
    allow_origins=_allowed_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# ---------------------------------------------------------------------------
#  Request / response models
# ---------------------------------------------------------------------------

class OutlineRequest(BaseModel):
    text: str = ""


class ChunkRequest(BaseModel):
    text: str = ""
    max_chunk_chars: int = settings.KCS_MAX_CHUNK_CHARS


class RulesetUpdate(BaseModel):
    text: str


class CompendiumUpdate(BaseModel):
    text: Optional[str] = None
    format: Optional[Literal["json", "jsonl"]] = None


class TaskRequest(BaseModel):
    title: str
    notes: Optional[str] = None
    urgency: Literal["urgent", "not-urgent"] = "urgent"
    importance: Literal["important", "not-important"] = "important"


class PromoteRequest(BaseModel):
    axis: Literal["importance", "urgency"]


def _attachment(filename: str, content: str, media_type: str) -> Response:
    return Response(
        content=content.encode("utf-8"),
        media_type=f"{media_type}; charset=utf-8",
        headers={"Content-Disposition": f'attachment; filename="{filename}"'},
    )


_MEDIA_TYPES = {
    ".md": "text/markdown",
    ".json": "application/json",
    ".jsonl": "application/x-ndjson",
}


def _media_type(filename: str) -> str:
    return _MEDIA_TYPES["." + filename.rsplit(".", 1)[-1]]


# ═══════════════════════════════════════════════════════════════════════════
#  STATELESS BUILDERS
# ═══════════════════════════════════════════════════════════════════════════

@app.post("/outline")
def build_outline(req: OutlineRequest):
    return {"outline": structure(req.text)}


@app.post("/chunks")
def build_chunks(req: ChunkRequest):
    try:
        chunks = segment(req.text, req.max_chunk_chars)
    except InvalidChunkSizeError as exc:
        raise HTTPException(400, str(exc))
    return {"chunks": [c.to_dict() for c in chunks], "count": len(chunks)}


# ═══════════════════════════════════════════════════════════════════════════
#  INSTRUCTIONAL RULESET
# ═══════════════════════════════════════════════════════════════════════════

def _ruleset_view(ws: Workspace) -> dict:
    return {"text": ws.ruleset_text, "outline": ws.outline()}


@app.get("/ruleset")
def get_ruleset(ws: Workspace = Depends(get_workspace)):
    return _ruleset_view(ws)


@app.put("/ruleset")
def update_ruleset(req: RulesetUpdate, ws: Workspace = Depends(get_workspace)):
    ws.ruleset_text = req.text
    return _ruleset_view(ws)


@app.get("/ruleset/export")
def export_ruleset(ws: Workspace = Depends(get_workspace)):
    """Download the outline as a Markdown file."""
    try:
        filename, content = ws.export_outline()
    except NothingToExportError as exc:
        raise HTTPException(404, str(exc))
    return _attachment(filename, content, _media_type(filename))


# ═══════════════════════════════════════════════════════════════════════════
#  KNOWLEDGE COMPENDIUM
# ═══════════════════════════════════════════════════════════════════════════

def _compendium_view(ws: Workspace) -> dict:
    chunks = ws.chunks()
    return {
        "text": ws.compendium_text,
        "format": ws.export_format,
        "max_chunk_chars": ws.max_chunk_chars,
        "chunks": [c.to_dict() for c in chunks],
        "count": len(chunks),
    }


@app.get("/compendium")
def get_compendium(ws: Workspace = Depends(get_workspace)):
    return _compendium_view(ws)


@app.put("/compendium")
def update_compendium(req: CompendiumUpdate, ws: Workspace = Depends(get_workspace)):
    if req.text is not None:
        ws.compendium_text = req.text
    if req.format is not None:
        ws.export_format = req.format
    return _compendium_view(ws)


@app.get("/compendium/export")
def export_compendium(format: Optional[str] = None, ws: Workspace = Depends(get_workspace)):
    """Download the chunks as JSON or JSON Lines (stored format by default)."""
    try:
        filename, content = ws.export_chunks(format)
    except UnsupportedFormatError as exc:
        raise HTTPException(400, str(exc))
    except NothingToExportError as exc:
        raise HTTPException(404, str(exc))
    return _attachment(filename, content, _media_type(filename))


# ═══════════════════════════════════════════════════════════════════════════
#  TASK BOARD
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/tasks")
def list_tasks(board: TaskBoard = Depends(get_board)):
    tasks = board.list()
    return {"tasks": [t.to_dict() for t in tasks], "count": len(tasks)}


@app.post("/tasks", status_code=201)
def create_task(req: TaskRequest, board: TaskBoard = Depends(get_board)):
    try:
        task = board.add(req.title, notes=req.notes, urgency=req.urgency, importance=req.importance)
    except ValueError as exc:
        raise HTTPException(400, str(exc))
    return {**task.to_dict(), "quadrant": task.quadrant}


@app.get("/tasks/quadrants")
def get_quadrants(board: TaskBoard = Depends(get_board)):
    grouped = board.quadrants()
    return {
        key: {**meta, "tasks": [t.to_dict() for t in grouped[key]]}
        for key, meta in QUADRANTS.items()
    }


@app.post("/tasks/{task_id}/toggle")
def toggle_task(task_id: str, board: TaskBoard = Depends(get_board)):
    try:
        task = board.toggle_complete(task_id)
    except TaskNotFoundError:
        raise HTTPException(404, "Task not found")
    return task.to_dict()


@app.post("/tasks/{task_id}/promote")
def promote_task(task_id: str, req: PromoteRequest, board: TaskBoard = Depends(get_board)):
    try:
        task = board.promote(task_id, req.axis)
    except TaskNotFoundError:
        raise HTTPException(404, "Task not found")
    return {**task.to_dict(), "quadrant": task.quadrant}


@app.delete("/tasks/{task_id}")
def delete_task(task_id: str, board: TaskBoard = Depends(get_board)):
    try:
        board.remove(task_id)
    except TaskNotFoundError:
        raise HTTPException(404, "Task not found")
    return {"deleted": True}


# ═══════════════════════════════════════════════════════════════════════════
#  HEALTH CHECK
# ═══════════════════════════════════════════════════════════════════════════

@app.get("/health")
def health_check(store: KeyValueStore = Depends(get_store)):
    return {
        "status": "ok",
        "store": type(store).__name__,
        "max_chunk_chars": settings.KCS_MAX_CHUNK_CHARS,
        "version": app.version,
    }
