"""HTTP surface for the colorization workflow.

A client creates a session, uploads an outline image, sets the prompt and
triggers colorization. The colorize call answers immediately with the
``loading`` state; the provider call runs as a background task and the
client polls ``GET /sessions/{id}`` for the outcome.
"""
from __future__ import annotations

import logging

from fastapi import APIRouter, BackgroundTasks, Depends, File, HTTPException, Response, UploadFile

from colorizer.config import get_settings
from colorizer.models import PromptUpdate, SessionView, SourceImage, SubmitOutcome, display_for
from colorizer.services.previews import preview_registry
from colorizer.services.sessions import SessionNotFound, SessionStore, session_store
from colorizer.services.workflow import ColorizationController, ColorizationInProgress

router = APIRouter()
logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# Helpers
# ---------------------------------------------------------------------------


def get_store() -> SessionStore:
    return session_store


def _get_controller(store: SessionStore, session_id: str) -> ColorizationController:
    try:
        return store.get(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc


def _view(session_id: str, controller: ColorizationController) -> SessionView:
    session = controller.session
    return SessionView(
        id=session_id,
        filename=session.source.filename if session.source else None,
        preview_url=session.preview.url if session.preview else None,
        prompt=session.prompt,
        state=session.state,
        message=session.message,
        display=display_for(session.state),
        can_submit=controller.can_submit,
    )


# ---------------------------------------------------------------------------
# Sessions
# ---------------------------------------------------------------------------


@router.post("/sessions", status_code=201, response_model=SessionView)
async def create_session(store: SessionStore = Depends(get_store)):
    session_id, controller = store.create()
    return _view(session_id, controller)


@router.get("/sessions/{session_id}", response_model=SessionView)
async def get_session(session_id: str, store: SessionStore = Depends(get_store)):
    return _view(session_id, _get_controller(store, session_id))


@router.delete("/sessions/{session_id}", status_code=204)
async def delete_session(session_id: str, store: SessionStore = Depends(get_store)):
    try:
        store.delete(session_id)
    except SessionNotFound as exc:
        raise HTTPException(status_code=404, detail="Session not found") from exc
    return Response(status_code=204)


@router.put("/sessions/{session_id}/image", response_model=SessionView)
async def upload_image(
    session_id: str,
    file: UploadFile = File(...),
    store: SessionStore = Depends(get_store),
):
    controller = _get_controller(store, session_id)
    content_type = (file.content_type or "").lower()
    if content_type not in get_settings().accepted_content_types:
        raise HTTPException(status_code=415, detail=f"Unsupported image type: {content_type or 'unknown'}")

    data = await file.read()
    controller.select_image(
        SourceImage(filename=file.filename or "upload", content_type=content_type, data=data)
    )
    return _view(session_id, controller)


@router.put("/sessions/{session_id}/prompt", response_model=SessionView)
async def update_prompt(session_id: str, body: PromptUpdate, store: SessionStore = Depends(get_store)):
    controller = _get_controller(store, session_id)
    controller.set_prompt(body.prompt)
    return _view(session_id, controller)


@router.post("/sessions/{session_id}/colorize", response_model=SessionView)
async def colorize(
    session_id: str,
    response: Response,
    background_tasks: BackgroundTasks,
    store: SessionStore = Depends(get_store),
):
    controller = _get_controller(store, session_id)
    try:
        ticket = controller.begin_colorization()
    except ColorizationInProgress as exc:
        raise HTTPException(status_code=409, detail=str(exc)) from exc

    if not isinstance(ticket, SubmitOutcome):
        response.status_code = 202
        background_tasks.add_task(controller.run_colorization, ticket)
    return _view(session_id, controller)


# ---------------------------------------------------------------------------
# Previews
# ---------------------------------------------------------------------------


@router.get("/previews/{token}")
async def get_preview(token: str):
    image = preview_registry.resolve(token)
    if image is None:
        raise HTTPException(status_code=404, detail="Preview not found")
    return Response(content=image.data, media_type=image.content_type)
