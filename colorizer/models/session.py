from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, Field

from .request_state import ErrorKind, RequestState


class SubmitOutcome(BaseModel):
    """What a submission attempt produced.

    ``message`` is the one-shot precondition message; it sits beside the
    request state and never replaces it.
    """

    accepted: bool
    error_kind: ErrorKind | None = None
    message: str | None = None
    state: RequestState


class PromptUpdate(BaseModel):
    prompt: str = Field(..., description="Free-text color description.")


class SessionView(BaseModel):
    id: str
    filename: str | None = None
    preview_url: str | None = None
    prompt: str = ""
    state: RequestState
    message: str | None = None
    display: Literal["empty", "loading", "result", "error"]
    can_submit: bool
