"""Result-area state of a colorization session.

Exactly one variant is active at a time and it alone decides what the
result area shows:

    Idle       -> empty-state placeholder
    Loading    -> progress indicator
    Succeeded  -> the colorized image
    Failed     -> the error message
"""
from __future__ import annotations

from enum import Enum
from typing import Annotated, Literal, Union

from pydantic import BaseModel, ConfigDict, Field

GENERIC_FAILURE_MESSAGE = "Failed to colorize image. Please try again."


class ErrorKind(str, Enum):
    MISSING_IMAGE = "missing_image"
    MISSING_PROMPT = "missing_prompt"
    REMOTE_FAILURE = "remote_failure"

    @property
    def message(self) -> str:
        return _ERROR_MESSAGES[self]


_ERROR_MESSAGES = {
    ErrorKind.MISSING_IMAGE: "Please upload an image first.",
    ErrorKind.MISSING_PROMPT: "Please provide a coloring prompt.",
    ErrorKind.REMOTE_FAILURE: GENERIC_FAILURE_MESSAGE,
}


class Idle(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["idle"] = "idle"


class Loading(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["loading"] = "loading"


class Succeeded(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["succeeded"] = "succeeded"
    result: str  # data URI


class Failed(BaseModel):
    model_config = ConfigDict(frozen=True)

    status: Literal["failed"] = "failed"
    error: str


RequestState = Annotated[Union[Idle, Loading, Succeeded, Failed], Field(discriminator="status")]


def display_for(state: Idle | Loading | Succeeded | Failed) -> Literal["empty", "loading", "result", "error"]:
    """Map a request state to the single thing the result area renders."""

    if isinstance(state, Loading):
        return "loading"
    if isinstance(state, Failed):
        return "error"
    if isinstance(state, Succeeded):
        return "result"
    return "empty"
