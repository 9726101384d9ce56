from .request_state import (
    GENERIC_FAILURE_MESSAGE,
    ErrorKind,
    Failed,
    Idle,
    Loading,
    RequestState,
    Succeeded,
    display_for,
)
from .session import PromptUpdate, SessionView, SubmitOutcome
from .source_image import PreviewHandle, SourceImage

__all__ = [
    "GENERIC_FAILURE_MESSAGE",
    "ErrorKind",
    "Failed",
    "Idle",
    "Loading",
    "RequestState",
    "Succeeded",
    "display_for",
    "PromptUpdate",
    "SessionView",
    "SubmitOutcome",
    "PreviewHandle",
    "SourceImage",
]
