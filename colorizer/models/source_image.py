from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SourceImage(BaseModel):
    """A user-selected image, held in memory for the lifetime of a session."""

    model_config = ConfigDict(frozen=True)

    filename: str
    content_type: str
    data: bytes = Field(..., repr=False)

    @property
    def size(self) -> int:
        return len(self.data)


class PreviewHandle(BaseModel):
    model_config = ConfigDict(frozen=True)

    token: str
    url: str  # e.g. "/previews/3f1c..."
