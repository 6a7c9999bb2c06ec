"""Exported file and driver input models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field


class SourceFile(BaseModel):
    """In-memory input file handed to a driver."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    data: bytes = Field(repr=False)
    media_type: str | None = None


class ExportedFile(BaseModel):
    """File produced by a driver, ready to be persisted."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    filename: str
    media_type: str
    data: bytes = Field(repr=False)
