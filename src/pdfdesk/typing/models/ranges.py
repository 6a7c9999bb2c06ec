"""Page-range models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict


class PageInterval(BaseModel):
    """Closed 1-based interval exactly as typed; `hi < lo` is allowed here."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    lo: int
    hi: int


class RangeSpec(BaseModel):
    """Parsed, unclamped page intervals in input order."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    intervals: tuple[PageInterval, ...] = ()

    def __bool__(self) -> bool:
        """Return whether at least one interval survived parsing."""
        return bool(self.intervals)

    def __len__(self) -> int:
        """Return the number of parsed intervals."""
        return len(self.intervals)
