"""Text layout models."""

from __future__ import annotations

from pydantic import BaseModel, ConfigDict, Field

from pdfdesk.typing.protocol import MeasuredFont  # noqa: TC001


class GlyphRun(BaseModel):
    """Substring laid out under a single font, measured as one unit."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    start: int = Field(ge=0, description="Code point offset in the paragraph.")
    text: str
    font: MeasuredFont
    x: float = Field(description="Advance from the start of the line.")
    width: float


class WrappedLine(BaseModel):
    """Laid-out text on one baseline."""

    model_config = ConfigDict(extra="forbid", frozen=True, arbitrary_types_allowed=True)

    runs: tuple[GlyphRun, ...]
    y: float
    advance: float = Field(description="Vertical cursor after the line was emitted.")

    @property
    def text(self) -> str:
        """Return the line text across all runs."""
        return "".join(run.text for run in self.runs)

    @property
    def width(self) -> float:
        """Return the measured line width."""
        return sum(run.width for run in self.runs)
