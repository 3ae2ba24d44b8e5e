"""Error taxonomy for readtime-agent.

Every failure is reported per resource as data; the pipeline never raises
these to the caller. Each error carries a ``stage`` tag so reporting code
can group them.
"""
from __future__ import annotations

from typing import Optional


class ReaderError(Exception):
    """Base class for per-resource failures."""

    stage = "reader"

    def __init__(self, message: str, raw_url: Optional[str] = None) -> None:
        super().__init__(message)
        self.message = message
        self.raw_url = raw_url

    def __str__(self) -> str:
        label = self.stage.capitalize()
        if self.raw_url:
            return f"{label} Error: {self.message} ({self.raw_url})"
        return f"{label} Error: {self.message}"


class ValidationError(ReaderError):
    """Malformed URL or URL that breaks the rule for its resource kind."""

    stage = "validation"


class ExtractionError(ReaderError):
    """Network, filesystem or document parsing failure."""

    stage = "extraction"


class AnalysisError(ReaderError):
    """Unsupported kind or degenerate text (e.g. zero sentences)."""

    stage = "analysis"
