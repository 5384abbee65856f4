# Pydantic data models for scan findings: Finding, Location, Severity.

from __future__ import annotations

from enum import Enum
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field


class Severity(str, Enum):
    """Fixed four-level severity taxonomy. A clean check is ``passed=True``, not a level."""

    CRITICAL = "critical"
    HIGH = "high"
    MEDIUM = "medium"
    LOW = "low"


# Display / grouping order, highest first.
SEVERITY_ORDER: tuple[Severity, ...] = (
    Severity.CRITICAL,
    Severity.HIGH,
    Severity.MEDIUM,
    Severity.LOW,
)


def severity_rank(severity: Severity) -> int:
    """Return 0 for critical up to 3 for low (lower sorts first)."""
    return SEVERITY_ORDER.index(Severity(severity))


class Location(BaseModel):
    """Where in the scanned tree a finding was reported."""

    file: str = Field(..., description="Path relative to the scan root, POSIX separators")
    line: int = Field(..., ge=1, description="1-based line number")
    code: str = Field("", description="Trimmed source line")
    column: Optional[int] = Field(None, ge=1, description="1-based column of the matched value")

    model_config = ConfigDict(frozen=True)


class Finding(BaseModel):
    """
    One reported fact about the scanned tree: a violation (``passed=False``)
    or the single "ran and found nothing" result of a checker (``passed=True``).
    """

    id: str
    name: str
    description: str
    severity: Severity
    passed: bool
    details: str = ""
    location: Optional[Location] = None
    recommendation: Optional[str] = None

    model_config = ConfigDict(frozen=True, use_enum_values=False)

    @property
    def display_location(self) -> str:
        """``file:line`` when a location is attached, else an empty string."""
        if self.location is None:
            return ""
        return f"{self.location.file}:{self.location.line}"

    def to_dict(self) -> dict:
        """JSON-ready dict; absent optional fields are omitted, not zero-filled."""
        return self.model_dump(mode="json", exclude_none=True)
