# Shared grouping for every report format: failed findings bucketed by severity, in display order.

from __future__ import annotations

from datetime import datetime, timezone
from typing import Optional, Sequence

from vibecheck.findings.models import SEVERITY_ORDER, Finding, Severity

SEVERITY_HEADINGS: dict[Severity, str] = {
    Severity.CRITICAL: "Critical Issues",
    Severity.HIGH: "High Severity Issues",
    Severity.MEDIUM: "Medium Severity Issues",
    Severity.LOW: "Low Severity Issues",
}

FOOTER = "Generated by VibeCheck"


def split_results(findings: Sequence[Finding]) -> tuple[list[Finding], list[Finding]]:
    """Return (failed, passed), each in input order."""
    failed = [f for f in findings if not f.passed]
    passed = [f for f in findings if f.passed]
    return failed, passed


def group_by_severity(findings: Sequence[Finding]) -> list[tuple[Severity, list[Finding]]]:
    """Failed findings per severity, highest first; empty buckets are kept."""
    failed, _ = split_results(findings)
    return [(sev, [f for f in failed if f.severity == sev]) for sev in SEVERITY_ORDER]


def resolve_timestamp(generated_at: Optional[datetime]) -> datetime:
    return generated_at if generated_at is not None else datetime.now(timezone.utc)
