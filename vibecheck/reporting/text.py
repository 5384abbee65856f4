# Plain text report: severity sections framed with dashed headers, suitable for redirecting to a file.

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from vibecheck.findings.models import Finding
from vibecheck.reporting.summary import FOOTER, SEVERITY_HEADINGS, group_by_severity, resolve_timestamp, split_results


def _section(title: str, lines: list[str]) -> None:
    lines.append(title)
    lines.append("-" * len(title))


def render_text(
    findings: Sequence[Finding],
    show_passed: bool = True,
    generated_at: Optional[datetime] = None,
) -> str:
    failed, passed = split_results(findings)
    stamp = resolve_timestamp(generated_at)

    lines = ["VIBECHECK SCAN RESULTS", "=" * len("VIBECHECK SCAN RESULTS"), ""]
    lines.append(f"Scan completed on {stamp.isoformat()}")
    lines.append(f"Total checks: {len(findings)}")
    lines.append(f"Passed: {len(passed)}")
    lines.append(f"Failed: {len(failed)}")
    lines.append("")

    for severity, group in group_by_severity(findings):
        if not group:
            continue
        _section(f"{SEVERITY_HEADINGS[severity].upper()} ({len(group)})", lines)
        for f in group:
            where = f" ({f.display_location})" if f.location else ""
            lines.append(f"x {f.name}{where}")
            if f.details:
                lines.append(f"  {f.details}")
            if f.location and f.location.code:
                lines.append("  Code:")
                lines.append(f"  {f.location.code}")
            if f.recommendation:
                lines.append(f"  Recommendation: {f.recommendation}")
            lines.append("")

    if show_passed and passed:
        _section(f"PASSED CHECKS ({len(passed)})", lines)
        for f in passed:
            lines.append(f"+ {f.name}")
            if f.details:
                lines.append(f"  {f.details}")
            lines.append("")

    lines.append("")
    lines.append(FOOTER)
    return "\n".join(lines) + "\n"
