# Markdown report: headed severity sections, fenced code snippets and bold recommendations.

from __future__ import annotations

from datetime import datetime
from typing import Optional, Sequence

from vibecheck.findings.models import Finding
from vibecheck.reporting.summary import FOOTER, SEVERITY_HEADINGS, group_by_severity, resolve_timestamp, split_results


def render_markdown(
    findings: Sequence[Finding],
    show_passed: bool = True,
    generated_at: Optional[datetime] = None,
) -> str:
    failed, passed = split_results(findings)
    stamp = resolve_timestamp(generated_at)

    lines = ["# VibeCheck Scan Results", "", "## Summary", ""]
    lines.append(f"- **Scan completed on:** {stamp.isoformat()}")
    lines.append(f"- **Total checks:** {len(findings)}")
    lines.append(f"- **Passed:** {len(passed)}")
    lines.append(f"- **Failed:** {len(failed)}")
    lines.append("")

    for severity, group in group_by_severity(findings):
        if not group:
            continue
        lines.append(f"## {SEVERITY_HEADINGS[severity]} ({len(group)})")
        lines.append("")
        for f in group:
            where = f" (`{f.display_location}`)" if f.location else ""
            lines.append(f"### {f.name}{where}")
            lines.append("")
            if f.details:
                lines.append(f.details)
                lines.append("")
            if f.location and f.location.code:
                lines.append("```")
                lines.append(f.location.code)
                lines.append("```")
                lines.append("")
            if f.recommendation:
                lines.append(f"**Recommendation:** {f.recommendation}")
                lines.append("")

    if show_passed and passed:
        lines.append(f"## Passed Checks ({len(passed)})")
        lines.append("")
        for f in passed:
            lines.append(f"### {f.name}")
            lines.append("")
            if f.details:
                lines.append(f.details)
                lines.append("")

    lines.append("---")
    lines.append(f"*{FOOTER}*")
    return "\n".join(lines) + "\n"
