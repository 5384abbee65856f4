# JSON report: summary counts plus every finding, ungrouped and lossless.

from __future__ import annotations

import json
from datetime import datetime
from typing import Optional, Sequence

from vibecheck.findings.models import Finding
from vibecheck.reporting.summary import resolve_timestamp, split_results


def build_json_report(findings: Sequence[Finding], generated_at: Optional[datetime] = None) -> dict:
    failed, passed = split_results(findings)
    return {
        "summary": {
            "total": len(findings),
            "passed": len(passed),
            "failed": len(failed),
            "timestamp": resolve_timestamp(generated_at).isoformat(),
        },
        "results": [f.to_dict() for f in findings],
    }


def render_json(findings: Sequence[Finding], generated_at: Optional[datetime] = None) -> str:
    return json.dumps(build_json_report(findings, generated_at), indent=2) + "\n"
