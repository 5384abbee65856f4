"""Tests for the text, markdown, JSON, HTML and console reports."""

import json
from datetime import datetime, timezone

import pytest
from rich.console import Console

from vibecheck.errors import UnsupportedFormatError
from vibecheck.findings.models import Finding, Location, Severity
from vibecheck.reporting.console import print_findings
from vibecheck.reporting.html import issue_text, render_html
from vibecheck.reporting.json_report import build_json_report
from vibecheck.reporting.markdown import render_markdown
from vibecheck.reporting.render import REPORT_FORMATS, default_report_filename, render_report, write_report
from vibecheck.reporting.summary import group_by_severity
from vibecheck.reporting.text import render_text

STAMP = datetime(2026, 1, 2, 3, 4, 5, tzinfo=timezone.utc)


def _findings() -> list[Finding]:
    return [
        Finding(
            id="xss-inner-html",
            name="Direct innerHTML Assignment",
            description="Direct DOM manipulation via innerHTML/outerHTML",
            severity=Severity.HIGH,
            passed=False,
            details="Direct DOM manipulation via innerHTML/outerHTML in src/dom.js:4",
            location=Location(file="src/dom.js", line=4, code='el.innerHTML = "<b>" + name;'),
            recommendation="Use textContent instead.",
        ),
        Finding(
            id="api-key-openai",
            name="OpenAI API Key Exposed",
            description="Potential OpenAI API key or secret found in code",
            severity=Severity.CRITICAL,
            passed=False,
            details="Found a possible OpenAI key in src/a.js:1",
            location=Location(file="src/a.js", line=1, code="const k = x", column=11),
            recommendation="Rotate it.",
        ),
        Finding(
            id="cors-config",
            name="CORS Configuration Check",
            description="Checks CORS",
            severity=Severity.HIGH,
            passed=True,
            details="No CORS misconfigurations found in 2 server-side files",
        ),
    ]


def test_group_by_severity_orders_and_keeps_empty_buckets():
    groups = group_by_severity(_findings())
    assert [sev for sev, _ in groups] == [Severity.CRITICAL, Severity.HIGH, Severity.MEDIUM, Severity.LOW]
    assert [[f.id for f in g] for _, g in groups] == [["api-key-openai"], ["xss-inner-html"], [], []]


def test_json_report_is_lossless():
    findings = _findings()
    report = json.loads(render_report(findings, "json", show_passed=False, generated_at=STAMP))
    assert report["summary"] == {"total": 3, "passed": 1, "failed": 2, "timestamp": STAMP.isoformat()}
    assert [Finding.model_validate(r) for r in report["results"]] == findings


def test_json_omits_absent_optional_fields():
    report = build_json_report(_findings(), STAMP)
    passed = report["results"][2]
    assert "location" not in passed
    assert "recommendation" not in passed
    assert report["results"][1]["location"]["column"] == 11
    assert "column" not in report["results"][0]["location"]


def test_text_report_structure():
    text = render_text(_findings(), generated_at=STAMP)
    assert text.startswith("VIBECHECK SCAN RESULTS\n")
    assert "Total checks: 3" in text
    assert "CRITICAL ISSUES (1)" in text
    assert "HIGH SEVERITY ISSUES (1)" in text
    assert "MEDIUM SEVERITY ISSUES" not in text
    assert text.index("CRITICAL ISSUES") < text.index("HIGH SEVERITY ISSUES")
    assert "x Direct innerHTML Assignment (src/dom.js:4)" in text
    assert "  Recommendation: Use textContent instead." in text
    assert "PASSED CHECKS (1)" in text
    assert text.rstrip().endswith("Generated by VibeCheck")


def test_text_report_hides_passed():
    text = render_text(_findings(), show_passed=False, generated_at=STAMP)
    assert "PASSED CHECKS" not in text
    assert "Passed: 1" in text


def test_markdown_report_structure():
    md = render_markdown(_findings(), generated_at=STAMP)
    assert md.startswith("# VibeCheck Scan Results\n")
    assert "## Summary" in md
    assert "## Critical Issues (1)" in md
    assert "### Direct innerHTML Assignment (`src/dom.js:4`)" in md
    assert '```\nel.innerHTML = "<b>" + name;\n```' in md
    assert "**Recommendation:** Rotate it." in md
    assert "## Passed Checks (1)" in md
    assert md.rstrip().endswith("*Generated by VibeCheck*")


def test_html_escapes_repository_content():
    page = render_html(_findings(), generated_at=STAMP)
    assert page.startswith("<!DOCTYPE html>")
    assert "<b>" not in page
    assert "el.innerHTML = &quot;&lt;b&gt;&quot; + name;" in page
    assert 'id="search"' in page
    assert page.count('class="copy-button"') == 3
    assert "<link" not in page
    assert "src=" not in page


def test_html_sections():
    page = render_html(_findings(), show_passed=False, generated_at=STAMP)
    assert '<details class="section critical" open>' in page
    assert '<details class="section high" open>' in page
    assert 'class="section passed"' not in page
    assert 'class="tile passed"' in page


def test_issue_text():
    text = issue_text(_findings()[0])
    assert text.splitlines()[0] == "[HIGH] Direct innerHTML Assignment"
    assert "Location: src/dom.js:4" in text
    assert "Recommendation: Use textContent instead." in text


def test_unsupported_format():
    with pytest.raises(UnsupportedFormatError) as exc:
        render_report(_findings(), "pdf")
    assert isinstance(exc.value, ValueError)
    assert exc.value.format == "pdf"


@pytest.mark.parametrize("fmt", REPORT_FORMATS)
def test_render_does_not_mutate_input(fmt):
    findings = _findings()
    before = [f.model_dump() for f in findings]
    render_report(findings, fmt, generated_at=STAMP)
    assert [f.model_dump() for f in findings] == before


def test_default_report_filename():
    assert default_report_filename("markdown", STAMP) == "vibecheck-report-2026-01-02T03-04-05.md"
    assert default_report_filename("text", STAMP).endswith(".txt")
    with pytest.raises(UnsupportedFormatError):
        default_report_filename("pdf", STAMP)


def test_write_report_to_explicit_path(tmp_path):
    out = tmp_path / "reports" / "scan.html"
    written = write_report(_findings(), "html", output_file=out, generated_at=STAMP)
    assert written == out
    assert out.read_text(encoding="utf-8").startswith("<!DOCTYPE html>")


def test_write_report_default_name(tmp_path, monkeypatch):
    monkeypatch.chdir(tmp_path)
    written = write_report(_findings(), "text", generated_at=STAMP)
    assert written.name == "vibecheck-report-2026-01-02T03-04-05.txt"
    assert (tmp_path / written.name).exists()


def test_console_output():
    console = Console(record=True, width=120)
    print_findings(_findings(), console=console)
    out = console.export_text()
    assert "Found 2 potential issues." in out
    assert "Critical Issues (1)" in out
    assert "src/dom.js:4" in out
    assert "Passed Checks (1)" in out


def test_console_all_passed():
    console = Console(record=True, width=120)
    print_findings(_findings()[2:], show_passed=False, console=console)
    out = console.export_text()
    assert "All checks passed!" in out
    assert "Passed Checks" not in out


def test_console_keeps_brackets_in_passed_details():
    passed = Finding(
        id="rate-limit-check",
        name="API Rate Limiting Check",
        description="Checks if API endpoints have rate limiting configured",
        severity=Severity.MEDIUM,
        passed=True,
        details="Rate limiting is configured globally in app/[locale]/middleware.ts [/x]",
    )
    console = Console(record=True, width=160)
    print_findings([passed], console=console)
    out = console.export_text()
    assert "app/[locale]/middleware.ts [/x]" in out
