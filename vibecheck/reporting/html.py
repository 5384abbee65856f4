"""
Self-contained HTML report: severity tiles, one collapsible section per
severity plus one for passed checks, a copy-as-text button on every card,
and a client-side search box. No external CSS, JS or fonts are referenced.

Everything taken from findings is scanned repository content, so every
interpolated value goes through _esc() (``html.escape`` with quotes).
"""

from __future__ import annotations

import html
from datetime import datetime
from typing import Optional, Sequence

from vibecheck.findings.models import Finding, Severity
from vibecheck.reporting.summary import SEVERITY_HEADINGS, group_by_severity, resolve_timestamp, split_results

_STYLE = """
body { font-family: -apple-system, BlinkMacSystemFont, "Segoe UI", Roboto, sans-serif; margin: 0; background: #f5f6f8; color: #222; }
header { background: #1f2933; color: #fff; padding: 16px 24px; display: flex; align-items: center; justify-content: space-between; }
header h1 { font-size: 20px; margin: 0; }
#search { padding: 6px 10px; border-radius: 4px; border: none; width: 260px; }
main { max-width: 1100px; margin: 24px auto; padding: 0 16px; }
.tiles { display: grid; grid-template-columns: repeat(5, 1fr); gap: 12px; margin-bottom: 24px; }
.tile { border-radius: 6px; padding: 12px 16px; color: #fff; }
.tile .count { font-size: 28px; font-weight: bold; }
.tile.critical { background: #b91c1c; } .tile.high { background: #ea580c; }
.tile.medium { background: #ca8a04; } .tile.low { background: #2563eb; } .tile.passed { background: #15803d; }
details { background: #fff; border-radius: 6px; margin-bottom: 16px; box-shadow: 0 1px 2px rgba(0,0,0,.08); }
summary { cursor: pointer; padding: 12px 16px; font-weight: bold; }
.card { border-left: 4px solid #999; margin: 0 16px 12px; padding: 12px 16px; background: #fafafa; position: relative; }
.card.critical { border-color: #b91c1c; } .card.high { border-color: #ea580c; }
.card.medium { border-color: #ca8a04; } .card.low { border-color: #2563eb; } .card.passed { border-color: #15803d; }
.card h3 { margin: 0 0 6px; font-size: 16px; }
.badge { font-size: 12px; text-transform: uppercase; padding: 2px 6px; border-radius: 3px; background: #e5e7eb; margin-left: 6px; }
.location { color: #6b7280; font-size: 13px; }
pre { background: #111827; color: #f9fafb; padding: 8px 10px; border-radius: 4px; overflow-x: auto; }
.recommendation { background: #ecfdf5; border-radius: 4px; padding: 8px 10px; }
.copy-button { position: absolute; top: 10px; right: 10px; font-size: 12px; cursor: pointer; }
footer { text-align: center; color: #6b7280; font-size: 13px; margin: 32px 0; }
"""

_SCRIPT = """
document.getElementById('search').addEventListener('input', function (e) {
  var term = e.target.value.toLowerCase();
  document.querySelectorAll('.card').forEach(function (card) {
    card.style.display = card.textContent.toLowerCase().indexOf(term) === -1 ? 'none' : '';
  });
});
document.querySelectorAll('.copy-button').forEach(function (button) {
  button.addEventListener('click', function () {
    var text = button.closest('.card').getAttribute('data-issue');
    navigator.clipboard.writeText(text).then(function () {
      button.textContent = 'Copied';
      setTimeout(function () { button.textContent = 'Copy'; }, 1500);
    });
  });
});
"""


def _esc(value: object) -> str:
    return html.escape(str(value), quote=True)


def issue_text(finding: Finding) -> str:
    """Plain-text rendering of one finding, used by the copy button."""
    parts = [f"[{finding.severity.value.upper()}] {finding.name}"]
    if finding.location:
        parts.append(f"Location: {finding.display_location}")
    if finding.details:
        parts.append(f"Details: {finding.details}")
    if finding.location and finding.location.code:
        parts.append(f"Code: {finding.location.code}")
    if finding.recommendation:
        parts.append(f"Recommendation: {finding.recommendation}")
    return "\n".join(parts)


def _card(finding: Finding) -> str:
    css = "passed" if finding.passed else finding.severity.value
    body = [
        f'<div class="card {css}" data-issue="{_esc(issue_text(finding))}">',
        '<button class="copy-button" type="button">Copy</button>',
        f'<h3>{_esc(finding.name)}<span class="badge">{_esc(finding.severity.value)}</span></h3>',
    ]
    if finding.location:
        body.append(f'<div class="location">{_esc(finding.display_location)}</div>')
    if finding.details:
        body.append(f"<p>{_esc(finding.details)}</p>")
    if finding.location and finding.location.code:
        body.append(f"<pre><code>{_esc(finding.location.code)}</code></pre>")
    if finding.recommendation:
        body.append(f'<div class="recommendation"><strong>Recommendation:</strong> {_esc(finding.recommendation)}</div>')
    body.append("</div>")
    return "\n".join(body)


def _section(css: str, title: str, findings: Sequence[Finding], open_: bool) -> str:
    cards = "\n".join(_card(f) for f in findings)
    attr = " open" if open_ else ""
    return f'<details class="section {css}"{attr}>\n<summary>{_esc(title)} ({len(findings)})</summary>\n{cards}\n</details>'


def _tile(css: str, label: str, count: int) -> str:
    return f'<div class="tile {css}"><div>{_esc(label)}</div><div class="count">{count}</div></div>'


def render_html(
    findings: Sequence[Finding],
    show_passed: bool = True,
    generated_at: Optional[datetime] = None,
) -> str:
    _, passed = split_results(findings)
    groups = group_by_severity(findings)
    stamp = resolve_timestamp(generated_at)

    tiles = [_tile(sev.value, SEVERITY_HEADINGS[sev], len(group)) for sev, group in groups]
    tiles.append(_tile("passed", "Passed Checks", len(passed)))

    sections = [
        _section(sev.value, SEVERITY_HEADINGS[sev], group, open_=sev in (Severity.CRITICAL, Severity.HIGH))
        for sev, group in groups
        if group
    ]
    if show_passed and passed:
        sections.append(_section("passed", "Passed Checks", passed, open_=False))

    return "\n".join([
        "<!DOCTYPE html>",
        '<html lang="en">',
        "<head>",
        '<meta charset="utf-8">',
        '<meta name="viewport" content="width=device-width, initial-scale=1">',
        "<title>VibeCheck Security Report</title>",
        f"<style>{_STYLE}</style>",
        "</head>",
        "<body>",
        "<header>",
        "<h1>VibeCheck Security Report</h1>",
        '<input type="text" id="search" placeholder="Search issues...">',
        "</header>",
        "<main>",
        f'<p class="location">Generated {_esc(stamp.isoformat())}</p>',
        '<div class="tiles">',
        *tiles,
        "</div>",
        *sections,
        "</main>",
        "<footer>Generated by VibeCheck</footer>",
        f"<script>{_SCRIPT}</script>",
        "</body>",
        "</html>",
        "",
    ])
