# Report format dispatch: render findings to a string in one of the file formats, and write report files.

from __future__ import annotations

import logging
from datetime import datetime
from pathlib import Path
from typing import Callable, Optional, Sequence

from vibecheck.errors import UnsupportedFormatError
from vibecheck.findings.models import Finding
from vibecheck.reporting.html import render_html
from vibecheck.reporting.json_report import render_json
from vibecheck.reporting.markdown import render_markdown
from vibecheck.reporting.summary import resolve_timestamp
from vibecheck.reporting.text import render_text

logger = logging.getLogger(__name__)

REPORT_EXTENSIONS: dict[str, str] = {
    "text": "txt",
    "json": "json",
    "markdown": "md",
    "html": "html",
}

REPORT_FORMATS = tuple(REPORT_EXTENSIONS)

_RENDERERS: dict[str, Callable[[Sequence[Finding], bool, Optional[datetime]], str]] = {
    "text": render_text,
    "json": lambda findings, show_passed, generated_at: render_json(findings, generated_at),
    "markdown": render_markdown,
    "html": render_html,
}


def render_report(
    findings: Sequence[Finding],
    fmt: str,
    show_passed: bool = True,
    generated_at: Optional[datetime] = None,
) -> str:
    """
    Render findings in ``fmt`` (text, json, markdown or html).

    JSON always carries every finding; ``show_passed`` only affects the
    human-readable formats. Input findings are never modified.

    Raises:
        UnsupportedFormatError: ``fmt`` is not a known format.
    """
    renderer = _RENDERERS.get(fmt)
    if renderer is None:
        raise UnsupportedFormatError(fmt)
    return renderer(findings, show_passed, generated_at)


def default_report_filename(fmt: str, generated_at: Optional[datetime] = None) -> str:
    if fmt not in REPORT_EXTENSIONS:
        raise UnsupportedFormatError(fmt)
    stamp = resolve_timestamp(generated_at).strftime("%Y-%m-%dT%H-%M-%S")
    return f"vibecheck-report-{stamp}.{REPORT_EXTENSIONS[fmt]}"


def write_report(
    findings: Sequence[Finding],
    fmt: str,
    output_file: Optional[Path] = None,
    show_passed: bool = True,
    generated_at: Optional[datetime] = None,
) -> Path:
    """Render and write a report; returns the path written."""
    content = render_report(findings, fmt, show_passed=show_passed, generated_at=generated_at)
    path = Path(output_file) if output_file else Path(default_report_filename(fmt, generated_at))
    if path.parent and not path.parent.exists():
        path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content, encoding="utf-8")
    logger.debug("Wrote %s report to %s", fmt, path)
    return path
