"""
Scan orchestration: run the enabled checkers over one root and post-process
their findings against the loaded config.

The pipeline is linear. The directory is validated, the config is loaded
(unless one was supplied), CLI and config options are merged, and the
checkers run one at a time in registry order. Their findings then go
through process_results(). A missing root is the only condition that aborts
the run; a checker that raises is reported as a synthetic error finding and
the remaining checkers still run.
"""

from __future__ import annotations

import asyncio
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from pathlib import Path
from typing import Optional, Sequence

from vibecheck.checkers.base import Checker, CheckOptions
from vibecheck.config import ConfigFile, get_enabled_checkers, get_severity_override, is_issue_ignored
from vibecheck.config_loader import load_config, load_config_file
from vibecheck.errors import ScanSetupError
from vibecheck.findings.models import Finding, Severity

logger = logging.getLogger(__name__)


@dataclass
class ScanOptions:
    """
    Caller-side scan options (typically straight from the CLI).

    ``config`` short-circuits discovery; otherwise ``config_path`` is loaded
    explicitly (errors are fatal) or the root and its ancestors are searched
    (errors are logged and ignored).
    """

    directory: Path = Path(".")
    ignore_patterns: list[str] = field(default_factory=list)
    skip_checkers: list[str] = field(default_factory=list)
    verbose: bool = False
    config: Optional[ConfigFile] = None
    config_path: Optional[Path] = None
    allow_python_config: bool = False
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("vibecheck"))


@dataclass
class ScanResult:
    directory: Path
    findings: list[Finding]
    checkers_run: list[str]
    config: Optional[ConfigFile] = None
    timestamp: datetime = field(default_factory=lambda: datetime.now(timezone.utc))

    @property
    def passed(self) -> list[Finding]:
        return [f for f in self.findings if f.passed]

    @property
    def failed(self) -> list[Finding]:
        return [f for f in self.findings if not f.passed]


def process_results(findings: Sequence[Finding], config: Optional[ConfigFile]) -> list[Finding]:
    """
    Apply ``ignoreIssues`` and ``severityOverrides`` to raw findings.

    Ignored ids are dropped regardless of severity or pass state. A failing
    finding whose id has an override with a different severity is replaced
    by a copy carrying the new severity and a note appended to ``details``.
    Passing findings are never overridden. Order is preserved.
    """
    if config is None:
        return list(findings)

    processed: list[Finding] = []
    for finding in findings:
        if is_issue_ignored(finding.id, config):
            continue
        if not finding.passed:
            override = get_severity_override(finding.id, config)
            if override is not None and override != finding.severity:
                note = f" (Severity overridden from {finding.severity.value} to {override.value})"
                finding = finding.model_copy(update={"severity": override, "details": finding.details + note})
        processed.append(finding)
    return processed


def error_finding(checker: Checker, exc: BaseException) -> Finding:
    """Synthetic finding for a checker that raised."""
    return Finding(
        id=f"{checker.id}-error",
        name=f"{checker.name} Error",
        description=f"An error occurred while running {checker.name}",
        severity=Severity.MEDIUM,
        passed=False,
        details=f"Error: {exc}",
    )


class VibeCheck:
    """Runs one scan; construct with ScanOptions and await run() (or call scan())."""

    def __init__(self, options: ScanOptions, checkers: Optional[Sequence[Checker]] = None) -> None:
        self.options = options
        self._checkers = checkers
        self.log = options.logger

    def scan(self) -> ScanResult:
        return asyncio.run(self.run())

    async def run(self) -> ScanResult:
        directory = self._validate_directory()
        config = self._load_config(directory)

        ignore_patterns = list(self.options.ignore_patterns)
        skip = set(self.options.skip_checkers)
        if config is not None:
            ignore_patterns.extend(config.ignore_patterns)
            skip.update(config.skip_checkers)

        checkers = self._select_checkers(skip)
        self.log.info("Scanning %s with %d checkers", directory, len(checkers))

        raw: list[Finding] = []
        for checker in checkers:
            check_options = CheckOptions(
                directory=directory,
                ignore_patterns=ignore_patterns,
                verbose=self.options.verbose,
                checker_options=config.options_for(checker.id) if config is not None else {},
                logger=self.log,
            )
            self.log.debug("Running %s", checker.id)
            try:
                results = await checker.check(check_options)
            except Exception as exc:
                self.log.error("Error running %s: %s", checker.id, exc)
                self.log.debug("Checker %s failed", checker.id, exc_info=True)
                results = [error_finding(checker, exc)]
            raw.extend(results)

        findings = process_results(raw, config)
        return ScanResult(
            directory=directory,
            findings=findings,
            checkers_run=[c.id for c in checkers],
            config=config,
        )

    def _validate_directory(self) -> Path:
        directory = Path(self.options.directory).resolve()
        if not directory.exists():
            raise ScanSetupError(f"Directory does not exist: {directory}")
        if not directory.is_dir():
            raise ScanSetupError(f"Not a directory: {directory}")
        return directory

    def _load_config(self, directory: Path) -> Optional[ConfigFile]:
        if self.options.config is not None:
            return self.options.config
        if self.options.config_path is not None:
            return load_config_file(self.options.config_path, allow_python=self.options.allow_python_config)
        return load_config(directory, allow_python=self.options.allow_python_config)

    def _select_checkers(self, skip: set[str]) -> list[Checker]:
        if self._checkers is None:
            return list(get_enabled_checkers(skip))
        return [c for c in self._checkers if c.id not in skip]
