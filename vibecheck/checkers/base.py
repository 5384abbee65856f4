# Checker interface (abstract base class): defines the contract all checkers implement.
# Concrete checkers (api_keys, cors, rls, ...) subclass Checker and implement check();
# the purely table-driven ones subclass TableChecker and only declare their rules.

from __future__ import annotations

import asyncio
import logging
import re
from abc import ABC, abstractmethod
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, ClassVar, Optional, Sequence

from pydantic import BaseModel, ConfigDict

from vibecheck.context import FileContext, load_contexts
from vibecheck.findings.models import Finding, Location, Severity
from vibecheck.traversal import find_files

# Path segments / name fragments that mark test, mock and fixture code.
_TEST_PATH_RE = re.compile(
    r"(?:^|/)(?:tests?|spec|__tests__|__mocks__|fixtures?)(?:/|$)|\.(?:test|spec)\.[^/]+$",
    re.IGNORECASE,
)


def is_test_path(relative_path: str) -> bool:
    """True for files that live in test/mock/fixture dirs or are named *.test.* / *.spec.*."""
    return bool(_TEST_PATH_RE.search(relative_path))


@dataclass
class CheckOptions:
    """
    Inputs for one checker invocation.

    ``checker_options`` is this checker's own bag from the config file's
    ``checkerOptions`` mapping (looked up by checker id). ``logger`` is the
    scan's logger; checkers log through it instead of any module-level level.
    """

    directory: Path
    ignore_patterns: list[str] = field(default_factory=list)
    verbose: bool = False
    checker_options: dict[str, Any] = field(default_factory=dict)
    logger: logging.Logger = field(default_factory=lambda: logging.getLogger("vibecheck"))


class CheckerOptionsModel(BaseModel):
    """Base for checker-specific option bags; camelCase keys, unknown keys ignored."""

    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class Checker(ABC):
    """
    Abstract base class for all checkers.

    Subclasses must define:
    - id: str, kebab-case identifier, the skip / override / options key
    - name: str, human-readable checker name
    - description: str, one line shown by ``vibecheck list``
    - pass_id: str, id of the single passing finding
    - check(options) -> list[Finding]

    Contract:
    - Never return an empty list: zero violations is reported as exactly one
      ``passed=True`` finding (see passing()).
    - A missing directory or zero matching files is a passing result, not an error.
    - Unreadable or binary files are skipped silently (debug log only).
    - Unexpected exceptions propagate; the orchestrator turns them into an
      error finding.

    Detection is regex-only and unaware of syntax: a match inside a comment or
    a string literal is indistinguishable from real code, and constructs split
    across lines are missed. Projects with known false positives are expected
    to suppress them with ``ignoreIssues`` or ``ignorePatterns``.
    """

    id: ClassVar[str]
    name: ClassVar[str]
    description: ClassVar[str]
    pass_id: ClassVar[str]
    # Severity attached to the passing finding.
    severity: ClassVar[Severity] = Severity.MEDIUM
    options_model: ClassVar[Optional[type[CheckerOptionsModel]]] = None

    @abstractmethod
    async def check(self, options: CheckOptions) -> list[Finding]:
        """
        Scan options.directory and return findings.

        Returns:
            One or more failing findings, or exactly one passing finding.
        """
        ...

    # --- helpers ---------------------------------------------------------------

    def logger(self, options: CheckOptions) -> logging.Logger:
        return options.logger.getChild(self.id)

    def parse_options(self, options: CheckOptions) -> Any:
        """Validate this checker's option bag with options_model (or return it as-is)."""
        if self.options_model is None:
            return options.checker_options
        return self.options_model.model_validate(options.checker_options or {})

    async def discover(
        self,
        options: CheckOptions,
        patterns: Sequence[str],
        extra_ignores: Sequence[str] = (),
        use_gitignore: bool = True,
    ) -> list[Path]:
        """Run file discovery off the event loop."""
        ignores = list(options.ignore_patterns) + list(extra_ignores)
        files = await asyncio.to_thread(
            find_files, options.directory, patterns, ignores, use_gitignore=use_gitignore
        )
        self.logger(options).debug("Found %d file(s) to scan", len(files))
        return files

    async def load(self, options: CheckOptions, paths: Sequence[Path]) -> list[FileContext]:
        """Read files off the event loop; unreadable and binary files are dropped."""
        root = Path(options.directory).resolve()
        return await asyncio.to_thread(load_contexts, list(paths), root)

    def passing(self, details: str) -> Finding:
        return Finding(
            id=self.pass_id,
            name=self.name,
            description=self.description,
            severity=self.severity,
            passed=True,
            details=details,
        )


@dataclass(frozen=True)
class LineRule:
    """One named regex rule applied to every line of a file."""

    key: str
    title: str
    message: str
    pattern: re.Pattern
    severity: Severity
    recommendation: str


class TableChecker(Checker):
    """
    Checker whose whole behavior is a table of LineRules.

    Every line of every file matching FILE_PATTERNS is tested against every
    rule; each hit becomes a finding with id ``<ID_PREFIX>-<rule.key>``.
    """

    FILE_PATTERNS: ClassVar[Sequence[str]] = ()
    RULES: ClassVar[Sequence[LineRule]] = ()
    ID_PREFIX: ClassVar[str] = ""

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)
        files = await self.discover(options, self.FILE_PATTERNS)
        if not files:
            return [self.passing("No relevant files found to scan")]

        contexts = await self.load(options, files)
        findings: list[Finding] = []
        for ctx in contexts:
            if options.verbose:
                log.debug("Scanning %s", ctx.relative_path)
            for line_no, line in ctx.iter_lines():
                for rule in self.RULES:
                    if rule.pattern.search(line):
                        findings.append(self._finding(rule, ctx, line_no, line))

        if not findings:
            return [self.passing(f"No issues found in {len(contexts)} files")]
        return findings

    def _finding(self, rule: LineRule, ctx: FileContext, line_no: int, line: str) -> Finding:
        return Finding(
            id=f"{self.ID_PREFIX}-{rule.key}",
            name=rule.title,
            description=rule.message,
            severity=rule.severity,
            passed=False,
            details=f"{rule.message} in {ctx.relative_path}:{line_no}",
            location=Location(file=ctx.relative_path, line=line_no, code=line.strip()),
            recommendation=rule.recommendation,
        )
