# Secret exposure detection: provider API keys, tokens and private keys in source files

from __future__ import annotations

import math
import re
from dataclasses import dataclass
from typing import Optional

from pydantic import Field

from vibecheck.checkers.base import CheckerOptionsModel, Checker, CheckOptions
from vibecheck.context import FileContext
from vibecheck.findings.models import Finding, Location, Severity


@dataclass(frozen=True)
class SecretPattern:
    service: str
    label: str
    pattern: re.Pattern
    recommendation: str


_ROTATE = "Remove the key from source, rotate it, and load it from an environment variable or secret manager."

# --- patterns --------------------------------------------------------------

# Order matters: more specific prefixes first (sk-ant- before sk-).
SECRET_PATTERNS: tuple[SecretPattern, ...] = (
    SecretPattern(
        "anthropic", "Anthropic",
        re.compile(r"\bsk-ant-[A-Za-z0-9_\-]{32,}"),
        "Rotate the Anthropic key in the console and call the API from a server using an environment variable.",
    ),
    SecretPattern(
        "openai", "OpenAI",
        re.compile(r"\bsk-(?!ant-)(?:proj-|svcacct-)?[A-Za-z0-9_\-]{32,}"),
        "Rotate the OpenAI key and read it from OPENAI_API_KEY on the server only.",
    ),
    SecretPattern(
        "supabase", "Supabase",
        re.compile(r"\bsbp_[A-Za-z0-9]{40,}"),
        "Revoke the Supabase access token and keep service tokens out of client and repository code.",
    ),
    SecretPattern(
        "stripe", "Stripe",
        re.compile(r"\b(?:sk|rk)_live_[A-Za-z0-9]{24,}"),
        "Roll the Stripe live key in the dashboard and load it from the server environment.",
    ),
    SecretPattern(
        "github", "GitHub",
        re.compile(r"\bgh[pousr]_[A-Za-z0-9]{36,}"),
        "Revoke the GitHub token and use a repository or CI secret instead.",
    ),
    SecretPattern(
        "aws", "AWS",
        re.compile(r"\b(?:AKIA|ASIA)[0-9A-Z]{16}\b"),
        "Deactivate the AWS access key in IAM and use role-based credentials or the environment.",
    ),
    SecretPattern(
        "google", "Google",
        re.compile(r"\bAIza[0-9A-Za-z\-_]{35}"),
        "Restrict or regenerate the Google API key and apply HTTP referrer / API restrictions.",
    ),
    SecretPattern(
        "slack", "Slack",
        re.compile(r"\bxox[baprs]-[A-Za-z0-9\-]{10,}"),
        "Revoke the Slack token and store it in the server environment.",
    ),
    SecretPattern(
        "sendgrid", "SendGrid",
        re.compile(r"\bSG\.[A-Za-z0-9_\-]{22}\.[A-Za-z0-9_\-]{43}"),
        "Delete the SendGrid key and create a new one stored outside the repository.",
    ),
    SecretPattern(
        "private-key", "Private Key",
        re.compile(r"-----BEGIN (?:RSA |EC |DSA |OPENSSH |PGP )?PRIVATE KEY(?: BLOCK)?-----"),
        "Remove the private key from the repository, revoke it, and load key material from a secret store.",
    ),
)

# keyword = "value" assignments; the value is group 1
_GENERIC_ASSIGNMENT = re.compile(
    r"""['"]?(?:api[_-]?key|apikey|api[_-]?secret|secret[_-]?key|access[_-]?token|auth[_-]?token|client[_-]?secret)['"]?"""
    r"""\s*[=:]\s*['"]([A-Za-z0-9_\-+/=.]{20,})['"]""",
    re.IGNORECASE,
)

# Generic matches must look random, not like a sentence or identifier.
GENERIC_MIN_ENTROPY = 3.5

# Whole words that mark a path segment or file name as example, test or placeholder content.
EXAMPLE_PATH_TOKENS = frozenset(
    {
        "example",
        "examples",
        "sample",
        "samples",
        "test",
        "tests",
        "spec",
        "mock",
        "mocks",
        "fixture",
        "fixtures",
        "dummy",
        "fake",
        "placeholder",
    }
)

_PATH_TOKEN_SPLIT = re.compile(r"[/.\-_]+")

# Line markers; "_" and "-" separate words, so test_key matches and latest does not.
_PLACEHOLDER_LINE = re.compile(
    r"(?<![a-z0-9])(?:examples?|samples?|tests?|mocks?|dummy|fake|placeholder|changeme)(?![a-z0-9])"
    r"|(?<![a-z0-9])your[_-]"
    r"|x{4,}",
    re.IGNORECASE,
)

FILE_PATTERNS = (
    "**/*.js",
    "**/*.jsx",
    "**/*.mjs",
    "**/*.cjs",
    "**/*.ts",
    "**/*.tsx",
    "**/*.vue",
    "**/*.svelte",
    "**/*.py",
    "**/*.rb",
    "**/*.go",
    "**/*.php",
    "**/*.java",
    "**/*.json",
    "**/*.yaml",
    "**/*.yml",
    "**/*.toml",
)

# Env files are where secrets belong; example / fixture trees are noise.
SAFE_PATTERNS = (
    "**/.env",
    "**/.env.*",
    "*.example",
    "*.sample",
    "**/test/**",
    "**/tests/**",
    "**/__tests__/**",
    "**/fixtures/**",
    "package-lock.json",
)


def shannon_entropy(s: str) -> float:
    if not s:
        return 0.0
    freq: dict[str, int] = {}
    for ch in s:
        freq[ch] = freq.get(ch, 0) + 1
    ent = 0.0
    n = len(s)
    for c in freq.values():
        p = c / n
        ent -= p * math.log2(p)
    return ent


def is_example_path(relative_path: str) -> bool:
    """True when a directory or file-name word is an example/test marker, e.g. config.example.js."""
    tokens = _PATH_TOKEN_SPLIT.split(relative_path.lower())
    return any(token in EXAMPLE_PATH_TOKENS for token in tokens)


def looks_like_placeholder(line: str) -> bool:
    return _PLACEHOLDER_LINE.search(line) is not None


class AdditionalPattern(CheckerOptionsModel):
    service: str
    pattern: str
    recommendation: str = _ROTATE


class ApiKeyOptions(CheckerOptionsModel):
    additional_patterns: list[AdditionalPattern] = Field(default_factory=list, alias="additionalPatterns")
    ignore_patterns: list[str] = Field(default_factory=list, alias="ignorePatterns")


class ApiKeyChecker(Checker):
    """Flags hardcoded provider keys and high-entropy secrets; every hit is critical."""

    id = "api-key-checker"
    name = "API Key Exposure Check"
    description = "Checks for exposed API keys and secrets in code"
    pass_id = "api-key-exposure"
    severity = Severity.CRITICAL
    options_model = ApiKeyOptions

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)
        opts: ApiKeyOptions = self.parse_options(options)
        patterns = SECRET_PATTERNS + tuple(self._compile_additional(opts, log))

        files = await self.discover(options, FILE_PATTERNS, SAFE_PATTERNS + tuple(opts.ignore_patterns))
        if not files:
            return [self.passing("No source files found to scan")]

        contexts = await self.load(options, files)
        findings: list[Finding] = []
        for ctx in contexts:
            if is_example_path(ctx.relative_path):
                log.debug("Skipping example/test file %s", ctx.relative_path)
                continue
            if options.verbose:
                log.debug("Scanning %s", ctx.relative_path)
            findings.extend(self._scan_file(ctx, patterns))

        if not findings:
            return [self.passing(f"No exposed API keys or secrets found in {len(contexts)} files")]
        return findings

    def _compile_additional(self, opts: ApiKeyOptions, log) -> list[SecretPattern]:
        compiled: list[SecretPattern] = []
        for extra in opts.additional_patterns:
            try:
                rx = re.compile(extra.pattern)
            except re.error as e:
                log.warning("Ignoring invalid additional pattern for %s: %s", extra.service, e)
                continue
            slug = re.sub(r"[^a-z0-9]+", "-", extra.service.lower()).strip("-") or "custom"
            compiled.append(SecretPattern(slug, extra.service, rx, extra.recommendation))
        return compiled

    def _scan_file(self, ctx: FileContext, patterns: tuple[SecretPattern, ...]) -> list[Finding]:
        findings: list[Finding] = []
        for line_no, line in ctx.iter_lines():
            if looks_like_placeholder(line):
                continue
            claimed: list[tuple[int, int]] = []
            for sp in patterns:
                for m in sp.pattern.finditer(line):
                    if _overlaps(claimed, m.span()):
                        continue
                    claimed.append(m.span())
                    findings.append(self._finding(ctx, line_no, line, m.start(), sp.service, sp.label, sp.recommendation))

            generic = self._generic_match(line, claimed)
            if generic is not None:
                findings.append(
                    self._finding(ctx, line_no, line, generic, "generic", "Generic", _ROTATE)
                )
        return findings

    @staticmethod
    def _generic_match(line: str, claimed: list[tuple[int, int]]) -> Optional[int]:
        m = _GENERIC_ASSIGNMENT.search(line)
        if m is None or _overlaps(claimed, m.span(1)):
            return None
        if shannon_entropy(m.group(1)) < GENERIC_MIN_ENTROPY:
            return None
        return m.start(1)

    def _finding(
        self,
        ctx: FileContext,
        line_no: int,
        line: str,
        offset: int,
        service: str,
        label: str,
        recommendation: str,
    ) -> Finding:
        return Finding(
            id=f"api-key-{service}",
            name=f"{label} API Key Exposed",
            description=f"Potential {label} API key or secret found in code",
            severity=Severity.CRITICAL,
            passed=False,
            details=f"Found a possible {label} key in {ctx.relative_path}:{line_no}",
            location=Location(file=ctx.relative_path, line=line_no, code=line.strip(), column=offset + 1),
            recommendation=recommendation,
        )


def _overlaps(claimed: list[tuple[int, int]], span: tuple[int, int]) -> bool:
    start, end = span
    return any(start < c_end and c_start < end for c_start, c_end in claimed)
