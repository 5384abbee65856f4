# Supabase Row Level Security: tables created without RLS, and policies that grant everyone access

from __future__ import annotations

import re
from dataclasses import dataclass
from typing import Optional

from pydantic import Field

from vibecheck.checkers.base import CheckerOptionsModel, Checker, CheckOptions
from vibecheck.context import FileContext
from vibecheck.findings.models import Finding, Location, Severity

FILE_PATTERNS = (
    "**/*.sql",
    "**/migrations/**/*.js",
    "**/migrations/**/*.ts",
)

# schema-qualified, optionally quoted identifier: public.users, "public"."users", users
_IDENT = r'(?:"[^"]+"|[A-Za-z0-9_]+)(?:\s*\.\s*(?:"[^"]+"|[A-Za-z0-9_]+))?'

CREATE_TABLE_RE = re.compile(
    rf"\bcreate\s+(?:(?:global\s+|local\s+)?(?:temp|temporary|unlogged)\s+)?table\s+(?:if\s+not\s+exists\s+)?({_IDENT})",
    re.IGNORECASE,
)
ENABLE_RLS_RE = re.compile(
    rf"\balter\s+table\s+(?:if\s+exists\s+)?(?:only\s+)?({_IDENT})\s+enable\s+row\s+level\s+security",
    re.IGNORECASE,
)
# Policy body runs up to the terminating semicolon, possibly across lines.
CREATE_POLICY_RE = re.compile(
    rf"""\bcreate\s+policy\s+(?:"[^"]*"|'[^']*'|\w+)\s+on\s+({_IDENT})([^;]*)""",
    re.IGNORECASE,
)

_ALWAYS_TRUE = re.compile(r"\b(?:using|with\s+check)\s*\(?\s*true\s*\)?", re.IGNORECASE)
_PUBLIC_ROLE = re.compile(r"\bto\s+(?:public|anon)\b|['\"]public['\"]", re.IGNORECASE)
_HAS_CONDITION = re.compile(r"\b(?:using|with\s+check)\b", re.IGNORECASE)


def normalize_table(name: str) -> str:
    """Lowercase, strip quotes and whitespace, and drop the default ``public.`` schema."""
    cleaned = re.sub(r'["\s]', "", name).lower()
    if cleaned.startswith("public."):
        cleaned = cleaned[len("public."):]
    return cleaned


def is_permissive_policy(body: str) -> bool:
    """True for ``using (true)`` / ``with check (true)``, or a public grant with no condition."""
    if _ALWAYS_TRUE.search(body):
        return True
    return bool(_PUBLIC_ROLE.search(body)) and not _HAS_CONDITION.search(body)


@dataclass
class TableInfo:
    name: str
    has_rls: bool = False
    file: Optional[str] = None
    line: Optional[int] = None
    code: str = ""


class RlsOptions(CheckerOptionsModel):
    check_rls: bool = Field(True, alias="checkRls")
    additional_tables: list[str] = Field(default_factory=list, alias="additionalTables")


class SupabaseRlsChecker(Checker):
    """
    Builds one table -> RLS map across every SQL file in the scan, so a table
    created in one migration and secured in a later one is not reported.
    """

    id = "supabase-rls-checker"
    name = "Supabase RLS Policy Check"
    description = "Checks for missing or insecure Row Level Security policies"
    pass_id = "supabase-rls"
    severity = Severity.HIGH
    options_model = RlsOptions

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)
        opts: RlsOptions = self.parse_options(options)
        if not opts.check_rls:
            return [self.passing("Row Level Security check disabled by configuration")]

        files = await self.discover(options, FILE_PATTERNS)
        if not files and not opts.additional_tables:
            log.debug("No SQL files found")
            return [self.passing("No SQL files found to scan")]

        contexts = await self.load(options, files)
        tables: dict[str, TableInfo] = {}
        policy_findings: list[Finding] = []

        for ctx in contexts:
            if options.verbose:
                log.debug("Scanning %s for RLS issues", ctx.relative_path)
            self._collect_tables(ctx, tables)
            policy_findings.extend(self._public_policies(ctx))

        for extra in opts.additional_tables:
            tables.setdefault(normalize_table(extra), TableInfo(name=normalize_table(extra)))

        findings = [self._missing_rls(info) for info in tables.values() if not info.has_rls]
        findings.extend(policy_findings)

        if not findings:
            return [self.passing(f"All {len(tables)} tables have RLS enabled with scoped access policies")]
        return findings

    @staticmethod
    def _collect_tables(ctx: FileContext, tables: dict[str, TableInfo]) -> None:
        events = [(m.start(), "create", m) for m in CREATE_TABLE_RE.finditer(ctx.text)]
        events += [(m.start(), "enable", m) for m in ENABLE_RLS_RE.finditer(ctx.text)]
        for offset, kind, m in sorted(events, key=lambda e: e[0]):
            name = normalize_table(m.group(1))
            info = tables.get(name)
            if info is None:
                info = tables[name] = TableInfo(name=name)
            if kind == "enable":
                info.has_rls = True
            if info.file is None:
                line = ctx.line_of(offset)
                info.file, info.line, info.code = ctx.relative_path, line, ctx.line_text(line)

    def _public_policies(self, ctx: FileContext) -> list[Finding]:
        findings: list[Finding] = []
        for m in CREATE_POLICY_RE.finditer(ctx.text):
            if not is_permissive_policy(m.group(2)):
                continue
            table = normalize_table(m.group(1))
            line = ctx.line_of(m.start())
            findings.append(
                Finding(
                    id="supabase-public-policy",
                    name="Public Access Policy",
                    description=f'Table "{table}" has a policy that grants public access',
                    severity=Severity.HIGH,
                    passed=False,
                    details=f'Table "{table}" has a policy that grants public access in {ctx.relative_path}:{line}',
                    location=Location(file=ctx.relative_path, line=line, code=ctx.line_text(line)),
                    recommendation=(
                        'Replace "using (true)" with a real access condition such as '
                        '"using (auth.uid() = user_id)" and grant to the authenticated role.'
                    ),
                )
            )
        return findings

    @staticmethod
    def _missing_rls(info: TableInfo) -> Finding:
        if info.file is None:
            details = f'Table "{info.name}" is expected to have RLS enabled but no enabling statement was found'
            location = None
        else:
            details = (
                f'Table "{info.name}" in {info.file}:{info.line} does not have RLS enabled, '
                "allowing unrestricted access"
            )
            location = Location(file=info.file, line=info.line, code=info.code)
        return Finding(
            id="supabase-rls-disabled",
            name="Missing Row Level Security",
            description=f'Table "{info.name}" does not have Row Level Security enabled',
            severity=Severity.HIGH,
            passed=False,
            details=details,
            location=location,
            recommendation=f'Enable RLS with: ALTER TABLE "{info.name}" ENABLE ROW LEVEL SECURITY;',
        )
