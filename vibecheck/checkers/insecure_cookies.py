# Cookie security attributes: Secure, HttpOnly and SameSite on cookies set by client or server code

from __future__ import annotations

import re

from vibecheck.checkers.base import Checker, CheckOptions, is_test_path
from vibecheck.context import FileContext
from vibecheck.findings.models import Finding, Location, Severity

# (pattern, server_side)
COOKIE_SETTERS: tuple[tuple[re.Pattern, bool], ...] = (
    (re.compile(r"document\.cookie\s*=", re.IGNORECASE), False),
    (re.compile(r"Cookies\.set\s*\(", re.IGNORECASE), False),
    (re.compile(r"\bsetCookie\s*\(|['\"]set-cookie['\"]", re.IGNORECASE), True),
    (re.compile(r"\bres\.cookie\s*\(", re.IGNORECASE), True),
    (re.compile(r"\b(?:response|res)\.cookies\.set\s*\(|\bcookies\(\s*\)\s*\.set\s*\(", re.IGNORECASE), True),
    (re.compile(r"headers\s*\(\s*\)\s*\.append\s*\(\s*['\"]Set-Cookie['\"]", re.IGNORECASE), True),
)

SECURE = re.compile(r"\bsecure\s*[:=]\s*true|;\s*secure\b", re.IGNORECASE)
HTTP_ONLY = re.compile(r"\bhttpOnly\s*[:=]\s*true|;\s*httpOnly\b", re.IGNORECASE)
SAME_SITE = re.compile(r"\bsameSite\s*[:=]\s*['\"]?(?:strict|lax|none)\b", re.IGNORECASE)

CODE_FILE_PATTERNS = (
    "**/*.js",
    "**/*.jsx",
    "**/*.ts",
    "**/*.tsx",
)


class InsecureCookiesChecker(Checker):
    id = "insecure-cookies-checker"
    name = "Insecure Cookies Check"
    description = "Checks for insecure cookie configurations"
    pass_id = "insecure-cookies"
    severity = Severity.HIGH

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)
        files = await self.discover(options, CODE_FILE_PATTERNS)
        if not files:
            return [self.passing("No relevant code files found to scan")]

        contexts = [c for c in await self.load(options, files) if not is_test_path(c.relative_path)]
        findings: list[Finding] = []
        cookie_files = 0
        for ctx in contexts:
            if options.verbose:
                log.debug("Scanning %s for cookie configurations", ctx.relative_path)
            first_line = None
            server_side = False
            for line_no, line in ctx.iter_lines():
                for pattern, is_server in COOKIE_SETTERS:
                    if pattern.search(line):
                        first_line = first_line or line_no
                        server_side = server_side or is_server
            if first_line is None:
                continue
            cookie_files += 1
            findings.extend(self._check_attributes(ctx, first_line, server_side))

        if cookie_files == 0:
            return [self.passing(f"No cookie usage found in {len(contexts)} scanned files")]
        if not findings:
            return [self.passing(f"Found cookies in {cookie_files} files with secure attributes set")]
        return findings

    @staticmethod
    def _check_attributes(ctx: FileContext, line: int, server_side: bool) -> list[Finding]:
        location = Location(file=ctx.relative_path, line=line, code=ctx.line_text(line))
        findings: list[Finding] = []
        if not SECURE.search(ctx.text):
            findings.append(Finding(
                id="missing-secure-flag",
                name="Missing Secure Flag in Cookies",
                description="Cookies are set without the Secure flag and can travel over unencrypted connections",
                severity=Severity.HIGH,
                passed=False,
                details=f"Cookies set without Secure flag in {ctx.relative_path}:{line}",
                location=location,
                recommendation="Add the Secure flag so cookies are only sent over HTTPS.",
            ))
        if server_side and not HTTP_ONLY.search(ctx.text):
            findings.append(Finding(
                id="missing-httponly-flag",
                name="Missing HttpOnly Flag in Cookies",
                description="Server-side cookies are set without the HttpOnly flag and are readable from JavaScript",
                severity=Severity.HIGH,
                passed=False,
                details=f"Server-side cookies set without HttpOnly flag in {ctx.relative_path}:{line}",
                location=location,
                recommendation="Add the HttpOnly flag to keep cookies out of reach of client-side scripts.",
            ))
        if not SAME_SITE.search(ctx.text):
            findings.append(Finding(
                id="missing-samesite-attribute",
                name="Missing SameSite Attribute in Cookies",
                description="Cookies are set without the SameSite attribute, exposing them to CSRF",
                severity=Severity.MEDIUM,
                passed=False,
                details=f"Cookies set without SameSite attribute in {ctx.relative_path}:{line}",
                location=location,
                recommendation="Set SameSite=Strict or SameSite=Lax on cookies.",
            ))
        return findings
