# CORS misconfiguration: wildcard origins, and credentials combined with a reflected origin

from __future__ import annotations

import re
from typing import Optional

from vibecheck.checkers.base import Checker, CheckOptions, is_test_path
from vibecheck.context import FileContext
from vibecheck.findings.models import Finding, Location, Severity

WILDCARD_ORIGIN = re.compile(
    r"""Access-Control-Allow-Origin['"]?\s*[:,=]\s*['"]\*['"]"""
    r"""|Access-Control-Allow-Origin:\s*\*""",
    re.IGNORECASE,
)
DYNAMIC_ORIGIN = re.compile(
    r"""(?:req|request)\.headers(?:\.origin|\[['"]origin['"]\]|\.get\(\s*['"]origin['"]\s*\))"""
    r"""|\borigin\s*:\s*true\b""",
    re.IGNORECASE,
)
CREDENTIALS = re.compile(
    r"""Access-Control-Allow-Credentials['"]?\s*[:,=]\s*['"]?true"""
    r"""|\bcredentials\s*:\s*true\b""",
    re.IGNORECASE,
)
EXPRESS_WILDCARD = re.compile(r"""\bcors\s*\(\s*\{[^}]*\borigin\s*:\s*['"]\*['"]""", re.IGNORECASE)

SERVER_FILE_PATTERNS = (
    "**/server.js",
    "**/server.ts",
    "**/server/**/*.js",
    "**/server/**/*.ts",
    "**/api/**/*.js",
    "**/api/**/*.ts",
    "**/routes/**/*.js",
    "**/routes/**/*.ts",
    "**/app.js",
    "**/app.ts",
    "**/next.config.js",
    "**/next.config.mjs",
    "**/next.config.ts",
    "**/middleware.js",
    "**/middleware.ts",
    "**/express/**/*.js",
    "**/express/**/*.ts",
    "**/config/**/*.js",
    "**/config/**/*.ts",
)


def _first_line(ctx: FileContext, pattern: re.Pattern) -> Optional[int]:
    m = pattern.search(ctx.text)
    return ctx.line_of(m.start()) if m else None


class CorsChecker(Checker):
    id = "cors-checker"
    name = "CORS Configuration Check"
    description = "Checks for misconfigurations in Cross-Origin Resource Sharing (CORS) settings"
    pass_id = "cors-config"
    severity = Severity.HIGH

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)
        files = await self.discover(options, SERVER_FILE_PATTERNS)
        if not files:
            return [self.passing("No server-side files found to scan")]

        contexts = [c for c in await self.load(options, files) if not is_test_path(c.relative_path)]
        findings: list[Finding] = []
        for ctx in contexts:
            if options.verbose:
                log.debug("Scanning %s for CORS misconfigurations", ctx.relative_path)

            line = _first_line(ctx, WILDCARD_ORIGIN)
            if line is not None:
                findings.append(self._finding(
                    ctx, line,
                    id="cors-wildcard-origin",
                    name="CORS Wildcard Origin",
                    description="CORS configured with wildcard origin (*) allows any website to make requests",
                    severity=Severity.MEDIUM,
                    details=f"CORS wildcard origin (*) found in {ctx.relative_path}:{line}",
                    recommendation='Specify exact origins instead of "*", for example "https://example.com".',
                ))

            if DYNAMIC_ORIGIN.search(ctx.text):
                line = _first_line(ctx, CREDENTIALS)
                if line is not None:
                    findings.append(self._finding(
                        ctx, line,
                        id="cors-credentials-dynamic-origin",
                        name="CORS with Credentials and Dynamic Origin",
                        description="Reflecting the request origin while allowing credentials lets any site make authenticated requests",
                        severity=Severity.CRITICAL,
                        details=f"CORS with credentials and a dynamic origin found in {ctx.relative_path}:{line}",
                        recommendation="Only allow credentials for an explicit allowlist of origins, never the reflected request origin.",
                    ))

            line = _first_line(ctx, EXPRESS_WILDCARD)
            if line is not None:
                findings.append(self._finding(
                    ctx, line,
                    id="cors-express-wildcard",
                    name="Express CORS Wildcard",
                    description="Express CORS middleware with wildcard origin allows requests from any origin",
                    severity=Severity.MEDIUM,
                    details=f"Express CORS middleware with wildcard origin found in {ctx.relative_path}:{line}",
                    recommendation='Pass an array of allowed origins, e.g. origin: ["https://example.com"].',
                ))

        if not findings:
            return [self.passing(f"No CORS misconfigurations found in {len(contexts)} server-side files")]
        return findings

    @staticmethod
    def _finding(ctx: FileContext, line: int, **fields) -> Finding:
        return Finding(
            passed=False,
            location=Location(file=ctx.relative_path, line=line, code=ctx.line_text(line)),
            **fields,
        )
