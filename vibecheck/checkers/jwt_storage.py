# Auth tokens in browser storage (localStorage / sessionStorage), readable by any injected script

from __future__ import annotations

import re

from vibecheck.checkers.base import Checker, CheckOptions, is_test_path
from vibecheck.findings.models import Finding, Location, Severity

_TOKEN_KEY = r"""(?:['"`][\w\-.]*(?:token|jwt)[\w\-.]*['"`]|['"`](?:auth|authentication|session)['"`])"""

JWT_STORAGE_PATTERNS = (
    re.compile(rf"(?:localStorage|sessionStorage)\.setItem\(\s*{_TOKEN_KEY}", re.IGNORECASE),
    re.compile(rf"(?:localStorage|sessionStorage)\[\s*{_TOKEN_KEY}\s*\]\s*=(?!=)", re.IGNORECASE),
    re.compile(r"(?:localStorage|sessionStorage)\.(?:token|jwt|accessToken|access_token)\s*=(?!=)", re.IGNORECASE),
    re.compile(r"\b(?:jwt|jose|jsonwebtoken)\b.*\b(?:localStorage|sessionStorage)\.setItem", re.IGNORECASE),
    re.compile(r"\b(?:localStorage|sessionStorage)\.setItem\(.*\b(?:jwt|jose|jsonwebtoken)\b", re.IGNORECASE),
    re.compile(r"\b(?:auth0|firebase|amplify|oauth)\b.*\b(?:localStorage|sessionStorage)\.setItem", re.IGNORECASE),
)

CLIENT_CODE_PATTERNS = (
    "**/*.js",
    "**/*.jsx",
    "**/*.ts",
    "**/*.tsx",
    "**/*.vue",
    "**/*.svelte",
    "**/*.html",
)


class JwtStorageChecker(Checker):
    id = "jwt-storage-checker"
    name = "JWT in Browser Storage Check"
    description = "Checks for JWT tokens stored in localStorage or sessionStorage"
    pass_id = "jwt-storage"
    severity = Severity.HIGH

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)
        files = await self.discover(options, CLIENT_CODE_PATTERNS)
        if not files:
            return [self.passing("No frontend code files found to scan")]

        contexts = [c for c in await self.load(options, files) if not is_test_path(c.relative_path)]
        findings: list[Finding] = []
        for ctx in contexts:
            if options.verbose:
                log.debug("Scanning %s for insecure JWT storage", ctx.relative_path)
            # first hit only; one finding per file
            for line_no, line in ctx.iter_lines():
                if any(p.search(line) for p in JWT_STORAGE_PATTERNS):
                    findings.append(
                        Finding(
                            id="jwt-local-storage",
                            name="JWT Token in Browser Storage",
                            description="JWT tokens stored in localStorage or sessionStorage can be stolen through XSS",
                            severity=Severity.HIGH,
                            passed=False,
                            details=f"Found a token stored in browser storage in {ctx.relative_path}:{line_no}",
                            location=Location(file=ctx.relative_path, line=line_no, code=line.strip()),
                            recommendation=(
                                "Store session tokens in HttpOnly, Secure cookies instead of localStorage "
                                "or sessionStorage."
                            ),
                        )
                    )
                    break

        if not findings:
            return [self.passing(f"No tokens found in localStorage or sessionStorage across {len(contexts)} files")]
        return findings
