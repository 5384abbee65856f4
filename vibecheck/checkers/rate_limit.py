# Rate limiting presence: API route handlers with no rate-limit signature anywhere in their path

from __future__ import annotations

import re
from dataclasses import dataclass

from vibecheck.checkers.base import Checker, CheckOptions, is_test_path
from vibecheck.context import FileContext
from vibecheck.findings.models import Finding, Location, Severity


@dataclass(frozen=True)
class Framework:
    name: str
    file_patterns: tuple[str, ...]
    route_patterns: tuple[re.Pattern, ...]
    rate_limit_patterns: tuple[re.Pattern, ...]


_SERVER_ENTRY_FILES = (
    "**/app.js",
    "**/app.ts",
    "**/server.js",
    "**/server.ts",
    "**/index.js",
    "**/index.ts",
)

FRAMEWORKS: tuple[Framework, ...] = (
    Framework(
        "Next.js API",
        ("**/pages/api/**/*.js", "**/pages/api/**/*.ts", "**/app/**/route.js", "**/app/**/route.ts"),
        (
            re.compile(r"export\s+(?:default|const|async\s+function|function)"),
        ),
        (
            re.compile(r"rate-?limit", re.IGNORECASE),
            re.compile(r"@upstash/ratelimit"),
            re.compile(r"\blimiter\b"),
        ),
    ),
    Framework(
        "Express.js",
        _SERVER_ENTRY_FILES + ("**/routes/**/*.js", "**/routes/**/*.ts"),
        (
            re.compile(r"\b(?:app|router)\.(?:get|post|put|delete|patch|all)\s*\("),
            re.compile(r"express\(\)"),
        ),
        (
            re.compile(r"express-rate-limit"),
            re.compile(r"rate-?limit", re.IGNORECASE),
            re.compile(r"new\s+RateLimit"),
            re.compile(r"\blimiter\b"),
        ),
    ),
    Framework(
        "Koa.js",
        _SERVER_ENTRY_FILES,
        (
            re.compile(r"new\s+Koa\(\)"),
            re.compile(r"koa-router"),
        ),
        (
            re.compile(r"koa-ratelimit"),
            re.compile(r"ratelimit", re.IGNORECASE),
        ),
    ),
    Framework(
        "Fastify",
        _SERVER_ENTRY_FILES,
        (
            re.compile(r"\bfastify\s*\("),
            re.compile(r"\.route\s*\("),
        ),
        (
            re.compile(r"fastify-rate-limit"),
            re.compile(r"[@'\"]fastify/rate-limit"),
        ),
    ),
    Framework(
        "NestJS",
        ("**/*.controller.ts",),
        (
            re.compile(r"@Controller\b"),
            re.compile(r"@(?:Get|Post|Put|Delete|Patch)\("),
        ),
        (
            re.compile(r"@Throttle\b"),
            re.compile(r"ThrottlerGuard"),
            re.compile(r"RateLimit"),
        ),
    ),
)

# Files that apply to every route when they carry a rate limiter.
GLOBAL_FILE_PATTERNS = (
    "**/middleware.js",
    "**/middleware.ts",
    "**/main.ts",
) + _SERVER_ENTRY_FILES

GLOBAL_RATE_LIMIT_PATTERNS = (
    re.compile(r"express-rate-limit|koa-ratelimit|fastify-rate-limit|@fastify/rate-limit|@upstash/ratelimit"),
    re.compile(r"ThrottlerModule|ThrottlerGuard"),
    re.compile(r"\b(?:app|server|router)\.(?:use|register)\s*\([^)]*(?:rate-?limit|limiter)", re.IGNORECASE),
)

MUTATION_PATTERN = re.compile(
    r"\b(?:export\s+(?:async\s+)?function|export\s+const)\s+(?:POST|PUT|PATCH|DELETE)\b"
    r"|\.(?:post|put|patch|delete)\s*\("
    r"|@(?:Post|Put|Patch|Delete)\("
    r"|method\s*===?\s*['\"](?:POST|PUT|PATCH|DELETE)['\"]"
    r"|case\s+['\"](?:POST|PUT|PATCH|DELETE)['\"]"
)


def has_any(patterns: tuple[re.Pattern, ...], text: str) -> bool:
    return any(p.search(text) for p in patterns)


class RateLimitChecker(Checker):
    id = "rate-limit-checker"
    name = "API Rate Limiting Check"
    description = "Checks if API endpoints have rate limiting configured"
    pass_id = "rate-limit-check"
    severity = Severity.MEDIUM

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)

        global_files = await self.discover(options, GLOBAL_FILE_PATTERNS)
        for ctx in await self.load(options, global_files):
            if is_test_path(ctx.relative_path):
                continue
            if has_any(GLOBAL_RATE_LIMIT_PATTERNS, ctx.text):
                log.debug("Global rate limiting found in %s", ctx.relative_path)
                return [self.passing(f"Rate limiting is configured globally in {ctx.relative_path}")]

        findings: list[Finding] = []
        seen: set[str] = set()
        routes_found = 0
        for framework in FRAMEWORKS:
            files = await self.discover(options, framework.file_patterns)
            for ctx in await self.load(options, files):
                if ctx.relative_path in seen or is_test_path(ctx.relative_path):
                    continue
                route = next((m for p in framework.route_patterns for m in [p.search(ctx.text)] if m), None)
                if route is None:
                    continue
                seen.add(ctx.relative_path)
                routes_found += 1
                if options.verbose:
                    log.debug("Found %s endpoints in %s", framework.name, ctx.relative_path)
                if has_any(framework.rate_limit_patterns, ctx.text):
                    continue
                findings.append(self._missing(framework, ctx, ctx.line_of(route.start())))

        if routes_found == 0:
            return [self.passing("No API endpoints were found in the scanned codebase")]
        if not findings:
            return [self.passing(f"All {routes_found} API route files have rate limiting implemented")]
        return findings

    @staticmethod
    def _missing(framework: Framework, ctx: FileContext, line: int) -> Finding:
        location = Location(file=ctx.relative_path, line=line, code=ctx.line_text(line))
        recommendation = (
            f"Add rate limiting middleware to protect your {framework.name} API endpoints from abuse, "
            "or apply a limiter globally in middleware."
        )
        if MUTATION_PATTERN.search(ctx.text):
            return Finding(
                id="rate-limit-missing-mutation",
                name="Missing Rate Limiting on Mutating Endpoint",
                description=f"{framework.name} endpoint that modifies data has no rate limiting protection",
                severity=Severity.HIGH,
                passed=False,
                details=f"Found {framework.name} POST/PUT/PATCH/DELETE handlers without rate limiting in {ctx.relative_path}",
                location=location,
                recommendation=recommendation,
            )
        return Finding(
            id="rate-limit-missing",
            name="Missing API Rate Limiting",
            description=f"{framework.name} API endpoints without rate limiting protection",
            severity=Severity.MEDIUM,
            passed=False,
            details=f"Found {framework.name} API endpoints without rate limiting in {ctx.relative_path}",
            location=location,
            recommendation=recommendation,
        )
