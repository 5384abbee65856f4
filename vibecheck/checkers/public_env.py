# Public environment variable exposure: secrets behind a client-exposed prefix (NEXT_PUBLIC_)

from __future__ import annotations

import re

from pydantic import Field

from vibecheck.checkers.base import CheckerOptionsModel, Checker, CheckOptions
from vibecheck.findings.models import Finding, Location, Severity

ENV_FILE_PATTERNS = (
    "**/.env",
    "**/.env.*",
    "**/next.config.js",
    "**/next.config.mjs",
    "**/next.config.ts",
)

# Names that are sensitive regardless of suffix.
SENSITIVE_NAMES = re.compile(r"SUPABASE_SERVICE|SUPABASE_KEY|OPENAI|ANTHROPIC|STRIPE_SECRET|DATABASE_URL")
SENSITIVE_SUFFIX = re.compile(r"_(?:KEY|SECRET|PASSWORD|PASS|TOKEN|PRIVATE_KEY|CREDENTIALS?)\b", re.IGNORECASE)

COMMENT_PREFIXES = ("#", "//", "/*", "*")


class PublicEnvOptions(CheckerOptionsModel):
    check_public_env: bool = Field(True, alias="checkPublicEnv")
    additional_env_files: list[str] = Field(default_factory=list, alias="additionalEnvFiles")
    public_prefixes: list[str] = Field(default_factory=lambda: ["NEXT_PUBLIC_"], alias="publicPrefixes")


def _name_pattern(prefixes: list[str]) -> re.Pattern:
    alternatives = "|".join(re.escape(p) for p in prefixes)
    return re.compile(rf"\b((?:{alternatives})[A-Za-z0-9_]+)")


def is_sensitive_name(name: str) -> bool:
    return bool(SENSITIVE_NAMES.search(name.upper()) or SENSITIVE_SUFFIX.search(name))


class PublicEnvChecker(Checker):
    """Flags sensitive-looking variables that carry the browser-exposed prefix."""

    id = "next-public-env-checker"
    name = "Next.js Public Environment Variable Check"
    description = "Checks for sensitive data in NEXT_PUBLIC_ environment variables"
    pass_id = "next-public-env"
    severity = Severity.MEDIUM
    options_model = PublicEnvOptions

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)
        opts: PublicEnvOptions = self.parse_options(options)
        if not opts.check_public_env:
            return [self.passing("Public environment variable check disabled by configuration")]

        # .env files are usually gitignored but still end up in the client bundle
        files = await self.discover(
            options, list(ENV_FILE_PATTERNS) + opts.additional_env_files, use_gitignore=False
        )
        if not files:
            log.debug("No environment files found")
            return [self.passing("No environment files found to scan")]

        name_rx = _name_pattern(opts.public_prefixes or ["NEXT_PUBLIC_"])
        contexts = await self.load(options, files)
        findings: list[Finding] = []
        for ctx in contexts:
            if options.verbose:
                log.debug("Scanning %s for sensitive public env variables", ctx.relative_path)
            for line_no, raw in ctx.iter_lines():
                line = raw.strip()
                if not line or line.startswith(COMMENT_PREFIXES):
                    continue
                seen: set[str] = set()
                for m in name_rx.finditer(line):
                    var = m.group(1)
                    if var in seen or not is_sensitive_name(var):
                        continue
                    seen.add(var)
                    findings.append(
                        Finding(
                            id="next-public-env-exposed",
                            name="Exposed Sensitive Data in Public Environment Variable",
                            description="Found sensitive data exposed in a client-side public environment variable",
                            severity=Severity.CRITICAL,
                            passed=False,
                            details=f"Public environment variable {var} looks sensitive in {ctx.relative_path}:{line_no}",
                            location=Location(file=ctx.relative_path, line=line_no, code=line, column=m.start(1) + 1),
                            recommendation=(
                                "Remove the public prefix and read the value server-side only, "
                                "e.g. from an API route or server component."
                            ),
                        )
                    )

        if not findings:
            return [self.passing(f"No sensitive data found in public environment variables across {len(contexts)} files")]
        return findings
