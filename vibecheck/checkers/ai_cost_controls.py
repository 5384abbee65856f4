# Generative AI cost controls: provider SDK calls without token limits, budget tracking or error handling

from __future__ import annotations

import re
from dataclasses import dataclass

from vibecheck.checkers.base import Checker, CheckOptions, is_test_path
from vibecheck.context import FileContext
from vibecheck.findings.models import Finding, Location, Severity


@dataclass(frozen=True)
class Provider:
    key: str
    label: str
    usage: re.Pattern
    parameter_controls: re.Pattern
    parameter_hint: str


PROVIDERS: tuple[Provider, ...] = (
    Provider(
        "openai", "OpenAI",
        re.compile(r"new\s+OpenAI\b|\bOpenAI\s*\(|\bopenai\.(?:chat\.completions|completions|embeddings|images|responses)", re.IGNORECASE),
        re.compile(r"max_?tokens|max_completion_tokens|max_output_tokens|frequency_penalty|presence_penalty|\btop_p\b|max_?retries|\btimeout\b", re.IGNORECASE),
        "max_tokens, temperature and frequency_penalty",
    ),
    Provider(
        "anthropic", "Anthropic",
        re.compile(r"new\s+Anthropic\b|\bAnthropic\s*\(|\banthropic\.(?:messages|completions)", re.IGNORECASE),
        re.compile(r"max_?tokens|max_tokens_to_sample|\btop_p\b|\btop_k\b|stop_sequences", re.IGNORECASE),
        "max_tokens, top_p and stop_sequences",
    ),
    Provider(
        "cohere", "Cohere",
        re.compile(r"new\s+CohereClient\b|\bcohere\.(?:Client|ClientV2)\s*\(|\bcohere\.(?:generate|chat|embed|classify|summarize)", re.IGNORECASE),
        re.compile(r"max_?tokens|\bp\s*[:=]|\bk\s*[:=]|frequency_penalty|presence_penalty|\btruncate\b", re.IGNORECASE),
        "max_tokens, p and k",
    ),
)

BUDGET_CONTROL = re.compile(r"(?:token|budget|cost|spend)_?(?:limit|cap|max|monitor|track|count|usage)", re.IGNORECASE)

# JS try/catch or promise .catch(), Python try/except
ERROR_HANDLING = re.compile(r"\btry\s*\{[\s\S]*?\}\s*catch\b|\.catch\s*\(|\btry\s*:[\s\S]*?\bexcept\b")

CODE_FILE_PATTERNS = (
    "**/*.js",
    "**/*.jsx",
    "**/*.mjs",
    "**/*.ts",
    "**/*.tsx",
    "**/*.py",
)


class AiCostControlsChecker(Checker):
    """
    Each provider found in a file is checked on three independent dimensions,
    so one call site can produce up to three findings.
    """

    id = "ai-cost-controls-checker"
    name = "AI API Cost Controls Check"
    description = "Checks for missing cost controls when using AI APIs"
    pass_id = "ai-cost-controls"
    severity = Severity.MEDIUM

    async def check(self, options: CheckOptions) -> list[Finding]:
        log = self.logger(options)
        files = await self.discover(options, CODE_FILE_PATTERNS)
        if not files:
            return [self.passing("No relevant code files found to scan")]

        contexts = [c for c in await self.load(options, files) if not is_test_path(c.relative_path)]
        findings: list[Finding] = []
        usages = 0
        for ctx in contexts:
            if options.verbose:
                log.debug("Scanning %s for AI API usage", ctx.relative_path)
            for provider in PROVIDERS:
                m = provider.usage.search(ctx.text)
                if m is None:
                    continue
                usages += 1
                findings.extend(self._check_provider(provider, ctx, ctx.line_of(m.start())))

        if usages == 0:
            return [self.passing(f"No AI API usage found in {len(contexts)} scanned files")]
        if not findings:
            return [self.passing(f"Found {usages} AI API usages with cost controls in place")]
        return findings

    def _check_provider(self, provider: Provider, ctx: FileContext, line: int) -> list[Finding]:
        location = Location(file=ctx.relative_path, line=line, code=ctx.line_text(line))
        where = f"{ctx.relative_path}:{line}"
        findings: list[Finding] = []

        if not provider.parameter_controls.search(ctx.text):
            findings.append(Finding(
                id=f"{provider.key}-missing-parameter-controls",
                name=f"{provider.label} API Missing Parameter Controls",
                description=f"{provider.label} API usage without parameters that limit tokens or generation",
                severity=Severity.MEDIUM,
                passed=False,
                details=f"{provider.label} API usage without parameter controls in {where}",
                location=location,
                recommendation=f"Set parameter controls such as {provider.parameter_hint} on every request to bound cost.",
            ))
        if not BUDGET_CONTROL.search(ctx.text):
            findings.append(Finding(
                id=f"{provider.key}-missing-budget-controls",
                name=f"{provider.label} API Missing Budget Controls",
                description=f"{provider.label} API usage without token counting or budget tracking",
                severity=Severity.HIGH,
                passed=False,
                details=f"{provider.label} API usage without budget controls in {where}",
                location=location,
                recommendation="Track token usage per user or request and enforce a spending cap before calling the API.",
            ))
        if not ERROR_HANDLING.search(ctx.text):
            findings.append(Finding(
                id=f"{provider.key}-missing-error-handling",
                name=f"{provider.label} API Missing Error Handling",
                description=f"{provider.label} API usage without error handling",
                severity=Severity.MEDIUM,
                passed=False,
                details=f"{provider.label} API usage without error handling in {where}",
                location=location,
                recommendation="Wrap API calls in error handling so failures do not trigger unbounded retries.",
            ))
        return findings
