# Information disclosure: stack traces, versions, internal paths and debug output in server code

import re

from vibecheck.checkers.base import LineRule, TableChecker
from vibecheck.findings.models import Severity

DISCLOSURE_RULES = (
    LineRule(
        "sensitive-headers",
        "Technology Headers Exposed",
        "Sensitive headers exposed",
        re.compile(r"\b(?:res|response)\.(?:header|setHeader|set)\s*\(\s*[\"'`](?:Server|X-Powered-By|X-AspNet-Version|X-AspNetMvc-Version)[\"'`]", re.IGNORECASE),
        Severity.LOW,
        "Remove headers that reveal the technology stack, e.g. app.disable('x-powered-by').",
    ),
    LineRule(
        "error-details",
        "Error Details in Response",
        "Detailed error information potentially exposed",
        re.compile(r"\.status\s*\(\s*\d+\s*\)\s*\.(?:send|json)\s*\(\s*(?:\{\s*)?(?:error|err)\b(?!\s*:\s*[\"'`])"),
        Severity.MEDIUM,
        "Return generic error messages in production and log the details server-side.",
    ),
    LineRule(
        "sensitive-data",
        "Sensitive Data Exposed",
        "Sensitive data potentially exposed",
        re.compile(r"\b(?:password|secret|private_?key|credit_?card|ssn)\w*\s*:\s*[\"'`][^\"'`]+[\"'`]", re.IGNORECASE),
        Severity.HIGH,
        "Make sure sensitive values are never logged or included in responses.",
    ),
    LineRule(
        "stack-trace",
        "Stack Trace Exposed",
        "Stack trace potentially exposed",
        re.compile(r"\bconsole\.(?:log|error)\s*\(\s*(?:error|err)\b|\b(?:error|err)\.stack\b"),
        Severity.MEDIUM,
        "Do not send stack traces to clients in production.",
    ),
    LineRule(
        "version-info",
        "Version Information Exposed",
        "Version information exposed",
        re.compile(r"\bversion\s*:\s*[\"'`]\d+(?:\.\d+)+[\"'`]|\bv\d+\.\d+\.\d+\b"),
        Severity.LOW,
        "Remove or mask version information in responses.",
    ),
    LineRule(
        "internal-paths",
        "Internal Paths Exposed",
        "Internal file paths potentially exposed",
        re.compile(r"\b__dirname\b|\bprocess\.cwd\(\)"),
        Severity.LOW,
        "Avoid returning internal file paths to clients.",
    ),
    LineRule(
        "debug-info",
        "Debug Output",
        "Debug information potentially exposed",
        re.compile(r"\bconsole\.(?:log|debug|info)\s*\(|\bdebug\s*:\s*true"),
        Severity.LOW,
        "Remove debug logging from production code paths or route it through a leveled logger.",
    ),
)


class InfoDisclosureChecker(TableChecker):
    id = "info-disclosure-checker"
    name = "Information Disclosure Check"
    description = "Checks for information disclosure in API and server code"
    pass_id = "disclosure-check"
    severity = Severity.MEDIUM

    ID_PREFIX = "disclosure"
    FILE_PATTERNS = (
        "**/route.ts",
        "**/route.js",
        "**/api/**/*.ts",
        "**/api/**/*.js",
        "**/middleware/**/*.ts",
        "**/middleware/**/*.js",
        "**/error/**/*.ts",
        "**/handlers/**/*.ts",
        "**/handlers/**/*.js",
        "**/config/**/*.ts",
    )
    RULES = DISCLOSURE_RULES
