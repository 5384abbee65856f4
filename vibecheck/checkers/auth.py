# Authentication anti-patterns in route, middleware and auth code

import re

from vibecheck.checkers.base import LineRule, TableChecker
from vibecheck.findings.models import Severity

AUTH_RULES = (
    LineRule(
        "hardcoded-credentials",
        "Hardcoded Credentials",
        "Hardcoded credentials found",
        re.compile(r"\b(?:const|let|var)\s+(?:password|secret|token|auth|api_?key)\s*=\s*[\"'`][^\"'`]+[\"'`]", re.IGNORECASE),
        Severity.CRITICAL,
        "Load credentials from environment variables or a secret manager.",
    ),
    LineRule(
        "plain-text-password",
        "Plain Text Password Comparison",
        "Plain text password comparison found",
        re.compile(r"\bpassword\s*===?\s*[\"'`][^\"'`]+[\"'`]"),
        Severity.HIGH,
        "Hash passwords with bcrypt or argon2 and compare with a constant-time check.",
    ),
    LineRule(
        "missing-auth",
        "Endpoint Missing Authentication",
        "Endpoint potentially missing authentication",
        re.compile(r"\b(?:app|router)\.(?:delete|put|post|patch)\s*\([^)]*\)\s*=>\s*\{(?![^}]*auth)"),
        Severity.HIGH,
        "Add authentication middleware to mutating endpoints.",
    ),
    LineRule(
        "weak-password",
        "Weak Password Policy",
        "Weak password policy found",
        re.compile(r"\bminLength\s*:\s*[1-7]\b|\bpassword\.length\s*>=?\s*[1-7]\b"),
        Severity.MEDIUM,
        "Require passwords of at least 8 characters and check them against breached-password lists.",
    ),
    LineRule(
        "token-exposure",
        "Token Exposed in URL",
        "Authentication token potentially exposed in URL",
        re.compile(r"[?&](?:token|jwt|access_token|auth)=|\b(?:jwt|token)\b.*\b(?:searchParams|query)\.(?:get\(|token|jwt)", re.IGNORECASE),
        Severity.HIGH,
        "Send tokens in the Authorization header or an HttpOnly cookie, never in the URL.",
    ),
    LineRule(
        "insecure-session",
        "Insecure Session Configuration",
        "Insecure session configuration found",
        re.compile(r"session\s*\(?\s*\{[^}]*(?:secure|httpOnly)\s*:\s*false"),
        Severity.HIGH,
        "Enable the secure and httpOnly flags on session cookies.",
    ),
)


class AuthChecker(TableChecker):
    id = "auth-checker"
    name = "Authentication Security Check"
    description = "Checks for authentication and session anti-patterns"
    pass_id = "auth-check"
    severity = Severity.HIGH

    ID_PREFIX = "auth"
    FILE_PATTERNS = (
        "**/route.ts",
        "**/route.js",
        "**/api/**/*.ts",
        "**/api/**/*.js",
        "**/auth/**/*.ts",
        "**/auth/**/*.js",
        "**/middleware.ts",
        "**/middleware.js",
        "**/config.ts",
        "**/config.js",
    )
    RULES = AUTH_RULES
