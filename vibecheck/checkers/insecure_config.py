# Insecure configuration values: disabled TLS checks, debug flags, weak hashes

import re

from vibecheck.checkers.base import LineRule, TableChecker
from vibecheck.findings.models import Severity

CONFIG_RULES = (
    LineRule(
        "disabled-ssl",
        "SSL/TLS Verification Disabled",
        "SSL/TLS verification disabled",
        re.compile(r"\bssl\s*:\s*false|rejectUnauthorized\s*:\s*false|NODE_TLS_REJECT_UNAUTHORIZED\s*=\s*[\"']?0"),
        Severity.HIGH,
        "Keep certificate verification enabled for every outbound connection.",
    ),
    LineRule(
        "debug-mode",
        "Debug Mode Enabled",
        "Debug mode potentially enabled in production",
        re.compile(r"\bdebug\s*:\s*true|NODE_ENV\s*=\s*[\"']development[\"']|isDevelopment\s*:\s*true"),
        Severity.MEDIUM,
        "Drive debug settings from the environment and keep them off in production.",
    ),
    LineRule(
        "exposed-endpoints",
        "Internal Endpoint in Configuration",
        "Internal endpoints potentially exposed",
        re.compile(r"\b(?:internal|admin|debug)\w*(?:url|endpoint|api)\w*\s*[:=]\s*[\"'](?:https?://|/)[^\"']+[\"']", re.IGNORECASE),
        Severity.LOW,
        "Keep internal endpoints out of client configuration and behind authentication.",
    ),
    LineRule(
        "insecure-cookies",
        "Insecure Cookie Configuration",
        "Insecure cookie configuration",
        re.compile(r"cookie.*\b(?:secure|httpOnly)\s*:\s*false|\bsameSite\s*:\s*[\"']none[\"']", re.IGNORECASE),
        Severity.MEDIUM,
        "Enable secure and httpOnly and choose SameSite=Lax or Strict.",
    ),
    LineRule(
        "cors-all",
        "CORS Allows All Origins",
        "CORS configured to allow all origins",
        re.compile(r"\bcors\s*\(\s*\{\s*origin\s*:\s*[\"']?\*[\"']?\s*\}|Access-Control-Allow-Origin:\s*\*"),
        Severity.MEDIUM,
        "Restrict CORS to specific trusted origins.",
    ),
    LineRule(
        "exposed-errors",
        "Error Details Exposed",
        "Potential exposure of error details",
        re.compile(r"\bstackTrace\b|\berror\.stack\b|\bshowErrors\s*:\s*true"),
        Severity.LOW,
        "Log error details server-side and return generic messages to clients.",
    ),
    LineRule(
        "weak-crypto",
        "Weak Cryptographic Algorithm",
        "Usage of weak cryptographic algorithms",
        re.compile(r"createHash\s*\(\s*[\"'](?:md5|sha1)[\"']|\bcrypto\b.*\b(?:md5|sha1)\b", re.IGNORECASE),
        Severity.MEDIUM,
        "Use SHA-256 or stronger, and a dedicated password hash for passwords.",
    ),
)


class ConfigChecker(TableChecker):
    id = "config-checker"
    name = "Configuration Security Check"
    description = "Checks for insecure configuration settings"
    pass_id = "config-check"
    severity = Severity.MEDIUM

    ID_PREFIX = "config"
    FILE_PATTERNS = (
        "**/config.ts",
        "**/config.js",
        "**/settings.ts",
        "**/settings.js",
        "**/middleware.ts",
        "**/middleware.js",
        "**/server.ts",
        "**/server.js",
        "**/*.config.ts",
        "**/*.config.js",
        "**/*.config.mjs",
    )
    RULES = CONFIG_RULES
