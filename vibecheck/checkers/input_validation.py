# Input validation: request data flowing into SQL, shell commands, eval, paths, regexes and parsers

import re

from vibecheck.checkers.base import LineRule, TableChecker
from vibecheck.findings.models import Severity

VALIDATION_RULES = (
    LineRule(
        "sql-injection",
        "SQL Injection",
        "Potential SQL injection vulnerability",
        re.compile(r"`\s*(?:SELECT|INSERT|UPDATE|DELETE)\b.*\$\{|\.query\s*\(\s*[\"'`][^\"'`]*\$\{", re.IGNORECASE),
        Severity.CRITICAL,
        "Use parameterized queries or an ORM instead of interpolating values into SQL.",
    ),
    LineRule(
        "unsafe-eval",
        "Dynamic Code Execution",
        "Unsafe dynamic code execution",
        re.compile(r"\beval\s*\(.*\$\{|\bnew\s+Function\s*\(.*\$\{|\bsetTimeout\s*\(\s*[\"'`].*\$\{"),
        Severity.CRITICAL,
        "Never evaluate strings built from user input.",
    ),
    LineRule(
        "no-validation",
        "Unvalidated Request Parameter",
        "Direct use of request parameters without validation",
        re.compile(r"\breq\.(?:body|query|params)\.[A-Za-z_$][\w$]*"),
        Severity.MEDIUM,
        "Validate request input with a schema library such as zod or joi before using it.",
    ),
    LineRule(
        "command-injection",
        "Command Injection",
        "Potential command injection vulnerability",
        re.compile(r"\b(?:exec|execSync|spawn|spawnSync)\s*\(\s*[\"'`][^\"'`]*\$\{"),
        Severity.CRITICAL,
        "Pass arguments as an array to execFile/spawn and validate them against an allowlist.",
    ),
    LineRule(
        "path-traversal",
        "Path Traversal",
        "Potential path traversal vulnerability",
        re.compile(r"\b(?:fs|path)\b.*\$\{[^}]*\b(?:req|params|query|body)\b"),
        Severity.HIGH,
        "Resolve user-supplied paths against a base directory and reject anything outside it.",
    ),
    LineRule(
        "unsafe-regex",
        "Dynamic Regular Expression",
        "Dynamic regular expression creation",
        re.compile(r"\bnew\s+RegExp\s*\(\s*(?:[\"'`][^\"'`]*\$\{|(?:req|params|query|body)\b)"),
        Severity.MEDIUM,
        "Escape user input before building a RegExp, or avoid dynamic patterns.",
    ),
    LineRule(
        "unsafe-deserialization",
        "Unsafe Deserialization",
        "Unsafe deserialization of user input",
        re.compile(r"\b(?:JSON\.parse|deserialize|unserialize)\s*\(\s*[^)]*\b(?:req|body|params|query)\b"),
        Severity.HIGH,
        "Validate parsed input against a schema before use.",
    ),
)


class InputValidationChecker(TableChecker):
    id = "input-validation-checker"
    name = "Input Validation Check"
    description = "Checks for unvalidated user input reaching dangerous sinks"
    pass_id = "validation-check"
    severity = Severity.HIGH

    ID_PREFIX = "validation"
    FILE_PATTERNS = (
        "**/route.ts",
        "**/route.js",
        "**/api/**/*.ts",
        "**/api/**/*.js",
        "**/controllers/**/*.ts",
        "**/controllers/**/*.js",
        "**/handlers/**/*.ts",
        "**/handlers/**/*.js",
        "**/middleware/**/*.ts",
        "**/middleware/**/*.js",
    )
    RULES = VALIDATION_RULES
