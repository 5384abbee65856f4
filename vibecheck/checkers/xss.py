# XSS-prone sinks: raw HTML injection, DOM writes and string evaluation in frontend code

import re

from vibecheck.checkers.base import LineRule, TableChecker
from vibecheck.findings.models import Severity

XSS_RULES = (
    LineRule(
        "dangerously-set-inner-html",
        "Usage of dangerouslySetInnerHTML",
        "Usage of dangerouslySetInnerHTML found",
        re.compile(r"dangerouslySetInnerHTML\s*=\s*\{"),
        Severity.HIGH,
        "Render content through React instead of dangerouslySetInnerHTML, or sanitize it with DOMPurify first.",
    ),
    LineRule(
        "inner-html",
        "Direct innerHTML Assignment",
        "Direct DOM manipulation via innerHTML/outerHTML",
        re.compile(r"\.(?:innerHTML|outerHTML)\s*=(?!=)"),
        Severity.HIGH,
        "Use textContent or createElement instead of assigning HTML strings.",
    ),
    LineRule(
        "unsafe-iframe",
        "Dynamic iframe Source",
        "Potentially unsafe iframe src found",
        re.compile(r"<iframe[^>]*\bsrc\s*=\s*\{", re.IGNORECASE),
        Severity.MEDIUM,
        "Validate iframe sources against an allowlist and add the sandbox attribute.",
    ),
    LineRule(
        "unsafe-style",
        "Dynamic Style Injection",
        "Dynamic style injection found",
        re.compile(r"\bstyle\s*=\s*\{\s*\{?[^}]*\$\{"),
        Severity.LOW,
        "Use CSS classes or styled components rather than interpolated style values.",
    ),
    LineRule(
        "eval",
        "String Evaluation",
        "Potentially unsafe code execution via eval or similar functions",
        re.compile(r"\b(?:eval|Function|setTimeout|setInterval)\s*\(\s*[\"'`]"),
        Severity.CRITICAL,
        "Avoid eval() and passing strings to Function, setTimeout or setInterval.",
    ),
    LineRule(
        "document-write",
        "Usage of document.write",
        "Usage of document.write found",
        re.compile(r"\bdocument\.(?:write|writeln)\s*\("),
        Severity.MEDIUM,
        "Use DOM APIs instead of document.write.",
    ),
    LineRule(
        "raw-html",
        "Raw HTML Injection",
        "Raw HTML injection found",
        re.compile(r"__html\s*:\s*(?![\"'`]\s*[\"'`])"),
        Severity.HIGH,
        "Sanitize HTML with a library such as DOMPurify before rendering it.",
    ),
)


class XssChecker(TableChecker):
    id = "xss-checker"
    name = "Cross-Site Scripting (XSS) Check"
    description = "Checks for potential XSS vulnerabilities in frontend code"
    pass_id = "xss-check"
    severity = Severity.HIGH

    ID_PREFIX = "xss"
    FILE_PATTERNS = ("**/*.tsx", "**/*.jsx", "**/*.ts", "**/*.js", "**/*.vue", "**/*.svelte", "**/*.html")
    RULES = XSS_RULES
