from __future__ import annotations

"""
Scan configuration: the checker registry, the config file model, and the
built-in profiles that config files can extend.

The registry is the single place that decides which checkers exist and in
which order they run. Config files (``vibecheck.config.json`` and friends)
are parsed into ConfigFile by vibecheck.config_loader; this module only
defines their shape and the lookups the post-processor needs.
"""

from typing import Any, Iterable, List, Optional, Sequence

from pydantic import BaseModel, ConfigDict, Field

from vibecheck.checkers.ai_cost_controls import AiCostControlsChecker
from vibecheck.checkers.api_keys import ApiKeyChecker
from vibecheck.checkers.auth import AuthChecker
from vibecheck.checkers.base import Checker
from vibecheck.checkers.cors import CorsChecker
from vibecheck.checkers.info_disclosure import InfoDisclosureChecker
from vibecheck.checkers.input_validation import InputValidationChecker
from vibecheck.checkers.insecure_config import ConfigChecker
from vibecheck.checkers.insecure_cookies import InsecureCookiesChecker
from vibecheck.checkers.jwt_storage import JwtStorageChecker
from vibecheck.checkers.public_env import PublicEnvChecker
from vibecheck.checkers.rate_limit import RateLimitChecker
from vibecheck.checkers.rls import SupabaseRlsChecker
from vibecheck.checkers.xss import XssChecker
from vibecheck.findings.models import Severity

BUILTIN_PREFIX = "vibecheck:"


class _ConfigModel(BaseModel):
    # camelCase in files, snake_case in code
    model_config = ConfigDict(populate_by_name=True, extra="ignore")


class SeverityOverride(_ConfigModel):
    id: str
    severity: Severity


class ReportOptions(_ConfigModel):
    format: Optional[str] = None
    output_file: Optional[str] = Field(None, alias="outputFile")
    show_passed: Optional[bool] = Field(None, alias="showPassed")


class ConfigFile(_ConfigModel):
    """
    Parsed config file.

    ``checker_options`` is an open mapping from checker id to that checker's
    own option bag; each checker validates its bag with its own model.
    """

    extends: Optional[str] = None
    ignore_patterns: List[str] = Field(default_factory=list, alias="ignorePatterns")
    skip_checkers: List[str] = Field(default_factory=list, alias="skipCheckers")
    severity_overrides: List[SeverityOverride] = Field(default_factory=list, alias="severityOverrides")
    ignore_issues: List[str] = Field(default_factory=list, alias="ignoreIssues")
    report_options: ReportOptions = Field(default_factory=ReportOptions, alias="reportOptions")
    checker_options: dict[str, dict[str, Any]] = Field(default_factory=dict, alias="checkerOptions")

    def options_for(self, checker_id: str) -> dict[str, Any]:
        return dict(self.checker_options.get(checker_id, {}))


def _overrides(*pairs: tuple[str, Severity]) -> list[SeverityOverride]:
    return [SeverityOverride(id=finding_id, severity=sev) for finding_id, sev in pairs]


# Profiles referenced as "vibecheck:<name>" from a config's extends.
BUILTIN_PROFILES: dict[str, ConfigFile] = {
    "recommended": ConfigFile(
        severity_overrides=_overrides(
            ("jwt-local-storage", Severity.CRITICAL),
            ("cors-wildcard-origin", Severity.HIGH),
        ),
    ),
    "strict": ConfigFile(
        severity_overrides=_overrides(
            ("jwt-local-storage", Severity.CRITICAL),
            ("cors-wildcard-origin", Severity.CRITICAL),
            ("cors-express-wildcard", Severity.CRITICAL),
            ("missing-secure-flag", Severity.CRITICAL),
            ("missing-httponly-flag", Severity.CRITICAL),
            ("missing-samesite-attribute", Severity.HIGH),
            ("rate-limit-missing", Severity.HIGH),
        ),
    ),
    "next": ConfigFile(
        checker_options={PublicEnvChecker.id: {"checkPublicEnv": True}},
    ),
    "supabase": ConfigFile(
        checker_options={SupabaseRlsChecker.id: {"checkRls": True}},
    ),
}


def get_default_checkers() -> list[Checker]:
    """
    Return one instance of every registered checker, in run order.

    Adding a checker means adding it here; nothing else needs to change.
    """
    return [
        ApiKeyChecker(),
        PublicEnvChecker(),
        SupabaseRlsChecker(),
        RateLimitChecker(),
        JwtStorageChecker(),
        CorsChecker(),
        AiCostControlsChecker(),
        InsecureCookiesChecker(),
        XssChecker(),
        AuthChecker(),
        ConfigChecker(),
        InfoDisclosureChecker(),
        InputValidationChecker(),
    ]


def get_enabled_checkers(skip: Iterable[str] = ()) -> Sequence[Checker]:
    """Registry order minus any checker whose id is in ``skip``."""
    skipped = set(skip)
    return [c for c in get_default_checkers() if c.id not in skipped]


def get_severity_override(finding_id: str, config: Optional[ConfigFile]) -> Optional[Severity]:
    """Severity override for ``finding_id``; the last matching entry wins."""
    if config is None:
        return None
    found: Optional[Severity] = None
    for override in config.severity_overrides:
        if override.id == finding_id:
            found = override.severity
    return found


def is_issue_ignored(finding_id: str, config: Optional[ConfigFile]) -> bool:
    return config is not None and finding_id in config.ignore_issues
