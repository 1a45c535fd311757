# faultdomain/config/validator.py
"""
Configuration Validator

Validates configuration for illegal/misleading combinations.
Returns structured issues with level (warn/error), path, message, hint.
"""

from typing import List, Literal, get_args
from dataclasses import dataclass

from .loader import FaultDomainConfig, UnattributedPolicy, LateCallbackPolicy


@dataclass(frozen=True)
class ConfigIssue:
    """
    Configuration validation issue

    Structured output for CLI/logging.
    """
    level: Literal["warn", "error"]
    path: str  # e.g., "unattributed"
    message: str
    hint: str = ""

    def __str__(self) -> str:
        hint_str = f"\n   Hint: {self.hint}" if self.hint else ""
        return f"[{self.level}] [{self.path}] {self.message}{hint_str}"


def validate_config(config: FaultDomainConfig) -> List[ConfigIssue]:
    """
    Validate configuration for illegal/misleading combinations.

    Returns:
        List of issues (warn/error level)
    """
    issues = []

    unattributed_choices = get_args(UnattributedPolicy)
    if config.unattributed not in unattributed_choices:
        issues.append(ConfigIssue(
            level="error",
            path="unattributed",
            message=f"unknown policy {config.unattributed!r}",
            hint=f"Use one of: {', '.join(unattributed_choices)}",
        ))

    late_choices = get_args(LateCallbackPolicy)
    if config.late_callback not in late_choices:
        issues.append(ConfigIssue(
            level="error",
            path="late_callback",
            message=f"unknown policy {config.late_callback!r}",
            hint=f"Use one of: {', '.join(late_choices)}",
        ))

    for name in ("auto_install", "log_faults"):
        if not isinstance(getattr(config, name), bool):
            issues.append(ConfigIssue(
                level="error",
                path=name,
                message=f"{name} must be a boolean, got {getattr(config, name)!r}",
            ))

    # Nothing routes later-turn faults until install() is called by hand
    if config.auto_install is False:
        issues.append(ConfigIssue(
            level="warn",
            path="auto_install",
            message="faults raised on later loop turns are not captured until install() is called",
            hint="Call faultdomain.install(loop) once per event loop",
        ))

    if config.auto_install is False and config.unattributed == "stop":
        issues.append(ConfigIssue(
            level="warn",
            path="unattributed",
            message="unattributed='stop' only applies on loops where install() was called",
        ))

    return issues


def has_errors(issues: List[ConfigIssue]) -> bool:
    return any(issue.level == "error" for issue in issues)
