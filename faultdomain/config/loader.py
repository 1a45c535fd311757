# faultdomain/config/loader.py
"""
Configuration Loader

Loads configuration from YAML files with code defaults as fallback.

Design principle:
- Code = truth (has all defaults)
- YAML = input parameters (optional)
- System works without YAML
"""

from __future__ import annotations

from dataclasses import dataclass, fields, replace
from pathlib import Path
from typing import Any, Dict, Literal, Optional
import logging
import os

import yaml

from ..core.errors import FaultDomainError


CONFIG_ENV_VAR = "FAULTDOMAIN_CONFIG"

UnattributedPolicy = Literal["delegate", "stop"]
LateCallbackPolicy = Literal["warn", "ignore", "raise"]

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class FaultDomainConfig:
    """
    Effective configuration.

    auto_install: Install the fault dispatcher on a loop the first time a
        boundary, bind or domain is used on it
    unattributed: What happens to a fault no domain accepts
        ("delegate" to the previous loop handler, or "stop" the loop too)
    late_callback: What happens when a wrapped function signals completion
        after its call already finished ("warn", "ignore", "raise")
    log_faults: Log every captured fault at INFO level
    """

    auto_install: bool = True
    unattributed: UnattributedPolicy = "delegate"
    late_callback: LateCallbackPolicy = "warn"
    log_faults: bool = False

    @classmethod
    def default(cls) -> "FaultDomainConfig":
        return cls()

    @classmethod
    def strict(cls) -> "FaultDomainConfig":
        """Halt the loop on unattributed faults and reject late callbacks"""
        return cls(
            auto_install=True,
            unattributed="stop",
            late_callback="raise",
            log_faults=True,
        )

    @classmethod
    def from_dict(cls, data: Optional[Dict[str, Any]]) -> "FaultDomainConfig":
        """Overlay known keys from data on the code defaults (unknown keys ignored)"""
        if not data:
            return cls.default()
        known = {f.name for f in fields(cls)}
        return cls(**{k: v for k, v in data.items() if k in known})

    @classmethod
    def from_yaml(cls, config_path: Optional[Path] = None) -> "FaultDomainConfig":
        return cls.from_dict(_load_yaml(config_path))

    def merged(self, **overrides: Any) -> "FaultDomainConfig":
        return replace(self, **overrides)

    def validate(self) -> list:
        from .validator import validate_config
        return validate_config(self)

    def to_dict(self) -> Dict[str, Any]:
        """Convert to dictionary for serialization"""
        return {
            "auto_install": self.auto_install,
            "unattributed": self.unattributed,
            "late_callback": self.late_callback,
            "log_faults": self.log_faults,
        }


def _candidate_paths(config_path: Optional[Path]) -> list[Path]:
    if config_path:
        return [Path(config_path)]
    paths = []
    env_path = os.getenv(CONFIG_ENV_VAR, "").strip()
    if env_path:
        paths.append(Path(env_path))
    paths.append(Path.home() / ".faultdomain" / "config.yml")
    return paths


def _load_yaml(config_path: Optional[Path] = None) -> Optional[Dict[str, Any]]:
    """Load YAML file, return None if not found (not an error)"""
    for path in _candidate_paths(config_path):
        if not path.exists():
            continue
        try:
            with open(path, "r", encoding="utf-8") as f:
                data = yaml.safe_load(f)
        except (OSError, yaml.YAMLError) as e:
            logger.warning(f"Ignoring unreadable config {path}: {e}")
            return None
        if data is None:
            return None
        if not isinstance(data, dict):
            logger.warning(f"Ignoring config {path}: top level must be a mapping")
            return None
        return data

    return None  # No YAML found, use code defaults


def load_config(config_path: Optional[Path] = None) -> FaultDomainConfig:
    """
    Load faultdomain configuration.

    Values that fail validation are not applied: the whole file is
    ignored with a warning, like an unreadable one.

    Args:
        config_path: Optional path to YAML file

    Returns:
        FaultDomainConfig instance (always has code defaults)
    """
    config = FaultDomainConfig.from_yaml(config_path)
    errors = [str(issue) for issue in config.validate() if issue.level == "error"]
    if errors:
        logger.warning(f"Ignoring invalid config, using defaults: {'; '.join(errors)}")
        return FaultDomainConfig.default()
    return config


_ACTIVE_CONFIG: Optional[FaultDomainConfig] = None


def get_config() -> FaultDomainConfig:
    """Process-wide effective config, loaded once on first use"""
    global _ACTIVE_CONFIG
    if _ACTIVE_CONFIG is None:
        _ACTIVE_CONFIG = load_config()
    return _ACTIVE_CONFIG


def set_config(config: FaultDomainConfig) -> FaultDomainConfig:
    """
    Replace the process-wide config; returns the previous one.

    Raises:
        FaultDomainError: INVALID_CONFIG if validation reports an error
    """
    global _ACTIVE_CONFIG
    errors = [str(issue) for issue in config.validate() if issue.level == "error"]
    if errors:
        raise FaultDomainError.invalid_config("refusing invalid faultdomain config", details={"issues": errors})
    previous = get_config()
    _ACTIVE_CONFIG = config
    return previous


def reset_config() -> None:
    """Forget the cached config so the next get_config() reloads it"""
    global _ACTIVE_CONFIG
    _ACTIVE_CONFIG = None


__all__ = [
    "FaultDomainConfig",
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
    "CONFIG_ENV_VAR",
]
