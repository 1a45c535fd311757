# faultdomain/config/__init__.py
"""
faultdomain Configuration

Design principles:
1. Code = truth (every field has a default)
2. YAML = input parameters (optional, can be deleted)
3. One process-wide effective config, replaceable for tests
"""

from .loader import (
    FaultDomainConfig,
    load_config,
    get_config,
    set_config,
    reset_config,
    CONFIG_ENV_VAR,
)
from .validator import validate_config, ConfigIssue

__all__ = [
    "FaultDomainConfig",
    "load_config",
    "get_config",
    "set_config",
    "reset_config",
    "CONFIG_ENV_VAR",
    "validate_config",
    "ConfigIssue",
]
