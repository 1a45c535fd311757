# faultdomain/cli/config_cmd.py
"""
config show / config validate
"""

import json
from pathlib import Path

import yaml

from faultdomain.config import FaultDomainConfig, load_config
from faultdomain.config.validator import has_errors


def show_config(args) -> int:
    config = load_config(Path(args.config) if args.config else None)
    if args.json:
        print(json.dumps(config.to_dict(), indent=2))
    else:
        print(yaml.safe_dump(config.to_dict(), sort_keys=False), end="")
    return 0


def validate_config_cmd(args) -> int:
    # raw file values; load_config() would replace invalid ones with defaults
    config = FaultDomainConfig.from_yaml(Path(args.config) if args.config else None)
    issues = config.validate()
    if not issues:
        print("Config OK")
        return 0
    for issue in issues:
        print(issue)
    return 1 if has_errors(issues) else 0
