# faultdomain/core/domain/__init__.py
from .stack import (
    DOMAIN_STACK,
    current_stack,
    current_domain,
    stack_of,
    live_domains,
)
from .domain import Domain, route_fault

__all__ = [
    "DOMAIN_STACK",
    "current_stack",
    "current_domain",
    "stack_of",
    "live_domains",
    "Domain",
    "route_fault",
]
