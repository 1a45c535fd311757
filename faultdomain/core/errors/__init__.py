# faultdomain/core/errors/__init__.py
"""
Core error types for faultdomain.

This package defines the components responsible for:
- Representing misuse of the isolation API
- Naming stable error codes

Faults captured by a domain are never wrapped in these types; callers
always receive the original exception object.

No side effects on import.
"""

from . import codes
from .exceptions import FaultDomainError

__all__ = ["codes", "FaultDomainError"]
