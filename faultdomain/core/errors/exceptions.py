# faultdomain/core/errors/exceptions.py
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Dict, Optional

from . import codes


def _safe_str(x: Any) -> str:
    try:
        return str(x)
    except Exception:
        return "<unstringifiable>"


def _normalize_error_code(code: Any) -> str:
    """
    Keep error_code stable and finite.
    Unknown codes are downgraded instead of leaking into callers' taxonomy.
    """
    c = _safe_str(code or codes.UNKNOWN).strip() or codes.UNKNOWN
    if c in codes.KNOWN_CODES:
        return c
    return codes.UNKNOWN


@dataclass
class FaultDomainError(Exception):
    """
    The one public exception type raised by faultdomain itself.
    """
    message: str
    error_code: str = codes.UNKNOWN
    details: Dict[str, Any] = field(default_factory=dict)
    cause: Optional[BaseException] = None

    def __post_init__(self) -> None:
        self.error_code = _normalize_error_code(self.error_code)
        super().__init__(self.message)

    def __str__(self) -> str:
        return f"[{self.error_code}] {self.message}"

    @property
    def is_usage_error(self) -> bool:
        return self.error_code in codes.USAGE_CODES

    def to_dict(self) -> Dict[str, Any]:
        return {
            "error_code": self.error_code,
            "message": self.message,
            "details": self.details,
            "cause": _safe_str(self.cause) if self.cause is not None else None,
        }

    # -------- factories --------

    @classmethod
    def no_running_loop(cls, operation: str) -> "FaultDomainError":
        return cls(
            message=f"{operation}() needs a running asyncio event loop or an explicit loop=",
            error_code=codes.NO_RUNNING_LOOP,
            details={"operation": operation},
        )

    @classmethod
    def missing_callback(cls, fn_name: str, got: Any = None) -> "FaultDomainError":
        return cls(
            message=f"wrapped call to {fn_name} must end with a callable callback",
            error_code=codes.MISSING_CALLBACK,
            details={"function": fn_name, "got": _safe_str(got)},
        )

    @classmethod
    def callback_reused(cls, domain_name: str, results: tuple) -> "FaultDomainError":
        return cls(
            message=f"completion of {domain_name} was signalled after the call had already finished",
            error_code=codes.CALLBACK_REUSED,
            details={"domain": domain_name, "results": [_safe_str(r) for r in results]},
        )

    @classmethod
    def callback_error(cls, value: Any) -> "FaultDomainError":
        return cls(
            message=f"callback reported a non-exception error: {_safe_str(value)}",
            error_code=codes.CALLBACK_ERROR,
            details={"value": _safe_str(value), "type": type(value).__name__},
        )

    @classmethod
    def handler_already_set(cls, domain_name: str) -> "FaultDomainError":
        return cls(
            message=f"{domain_name} already has an error handler",
            error_code=codes.HANDLER_ALREADY_SET,
            details={"domain": domain_name},
        )

    @classmethod
    def invalid_argument(
        cls,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> "FaultDomainError":
        return cls(
            message=message,
            error_code=codes.INVALID_ARGUMENT,
            details=details or {},
        )

    @classmethod
    def invalid_config(
        cls,
        message: str,
        *,
        details: Optional[Dict[str, Any]] = None,
    ) -> "FaultDomainError":
        return cls(
            message=message,
            error_code=codes.INVALID_CONFIG,
            details=details or {},
        )
