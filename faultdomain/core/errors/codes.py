# faultdomain/core/errors/codes.py
from __future__ import annotations

from typing import Final


# ---- canonical error codes (stable public contract) ----
# generic
UNKNOWN: Final[str] = "UNKNOWN"
INVALID_ARGUMENT: Final[str] = "INVALID_ARGUMENT"
INVALID_CONFIG: Final[str] = "INVALID_CONFIG"

# scheduler
NO_RUNNING_LOOP: Final[str] = "NO_RUNNING_LOOP"

# boundary / callbacks
MISSING_CALLBACK: Final[str] = "MISSING_CALLBACK"
CALLBACK_REUSED: Final[str] = "CALLBACK_REUSED"
CALLBACK_ERROR: Final[str] = "CALLBACK_ERROR"

# domain
HANDLER_ALREADY_SET: Final[str] = "HANDLER_ALREADY_SET"


# ---- semantic groups (internal helpers) ----

# Raised synchronously at the call site; they describe API misuse.
USAGE_CODES: Final[set[str]] = {
    INVALID_ARGUMENT,
    INVALID_CONFIG,
    NO_RUNNING_LOOP,
    MISSING_CALLBACK,
    HANDLER_ALREADY_SET,
}

# Raised or delivered while a wrapped call is in flight.
BOUNDARY_CODES: Final[set[str]] = {
    CALLBACK_REUSED,
    CALLBACK_ERROR,
}

KNOWN_CODES: Final[set[str]] = {UNKNOWN} | USAGE_CODES | BOUNDARY_CODES
