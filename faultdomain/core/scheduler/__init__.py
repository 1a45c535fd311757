# faultdomain/core/scheduler/__init__.py
from .bridge import get_loop, defer_in_fresh_domain, reenter_and_run
from .dispatcher import (
    FaultDispatcher,
    install,
    uninstall,
    is_installed,
    attach,
    attach_running_loop,
)

__all__ = [
    "get_loop",
    "defer_in_fresh_domain",
    "reenter_and_run",
    "FaultDispatcher",
    "install",
    "uninstall",
    "is_installed",
    "attach",
    "attach_running_loop",
]
