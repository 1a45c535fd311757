# faultdomain/__init__.py
"""
faultdomain - asynchronous fault isolation for callback-style asyncio code

A wrapped call gets every fault it produces delivered to its own callback,
exactly once: faults raised synchronously, faults raised by callbacks it
scheduled on later loop turns, and faults raised by listeners it handed to
other event sources. When the callback runs, the caller's own domain is
ambient again.

User-facing API:
- wrap(fn): fence one call; wrapped(*args, callback)
- run(fn, catch_fn, after_fn) / try_catch(fn, catch_fn): error-first shapes
- bind(fn): keep a listener attributed to the domain that registered it
- acall(fn, *args): await a wrapped call

Basic usage:

    >>> from faultdomain import wrap
    >>> def upper(value, cb):
    ...     cb(None, value.upper())
    >>> wrap(upper)("v1", lambda err, result: print(err, result))
    None V1

Listeners on long-lived sources:

    >>> def subscribe(cb):
    ...     emitter.on("tick", bind(on_tick))   # faults from on_tick reach catch_fn
    >>> run(subscribe, lambda err, after: print("captured", err))

Advanced/Internal API:
- Domain, current_domain(), live_domains(): isolation contexts
- install(loop) / uninstall(loop): the loop-level fault dispatcher
"""

__version__ = "0.1.0"

# User-facing API (main entry point)
from .api import wrap, run, try_catch, bind, acall

# Core types
from .core.domain import Domain, current_domain, current_stack, live_domains
from .core.errors import FaultDomainError
from .core.scheduler import FaultDispatcher, install, uninstall, is_installed

# Configuration
from .config import FaultDomainConfig, load_config, get_config, set_config

__all__ = [
    # Version
    "__version__",

    # User-facing API
    "wrap",
    "run",
    "try_catch",
    "bind",
    "acall",

    # Core types
    "Domain",
    "current_domain",
    "current_stack",
    "live_domains",
    "FaultDomainError",
    "FaultDispatcher",
    "install",
    "uninstall",
    "is_installed",

    # Configuration
    "FaultDomainConfig",
    "load_config",
    "get_config",
    "set_config",
]
