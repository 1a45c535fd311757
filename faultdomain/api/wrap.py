# faultdomain/api/wrap.py
"""
Boundary wrapper - run one callback-style call inside its own domain
"""

from __future__ import annotations

from asyncio import AbstractEventLoop
from functools import wraps
from typing import Any, Callable, Optional
import logging

from ..config import get_config
from ..core.domain import Domain
from ..core.errors import FaultDomainError
from ..core.scheduler import defer_in_fresh_domain, get_loop, reenter_and_run


Callback = Callable[..., Any]

logger = logging.getLogger(__name__)


class BoundaryCall:
    """
    One invocation of a wrapped function.

    The domain's error handler and the done callback handed to the
    function both end in complete(), which finalizes exactly once:
    dispose the domain, restore the caller's domain, and call the user
    callback on the following turn.
    """

    def __init__(
        self,
        fn: Callable[..., Any],
        args: tuple,
        kwargs: dict,
        callback: Callback,
        loop: AbstractEventLoop,
        name: Optional[str] = None,
    ):
        self.fn = fn
        self.args = args
        self.kwargs = kwargs
        self.callback = callback
        self.loop = loop
        self.name = name
        self.domain: Optional[Domain] = None
        self.completed = False

    def start(self) -> Domain:
        self.domain = defer_in_fresh_domain(
            self._invoke,
            self.complete,
            loop=self.loop,
            name=self.name,
        )
        return self.domain

    def _invoke(self, done: Callback) -> Any:
        return self.fn(*self.args, done, **self.kwargs)

    def complete(self, *results: Any) -> None:
        """Finalize with (exc,) from the domain or the function's own results"""
        if self.completed:
            self._late(results)
            return
        self.completed = True

        domain = self.domain
        domain.dispose()
        logger.debug("%s finished, restoring %s", domain.name, domain.parent)
        reenter_and_run(domain.parent, self.loop.call_soon, self.callback, *results)

    def _late(self, results: tuple) -> None:
        policy = get_config().late_callback
        name = self.domain.name if self.domain is not None else self.name
        if policy == "raise":
            raise FaultDomainError.callback_reused(name, results)
        if policy == "warn":
            logger.warning(f"Dropped late completion of {name}; its callback already ran")


def wrap(
    fn: Optional[Callable[..., Any]] = None,
    *,
    loop: Optional[AbstractEventLoop] = None,
    name: Optional[str] = None,
) -> Callable[..., Any]:
    """
    Fence every fault of a callback-style function into its callback.

    The returned function takes fn's arguments followed by a callback.
    fn runs on the next loop turn inside a fresh domain and receives a
    done callback in place of the user's. The user callback then fires
    exactly once, after the caller's own domain is ambient again:
    - callback(exc) if fn raised, synchronously or from anything it
      scheduled while its domain was ambient
    - callback(*results) with whatever fn passed to done, error-first
      values included

    Args:
        fn: Function called as fn(*args, done, **kwargs)
        loop: Loop to schedule on (default: the loop running at call time)
        name: Label for the domains created (default: the function name)

    Example:
        >>> def upper(value, cb):
        ...     cb(None, value.upper())
        >>> wrap(upper)("v1", print)        # prints: None V1
        >>> @wrap
        ... def boom(value, cb):
        ...     raise ValueError("boom")
        >>> boom("v1", print)               # prints: boom
    """
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        label = name or getattr(func, "__name__", "wrapped")

        @wraps(func)
        def wrapped(*args: Any, **kwargs: Any) -> Domain:
            if not args or not callable(args[-1]):
                raise FaultDomainError.missing_callback(label, args[-1] if args else None)
            *call_args, callback = args
            call = BoundaryCall(
                func,
                tuple(call_args),
                kwargs,
                callback,
                get_loop(loop, operation="wrap"),
                name=label,
            )
            return call.start()

        return wrapped

    if fn is not None:
        return decorator(fn)
    return decorator
