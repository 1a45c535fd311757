# faultdomain/core/domain/domain.py
"""
Isolation context (Domain)

A Domain is a unit of dynamic scope. While it is ambient, every fault
raised by code running under it (synchronously, or later from anything
scheduled while it was ambient) is attributed to it. It delivers at most
one fault to its error handler, then it is terminated for good.
"""

from __future__ import annotations

from contextvars import copy_context
from typing import Any, Callable, Iterable, Optional, Tuple
import itertools
import logging

from ..errors import FaultDomainError
from . import stack as _stack


ErrorHandler = Callable[[BaseException], Any]

logger = logging.getLogger(__name__)

_ids = itertools.count(1)


class Domain:
    """
    Isolation context

    Attributes:
        id: Process-unique sequence number
        name: Label used in logs and errors
        parent: Domain that was ambient when this one was created
        active: False once a fault was delivered or the domain was disposed
        error: The fault delivered to the handler, if any

    Example:
        >>> d = Domain(name="job")
        >>> d.on_error(lambda exc: print("captured", exc))
        >>> d.run(loop.call_soon, flaky_callback)
    """

    def __init__(self, name: Optional[str] = None):
        self.id = next(_ids)
        self.name = name or f"domain-{self.id}"
        self.parent: Optional[Domain] = _stack.current_domain()
        self.active = True
        self.error: Optional[BaseException] = None
        self._error_handler: Optional[ErrorHandler] = None
        _stack.track(self)

    def __repr__(self) -> str:
        state = "active" if self.active else "done"
        return f"<Domain {self.name} {state}>"

    # -------- stack discipline --------

    def enter(self) -> None:
        """Push onto the current stack; this domain becomes ambient"""
        from ..scheduler.dispatcher import attach_running_loop
        attach_running_loop()
        _stack.push(self)

    def exit(self) -> None:
        """Pop from the current stack, restoring whatever was ambient before"""
        _stack.pop(self)

    def lineage(self) -> Tuple["Domain", ...]:
        """Domains from the outermost ancestor down to this one"""
        chain = []
        node: Optional[Domain] = self
        while node is not None:
            chain.append(node)
            node = node.parent
        return tuple(reversed(chain))

    def reenter(self, fn: Callable[..., Any], *args: Any) -> Any:
        """
        Call fn(*args) with this domain's lineage as the ambient stack.

        Runs in a copy of the current context, so the caller's stack is
        untouched afterwards. Anything fn schedules inherits the lineage.
        """
        return copy_context().run(_stack.call_with_stack, self.lineage(), fn, args)

    def dispose(self) -> None:
        """Final exit: pop if ambient and never accept another fault"""
        self.active = False
        self.exit()
        _stack.untrack(self)

    # -------- faults --------

    def on_error(self, handler: ErrorHandler) -> None:
        """Register the single error handler"""
        if self._error_handler is not None:
            raise FaultDomainError.handler_already_set(self.name)
        self._error_handler = handler

    def report(self, exc: BaseException) -> bool:
        """
        Deliver a fault to the handler, at most once.

        Returns:
            True if delivered; False if this domain cannot take it
            (already terminated, or no handler) and it must go elsewhere
        """
        if not self.active or self._error_handler is None:
            return False

        self.active = False
        self.error = exc
        _stack.untrack(self)

        from ...config import get_config
        if get_config().log_faults:
            logger.info("%s captured %s: %s", self.name, type(exc).__name__, exc)
        else:
            logger.debug("%s captured %s", self.name, type(exc).__name__)

        self._error_handler(exc)
        return True

    def run(self, body: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
        """
        Call body with this domain entered.

        A synchronous fault goes to the domain stack instead of the caller;
        it is re-raised only if no domain on the stack accepts it.
        The domain is exited on every path.
        """
        self.enter()
        try:
            return body(*args, **kwargs)
        except Exception as exc:
            escaped = route_fault(exc, _stack.current_stack())
            if escaped is exc:
                raise
            if escaped is not None:
                raise escaped
            return None
        finally:
            self.exit()


def route_fault(exc: BaseException, stack: Iterable[Domain]) -> Optional[BaseException]:
    """
    Deliver exc to the innermost domain that accepts it.

    Terminated or handler-less domains are skipped. If a handler itself
    raises, that exception continues to the next enclosing domain.

    Returns:
        None if delivered, otherwise the exception that nobody accepted
    """
    fault = exc
    for domain in reversed(tuple(stack)):
        try:
            if domain.report(fault):
                return None
        except Exception as handler_exc:
            logger.debug("error handler of %s raised %s", domain.name, type(handler_exc).__name__)
            fault = handler_exc
    return fault

