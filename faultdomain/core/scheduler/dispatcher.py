# faultdomain/core/scheduler/dispatcher.py
"""
Fault dispatcher - the loop's "uncaught exception" hook

asyncio reports an exception escaping a scheduled callback to the loop's
exception handler, together with the handle (or task) it came from. The
handle still carries the contextvars.Context it ran in, and therefore the
domain stack that was ambient when the callback was registered. The
dispatcher reads that stack and routes the fault to its owning domain.

Faults no domain accepts go to the handler that was installed before the
dispatcher (or the loop's default handler): the host's own uncaught-failure
path. With unattributed="stop" the loop is stopped as well.
"""

from __future__ import annotations

from asyncio import AbstractEventLoop
from typing import Any, Callable, Dict, Optional, Tuple
import asyncio
import logging

from ..domain import Domain, route_fault, stack_of
from ...config import FaultDomainConfig, get_config


LoopExceptionHandler = Callable[[AbstractEventLoop, Dict[str, Any]], Any]

logger = logging.getLogger(__name__)


def _source_stack(context: Dict[str, Any]) -> Tuple[Domain, ...]:
    """Domain stack of the handle or task a loop error came from"""
    for key in ("handle", "future", "task"):
        source = context.get(key)
        get_context = getattr(source, "get_context", None)
        if callable(get_context):
            return stack_of(get_context())
    return ()


class FaultDispatcher:
    """
    Loop exception handler that attributes faults to domains.

    Installed with install(loop); chains to the handler it replaced.
    """

    def __init__(
        self,
        previous: Optional[LoopExceptionHandler] = None,
        config: Optional[FaultDomainConfig] = None,
    ):
        self.previous = previous
        self._config = config

    @property
    def config(self) -> FaultDomainConfig:
        return self._config if self._config is not None else get_config()

    def __call__(self, loop: AbstractEventLoop, context: Dict[str, Any]) -> None:
        exc = context.get("exception")
        stack = _source_stack(context)

        if exc is not None and stack:
            escaped = route_fault(exc, stack)
            if escaped is None:
                return
            if escaped is not exc:
                context = {
                    **context,
                    "message": f"Exception in error handler while routing: {context.get('message')}",
                    "exception": escaped,
                }

        self.unattributed(loop, context)

    def unattributed(self, loop: AbstractEventLoop, context: Dict[str, Any]) -> None:
        logger.debug("unattributed loop error: %s", context.get("message"))
        if self.previous is not None:
            self.previous(loop, context)
        else:
            loop.default_exception_handler(context)

        if self.config.unattributed == "stop":
            loop.stop()


def _resolve(loop: Optional[AbstractEventLoop]) -> AbstractEventLoop:
    if loop is not None:
        return loop
    from .bridge import get_loop
    return get_loop(None, operation="install")


def install(
    loop: Optional[AbstractEventLoop] = None,
    *,
    config: Optional[FaultDomainConfig] = None,
) -> FaultDispatcher:
    """
    Install the dispatcher as the loop's exception handler (idempotent).

    Args:
        loop: Target loop (default: the running loop)
        config: Fixed config for this dispatcher (default: get_config() at call time)

    Returns:
        The dispatcher now installed on the loop
    """
    loop = _resolve(loop)
    current = loop.get_exception_handler()
    if isinstance(current, FaultDispatcher):
        return current

    dispatcher = FaultDispatcher(previous=current, config=config)
    loop.set_exception_handler(dispatcher)
    logger.debug("fault dispatcher installed on %r", loop)
    return dispatcher


def uninstall(loop: Optional[AbstractEventLoop] = None) -> bool:
    """Restore the handler the dispatcher replaced. Returns False if not installed."""
    loop = _resolve(loop)
    current = loop.get_exception_handler()
    if not isinstance(current, FaultDispatcher):
        return False
    loop.set_exception_handler(current.previous)
    return True


def is_installed(loop: Optional[AbstractEventLoop] = None) -> bool:
    return isinstance(_resolve(loop).get_exception_handler(), FaultDispatcher)


def attach(loop: AbstractEventLoop) -> AbstractEventLoop:
    """Install on loop if auto_install is on"""
    if get_config().auto_install:
        install(loop)
    return loop


def attach_running_loop() -> Optional[AbstractEventLoop]:
    """attach() the running loop, if there is one"""
    try:
        loop = asyncio.get_running_loop()
    except RuntimeError:
        return None
    return attach(loop)
