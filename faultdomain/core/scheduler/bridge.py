# faultdomain/core/scheduler/bridge.py
"""
Context-scheduler bridge

Orders domain entry/exit against loop turns:
- defer_in_fresh_domain: start work one turn later inside a new domain
- reenter_and_run: run something under a given domain's stack, so that
  what it schedules (typically the caller's completion callback) inherits
  that stack and nothing else

Exiting a domain only changes the current context; a continuation that
must observe the restored stack is therefore always scheduled for a later
turn from inside reenter_and_run, never called in the same turn.
"""

from __future__ import annotations

from asyncio import AbstractEventLoop
from contextvars import copy_context
from typing import Any, Callable, Optional
import asyncio
import logging

from ..domain import Domain
from ..domain.stack import call_with_stack
from ..errors import FaultDomainError
from .dispatcher import attach


Completion = Callable[..., Any]

logger = logging.getLogger(__name__)


def get_loop(loop: Optional[AbstractEventLoop] = None, *, operation: str = "wrap") -> AbstractEventLoop:
    """
    Resolve the loop that schedules deferred turns.

    Raises:
        FaultDomainError: NO_RUNNING_LOOP if no loop is given and none is running
    """
    if loop is not None:
        return loop
    try:
        return asyncio.get_running_loop()
    except RuntimeError as e:
        raise FaultDomainError.no_running_loop(operation) from e


def defer_in_fresh_domain(
    fn: Callable[[Completion], Any],
    completion: Completion,
    *,
    loop: Optional[AbstractEventLoop] = None,
    name: Optional[str] = None,
) -> Domain:
    """
    Create a domain and call fn(completion) inside it on the next turn.

    completion is both the domain's error handler (called as
    completion(exc)) and the success path fn is expected to call itself.

    Returns:
        The new domain (its parent is the domain ambient right now)
    """
    loop = attach(get_loop(loop, operation="defer_in_fresh_domain"))
    domain = Domain(name=name)
    domain.on_error(completion)
    loop.call_soon(domain.run, fn, completion)
    logger.debug("deferred %s under %s", getattr(fn, "__name__", fn), domain.name)
    return domain


def reenter_and_run(domain: Optional[Domain], fn: Callable[..., Any], *args: Any) -> Any:
    """
    Call fn(*args) with domain restored as the ambient domain.

    With domain=None, fn runs under an empty stack instead (there is no
    domain to restore). The caller's own stack is never modified.
    """
    if domain is not None:
        return domain.reenter(fn, *args)
    return copy_context().run(call_with_stack, (), fn, args)
