# faultdomain/core/domain/stack.py
"""
Ambient domain stack

The stack is an immutable tuple held in a ContextVar, most recent domain
last. asyncio copies the current context whenever it schedules a callback
or starts a task, so anything registered while a domain is ambient runs
with that same stack later, no matter which event source fires it.

Lifecycle:
- empty at startup (default=())
- changed only by push/pop issued from Domain.enter()/Domain.exit(), or by
  call_with_stack() inside a copied context when a finished call restores
  its caller's stack
"""

from __future__ import annotations

from contextvars import Context, ContextVar
from typing import TYPE_CHECKING, Any, Callable, List, Optional, Tuple
import weakref

if TYPE_CHECKING:
    from .domain import Domain


DOMAIN_STACK: ContextVar[Tuple["Domain", ...]] = ContextVar(
    "DOMAIN_STACK",
    default=(),
)

# Domains created and not yet terminated (delivered a fault or disposed)
_LIVE: "weakref.WeakSet[Domain]" = weakref.WeakSet()


def current_stack() -> Tuple["Domain", ...]:
    return DOMAIN_STACK.get()


def current_domain() -> Optional["Domain"]:
    """
    Get the ambient domain

    Returns:
        Top of the current stack, or None if no domain is ambient
    """
    stack = DOMAIN_STACK.get()
    return stack[-1] if stack else None


def stack_of(context: Optional[Context]) -> Tuple["Domain", ...]:
    """Read the domain stack captured in a contextvars.Context"""
    if context is None:
        return ()
    return context.get(DOMAIN_STACK, ())


def push(domain: "Domain") -> None:
    DOMAIN_STACK.set(DOMAIN_STACK.get() + (domain,))


def pop(domain: "Domain") -> bool:
    """
    Drop domain and anything stacked above it.

    Returns False if the domain is not on the current stack.
    """
    stack = DOMAIN_STACK.get()
    for index in range(len(stack) - 1, -1, -1):
        if stack[index] is domain:
            DOMAIN_STACK.set(stack[:index])
            return True
    return False


def call_with_stack(stack: Tuple["Domain", ...], fn: Callable[..., Any], args: tuple) -> Any:
    """Set the stack in the current context, then call fn(*args)"""
    DOMAIN_STACK.set(stack)
    return fn(*args)


def track(domain: "Domain") -> None:
    _LIVE.add(domain)


def untrack(domain: "Domain") -> None:
    _LIVE.discard(domain)


def live_domains() -> List["Domain"]:
    """Domains that can still capture a fault, oldest first"""
    return sorted(_LIVE, key=lambda d: d.id)
