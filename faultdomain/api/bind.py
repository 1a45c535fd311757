# faultdomain/api/bind.py
"""
Deferred rebinding - keep a callback attributed to the domain it was created in
"""

from __future__ import annotations

from asyncio import AbstractEventLoop
from functools import partial, wraps
from typing import Any, Callable, Optional

from ..core.domain import current_domain
from ..core.scheduler import attach, get_loop


def bind(
    fn: Callable[..., Any],
    *,
    loop: Optional[AbstractEventLoop] = None,
) -> Callable[..., Any]:
    """
    Bind fn to the ambient domain.

    Use it for listeners handed to long-lived event sources: whenever the
    bound function is invoked, from whatever call stack, fn runs on the
    next loop turn with the captured domain re-entered for that call only.
    Its faults go to that domain, not to whatever is ambient at emit time.

    Returns:
        A bound function, or fn itself if no domain is ambient
    """
    domain = current_domain()
    if domain is None:
        return fn

    @wraps(fn)
    def bound(*args: Any, **kwargs: Any) -> None:
        target = attach(get_loop(loop, operation="bind"))
        domain.reenter(target.call_soon, partial(fn, *args, **kwargs))

    return bound
