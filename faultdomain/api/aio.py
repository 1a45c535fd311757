# faultdomain/api/aio.py
"""
Async bridge - await a boundary-wrapped callback-style call
"""

from __future__ import annotations

from typing import Any, Callable

from ..core.errors import FaultDomainError
from ..core.scheduler import get_loop
from .wrap import wrap


async def acall(fn: Callable[..., Any], *args: Any, **kwargs: Any) -> Any:
    """
    Call fn(*args, cb, **kwargs) inside a boundary and await its outcome.

    Returns:
        None, the single result, or a tuple when fn reports several

    Raises:
        The captured fault, or the error fn reported first. Error values
        that are not exceptions are raised as FaultDomainError(CALLBACK_ERROR).
    """
    loop = get_loop(None, operation="acall")
    future = loop.create_future()

    def settle(err: Any = None, *results: Any) -> None:
        if future.done():
            return
        if err is not None:
            if not isinstance(err, BaseException):
                err = FaultDomainError.callback_error(err)
            future.set_exception(err)
        elif not results:
            future.set_result(None)
        elif len(results) == 1:
            future.set_result(results[0])
        else:
            future.set_result(results)

    wrap(fn, loop=loop)(*args, settle, **kwargs)
    return await future
