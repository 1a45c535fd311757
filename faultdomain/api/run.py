# faultdomain/api/run.py
"""
Result combinators over wrap(): run() and try_catch()
"""

from __future__ import annotations

from asyncio import AbstractEventLoop
from typing import Any, Callable, Optional

from ..core.domain import Domain
from ..core.errors import FaultDomainError
from .wrap import wrap


def _noop(*args: Any) -> None:
    return None


class _ResultCollector:
    """Stores what the body passes to its callback and completes the wrap cleanly"""

    def __init__(self):
        self.results: tuple = ()

    def bind(self, done: Callable[..., Any]) -> Callable[..., Any]:
        def collect(*results: Any) -> None:
            self.results = results
            done(None)
        return collect


def run(
    fn: Callable[[Callable[..., Any]], Any],
    catch_fn: Optional[Callable[..., Any]] = None,
    after_fn: Optional[Callable[..., Any]] = None,
    *,
    loop: Optional[AbstractEventLoop] = None,
) -> Domain:
    """
    Run fn(cb) inside a boundary and split the outcome.

    - fn calls cb(*results): after_fn(*results). An error fn passes
      positionally is forwarded as-is, not treated as a fault.
    - fn raises (now or on a later turn): catch_fn(exc, after_fn), so the
      catch handler may continue the chain by calling after_fn itself.

    With only one of catch_fn/after_fn given, it is used for both.

    Returns:
        The domain fn runs in
    """
    after_fn = after_fn or catch_fn
    catch_fn = catch_fn or after_fn
    if catch_fn is None:
        raise FaultDomainError.invalid_argument("run() needs catch_fn or after_fn")

    collector = _ResultCollector()

    def body(done: Callable[..., Any]) -> None:
        fn(collector.bind(done))

    def finish(err: Optional[BaseException] = None, *_: Any) -> Any:
        if err is not None:
            return catch_fn(err, after_fn)
        return after_fn(*collector.results)

    return wrap(body, loop=loop, name=getattr(fn, "__name__", None))(finish)


def try_catch(
    fn: Callable[[Callable[..., Any]], Any],
    catch_fn: Callable[..., Any],
    *,
    loop: Optional[AbstractEventLoop] = None,
) -> Domain:
    """Intercept faults of fn with catch_fn; a clean finish is ignored"""
    return run(fn, catch_fn, _noop, loop=loop)
