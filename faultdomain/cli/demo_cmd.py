# faultdomain/cli/demo_cmd.py
"""
Three-act demonstration of fault attribution:
Act 1: Synchronous fault
Act 2: Fault from a later loop turn
Act 3: Fault from a listener on a foreign event source
"""

import asyncio

from faultdomain import bind, current_domain, run, wrap


class _Ticker:
    """Minimal foreign event source: listeners are called from whoever emits"""

    def __init__(self):
        self.listeners = []

    def on(self, listener):
        self.listeners.append(listener)

    def emit(self, *args):
        for listener in list(self.listeners):
            listener(*args)


def _banner(title: str) -> None:
    print("\n" + "─" * 70)
    print(f"  {title}")
    print("─" * 70 + "\n")


async def _act1_sync_fault() -> None:
    _banner("ACT 1: Synchronous fault")

    def parse(value, cb):
        cb(None, int(value))

    finished = asyncio.get_running_loop().create_future()

    def callback(err, *results):
        print(f"  [CALLBACK] err={err!r} results={results} ambient={current_domain()}")
        finished.set_result(None)

    print('  wrap(parse)("not-a-number", callback)')
    wrap(parse)("not-a-number", callback)
    await finished


async def _act2_later_turn_fault() -> None:
    _banner("ACT 2: Fault from a later loop turn")
    loop = asyncio.get_running_loop()

    def fetch(url, cb):
        def on_timeout():
            raise TimeoutError(f"{url} timed out")
        loop.call_later(0.01, on_timeout)

    finished = loop.create_future()

    def callback(err, *results):
        print(f"  [CALLBACK] err={err!r} ambient={current_domain()}")
        finished.set_result(None)

    print('  wrap(fetch)("https://example.invalid", callback)')
    wrap(fetch)("https://example.invalid", callback)
    await finished


async def _act3_foreign_listener_fault() -> None:
    _banner("ACT 3: Fault from a listener on a foreign event source")
    loop = asyncio.get_running_loop()
    ticker = _Ticker()
    finished = loop.create_future()

    def subscribe(cb):
        def on_tick(n):
            raise RuntimeError(f"listener failed on tick {n}")
        ticker.on(bind(on_tick))

    def catch(err, after):
        print(f"  [CATCH] err={err!r} ambient={current_domain()}")
        finished.set_result(None)

    run(subscribe, catch)
    await asyncio.sleep(0.01)

    print(f"  ticker.emit(1) from ambient={current_domain()}")
    ticker.emit(1)
    await finished


async def _demo() -> None:
    print(f"\n{'=' * 70}")
    print("  faultdomain Three-Act Demonstration")
    print(f"{'=' * 70}")

    await _act1_sync_fault()
    await _act2_later_turn_fault()
    await _act3_foreign_listener_fault()

    print(f"\n{'=' * 70}")
    print("  Every fault reached the callback of the call that owned it,")
    print("  and no domain was left ambient afterwards.")
    print(f"{'=' * 70}\n")


def run_demo(args) -> int:
    asyncio.run(_demo())
    return 0
