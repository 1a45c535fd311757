# tests/core/test_bridge.py
import asyncio

import pytest

from faultdomain import Domain, FaultDomainError, current_domain, current_stack
from faultdomain.core.errors import codes
from faultdomain.core.scheduler import defer_in_fresh_domain, get_loop, reenter_and_run


async def test_defer_in_fresh_domain_calls_next_turn_inside_domain():
    loop = asyncio.get_running_loop()
    finished = loop.create_future()
    calls = []

    def fn(completion):
        calls.append(current_domain())
        completion(None, "ok")

    def completion(*results):
        finished.set_result(results)

    domain = defer_in_fresh_domain(fn, completion, name="fresh")
    assert calls == []

    assert await asyncio.wait_for(finished, 1) == (None, "ok")
    assert calls == [domain]
    assert domain.name == "fresh"
    domain.dispose()


async def test_defer_in_fresh_domain_routes_fault_to_completion():
    loop = asyncio.get_running_loop()
    finished = loop.create_future()

    def fn(completion):
        raise ValueError("boom")

    domain = defer_in_fresh_domain(fn, finished.set_result)

    exc = await asyncio.wait_for(finished, 1)
    assert str(exc) == "boom"
    assert domain.active is False


async def test_reenter_and_run_schedules_under_restored_stack():
    loop = asyncio.get_running_loop()
    outer = Domain(name="outer")
    inner = outer.run(Domain, "inner")
    seen = loop.create_future()

    reenter_and_run(inner, loop.call_soon, lambda: seen.set_result(current_stack()))

    assert current_stack() == ()
    assert await asyncio.wait_for(seen, 1) == (outer, inner)
    inner.dispose()
    outer.dispose()


def test_reenter_and_run_without_domain_uses_empty_stack():
    domain = Domain()

    def probe():
        return reenter_and_run(None, current_stack), current_stack()

    restored, caller = domain.run(probe)

    assert restored == ()
    assert caller == (domain,)
    domain.dispose()


def test_get_loop():
    with pytest.raises(FaultDomainError) as info:
        get_loop(operation="probe")
    assert info.value.error_code == codes.NO_RUNNING_LOOP
    assert info.value.details == {"operation": "probe"}

    loop = asyncio.new_event_loop()
    try:
        assert get_loop(loop) is loop
    finally:
        loop.close()
