# tests/core/test_dispatcher.py
"""
FaultDispatcher - loop exception handler that attributes later-turn faults
"""

import asyncio

from faultdomain import (
    Domain,
    FaultDispatcher,
    FaultDomainConfig,
    install,
    is_installed,
    set_config,
    uninstall,
    wrap,
)


def _raise(exc):
    raise exc


def test_install_is_idempotent_and_chains_previous_handler():
    loop = asyncio.new_event_loop()
    try:
        seen = []

        def previous(loop, context):
            seen.append(context["message"])

        loop.set_exception_handler(previous)
        first = install(loop)
        assert install(loop) is first
        assert first.previous is previous
        assert is_installed(loop)

        loop.call_exception_handler({"message": "no exception here"})
        assert seen == ["no exception here"]

        assert uninstall(loop) is True
        assert loop.get_exception_handler() is previous
        assert uninstall(loop) is False
    finally:
        loop.close()


def test_stop_policy_halts_the_loop():
    loop = asyncio.new_event_loop()
    try:
        seen = []
        loop.set_exception_handler(lambda loop, context: seen.append(context["exception"]))
        install(loop, config=FaultDomainConfig(unattributed="stop"))

        loop.call_soon(_raise, ValueError("fatal"))
        loop.call_later(5.0, seen.append, "loop kept running")
        loop.run_forever()

        assert [str(e) for e in seen] == ["fatal"]
    finally:
        loop.close()


async def test_first_use_installs_dispatcher():
    loop = asyncio.get_running_loop()
    uninstall(loop)
    finished = loop.create_future()

    wrap(lambda cb: cb(None))(finished.set_result)
    await asyncio.wait_for(finished, 1)

    assert is_installed(loop)


async def test_auto_install_off_leaves_loop_alone():
    set_config(FaultDomainConfig(auto_install=False))
    loop = asyncio.get_running_loop()
    uninstall(loop)
    finished = loop.create_future()

    wrap(lambda cb: cb(None))(finished.set_result)
    await asyncio.wait_for(finished, 1)

    assert not is_installed(loop)


async def test_plain_domain_captures_later_turn_fault():
    loop = asyncio.get_running_loop()
    domain = Domain(name="plain")
    caught = loop.create_future()
    domain.on_error(caught.set_result)

    domain.run(loop.call_later, 0.005, _raise, ValueError("late"))

    assert str(await asyncio.wait_for(caught, 1)) == "late"
    assert isinstance(loop.get_exception_handler(), FaultDispatcher)


async def test_raising_handler_escapes_as_unattributed(uncaught):
    loop = asyncio.get_running_loop()
    domain = Domain(name="broken")

    def broken(exc):
        raise RuntimeError("handler broke")

    domain.on_error(broken)
    domain.run(loop.call_soon, _raise, ValueError("original"))

    (escaped,) = await uncaught.wait_for(1)
    assert str(escaped) == "handler broke"
    assert "while routing" in uncaught.contexts[0]["message"]
