# tests/conftest.py
import asyncio

import pytest

from faultdomain import FaultDomainConfig, install, live_domains, set_config, uninstall
from faultdomain.config import reset_config


class UncaughtRecorder:
    """
    Stands in for the host's uncaught-exception handler.

    Installed underneath the fault dispatcher, so it only sees faults that
    no domain accepted.
    """

    def __init__(self, loop):
        self.loop = loop
        self.contexts = []
        self._waiters = []

    def __call__(self, loop, context):
        self.contexts.append(context)
        waiters, self._waiters = self._waiters, []
        for waiter in waiters:
            if not waiter.done():
                waiter.set_result(None)

    @property
    def exceptions(self):
        return [context.get("exception") for context in self.contexts]

    async def wait_for(self, count=1, timeout=1.0):
        while len(self.contexts) < count:
            waiter = self.loop.create_future()
            self._waiters.append(waiter)
            await asyncio.wait_for(waiter, timeout)
        return self.exceptions


@pytest.fixture(autouse=True)
def default_config():
    """Every test starts from code defaults, whatever ~/.faultdomain says"""
    set_config(FaultDomainConfig())
    yield
    reset_config()


@pytest.fixture(autouse=True)
def no_leaked_domains():
    """A finished scenario must leave no domain able to capture faults"""
    yield
    leaked = live_domains()
    for domain in leaked:
        domain.dispose()
    assert leaked == [], f"Domain left live: {leaked}"


@pytest.fixture
async def uncaught():
    loop = asyncio.get_running_loop()
    uninstall(loop)
    previous = loop.get_exception_handler()
    recorder = UncaughtRecorder(loop)
    loop.set_exception_handler(recorder)
    install(loop)
    yield recorder
    uninstall(loop)
    loop.set_exception_handler(previous)
