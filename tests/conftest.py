"""Fixtures and a fake session bus for the desknotify tests."""

import pytest
from dbus_next import Message

from desknotify import SessionConnection


class FakeBus:
    """
    Stands in for a connected MessageBus. Records every outgoing message and
    answers it with a real reply message prepared through answer() or fail().
    """

    def __init__(self):
        self.connected = True
        self.calls = []
        self.disconnects = 0
        self._replies = {}

    def disconnect(self):
        self.connected = False
        self.disconnects += 1

    def answer(self, member, signature="", body=()):
        self._replies[member] = lambda msg: Message.new_method_return(msg, signature, list(body))

    def fail(self, member, error_name, text):
        self._replies[member] = lambda msg: Message.new_error(msg, error_name, text)

    def raise_on(self, member, exc):
        def reply(msg):
            raise exc

        self._replies[member] = reply

    async def call(self, msg):
        msg.serial = len(self.calls) + 1
        self.calls.append(msg)
        return self._replies[msg.member](msg)


class CountingFactory:
    def __init__(self, bus):
        self.bus = bus
        self.count = 0
        self.error = None

    async def __call__(self):
        self.count += 1
        if self.error is not None:
            raise self.error
        return self.bus


@pytest.fixture
def bus():
    return FakeBus()


@pytest.fixture
def factory(bus):
    return CountingFactory(bus)


@pytest.fixture
def connection(factory):
    return SessionConnection(factory)


@pytest.fixture
def make_bus():
    def make():
        bus = FakeBus()
        bus.answer("Notify", "u", [1])
        return bus

    return make
