"""Talking to the notification daemon over the session bus.

Everything here goes through :class:`SessionConnection`, which owns the
shared bus connections of the process, one per event loop. A connection is
only opened when the first call needs it, and is reopened when the bus
reports it lost.
"""

import asyncio
import logging
import threading
from typing import NamedTuple

from dbus_next import Message, MessageType
from dbus_next.aio import MessageBus
from dbus_next.constants import BusType
from dbus_next.errors import AuthError, DBusError

from .exceptions import BusConnectionError, MalformedResponseError

logger = logging.getLogger(__name__)

SERVICE_NAME = "org.freedesktop.Notifications"
OBJECT_PATH = "/org/freedesktop/Notifications"
INTERFACE = "org.freedesktop.Notifications"

UINT32_MAX = 2**32 - 1
INT32_MIN = -(2**31)
INT32_MAX = 2**31 - 1


def connect_session_bus():
    return MessageBus(bus_type=BusType.SESSION).connect()


class ServerInformation(NamedTuple):
    name: str
    vendor: str
    version: str
    spec_version: str


class _LoopSlot:
    """The bus of one event loop and the lock its first connect runs under."""

    def __init__(self):
        self.lock = asyncio.Lock()
        self.bus = None

    def discard(self) -> None:
        if self.bus is not None and self.bus.connected:
            logger.debug("disconnecting cached session bus connection")
            self.bus.disconnect()
        self.bus = None


class SessionConnection:
    """
    Lazily connected handle to the bus the notification daemon lives on.

    *factory* is called without arguments and must return an awaitable
    resolving to a connected bus, i.e. something with an async ``call()``,
    ``disconnect()`` and a ``connected`` attribute. It defaults to the
    session bus.

    A bus belongs to the event loop that created it, so one is kept per
    loop. Buses of loops that have since been closed (as each
    ``asyncio.run()`` does on return) are disconnected the next time any
    loop asks for a connection.
    """

    def __init__(self, factory=connect_session_bus):
        self.factory = factory
        self._guard = threading.Lock()
        # event loop -> _LoopSlot
        self._slots = {}

    def _slot(self, loop) -> _LoopSlot:
        with self._guard:
            for closed in [other for other in self._slots if other.is_closed()]:
                self._slots.pop(closed).discard()
            slot = self._slots.get(loop)
            if slot is None:
                slot = self._slots[loop] = _LoopSlot()
            return slot

    async def get(self):
        """Returns the connected bus, connecting first if needed."""
        slot = self._slot(asyncio.get_running_loop())
        async with slot.lock:
            if slot.bus is not None and not slot.bus.connected:
                logger.debug("session bus connection lost, reconnecting")
                slot.bus = None
            if slot.bus is None:
                try:
                    slot.bus = await self.factory()
                except (OSError, ValueError, AuthError, DBusError) as e:
                    raise BusConnectionError(str(e) or type(e).__name__) from e
                logger.debug("connected to the session bus")
            return slot.bus

    def reset(self) -> None:
        """Disconnects and forgets every cached bus."""
        with self._guard:
            slots = list(self._slots.values())
            self._slots.clear()
        for slot in slots:
            slot.discard()

    async def call(self, member: str, signature: str = "", body=()) -> Message:
        """
        Calls *member* on the notification daemon and returns the reply.

        Error replies are raised as :class:`dbus_next.errors.DBusError`.
        Transport failures drop the cached connection before propagating.
        """
        bus = await self.get()
        msg = Message(
            destination=SERVICE_NAME,
            path=OBJECT_PATH,
            interface=INTERFACE,
            member=member,
            signature=signature,
            body=list(body),
        )
        try:
            reply = await bus.call(msg)
        except (OSError, EOFError):
            slot = self._slot(asyncio.get_running_loop())
            if slot.bus is bus:
                slot.discard()
            raise

        if reply.message_type == MessageType.ERROR:
            text = reply.body[0] if reply.signature.startswith("s") else ""
            raise DBusError(reply.error_name, text, reply=reply)
        return reply


session = SessionConnection()


def _expect(reply: Message, member: str, signature: str) -> list:
    if reply.signature != signature:
        raise MalformedResponseError(member, reply.signature, reply.body)
    return reply.body


async def notify(
    name: str,
    summary: str,
    body: str,
    icon_path: str,
    replaces_id: int = 0,
    actions=None,
    hints=None,
    timeout_ms: int = 0,
    *,
    connection: SessionConnection | None = None,
) -> int:
    """
    Does the real work of getting a connection and calling ``Notify``.

    To have the daemon use its defaults, the following is accepted::

        name = ""
        body = ""
        replaces_id = 0
        actions = None
        hints = None

    so really only *summary* and *timeout_ms* are required for a meaningful
    notification. A *replaces_id* of 0 asks for a new notification, anything
    else asks the daemon to update that notification in place.

    Returns the id the daemon assigned, which may differ from *replaces_id*.
    """
    if not 0 <= replaces_id <= UINT32_MAX:
        raise ValueError(f"replaces_id out of range: {replaces_id}")
    if not INT32_MIN <= timeout_ms <= INT32_MAX:
        raise ValueError(f"timeout_ms out of range: {timeout_ms}")
    if connection is None:
        connection = session

    logger.debug("sending notification %r (replaces %d)", summary, replaces_id)
    reply = await connection.call(
        "Notify",
        "susssasa{sv}i",
        [
            name,
            replaces_id,
            icon_path,
            summary,
            body,
            list(actions or []),
            dict(hints or {}),
            timeout_ms,
        ],
    )

    values = _expect(reply, "Notify", "u")
    if len(values) != 1 or not isinstance(values[0], int) \
            or not 0 <= values[0] <= UINT32_MAX:
        raise MalformedResponseError("Notify", reply.signature, reply.body)
    logger.debug("daemon assigned id %d", values[0])
    return values[0]


async def close_notification(id: int, *, connection: SessionConnection | None = None) -> None:
    """Asks the daemon to remove notification *id* from display."""
    if not 0 <= id <= UINT32_MAX:
        raise ValueError(f"id out of range: {id}")
    if connection is None:
        connection = session
    logger.debug("closing notification %d", id)
    reply = await connection.call("CloseNotification", "u", [id])
    _expect(reply, "CloseNotification", "")


async def get_capabilities(*, connection: SessionConnection | None = None) -> list[str]:
    """
    Returns the optional features the daemon implements, such as "body",
    "body-markup", "actions" or "persistence".
    """
    if connection is None:
        connection = session
    reply = await connection.call("GetCapabilities")
    return list(_expect(reply, "GetCapabilities", "as")[0])


async def get_server_information(*, connection: SessionConnection | None = None) -> ServerInformation:
    if connection is None:
        connection = session
    reply = await connection.call("GetServerInformation")
    return ServerInformation(*_expect(reply, "GetServerInformation", "ssss"))
