"""Notifications with their defaults kept in one place.

A :class:`Notification` lets several kinds of messages share presentation
settings::

    async def main():
        critical = Notification("prog", icon_path="critical-icon.png",
                                urgency=NotificationUrgency.CRITICAL)
        boring = Notification("prog", icon_path="low-icon.png",
                              timeout=timedelta(seconds=1),
                              urgency=NotificationUrgency.LOW)
        await boring.send_msg("Nothing is happening... boring!", "")
        await critical.send_msg("Your computer is on fire!",
                                "Here is what you should do:\\n ...")

Every successful call stores the id the daemon assigned in
:attr:`Notification.id`, so ``replace()`` without an id updates the
notification last shown through that record. A failed call leaves ``id``
untouched.
"""

import logging
from dataclasses import dataclass, field
from datetime import timedelta

from .bus import INT32_MAX, INT32_MIN, SessionConnection, close_notification, notify
from .urgency import NotificationUrgency, as_hint

logger = logging.getLogger(__name__)

# 0 asks the daemon to keep the notification until dismissed; the
# protocol reserves -1 for "whatever the daemon prefers".
EXPIRES_NEVER = timedelta(0)
EXPIRES_DEFAULT = timedelta(milliseconds=-1)


def timeout_in_ms(timeout: timedelta) -> int:
    """
    Returns *timeout* in whole milliseconds, truncated toward zero and
    clamped to the signed 32 bit range the protocol uses.
    """
    us = timeout // timedelta(microseconds=1)
    ms = abs(us) // 1000
    if us < 0:
        ms = -ms
    return max(INT32_MIN, min(INT32_MAX, ms))


@dataclass
class Notification:
    # application name sending the notification, may be ""
    name: str = ""
    summary: str = ""
    # some daemons ignore the body, may be ""
    body: str = ""
    # some daemons ignore the icon, may be ""
    icon_path: str = ""
    # requested display time, daemons may override it
    timeout: timedelta = EXPIRES_NEVER
    urgency: NotificationUrgency = NotificationUrgency.NORMAL
    # assigned by the daemon, 0 until sent
    id: int = 0
    # extra a{sv} hints; the urgency field always takes precedence
    hints: dict = field(default_factory=dict)
    actions: list = field(default_factory=list)
    connection: SessionConnection | None = field(default=None, compare=False, repr=False)

    def _hints(self, urgency: NotificationUrgency) -> dict:
        hints = dict(self.hints)
        hints.update(as_hint(urgency))
        return hints

    async def _notify(self, summary: str, body: str, urgency: NotificationUrgency, replaces_id: int) -> int:
        self.id = await notify(
            self.name,
            summary,
            body,
            self.icon_path,
            replaces_id,
            self.actions,
            self._hints(urgency),
            timeout_in_ms(self.timeout),
            connection=self.connection,
        )
        return self.id

    def _target(self, id: int | None) -> int:
        target = self.id if id is None else id
        if not target:
            raise ValueError("nothing to replace: notification has not been sent")
        return target

    async def send(self) -> int:
        """Sends the notification as it is, always as a new one."""
        return await self._notify(self.summary, self.body, self.urgency, 0)

    async def send_msg(self, summary: str, body: str) -> int:
        """Like :meth:`send`, with *summary* and *body* in place of the record's."""
        return await self._notify(summary, body, self.urgency, 0)

    async def send_urgent_msg(self, summary: str, body: str, urgency: NotificationUrgency) -> int:
        return await self._notify(summary, body, urgency, 0)

    async def replace(self, id: int | None = None) -> int:
        """
        Replaces notification *id* (by default the one this record last
        showed) with the record as it is, and returns the new id. Raises
        ValueError when there is no id to replace; use :meth:`send` for that.
        """
        return await self._notify(self.summary, self.body, self.urgency, self._target(id))

    async def replace_msg(self, id: int | None, summary: str, body: str) -> int:
        return await self._notify(summary, body, self.urgency, self._target(id))

    async def replace_urgent_msg(
        self, id: int | None, summary: str, body: str, urgency: NotificationUrgency
    ) -> int:
        return await self._notify(summary, body, urgency, self._target(id))

    async def close(self) -> None:
        """Removes the notification this record last showed, if any."""
        if not self.id:
            return
        await close_notification(self.id, connection=self.connection)
        logger.debug("closed notification %d", self.id)
        self.id = 0


async def send_msg(
    summary: str,
    body: str,
    *,
    name: str = "",
    icon_path: str = "",
    timeout: timedelta = EXPIRES_NEVER,
    urgency: NotificationUrgency = NotificationUrgency.NORMAL,
    connection: SessionConnection | None = None,
) -> int:
    """Shows a new notification and returns its id."""
    note = Notification(name, icon_path=icon_path, timeout=timeout, urgency=urgency, connection=connection)
    return await note.send_msg(summary, body)


async def send_urgent_msg(summary: str, body: str, urgency: NotificationUrgency, **kwargs) -> int:
    return await send_msg(summary, body, urgency=urgency, **kwargs)


async def replace_msg(
    id: int,
    summary: str,
    body: str,
    *,
    name: str = "",
    icon_path: str = "",
    timeout: timedelta = EXPIRES_NEVER,
    urgency: NotificationUrgency = NotificationUrgency.NORMAL,
    connection: SessionConnection | None = None,
) -> int:
    """Replaces notification *id* and returns the id the daemon now uses for it."""
    note = Notification(name, icon_path=icon_path, timeout=timeout, urgency=urgency, connection=connection)
    return await note.replace_msg(id, summary, body)


async def replace_urgent_msg(id: int, summary: str, body: str, urgency: NotificationUrgency, **kwargs) -> int:
    return await replace_msg(id, summary, body, urgency=urgency, **kwargs)
