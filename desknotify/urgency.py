from enum import IntEnum

from dbus_next import Variant


class NotificationUrgency(IntEnum):
    """
    Urgency level passed to the daemon as the ``urgency`` hint.
    Some daemons make no distinction between the levels, enough do that
    it is worth sending.
    """
    LOW = 0       # probably not even shown
    NORMAL = 1    # information that is interesting
    CRITICAL = 2  # errors or severe events

    def as_hint(self) -> dict[str, Variant]:
        return as_hint(self)


def as_hint(urgency: NotificationUrgency) -> dict[str, Variant]:
    """Returns the urgency as the ``a{sv}`` hint table the daemon expects."""
    return {"urgency": Variant("y", int(urgency))}
