"""Client for the freedesktop.org desktop notifications protocol."""

from .bus import (
    ServerInformation,
    SessionConnection,
    close_notification,
    get_capabilities,
    get_server_information,
    notify,
)
from .exceptions import BusConnectionError, MalformedResponseError, NotifyError
from .notification import (
    EXPIRES_DEFAULT,
    EXPIRES_NEVER,
    Notification,
    replace_msg,
    replace_urgent_msg,
    send_msg,
    send_urgent_msg,
    timeout_in_ms,
)
from .urgency import NotificationUrgency, as_hint

__all__ = [
    "BusConnectionError",
    "EXPIRES_DEFAULT",
    "EXPIRES_NEVER",
    "MalformedResponseError",
    "Notification",
    "NotificationUrgency",
    "NotifyError",
    "ServerInformation",
    "SessionConnection",
    "as_hint",
    "close_notification",
    "get_capabilities",
    "get_server_information",
    "notify",
    "replace_msg",
    "replace_urgent_msg",
    "send_msg",
    "send_urgent_msg",
    "timeout_in_ms",
]

__version__ = "0.1.0"
