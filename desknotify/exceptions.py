class NotifyError(Exception):
    pass


class BusConnectionError(NotifyError):
    """The session bus could not be reached."""

    def __init__(self, reason: str) -> None:
        super().__init__(f"Cannot connect to the session bus: {reason}")


class MalformedResponseError(NotifyError):
    """The daemon answered, but not in the shape the protocol defines."""

    def __init__(self, member: str, signature: str, body) -> None:
        self.member = member
        self.signature = signature
        self.body = body
        super().__init__(
            f"Unrecognized response to {member} from notification daemon: "
            f"signature {signature!r}, body {body!r}"
        )
