"""Domain errors."""


class SerialConsoleError(Exception):
    """Base class for serial console errors."""


class SelectionCancelled(SerialConsoleError):
    """The user declined to pick a device."""

    def __init__(self, message: str = "No port selected by the user") -> None:
        super().__init__(message)


class OpenError(SerialConsoleError):
    """The device could not be opened or its streams could not be wired."""


class StreamFault(SerialConsoleError):
    """The byte stream of a live session failed."""


class SessionActiveError(SerialConsoleError):
    """The operation is not allowed while a session is live."""
