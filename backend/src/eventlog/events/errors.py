"""Event log exceptions and recoverable-error accumulation."""


class EventError(Exception):
    """Base class for event log errors."""


class UnrecognisedEventTypeError(EventError):
    """Raised when creating an event whose type was never registered.

    This is a caller misconfiguration rather than bad input, so it is not
    reported through the accumulated error list.
    """

    def __init__(self, slug: str):
        super().__init__(f"Unrecognised event type '{slug}'")
        self.slug = slug


class EventConfigError(EventError):
    """Raised when an event type configuration file cannot be used."""


class ErrorHandling:
    """Accumulates recoverable error messages for the caller to inspect.

    Operations that fail on bad input record a message and return False;
    callers check the return value and read last_error().
    """

    def __init__(self) -> None:
        self._errors: list[str] = []

    def set_error(self, message: str) -> None:
        self._errors.append(message)

    def get_errors(self) -> list[str]:
        return list(self._errors)

    def last_error(self) -> str | None:
        return self._errors[-1] if self._errors else None

    def clear_errors(self) -> None:
        self._errors.clear()
