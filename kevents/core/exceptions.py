"""Custom exceptions for kevents."""


class KEventsError(Exception):
    """Base exception for all kevents errors."""


class ConfigurationError(KEventsError):
    """Raised when configuration is invalid or cannot be loaded."""


class ValidationError(KEventsError, TypeError):
    """Raised when an argument passed to the emitter is invalid."""


class InvalidListenerError(ValidationError):
    """Raised when a listener is not callable."""

    def __init__(self, listener: object) -> None:
        super().__init__(f"listener must be callable, got {type(listener).__name__}")
        self.listener = listener


class InvalidEventKeyError(ValidationError):
    """Raised when an event key is not a string, symbol, or integer."""

    def __init__(self, event_key: object) -> None:
        super().__init__(
            f"event key must be a str, Symbol, or int, got {type(event_key).__name__}"
        )
        self.event_key = event_key
