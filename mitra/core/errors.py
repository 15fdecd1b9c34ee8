"""
Exception hierarchy for the Mitra coordinator.

Agents and the coordinator raise these; the HTTP and CLI layers translate
them into status codes and user-facing messages.
"""


class MitraError(Exception):
    """Base class for all coordinator errors."""


class InvalidArgumentError(MitraError):
    """An intent argument is missing or cannot be parsed."""

    def __init__(self, message: str, field: str = None):
        super().__init__(message)
        self.field = field


class UnsupportedIntentError(MitraError):
    """The intent name is not part of the supported intent set."""

    def __init__(self, intent_name: str):
        super().__init__(f"Unsupported intent: {intent_name}")
        self.intent_name = intent_name


class StorageError(MitraError):
    """The document store could not complete an operation."""


class ScheduleFetchError(MitraError):
    """
    A concurrent read needed to build a schedule failed or timed out.

    The whole schedule operation is abandoned; no partial result is produced.
    """
