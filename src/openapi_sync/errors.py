"""Exception types raised by the parser and the section editors."""


class OpenApiSyncError(Exception):
    """Base class for all errors raised by this package."""


class ParseError(OpenApiSyncError):
    """Text could not be turned into a document."""

    def __init__(self, messages: list[str]):
        self.messages = messages
        super().__init__("; ".join(messages))


class EditError(OpenApiSyncError):
    """A section edit could not be applied."""


class StructuralEditError(EditError):
    """The edit points at an index or field that does not exist (stale edit)."""


class InvalidValueError(EditError):
    """The edit targets a valid field but the new value is not allowed."""
