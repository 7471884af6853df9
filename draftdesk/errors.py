"""Error taxonomy shared by the store, persistence layer and command surface."""


class DraftDeskError(Exception):
    """Base class for errors that are reported to the user without exiting."""

    title = "Error"

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class UserError(DraftDeskError):
    """Malformed command arguments or an out-of-range index."""
    pass


class FileIOError(DraftDeskError):
    """A read or write failed; the operation was aborted."""

    title = "File Error"


class CorruptFile(DraftDeskError):
    """File contents match neither the current nor the legacy schema."""

    title = "Corrupt File"


class InvalidOperation(DraftDeskError):
    """Operation would break a store invariant (e.g. deleting the last chapter)."""

    title = "Not Allowed"


class SchemaMismatch(Exception):
    """Raised by a schema parser when the payload is not in its format."""
    pass
