from __future__ import annotations


class FichiersError(Exception):
    """Base error for the files service, rendered as plain text with ``status_code``."""

    status_code = 500

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class FileMissingError(FichiersError):
    status_code = 404

    def __init__(self, filename: str) -> None:
        super().__init__(f"File {filename} does not exist.")
        self.filename = filename


class InvalidFilenameError(FichiersError):
    status_code = 400

    def __init__(self, filename: str | None) -> None:
        super().__init__(f"Invalid filename: {filename!r}")
        self.filename = filename


class StorageIOError(FichiersError):
    """Disk or stream failure."""


class PersistenceError(FichiersError):
    """Metadata store failure other than a duplicate filename."""


class DuplicateFilenameError(FichiersError):
    """Filename already recorded; upload treats this as the benign path."""

    def __init__(self, filename: str) -> None:
        super().__init__(f"File {filename} is already recorded.")
        self.filename = filename
