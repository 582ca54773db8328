"""Exceptions raised by the upload and listing services."""


class UploadValidationError(Exception):
    """Raised when an upload request is missing its file part."""

    def __init__(self, message: str = "No file uploaded") -> None:
        self.message = message
        super().__init__(message)


class StorageReadError(Exception):
    """Raised when the storage directory or one of its entries cannot be read.

    The original OS error description is kept in ``error`` so it can be
    reported back to the caller.
    """

    def __init__(self, error: str, message: str = "Error reading files") -> None:
        self.message = message
        self.error = error
        super().__init__(f"{message}: {error}")


class StorageNameExhaustedError(Exception):
    """Raised when no free filename could be found for an upload."""

    def __init__(self, filename: str, attempts: int) -> None:
        self.filename = filename
        self.attempts = attempts
        super().__init__(
            f"Could not find a free name for '{filename}' after {attempts} attempts"
        )
