"""Error taxonomy for the task store and its storage backends."""

from enum import Enum


class ErrorCategory(Enum):
    """Categories of failures the store can encounter."""

    STORAGE_READ = "storage_read"
    STORAGE_WRITE = "storage_write"
    REFERENCE_NOT_FOUND = "reference_not_found"
    INVALID_INVITATION = "invalid_invitation"


class StorageError(Exception):
    """Base error raised by key-value storage backends."""

    category: ErrorCategory = ErrorCategory.STORAGE_READ

    def __init__(self, key: str, message: str) -> None:
        super().__init__(f"{message} (key: {key})")
        self.key = key


class StorageReadError(StorageError):
    """A key could not be read or its payload could not be parsed."""

    category = ErrorCategory.STORAGE_READ


class StorageWriteError(StorageError):
    """A serialized collection could not be written."""

    category = ErrorCategory.STORAGE_WRITE


class InvitationError(ValueError):
    """Invitation input was rejected before a partner was created."""

    category = ErrorCategory.INVALID_INVITATION
