"""Exceptions raised by the ban list codec and its helpers."""

from enum import Enum


class BanListErrorKind(Enum):
    """Failure categories callers switch on"""
    FILE_NOT_FOUND = "file_not_found"
    FILE_NOT_ACCESSIBLE = "file_not_accessible"
    INVALID_FILE_FORMAT = "invalid_file_format"
    UNKNOWN = "unknown"


class BanListError(Exception):
    """Exception raised when the ban list file cannot be read or updated.

    Attributes:
        kind: The BanListErrorKind describing the failure
        message: Human-readable description
    """

    def __init__(self, kind: BanListErrorKind, message: str):
        super().__init__(message)
        self.kind = kind
        self.message = message

    @classmethod
    def not_found(cls, file_path) -> "BanListError":
        return cls(BanListErrorKind.FILE_NOT_FOUND, f"File doesn't exist: {file_path}")

    @classmethod
    def not_accessible(cls, file_path, reason: object = None) -> "BanListError":
        message = f"File cannot be read/written: {file_path}"
        if reason:
            message = f"{message} ({reason})"
        return cls(BanListErrorKind.FILE_NOT_ACCESSIBLE, message)

    @classmethod
    def invalid_format(cls, message: str) -> "BanListError":
        return cls(BanListErrorKind.INVALID_FILE_FORMAT, message)

    @classmethod
    def unknown(cls, message: str) -> "BanListError":
        return cls(BanListErrorKind.UNKNOWN, message)


class InvalidSteamIdError(ValueError):
    """Exception raised for identifiers that are not Steam64-shaped"""
    pass


class BackupError(Exception):
    """Exception raised for backup and revert failures"""
    pass
