from __future__ import annotations

from enum import Enum


class DriveErrorKind(str, Enum):
    INVALID_NAME = 'invalid_name'
    NOT_FOUND = 'not_found'
    INVALID_UPLOAD = 'invalid_upload'
    ALREADY_EXISTS = 'already_exists'
    IO = 'io'


_STATUS_BY_KIND = {
    DriveErrorKind.INVALID_NAME: 400,
    DriveErrorKind.NOT_FOUND: 404,
    DriveErrorKind.INVALID_UPLOAD: 400,
    DriveErrorKind.ALREADY_EXISTS: 500,
    DriveErrorKind.IO: 500,
}


class DriveError(Exception):
    """Base class for failures raised by the drive core.

    Each subclass pins a ``kind``; the HTTP layer maps it to a status code
    through :attr:`status_code` and never inspects the underlying OS error.
    """

    kind: DriveErrorKind = DriveErrorKind.IO

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message

    @property
    def status_code(self) -> int:
        return _STATUS_BY_KIND[self.kind]


class InvalidNameError(DriveError):
    kind = DriveErrorKind.INVALID_NAME


class PathEscapeError(InvalidNameError):
    pass


class NotFoundError(DriveError):
    kind = DriveErrorKind.NOT_FOUND


class InvalidUploadError(DriveError):
    kind = DriveErrorKind.INVALID_UPLOAD


class AlreadyExistsError(DriveError):
    kind = DriveErrorKind.ALREADY_EXISTS


class DriveIOError(DriveError):
    kind = DriveErrorKind.IO
