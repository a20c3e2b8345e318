from enum import Enum

from fastapi import status


class ErrorKind(str, Enum):
    UNAUTHENTICATED = "unauthenticated"
    INVALID_ARGUMENT = "invalid-argument"
    PERMISSION_DENIED = "permission-denied"
    INTERNAL = "internal"

    @property
    def http_status(self) -> int:
        return _HTTP_STATUS[self]

    @property
    def protocol_status(self) -> str:
        """Status string used on the callable wire protocol, e.g. ``PERMISSION_DENIED``."""
        return self.value.replace('-', '_').upper()


_HTTP_STATUS = {
    ErrorKind.UNAUTHENTICATED: status.HTTP_401_UNAUTHORIZED,
    ErrorKind.INVALID_ARGUMENT: status.HTTP_400_BAD_REQUEST,
    ErrorKind.PERMISSION_DENIED: status.HTTP_403_FORBIDDEN,
    ErrorKind.INTERNAL: status.HTTP_500_INTERNAL_SERVER_ERROR,
}


class CallableError(Exception):
    """Typed error returned to callers of a callable operation."""

    def __init__(self, kind: ErrorKind, message: str):
        super().__init__(message)
        self.kind = ErrorKind(kind)
        self.message = message

    def to_dict(self) -> dict:
        return {
            'status': self.kind.protocol_status,
            'message': self.message,
        }

    def __repr__(self):
        return f"CallableError({self.kind.value!r}, {self.message!r})"


class ObjectNotFound(Exception):
    """Raised by an object store when the object to delete does not exist."""

    def __init__(self, path: str):
        super().__init__(f"Object not found: {path}")
        self.path = path


class InvalidTriggerEvent(ValueError):
    """Raised when a document event body cannot be decoded."""
