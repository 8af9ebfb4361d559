from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Generic, TypeVar

T = TypeVar("T")


class ErrorKind(str, Enum):
    INVALID_INPUT = "INVALID_INPUT"
    NOT_FOUND = "NOT_FOUND"
    CONFLICT = "CONFLICT"
    FORBIDDEN = "FORBIDDEN"
    INTERNAL_ERROR = "INTERNAL_SERVER_ERROR"


@dataclass(frozen=True)
class ServiceResult(Generic[T]):
    """Result of a service operation.

    Exactly one of ``data`` (on success) or ``error`` + ``message`` (on failure)
    is meaningful. Services never raise for expected conditions; the request
    layer decides how each ``ErrorKind`` is rendered.
    """

    ok: bool
    data: T | None = None
    error: ErrorKind | None = None
    message: str | None = None

    @classmethod
    def success(cls, data: T | None = None, message: str | None = None) -> ServiceResult[T]:
        return cls(ok=True, data=data, message=message)

    @classmethod
    def failure(cls, error: ErrorKind, message: str) -> ServiceResult[T]:
        return cls(ok=False, error=error, message=message)

    @classmethod
    def invalid(cls, message: str) -> ServiceResult[T]:
        return cls.failure(ErrorKind.INVALID_INPUT, message)

    @classmethod
    def not_found(cls, message: str) -> ServiceResult[T]:
        return cls.failure(ErrorKind.NOT_FOUND, message)

    @classmethod
    def conflict(cls, message: str) -> ServiceResult[T]:
        return cls.failure(ErrorKind.CONFLICT, message)

    @classmethod
    def forbidden(cls, message: str) -> ServiceResult[T]:
        return cls.failure(ErrorKind.FORBIDDEN, message)

    @classmethod
    def internal(cls, message: str = "Erro ao processar requisição") -> ServiceResult[T]:
        return cls.failure(ErrorKind.INTERNAL_ERROR, message)
