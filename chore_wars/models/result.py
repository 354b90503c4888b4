# chore_wars/models/result.py
"""Uniform result envelope returned by every service operation.

Domain failures are values, not exceptions: callers check ``is_success``
before reading ``data``.
"""
from enum import Enum
from typing import Generic, List, Optional, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorKind(str, Enum):
    NOT_FOUND = "NotFound"
    INVALID_STATE = "InvalidState"
    FORBIDDEN = "Forbidden"
    CONFLICT = "Conflict"
    VALIDATION_FAILURE = "ValidationFailure"


class FieldError(BaseModel):
    field: str
    message: str


class AppResult(BaseModel, Generic[T]):
    is_success: bool
    data: Optional[T] = None
    errors: List[str] = Field(default_factory=list)
    validation_errors: List[FieldError] = Field(default_factory=list)
    message: Optional[str] = None
    error_kind: Optional[ErrorKind] = None

    @classmethod
    def success(cls, data: Optional[T] = None, message: Optional[str] = None, errors: Optional[List[str]] = None) -> "AppResult[T]":
        return cls(is_success=True, data=data, message=message, errors=list(errors or []))

    @classmethod
    def failure(cls, kind: ErrorKind, error: str) -> "AppResult[T]":
        return cls(is_success=False, errors=[error], error_kind=kind)

    @classmethod
    def validation_failure(cls, validation_errors: List[FieldError]) -> "AppResult[T]":
        return cls(
            is_success=False,
            validation_errors=validation_errors,
            error_kind=ErrorKind.VALIDATION_FAILURE,
        )


def validate_ids(**fields: Optional[str]) -> List[FieldError]:
    """Field errors for every blank identifier argument"""
    return [
        FieldError(field=name, message=f"{name} is required")
        for name, value in fields.items()
        if value is None or not str(value).strip()
    ]
