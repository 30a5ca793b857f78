# app/core/errors.py
from __future__ import annotations

from typing import Any, Optional


class DomainError(Exception):
    """Base dos erros de negócio; cada subclasse mapeia para um status HTTP."""

    code = "DOMAIN_ERROR"
    status_code = 400

    def __init__(self, message: str, details: Optional[Any] = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def to_dict(self) -> dict:
        return {"code": self.code, "message": self.message, "details": self.details}


class InvalidArgument(DomainError):
    code = "INVALID_ARGUMENT"
    status_code = 400


class InvalidState(DomainError):
    code = "INVALID_STATE"
    status_code = 400


class Forbidden(DomainError):
    code = "FORBIDDEN"
    status_code = 403


class NotFound(DomainError):
    code = "NOT_FOUND"
    status_code = 404


class Conflict(DomainError):
    code = "CONFLICT"
    status_code = 409
