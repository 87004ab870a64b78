"""
Application error taxonomy.

Services raise ``AppError`` subclasses; the error handlers registered
in the application factory turn them into the JSON error envelope with
the matching HTTP status.  Anything that is not an ``AppError`` is
reported as an internal server error.

    NOT_FOUND              -> 404
    ALREADY_EXISTS         -> 409
    CONFLICT               -> 409
    VALIDATION_ERROR       -> 400
    BAD_REQUEST            -> 400
    INTERNAL_SERVER_ERROR  -> 500
"""

from typing import Any

CODE_NOT_FOUND = "NOT_FOUND"
CODE_ALREADY_EXISTS = "ALREADY_EXISTS"
CODE_CONFLICT = "CONFLICT"
CODE_VALIDATION_ERROR = "VALIDATION_ERROR"
CODE_BAD_REQUEST = "BAD_REQUEST"
CODE_INTERNAL_ERROR = "INTERNAL_SERVER_ERROR"


class AppError(Exception):
    """
    An error that knows how it should be presented over HTTP.

    Attributes:
        code:        Machine-readable error code.
        message:     Human-readable message returned to the client.
        status_code: HTTP status for the response.
        details:     Optional field -> message mapping (validation errors).
    """

    code: str = CODE_INTERNAL_ERROR
    status_code: int = 500

    def __init__(self, message: str, details: dict[str, Any] | None = None):
        super().__init__(message)
        self.message = message
        self.details = details

    def with_details(self, details: dict[str, Any]) -> "AppError":
        """Attach a details mapping and return the same error."""
        self.details = details
        return self

    def to_dict(self) -> dict[str, Any]:
        """Serialize into the ``error`` member of the response envelope."""
        payload: dict[str, Any] = {"code": self.code, "message": self.message}
        if self.details:
            payload["details"] = self.details
        return payload

    def __repr__(self) -> str:
        return f"<{self.__class__.__name__} {self.code}: {self.message}>"


class NotFoundError(AppError):
    code = CODE_NOT_FOUND
    status_code = 404


class AlreadyExistsError(AppError):
    code = CODE_ALREADY_EXISTS
    status_code = 409


class ConflictError(AppError):
    code = CODE_CONFLICT
    status_code = 409


class ValidationError(AppError):
    code = CODE_VALIDATION_ERROR
    status_code = 400


class BadRequestError(AppError):
    code = CODE_BAD_REQUEST
    status_code = 400


class InternalError(AppError):
    code = CODE_INTERNAL_ERROR
    status_code = 500


# -- Constructors ----------------------------------------------------------


def not_found(resource: str) -> NotFoundError:
    """``<resource> not found`` (404)."""
    return NotFoundError(f"{resource} not found")


def already_exists(resource: str) -> AlreadyExistsError:
    """``<resource> already exists`` (409)."""
    return AlreadyExistsError(f"{resource} already exists")


def conflict(message: str) -> ConflictError:
    return ConflictError(message)


def validation(message: str) -> ValidationError:
    return ValidationError(message)


def bad_request(message: str) -> BadRequestError:
    return BadRequestError(message)


def internal(message: str) -> InternalError:
    return InternalError(message)
