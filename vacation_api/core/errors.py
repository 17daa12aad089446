"""Result values returned by request handlers.

Handlers never write responses themselves. They return either ``Ok`` or one
of the ``ApiError`` variants below, and ``to_response`` turns that value into
the JSON response sent to the client.
"""

from dataclasses import dataclass, field
from typing import Any, ClassVar, Union

from fastapi import status
from fastapi.responses import JSONResponse


@dataclass(frozen=True)
class Ok:
    body: Any
    status_code: int = status.HTTP_200_OK


@dataclass(frozen=True)
class ApiError:
    """Base class for every error outcome a handler can produce."""

    message: str = "Internal Server Error"
    status_code: ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR

    def body(self) -> dict:
        return {"error": self.message}


@dataclass(frozen=True)
class AuthenticationMissing(ApiError):
    message: str = "No token provided"
    status_code: ClassVar[int] = status.HTTP_401_UNAUTHORIZED


@dataclass(frozen=True)
class AuthenticationInvalid(ApiError):
    message: str = "Invalid or expired token"
    status_code: ClassVar[int] = status.HTTP_401_UNAUTHORIZED


@dataclass(frozen=True)
class AuthorizationDenied(ApiError):
    message: str = "Insufficient permissions"
    status_code: ClassVar[int] = status.HTTP_403_FORBIDDEN


@dataclass(frozen=True)
class NotFound(ApiError):
    message: str = "404 Not Found"
    status_code: ClassVar[int] = status.HTTP_404_NOT_FOUND


@dataclass(frozen=True)
class BadRequest(ApiError):
    message: str = "Bad Request"
    status_code: ClassVar[int] = status.HTTP_400_BAD_REQUEST


@dataclass(frozen=True)
class ValidationFailed(ApiError):
    message: str = "Validation failed"
    errors: tuple[str, ...] = field(default_factory=tuple)
    status_code: ClassVar[int] = 422

    def body(self) -> dict:
        return {"errors": list(self.errors)}


@dataclass(frozen=True)
class InternalError(ApiError):
    status_code: ClassVar[int] = status.HTTP_500_INTERNAL_SERVER_ERROR


Result = Union[Ok, ApiError]


def to_response(result: Result) -> JSONResponse:
    if isinstance(result, ApiError):
        return JSONResponse(status_code=result.status_code, content=result.body())
    return JSONResponse(status_code=result.status_code, content=result.body)
