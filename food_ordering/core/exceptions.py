"""
API error taxonomy and the handlers that render it.

Every error leaves the service as JSON ``{"message": "..."}``. Domain code
raises one of the ``APIError`` subclasses; anything else is treated as an
unexpected failure, logged, and answered with a bare 500.
"""
import logging
from typing import Any, Dict, Sequence, Type, TypeVar

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse
from pydantic import BaseModel, ValidationError
from starlette.exceptions import HTTPException as StarletteHTTPException

logger = logging.getLogger(__name__)

ModelT = TypeVar("ModelT", bound=BaseModel)


class APIError(HTTPException):
    """Base API error with a human readable message"""

    def __init__(self, status_code: int, message: str):
        super().__init__(status_code=status_code, detail=message)

    @property
    def message(self) -> str:
        return self.detail


class BadRequestError(APIError):
    def __init__(self, message: str = "Bad request"):
        super().__init__(status.HTTP_400_BAD_REQUEST, message)


class UnauthorizedError(APIError):
    """Missing or invalid session, or authenticated but not the owner"""

    def __init__(self, message: str = "Not authorized"):
        super().__init__(status.HTTP_401_UNAUTHORIZED, message)


class ForbiddenError(APIError):
    """Authenticated, but the role is not permitted"""

    def __init__(self, message: str = "Forbidden"):
        super().__init__(status.HTTP_403_FORBIDDEN, message)


class NotFoundError(APIError):
    def __init__(self, message: str = "Resource not found"):
        super().__init__(status.HTTP_404_NOT_FOUND, message)


class ConflictError(APIError):
    def __init__(self, message: str = "Resource already exists"):
        super().__init__(status.HTTP_409_CONFLICT, message)


async def http_exception_handler(request: Request, exc: StarletteHTTPException) -> JSONResponse:
    return JSONResponse(
        status_code=exc.status_code,
        content={"message": exc.detail},
        headers=getattr(exc, "headers", None),
    )


def validation_message(errors: Sequence[Dict[str, Any]]) -> str:
    """One-line summary naming the first offending field"""
    message = "Invalid request"
    if errors:
        first = errors[0]
        location = ".".join(str(part) for part in first.get("loc", ()) if part != "body")
        message = f"{location}: {first.get('msg')}" if location else first.get("msg", message)
    return message


def validate_body(model: Type[ModelT], data: Any) -> ModelT:
    """Validate a raw request body, failing with a 400 like request validation does.

    Used where a body must only be checked after the caller's access to the
    target has been established.
    """
    try:
        return model.model_validate(data)
    except ValidationError as exc:
        raise BadRequestError(validation_message(exc.errors()))


async def validation_exception_handler(request: Request, exc: RequestValidationError) -> JSONResponse:
    return JSONResponse(
        status_code=status.HTTP_400_BAD_REQUEST,
        content={"message": validation_message(exc.errors())},
    )


async def unhandled_exception_handler(request: Request, exc: Exception) -> JSONResponse:
    logger.exception("Unhandled error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"message": "Server Error"},
    )


def register_exception_handlers(app: FastAPI) -> None:
    app.add_exception_handler(StarletteHTTPException, http_exception_handler)
    app.add_exception_handler(RequestValidationError, validation_exception_handler)
    app.add_exception_handler(Exception, unhandled_exception_handler)
