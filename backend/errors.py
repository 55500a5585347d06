"""
Error taxonomy for the users API and its translation to HTTP.

Every failure a request can hit ends up as one of the ``ApiError`` subclasses
below; ``install_error_handlers`` is the only place that turns them into
responses. All error bodies are plain text.
"""
from __future__ import annotations

from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import PlainTextResponse
from starlette.exceptions import HTTPException as StarletteHTTPException


class ApiError(Exception):
    status_code = 500

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class ValidationFailed(ApiError):
    status_code = 422

    def __init__(self, message: str, status_code: int = 422):
        super().__init__(message)
        self.status_code = status_code


class UserNotFound(ApiError):
    status_code = 404

    def __init__(self, message: str = "User not found"):
        super().__init__(message)


class StorageError(ApiError):
    status_code = 500


def _describe(err: dict) -> str:
    loc = ".".join(str(p) for p in err.get("loc", ()))
    msg = err.get("msg", "invalid value")
    return f"{loc}: {msg}" if loc else msg


def validation_failed_from(exc: RequestValidationError) -> ValidationFailed:
    errors = exc.errors()
    if not errors:
        return ValidationFailed("Invalid request")
    first = errors[0]
    loc = first.get("loc", ())
    # 非法 JSON、路径参数解析失败 -> 400；字段缺失/类型不符 -> 422
    if first.get("type") == "json_invalid" or (loc and loc[0] == "path"):
        return ValidationFailed(_describe(first), status_code=400)
    return ValidationFailed(_describe(first))


def install_error_handlers(app: FastAPI):
    @app.exception_handler(ApiError)
    async def _api_error(request: Request, exc: ApiError):
        return PlainTextResponse(exc.message, status_code=exc.status_code)

    @app.exception_handler(RequestValidationError)
    async def _validation_error(request: Request, exc: RequestValidationError):
        err = validation_failed_from(exc)
        return PlainTextResponse(err.message, status_code=err.status_code)

    @app.exception_handler(StarletteHTTPException)
    async def _http_error(request: Request, exc: StarletteHTTPException):
        return PlainTextResponse(
            str(exc.detail),
            status_code=exc.status_code,
            headers=getattr(exc, "headers", None),
        )
