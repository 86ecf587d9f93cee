from __future__ import annotations

import inspect
from dataclasses import dataclass
from functools import wraps
from typing import Any, Callable

from fastapi import FastAPI, HTTPException, Request, status
from fastapi.exceptions import RequestValidationError
from fastapi.encoders import jsonable_encoder
from fastapi.responses import JSONResponse
from fastapi.routing import APIRoute
from starlette.responses import Response

from core.logging import REQUEST_ID_HEADER, get_logger
from core.validation_errors import format_validation_error_details

_RESPONSE_DOC_ATTR = "__response_doc_config__"

logger = get_logger(__name__)


@dataclass(frozen=True)
class ResponseDocConfig:
    message: str
    status_code: int
    description: str
    success_example: dict[str, Any] | None = None
    summary: str | None = None
    response_codes: dict[int, str] | None = None


def success_payload(
    data: dict[str, Any] | None,
    message: str = "Success",
    *,
    request_id: str | None = None,
) -> dict[str, Any]:
    """Build a success body.

    Fields of ``data`` sit at the top level next to ``success`` and
    ``message``, so upload clients read ``uploadUrl`` and friends directly.
    """
    payload: dict[str, Any] = {
        "success": True,
        "message": message,
    }
    if data:
        payload.update(data)
    if request_id:
        payload["requestId"] = request_id
    return payload


def error_payload(
    message: str,
    *,
    code: str | None = None,
    details: Any = None,
    request_id: str | None = None,
) -> dict[str, Any]:
    payload: dict[str, Any] = {
        "success": False,
        "error": message,
        "code": code,
        "details": details,
    }
    if request_id:
        payload["requestId"] = request_id
    return payload


def error_response(
    *,
    status_code: int,
    message: str,
    code: str | None = None,
    details: Any = None,
    headers: dict[str, str] | None = None,
    request_id: str | None = None,
) -> JSONResponse:
    if request_id:
        headers = {**(headers or {}), REQUEST_ID_HEADER: request_id}
    return JSONResponse(
        status_code=status_code,
        headers=headers,
        content=jsonable_encoder(
            error_payload(message=message, code=code, details=details, request_id=request_id)
        ),
    )


def _parse_http_exception_detail(detail: Any) -> tuple[str, str, Any]:
    if isinstance(detail, str):
        return detail, "HTTP_EXCEPTION", None

    if isinstance(detail, dict):
        message = detail.get("message")
        if isinstance(message, str) and message.strip():
            return message, str(detail.get("code", "HTTP_EXCEPTION")), detail.get("details")

        nested_detail = detail.get("detail")
        if isinstance(nested_detail, str) and nested_detail.strip():
            return nested_detail, "HTTP_EXCEPTION", detail

        return "Request failed", "HTTP_EXCEPTION", detail

    if detail is None:
        return "Request failed", "HTTP_EXCEPTION", None

    return str(detail), "HTTP_EXCEPTION", None


def _extract_request(*args: Any, **kwargs: Any) -> Request | None:
    for value in kwargs.values():
        if isinstance(value, Request):
            return value
    for value in args:
        if isinstance(value, Request):
            return value
    return None


def request_id_from_request(request: Request | None) -> str | None:
    if request is None:
        return None
    return getattr(request.state, "request_id", None)


def http_exception_response(
    exc: HTTPException,
    request: Request | None = None,
    *,
    include_error_details: bool = False,
) -> JSONResponse:
    message, code, details = _parse_http_exception_detail(exc.detail)
    # Upstream details stay in the log unless debugging is on.
    if exc.status_code >= 500 and not include_error_details:
        details = None
    return error_response(
        status_code=exc.status_code,
        message=message,
        code=code,
        details=details,
        request_id=request_id_from_request(request),
        headers=exc.headers,
    )


def document_response(
    *,
    message: str = "Success",
    status_code: int = status.HTTP_200_OK,
    description: str = "Successful response",
    success_example: dict[str, Any] | None = None,
    summary: str | None = None,
    response_codes: dict[int, str] | None = None,
) -> Callable[[Callable[..., Any]], Callable[..., Any]]:
    def decorator(func: Callable[..., Any]) -> Callable[..., Any]:
        config = ResponseDocConfig(
            message=message,
            status_code=status_code,
            description=description,
            success_example=success_example,
            summary=summary,
            response_codes=response_codes,
        )

        @wraps(func)
        async def wrapper(*args: Any, **kwargs: Any) -> Response:
            result = func(*args, **kwargs)
            if inspect.isawaitable(result):
                result = await result

            if isinstance(result, Response):
                return result

            request = _extract_request(*args, **kwargs)
            return JSONResponse(
                status_code=status_code,
                content=jsonable_encoder(
                    success_payload(
                        data=result,
                        message=message,
                        request_id=request_id_from_request(request),
                    )
                ),
            )

        setattr(wrapper, _RESPONSE_DOC_ATTR, config)
        return wrapper

    return decorator


def apply_response_documentation(app: FastAPI) -> None:
    updated = False

    for route in app.routes:
        if not isinstance(route, APIRoute):
            continue

        config = getattr(route.endpoint, _RESPONSE_DOC_ATTR, None)
        if not isinstance(config, ResponseDocConfig):
            continue

        if config.summary and not route.summary:
            route.summary = config.summary

        route.status_code = config.status_code

        existing_responses = dict(route.responses or {})
        success_code = config.status_code
        response_entry = dict(existing_responses.get(success_code, {}))
        response_entry.setdefault("description", config.description)

        content = dict(response_entry.get("content", {}))
        app_json = dict(content.get("application/json", {}))
        app_json.setdefault(
            "example",
            success_payload(data=config.success_example, message=config.message),
        )
        content["application/json"] = app_json
        response_entry["content"] = content
        existing_responses[success_code] = response_entry

        for code, code_description in (config.response_codes or {}).items():
            entry = dict(existing_responses.get(code, {}))
            entry.setdefault("description", code_description)
            existing_responses[code] = entry

        route.responses = existing_responses
        updated = True

    if updated:
        app.openapi_schema = None


def register_exception_handlers(app: FastAPI, *, include_error_details: bool = False) -> None:
    @app.exception_handler(HTTPException)
    async def custom_http_exception_handler(request: Request, exc: HTTPException):
        if exc.status_code >= 500:
            logger.error("request_failed", path=request.url.path, status_code=exc.status_code, detail=exc.detail)
        return http_exception_response(exc=exc, request=request, include_error_details=include_error_details)

    @app.exception_handler(RequestValidationError)
    async def custom_validation_exception_handler(request: Request, exc: RequestValidationError):
        details = format_validation_error_details(list(exc.errors()))
        return error_response(
            status_code=422,
            message=details["summary"],
            code="VALIDATION_FAILED",
            details=details,
            request_id=request_id_from_request(request),
        )

    @app.exception_handler(Exception)
    async def custom_exception_handler(request: Request, exc: Exception):
        logger.exception("unhandled_exception", path=request.url.path)
        return error_response(
            status_code=500,
            message="Internal Server Error",
            code="INTERNAL_ERROR",
            details=str(exc) if include_error_details else None,
            request_id=request_id_from_request(request),
        )
