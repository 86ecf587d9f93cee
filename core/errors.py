from __future__ import annotations

from enum import Enum
from typing import Any

from fastapi import HTTPException, status


class ErrorCode(str, Enum):
    VALIDATION_FAILED = "VALIDATION_FAILED"
    INVALID_ACTION = "INVALID_ACTION"
    INTERNAL_ERROR = "INTERNAL_ERROR"
    UPSTREAM_AUTH_ERROR = "UPSTREAM_AUTH_ERROR"
    UPSTREAM_STORAGE_ERROR = "UPSTREAM_STORAGE_ERROR"
    UPSTREAM_EMAIL_ERROR = "UPSTREAM_EMAIL_ERROR"


class AppException(HTTPException):
    def __init__(
        self,
        *,
        status_code: int,
        code: ErrorCode,
        message: str,
        details: Any | None = None,
        headers: dict[str, str] | None = None,
    ) -> None:
        detail = {
            "message": message,
            "code": code.value,
            "details": details,
        }
        super().__init__(status_code=status_code, detail=detail, headers=headers)

    @property
    def code(self) -> str:
        return self.detail["code"]  # type: ignore[index]

    @property
    def message(self) -> str:
        return self.detail["message"]  # type: ignore[index]


def invalid_action(action: str) -> AppException:
    return AppException(
        status_code=status.HTTP_400_BAD_REQUEST,
        code=ErrorCode.INVALID_ACTION,
        message="Invalid action",
        details={"action": action},
    )


def validation_failed(message: str, details: Any | None = None) -> AppException:
    return AppException(
        status_code=422,
        code=ErrorCode.VALIDATION_FAILED,
        message=message,
        details=details,
    )


def missing_metadata_fields(upload_type: str, fields: list[str]) -> AppException:
    noun = "field" if len(fields) == 1 else "fields"
    return validation_failed(
        f"Validation failed: missing required {noun} for {upload_type} upload: {', '.join(fields)}.",
        details={"uploadType": upload_type, "missingFields": fields},
    )


def upstream_auth_error(message: str, details: Any | None = None) -> AppException:
    return AppException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorCode.UPSTREAM_AUTH_ERROR,
        message=message,
        details=details,
    )


def upstream_storage_error(message: str, details: Any | None = None) -> AppException:
    return AppException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorCode.UPSTREAM_STORAGE_ERROR,
        message=message,
        details=details,
    )


def upstream_email_error(message: str, details: Any | None = None) -> AppException:
    return AppException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        code=ErrorCode.UPSTREAM_EMAIL_ERROR,
        message=message,
        details=details,
    )
