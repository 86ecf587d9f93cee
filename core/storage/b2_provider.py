from __future__ import annotations

from typing import Any
from urllib.parse import quote

import httpx

from core.errors import AppException, ErrorCode, upstream_auth_error, upstream_storage_error
from core.storage.provider import UploadStorageProvider
from core.storage.types import StorageAuthorization, StorageBackend, UploadTarget

AUTHORIZE_PATH = "/b2api/v2/b2_authorize_account"
GET_UPLOAD_URL_PATH = "/b2api/v2/b2_get_upload_url"


class B2ExpiredAuthorization(AppException):
    """B2 refused an account token that the cache still considered valid."""


class B2StorageProvider(UploadStorageProvider):
    backend_name = StorageBackend.B2.value

    def __init__(
        self,
        *,
        key_id: str,
        app_key: str,
        bucket_id: str,
        bucket_name: str,
        endpoint: str,
        download_host: str,
        timeout: float = 15.0,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self._key_id = key_id
        self._app_key = app_key
        self._bucket_id = bucket_id
        self._bucket_name = bucket_name
        self._endpoint = endpoint.rstrip("/")
        self._download_host = download_host
        self._timeout = timeout
        self._transport = transport

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=self._timeout, transport=self._transport)

    async def authorize(self) -> StorageAuthorization:
        try:
            async with self._client() as client:
                response = await client.get(
                    f"{self._endpoint}{AUTHORIZE_PATH}",
                    auth=(self._key_id, self._app_key),
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as err:
            raise upstream_auth_error(
                "Storage provider rejected credentials",
                details=_b2_error_details(err.response),
            ) from err
        except httpx.HTTPError as err:
            raise upstream_auth_error("Storage provider authorization request failed", details=str(err)) from err

        payload = _json_object(response, on_error=upstream_auth_error)
        api_url = payload.get("apiUrl")
        token = payload.get("authorizationToken")
        if not api_url or not token:
            raise upstream_auth_error("Storage provider authorization response is incomplete")

        return StorageAuthorization(
            api_url=str(api_url).rstrip("/"),
            authorization_token=str(token),
            download_url=payload.get("downloadUrl"),
            account_id=payload.get("accountId"),
            raw=payload,
        )

    async def get_upload_url(self, authorization: StorageAuthorization) -> UploadTarget:
        try:
            async with self._client() as client:
                response = await client.post(
                    f"{authorization.api_url}{GET_UPLOAD_URL_PATH}",
                    json={"bucketId": self._bucket_id},
                    headers={"Authorization": authorization.authorization_token},
                )
                response.raise_for_status()
        except httpx.HTTPStatusError as err:
            details = _b2_error_details(err.response)
            if err.response.status_code == 401:
                raise B2ExpiredAuthorization(
                    status_code=500,
                    code=ErrorCode.UPSTREAM_STORAGE_ERROR,
                    message="Storage provider rejected the upload URL request",
                    details=details,
                ) from err
            raise upstream_storage_error(
                "Storage provider rejected the upload URL request",
                details=details,
            ) from err
        except httpx.HTTPError as err:
            raise upstream_storage_error("Storage provider request failed", details=str(err)) from err

        payload = _json_object(response, on_error=upstream_storage_error)
        upload_url = payload.get("uploadUrl")
        token = payload.get("authorizationToken")
        if not upload_url or not token:
            raise upstream_storage_error("Storage provider upload URL response is incomplete")

        return UploadTarget(
            upload_url=str(upload_url),
            authorization_token=str(token),
            bucket_id=str(payload.get("bucketId") or self._bucket_id),
        )

    def public_file_url(self, file_path: str) -> str:
        return f"https://{self._download_host}/file/{self._bucket_name}/{quote(file_path, safe='/')}"


def _b2_error_details(response: httpx.Response) -> dict[str, Any]:
    details: dict[str, Any] = {"status_code": response.status_code}
    try:
        body = response.json()
    except ValueError:
        return details
    if isinstance(body, dict):
        if body.get("code"):
            details["provider_code"] = body["code"]
        if body.get("message"):
            details["provider_message"] = body["message"]
    return details


def _json_object(response: httpx.Response, *, on_error) -> dict[str, Any]:
    try:
        payload = response.json()
    except ValueError as err:
        raise on_error("Storage provider returned invalid JSON") from err
    if not isinstance(payload, dict):
        raise on_error("Storage provider response shape is invalid")
    return payload
