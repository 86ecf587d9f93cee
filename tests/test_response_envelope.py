from core.errors import invalid_action, upstream_email_error, upstream_storage_error
from core.response_envelope import error_payload, http_exception_response, success_payload


def test_success_payload_flattens_data_and_includes_request_id():
    payload = success_payload(
        data={"uploadUrl": "https://pod/upload", "fileId": "1_abcd"},
        message="Upload prepared",
        request_id="req-123",
    )
    assert payload["success"] is True
    assert payload["message"] == "Upload prepared"
    assert payload["uploadUrl"] == "https://pod/upload"
    assert payload["requestId"] == "req-123"
    assert "data" not in payload


def test_success_payload_without_data():
    payload = success_payload(data=None, message="Notifications sent")
    assert payload == {"success": True, "message": "Notifications sent"}


def test_error_payload_includes_request_id():
    payload = error_payload(
        message="failed",
        code="X",
        request_id="req-999",
    )
    assert payload["success"] is False
    assert payload["error"] == "failed"
    assert payload["code"] == "X"
    assert payload["requestId"] == "req-999"


def test_http_exception_response_unpacks_app_exception():
    response = http_exception_response(invalid_action("cancel"))
    assert response.status_code == 400
    assert b'"error":"Invalid action"' in response.body
    assert b'"code":"INVALID_ACTION"' in response.body


def test_upstream_errors_map_to_500():
    exc = upstream_storage_error("Storage provider request failed")
    response = http_exception_response(exc)
    assert response.status_code == 500
    assert exc.code == "UPSTREAM_STORAGE_ERROR"
    assert exc.message == "Storage provider request failed"


def test_upstream_details_are_hidden_unless_debugging():
    exc = upstream_email_error(
        "Email provider rejected the message",
        details={"status_code": 403, "provider_errors": ["API key sg.live.123 lacks mail.send"]},
    )

    hidden = http_exception_response(exc)
    shown = http_exception_response(exc, include_error_details=True)

    assert b'"details":null' in hidden.body
    assert b"sg.live.123" not in hidden.body
    assert b"sg.live.123" in shown.body


def test_client_error_details_are_kept():
    response = http_exception_response(invalid_action("cancel"))
    assert b'"details":{"action":"cancel"}' in response.body
