from __future__ import annotations

from typing import Any, Iterable


_REQUEST_LOCATIONS = {"body", "query", "path", "header", "cookie"}
# Discriminated-union errors carry the variant tag as a path segment.
_UPLOAD_TYPE_TAGS = {"raw", "edited"}
_UNION_TAG_ERRORS = {"union_tag_invalid", "union_tag_not_found"}


def _normalize_error_path(location_parts: Iterable[Any]) -> tuple[str, str]:
    parts = [str(part) for part in location_parts]
    if not parts:
        return "body", "(root)"

    location = parts[0]
    if location in _REQUEST_LOCATIONS:
        path_parts = parts[1:]
    else:
        path_parts = parts

    path_parts = [
        part
        for index, part in enumerate(path_parts)
        if not (part in _UPLOAD_TYPE_TAGS and index > 0 and path_parts[index - 1] == "metadata")
    ]

    if not path_parts:
        return location, "(root)"

    return location, ".".join(path_parts)


def _build_summary(*, missing_fields: list[str], bad_upload_type: bool, error_count: int) -> str:
    if bad_upload_type:
        return "Validation failed: metadata.uploadType must be one of: raw, edited."

    if missing_fields:
        noun = "field" if len(missing_fields) == 1 else "fields"
        fields = ", ".join(missing_fields)
        return f"Validation failed: missing required {noun}: {fields}."

    noun = "field" if error_count == 1 else "fields"
    return f"Validation failed for {error_count} {noun}."


def format_validation_error_details(errors: list[dict[str, Any]]) -> dict[str, Any]:
    field_errors: list[dict[str, str]] = []
    missing_fields: list[str] = []
    bad_upload_type = False

    for error in errors:
        raw_loc = error.get("loc")
        if isinstance(raw_loc, (list, tuple)):
            location, path = _normalize_error_path(raw_loc)
        elif raw_loc is None:
            location, path = "body", "(root)"
        else:
            location, path = _normalize_error_path([raw_loc])

        error_type = str(error.get("type", "validation_error"))
        message = str(error.get("msg", "Invalid value"))

        if error_type in _UNION_TAG_ERRORS:
            bad_upload_type = True
            path = f"{path}.uploadType" if path != "(root)" else "uploadType"

        field_errors.append(
            {
                "path": path,
                "location": location,
                "message": message,
                "errorType": error_type,
            }
        )

        if error_type == "missing" and path not in missing_fields:
            missing_fields.append(path)

    return {
        "summary": _build_summary(
            missing_fields=missing_fields,
            bad_upload_type=bad_upload_type,
            error_count=len(field_errors),
        ),
        "missingFields": missing_fields,
        "fieldErrors": field_errors,
    }
