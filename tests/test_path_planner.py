import re

from schemas.upload_schema import EditedUploadMetadata, RawUploadMetadata
from services.path_planner import plan_path


def _raw(**overrides) -> RawUploadMetadata:
    values = {"uploadType": "raw", "editor": "jane@x.com", "clientName": "Acme Co"}
    values.update(overrides)
    return RawUploadMetadata.model_validate(values)


def _edited(**overrides) -> EditedUploadMetadata:
    values = {"uploadType": "edited", "projectName": "Spring  Launch\tPromo"}
    values.update(overrides)
    return EditedUploadMetadata.model_validate(values)


def test_raw_upload_path_uses_editor_handle_and_sanitized_client():
    file_id, file_path = plan_path("clip.mp4", _raw(), now_ms=1718035200000, suffix="0a1b2c3d")

    assert file_id == "1718035200000_0a1b2c3d"
    assert file_path == "raw_uploads/jane/1718035200000_Acme_Co/clip.mp4"


def test_edited_upload_path_collapses_whitespace_runs():
    _, file_path = plan_path("final cut.mov", _edited(), now_ms=1718035200000, suffix="ffffffff")

    assert file_path == "edited_uploads/review/1718035200000_Spring_Launch_Promo/final cut.mov"


def test_generated_id_is_timestamp_and_eight_hex_chars():
    file_id, file_path = plan_path("clip.mp4", _raw())

    match = re.fullmatch(r"(\d{13})_([0-9a-f]{8})", file_id)
    assert match is not None
    timestamp = match.group(1)
    assert re.fullmatch(rf"raw_uploads/jane/{timestamp}_Acme_Co/clip\.mp4", file_path)


def test_ids_differ_between_calls():
    ids = {plan_path("clip.mp4", _raw(), now_ms=1)[0] for _ in range(20)}
    assert len(ids) > 1


def test_scenario_prepare_path_for_acme():
    _, file_path = plan_path("clip.mp4", _raw())

    assert "raw_uploads/jane/" in file_path
    assert "Acme_Co" in file_path
    assert file_path.endswith("/clip.mp4")
