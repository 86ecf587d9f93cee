from __future__ import annotations

from core.logging import get_logger
from core.storage.manager import UploadStorageManager
from schemas.upload_schema import PreparedUpload, PrepareUploadRequest
from services.path_planner import plan_path

logger = get_logger(__name__)


async def prepare_upload(
    payload: PrepareUploadRequest,
    *,
    storage: UploadStorageManager,
) -> PreparedUpload:
    target = await storage.get_upload_target()
    file_id, file_path = plan_path(payload.file_name, payload.metadata)

    logger.info(
        "upload_prepared",
        file_id=file_id,
        file_path=file_path,
        file_size=payload.file_size,
        upload_type=payload.metadata.upload_type,
    )
    return PreparedUpload(
        upload_url=target.upload_url,
        auth_token=target.authorization_token,
        file_id=file_id,
        file_path=file_path,
    )
