from fastapi import APIRouter, Depends, Path

from api.deps import get_mail_manager, get_notification_config, get_review_store, get_storage_manager
from core.errors import invalid_action
from core.logging import get_logger
from core.mail.manager import MailManager
from core.response_envelope import document_response
from core.reviews.manager import ReviewStoreManager
from core.storage.manager import UploadStorageManager
from schemas.upload_schema import CompleteUploadRequest, PrepareUploadRequest
from services.email_renderer import NotificationConfig
from services.notification_service import send_upload_notifications
from services.upload_service import prepare_upload

logger = get_logger(__name__)

router = APIRouter(prefix="/upload", tags=["Upload"])


@router.post("/prepare")
@document_response(
    message="Upload prepared",
    summary="Issue a direct-to-storage upload target",
    success_example={
        "uploadUrl": "https://pod-000-1000-00.backblaze.com/b2api/v2/b2_upload_file/bucket/c000",
        "authToken": "4_0022623512fc8f80000000001_01a2b3c4",
        "fileId": "1718035200000_3fa85f64",
        "filePath": "raw_uploads/jane/1718035200000_Acme_Co/clip.mp4",
    },
    response_codes={422: "Invalid payload", 500: "Storage provider failure"},
)
async def prepare_upload_target(
    payload: PrepareUploadRequest,
    storage: UploadStorageManager = Depends(get_storage_manager),
):
    logger.info("upload_api_called", action="prepare", file_name=payload.file_name)
    prepared = await prepare_upload(payload, storage=storage)
    return prepared.to_wire()


@router.post("/complete")
@document_response(
    message="Notifications sent",
    summary="Send the notification for a finished upload",
    response_codes={422: "Invalid payload", 500: "Email provider failure"},
)
async def complete_upload(
    payload: CompleteUploadRequest,
    storage: UploadStorageManager = Depends(get_storage_manager),
    mailer: MailManager = Depends(get_mail_manager),
    reviews: ReviewStoreManager = Depends(get_review_store),
    config: NotificationConfig = Depends(get_notification_config),
):
    logger.info("upload_api_called", action="complete", files=len(payload.files))
    await send_upload_notifications(
        payload,
        mailer=mailer,
        storage=storage,
        reviews=reviews,
        config=config,
    )
    return None


@router.post("/{action}", include_in_schema=False)
async def unknown_upload_action(action: str = Path(...)):
    logger.info("upload_api_called", action=action)
    raise invalid_action(action)


@router.post("", include_in_schema=False)
@router.post("/", include_in_schema=False)
async def missing_upload_action():
    logger.info("upload_api_called", action="")
    raise invalid_action("")
