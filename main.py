from __future__ import annotations

import time
from contextlib import asynccontextmanager
from datetime import datetime, timezone

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from starlette.middleware.base import BaseHTTPMiddleware

from core.logging import RequestIdMiddleware, get_logger, setup_logging
from core.mail.manager import MailManager
from core.response_envelope import (
    apply_response_documentation,
    document_response,
    register_exception_handlers,
)
from core.reviews.manager import ReviewStoreManager
from core.settings import get_settings
from core.storage.manager import UploadStorageManager

setup_logging()
settings = get_settings()
logger = get_logger(__name__)


class RequestTimingMiddleware(BaseHTTPMiddleware):
    async def dispatch(self, request: Request, call_next):
        start_time = time.time()
        response = await call_next(request)
        response.headers["X-Process-Time"] = str(time.time() - start_time)
        return response


@asynccontextmanager
async def lifespan(app: FastAPI):
    UploadStorageManager.configure_from_settings(settings)
    MailManager.configure_from_settings(settings)
    ReviewStoreManager.configure_from_settings(settings)
    logger.info(
        "app_started",
        env=settings.env,
        bucket=settings.b2_bucket_name,
        review_store=settings.review_store_backend,
    )
    yield


app = FastAPI(lifespan=lifespan, title="Footage Workflow API")
app.add_middleware(RequestIdMiddleware)
app.add_middleware(RequestTimingMiddleware)
app.add_middleware(
    CORSMiddleware,
    allow_origins=list(settings.cors_origins) if settings.cors_origins else ["*"],
    allow_methods=["*"],
    allow_headers=["*"],
)


register_exception_handlers(
    app,
    include_error_details=settings.debug_include_error_details and not settings.is_production,
)


@app.get("/health", tags=["Health"])
@document_response(
    message="Health check completed",
    success_example={"status": "healthy"},
)
async def health_check():
    return {
        "status": "healthy",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "reviewStore": settings.review_store_backend,
    }


from api.v1.upload_route import router as v1_upload_route_router

app.include_router(v1_upload_route_router, prefix="/api")

apply_response_documentation(app)
