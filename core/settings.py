from __future__ import annotations

import os
from dataclasses import dataclass
from functools import lru_cache

from dotenv import load_dotenv

load_dotenv()

SUPPORTED_REVIEW_STORE_BACKENDS = {"memory", "redis"}

DEFAULT_B2_BUCKET_NAME = "nuculture-media"
DEFAULT_B2_ENDPOINT = "https://api.backblazeb2.com"
DEFAULT_B2_DOWNLOAD_HOST = "f003.backblazeb2.com"
# B2 tokens live for 24h; refresh an hour early.
DEFAULT_B2_AUTH_TTL_SECONDS = 23 * 60 * 60
DEFAULT_REVIEW_TTL_SECONDS = 30 * 24 * 60 * 60


def _split_csv(value: str | None) -> tuple[str, ...]:
    if not value:
        return tuple()
    return tuple(item.strip() for item in value.split(",") if item.strip())


def _env(name: str) -> str | None:
    raw_value = os.getenv(name)
    if raw_value is None:
        return None
    normalized = raw_value.strip()
    return normalized or None


def _positive_int(name: str, default: int) -> int:
    value = _env(name)
    if value is None:
        return default
    return int(value)


def collect_missing_required_env_vars() -> list[str]:
    missing: list[str] = []

    always_required = (
        "B2_KEY_ID",
        "B2_APP_KEY",
        "B2_BUCKET_ID",
        "SENDGRID_API_KEY",
        "BOSS_EMAIL",
        "FROM_EMAIL",
        "APP_URL",
    )
    for var_name in always_required:
        if _env(var_name) is None:
            missing.append(var_name)

    review_backend = (_env("REVIEW_STORE_BACKEND") or "memory").lower()
    if review_backend == "redis" and _env("REDIS_URL") is None:
        missing.append("REDIS_URL")

    return sorted(set(missing))


def collect_invalid_env_values() -> list[str]:
    invalid_values: list[str] = []

    review_backend = (_env("REVIEW_STORE_BACKEND") or "memory").lower()
    if review_backend not in SUPPORTED_REVIEW_STORE_BACKENDS:
        invalid_values.append("REVIEW_STORE_BACKEND must be one of: memory, redis")

    for var_name in ("B2_AUTH_TTL_SECONDS", "REVIEW_TTL_SECONDS"):
        raw_value = _env(var_name)
        if raw_value is None:
            continue
        try:
            parsed = int(raw_value)
            if parsed <= 0:
                raise ValueError("must be positive")
        except ValueError:
            invalid_values.append(f"{var_name} must be a positive integer")

    app_url = _env("APP_URL")
    if app_url is not None and not app_url.startswith(("http://", "https://")):
        invalid_values.append("APP_URL must start with http:// or https://")

    return invalid_values


def validate_required_environment() -> None:
    missing_vars = collect_missing_required_env_vars()
    invalid_values = collect_invalid_env_values()
    if not missing_vars and not invalid_values:
        return

    message_lines = ["Application startup blocked by invalid environment configuration."]
    if missing_vars:
        message_lines.append("")
        message_lines.append("Missing required environment variables:")
        message_lines.extend(f"- {name}" for name in missing_vars)
    if invalid_values:
        message_lines.append("")
        message_lines.append("Invalid environment values:")
        message_lines.extend(f"- {message}" for message in invalid_values)
    raise RuntimeError("\n".join(message_lines))


@dataclass(frozen=True)
class Settings:
    env: str
    cors_origins: tuple[str, ...]
    debug_include_error_details: bool
    b2_key_id: str
    b2_app_key: str
    b2_bucket_id: str
    b2_bucket_name: str
    b2_endpoint: str
    b2_download_host: str
    b2_auth_ttl_seconds: int
    sendgrid_api_key: str
    boss_email: str
    from_email: str
    app_url: str
    review_store_backend: str
    review_ttl_seconds: int
    redis_url: str | None

    @property
    def is_production(self) -> bool:
        return self.env.lower() == "production"


@lru_cache(maxsize=1)
def get_settings() -> Settings:
    validate_required_environment()

    return Settings(
        env=os.getenv("ENV", "development"),
        cors_origins=_split_csv(os.getenv("CORS_ORIGINS")),
        debug_include_error_details=os.getenv("DEBUG_INCLUDE_ERROR_DETAILS", "false").lower()
        in {"1", "true", "yes"},
        b2_key_id=_env("B2_KEY_ID") or "",
        b2_app_key=_env("B2_APP_KEY") or "",
        b2_bucket_id=_env("B2_BUCKET_ID") or "",
        b2_bucket_name=_env("B2_BUCKET_NAME") or DEFAULT_B2_BUCKET_NAME,
        b2_endpoint=(_env("B2_ENDPOINT") or DEFAULT_B2_ENDPOINT).rstrip("/"),
        b2_download_host=_env("B2_DOWNLOAD_HOST") or DEFAULT_B2_DOWNLOAD_HOST,
        b2_auth_ttl_seconds=_positive_int("B2_AUTH_TTL_SECONDS", DEFAULT_B2_AUTH_TTL_SECONDS),
        sendgrid_api_key=_env("SENDGRID_API_KEY") or "",
        boss_email=_env("BOSS_EMAIL") or "",
        from_email=_env("FROM_EMAIL") or "",
        app_url=(_env("APP_URL") or "").rstrip("/"),
        review_store_backend=(_env("REVIEW_STORE_BACKEND") or "memory").lower(),
        review_ttl_seconds=_positive_int("REVIEW_TTL_SECONDS", DEFAULT_REVIEW_TTL_SECONDS),
        redis_url=_env("REDIS_URL"),
    )
