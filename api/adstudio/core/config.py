from __future__ import annotations

import os
from dataclasses import dataclass


def getenv(name: str, default: str | None = None) -> str | None:
    v = os.getenv(name, default)
    return v


@dataclass
class Settings:
    # Service
    service_name: str = getenv("SERVICE_NAME", "adstudio-api") or "adstudio-api"
    service_env: str = getenv("SERVICE_ENV", "dev") or "dev"
    service_region: str = getenv("SERVICE_REGION", "eu-central") or "eu-central"
    log_level: str = getenv("LOG_LEVEL", "INFO") or "INFO"

    # Completion service (Anthropic Messages API)
    anthropic_api_key: str | None = getenv("ANTHROPIC_API_KEY") or getenv("CLAUDE_API_KEY")
    anthropic_base_url: str = getenv("ANTHROPIC_BASE_URL", "https://api.anthropic.com") or "https://api.anthropic.com"
    anthropic_model: str = getenv("ANTHROPIC_MODEL", "claude-sonnet-4-20250514") or "claude-sonnet-4-20250514"
    anthropic_version: str = getenv("ANTHROPIC_VERSION", "2023-06-01") or "2023-06-01"

    # Completion timeouts (in seconds)
    completion_timeout: int = int(getenv("COMPLETION_TIMEOUT", "120") or "120")
    completion_timeout_long: int = int(getenv("COMPLETION_TIMEOUT_LONG", "300") or "300")  # Extended reasoning

    # Rendering service (Creatomate)
    creatomate_api_key: str | None = getenv("CREATOMATE_API_KEY")
    creatomate_base_url: str = getenv("CREATOMATE_BASE_URL", "https://api.creatomate.com/v1") or "https://api.creatomate.com/v1"
    render_poll_interval: float = float(getenv("RENDER_POLL_INTERVAL", "2") or "2")
    render_poll_attempts: int = int(getenv("RENDER_POLL_ATTEMPTS", "60") or "60")

    langfuse_public_key: str | None = getenv("LANGFUSE_PUBLIC_KEY")
    langfuse_secret_key: str | None = getenv("LANGFUSE_SECRET_KEY")
    langfuse_host: str = getenv("LANGFUSE_HOST", "https://cloud.langfuse.com") or "https://cloud.langfuse.com"

    # Database (unset means persistence is unconfigured)
    database_url: str | None = getenv("DATABASE_URL")

    # Cloudflare R2 (S3 compatible)
    r2_account_id: str | None = getenv("R2_ACCOUNT_ID")
    r2_access_key_id: str | None = getenv("R2_ACCESS_KEY_ID")
    r2_secret_access_key: str | None = getenv("R2_SECRET_ACCESS_KEY")
    r2_bucket: str = getenv("R2_BUCKET", "brand-assets") or "brand-assets"
    r2_public_base_url: str | None = getenv("R2_PUBLIC_BASE_URL")
    # Generic storage
    storage_backend: str = getenv("STORAGE_BACKEND", "auto") or "auto"
    local_storage_dir: str = getenv("LOCAL_STORAGE_DIR", "var/storage") or "var/storage"
    service_base_url: str = getenv("SERVICE_BASE_URL", "http://localhost:8000") or "http://localhost:8000"

    # Brand
    brand_context_path: str | None = getenv("BRAND_CONTEXT_PATH")

    # Pipeline
    enable_self_review: bool = (getenv("ENABLE_SELF_REVIEW", "true") or "true").lower() == "true"

    # Security & policy
    cors_allow_origins: str | None = getenv("CORS_ALLOW_ORIGINS")
    max_request_size: int = int(getenv("MAX_REQUEST_SIZE", "20971520") or "20971520")  # 20MB, base64 images

    @property
    def is_production(self) -> bool:
        return self.service_env in ("prod", "production")


settings = Settings()
