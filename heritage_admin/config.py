# Copyright (c) 2026 Mohammed Hassan. All rights reserved.
# Proprietary and confidential. Unauthorized copying, modification, distribution, or use is prohibited.

from pydantic_settings import BaseSettings, SettingsConfigDict

import os

class Settings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    database_url: str = os.getenv("DATABASE_URL", "sqlite:///./heritage.db")
    db_connect_attempts: int = 3
    db_connect_backoff_seconds: float = 2.0
    timezone: str = "Asia/Kolkata"
    default_currency: str = "INR"

    secret_key: str = os.getenv("JWT_SECRET", "change-me-in-production-for-jwt")
    superadmin_email: str | None = None
    superadmin_password: str | None = None

    # Public URLs of stored media are built from this
    public_base_url: str = os.getenv("BASE_URL", "http://localhost:8000")
    uploads_dir: str = "uploads"
    storage_bucket: str = "heritage"
    max_upload_bytes: int = 50 * 1024 * 1024

    # S3-compatible bucket (Supabase storage exposes one). Local uploads dir when unset.
    s3_access_key: str | None = None
    s3_secret_key: str | None = None
    s3_endpoint_url: str | None = None
    s3_region: str | None = None

    translate_function_url: str = "http://localhost:54321/functions/v1/heritage-translate"
    translate_api_key: str | None = None
    translate_timeout_seconds: float = 15.0
    translation_debounce_seconds: float = 1.0
    supported_languages: list[str] = ["en", "hi", "gu", "ja", "es", "fr"]

    axiom_token: str | None = None
    axiom_dataset: str | None = None
    axiom_url: str = "https://api.axiom.co"
    axiom_org_id: str | None = None

settings = Settings()
