from pydantic_settings import BaseSettings, SettingsConfigDict


class Settings(BaseSettings):
    """Application configuration loaded from environment variables."""

    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    app_env: str = "dev"
    log_level: str = "INFO"

    storage_backend: str = "local"
    local_storage_root: str = "./local_storage"

    s3_bucket_name: str = ""
    s3_endpoint_url: str = ""
    s3_region: str = "auto"
    s3_access_key_id: str = ""
    s3_secret_access_key: str = ""
    s3_timeout_seconds: int = 30
    s3_upload_url_expiry_seconds: int = 300
    s3_download_url_expiry_seconds: int = 3600

    conversion_provider: str = "local"
    conversion_base_url: str = ""
    conversion_api_key: str = ""
    conversion_timeout_seconds: int = 60
    pdf_engine: str = "pdfplumber"

    max_extracted_text_length: int = 50000
    thumbnail_max_width: int = 300
    thumbnail_jpeg_quality: int = 80
