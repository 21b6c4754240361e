# src/product_api/config/settings.py
from functools import lru_cache
from typing import Any, Dict, List, Optional

from pydantic import AliasChoices, Field, field_validator, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from database.mongo_adapter import database_name_from_uri
from product_api.adapters.storage import StorageConfig

DEFAULT_MAX_BODY_SIZE = 25 * 1024 * 1024


class Settings(BaseSettings):
    """
    Single source of truth for all application settings.

    Configuration precedence:
    1. Environment variables (highest priority)
    2. .env file (if exists)
    3. Default values in this class (lowest priority)

    Usage:
        from product_api.config.settings import get_settings
        settings = get_settings()
        bucket_name = settings.s3_bucket_name
    """

    # Application Settings
    app_name: str = Field(
        default="product-api",
        description="Application name"
    )

    host: str = Field(
        default="0.0.0.0",
        description="Interface uvicorn binds to"
    )

    port: int = Field(
        default=3001,
        description="Listen port"
    )

    # Shared secret compared against the `apiKey` form/body field
    api_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("API_KEY", "YOUR_API_KEY", "api_key"),
        description="Shared API secret; when unset every request is rejected"
    )

    # MongoDB Configuration
    mongodb_uri: str = Field(
        default="mongodb://localhost:27017/products",
        validation_alias=AliasChoices("MONGODB_URI", "MONGOOSE_URI", "mongodb_uri"),
        description="MongoDB connection string"
    )

    mongodb_database: Optional[str] = Field(
        default=None,
        description="Database name (taken from the connection string when not set)"
    )

    submissions_collection: str = Field(
        default="adddatas",
        description="Collection holding submission records"
    )

    # Object storage (S3) Configuration
    aws_region: str = Field(
        default="us-east-1",
        validation_alias=AliasChoices("AWS_DEFAULT_REGION", "aws_region")
    )

    aws_access_key_id: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_ACCESS_KEY_ID", "aws_access_key_id")
    )

    aws_secret_access_key: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_SECRET_ACCESS_KEY", "aws_secret_access_key")
    )

    aws_endpoint_url: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_ENDPOINT_URL", "aws_endpoint_url")
    )

    s3_bucket_name: str = Field(
        default="product-media",
        description="S3 bucket for product images and videos"
    )

    cdn_base_url: Optional[str] = Field(
        default=None,
        description="Public base URL (CDN) that fronts the bucket"
    )

    media_key_prefix: str = Field(
        default="products",
        description="Key prefix for uploaded media"
    )

    # Local staging
    upload_dir: str = Field(
        default="uploads",
        description="Directory where multipart attachments are staged"
    )

    # HTTP
    max_body_size: int = Field(
        default=DEFAULT_MAX_BODY_SIZE,
        gt=0,
        description="Size ceiling in bytes for JSON and URL-encoded bodies"
    )

    cors_origins: List[str] = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    # Logging
    log_level: str = Field(
        default="INFO",
        description="Logging level"
    )

    @field_validator("log_level")
    @classmethod
    def normalize_log_level(cls, v: str) -> str:
        """Accept lower-case level names from the environment."""
        level = v.upper()
        valid_levels = ["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"]
        if level not in valid_levels:
            raise ValueError(f"Invalid log_level: {v}. Must be one of {valid_levels}")
        return level

    @field_validator("cdn_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: Optional[str]) -> Optional[str]:
        return v.rstrip("/") if v else v

    @model_validator(mode="after")
    def derive_database_name(self) -> "Settings":
        """Fall back to the database named in the connection string."""
        if not self.mongodb_database:
            self.mongodb_database = database_name_from_uri(self.mongodb_uri)
        return self

    def storage_config(self) -> StorageConfig:
        """Build the explicit configuration consumed by the asset uploader."""
        return StorageConfig(
            bucket_name=self.s3_bucket_name,
            region=self.aws_region,
            endpoint_url=self.aws_endpoint_url,
            access_key_id=self.aws_access_key_id,
            secret_access_key=self.aws_secret_access_key,
            cdn_base_url=self.cdn_base_url,
            key_prefix=self.media_key_prefix,
        )

    def get_environment_dict(self, mask_secrets: bool = True) -> Dict[str, Any]:
        """Get configuration as a dictionary, with secrets masked by default.

        Returns:
            Dictionary of effective settings keyed by environment variable name
        """

        def _mask(value: Optional[str]) -> Optional[str]:
            if value is None or not mask_secrets:
                return value
            return "****"

        return {
            "APP_NAME": self.app_name,
            "HOST": self.host,
            "PORT": self.port,
            "MONGODB_URI": _mask(self.mongodb_uri),
            "MONGODB_DATABASE": self.mongodb_database,
            "SUBMISSIONS_COLLECTION": self.submissions_collection,
            "API_KEY": _mask(self.api_key),
            "AWS_DEFAULT_REGION": self.aws_region,
            "AWS_ENDPOINT_URL": self.aws_endpoint_url,
            "AWS_ACCESS_KEY_ID": _mask(self.aws_access_key_id),
            "AWS_SECRET_ACCESS_KEY": _mask(self.aws_secret_access_key),
            "S3_BUCKET_NAME": self.s3_bucket_name,
            "CDN_BASE_URL": self.cdn_base_url,
            "MEDIA_KEY_PREFIX": self.media_key_prefix,
            "UPLOAD_DIR": self.upload_dir,
            "MAX_BODY_SIZE": self.max_body_size,
            "CORS_ORIGINS": self.cors_origins,
            "LOG_LEVEL": self.log_level,
        }

    model_config = SettingsConfigDict(
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore",
        populate_by_name=True,
    )


@lru_cache()
def get_settings() -> Settings:
    """
    Get cached settings instance.
    This ensures we only create one Settings instance per process.
    """
    return Settings()
