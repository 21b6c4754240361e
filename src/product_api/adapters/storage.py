"""
Object storage adapter for product media.

Uploads staged attachments to an S3 bucket and reports the public URL the
asset can be fetched from. The local staged file is always removed once an
upload has been attempted.
"""

import logging
import mimetypes
import os
import uuid
from dataclasses import dataclass
from pathlib import Path
from typing import TYPE_CHECKING, Optional

import boto3

from product_api.utils.decorators import log_execution_time

if TYPE_CHECKING:
    from mypy_boto3_s3 import S3Client

logger = logging.getLogger(__name__)

DEFAULT_CONTENT_TYPE = "application/octet-stream"


@dataclass(frozen=True)
class StorageConfig:
    """Connection details for the media bucket."""
    bucket_name: str
    region: str = "us-east-1"
    endpoint_url: Optional[str] = None
    access_key_id: Optional[str] = None
    secret_access_key: Optional[str] = None
    cdn_base_url: Optional[str] = None
    key_prefix: str = "products"

    @property
    def public_base_url(self) -> str:
        if self.cdn_base_url:
            return self.cdn_base_url.rstrip("/")
        return f"https://{self.bucket_name}.s3.{self.region}.amazonaws.com"


@dataclass(frozen=True)
class RemoteAsset:
    """An object that now lives in the bucket."""
    object_key: str
    secure_url: str
    content_type: str
    size_bytes: int


@dataclass(frozen=True)
class UploadResult:
    """Outcome of a single upload: either an asset or an error message."""
    asset: Optional[RemoteAsset] = None
    error: Optional[str] = None

    @property
    def ok(self) -> bool:
        return self.asset is not None


class AssetUploader:
    """Uploads local files to the media bucket."""

    def __init__(self, config: StorageConfig, s3_client: Optional["S3Client"] = None):
        self.config = config
        self.s3_client = s3_client or boto3.client(
            "s3",
            region_name=config.region,
            endpoint_url=config.endpoint_url,
            aws_access_key_id=config.access_key_id,
            aws_secret_access_key=config.secret_access_key,
        )

    def build_object_key(self, filename: Optional[str] = None) -> str:
        """Random key under the media prefix, keeping the original extension."""
        suffix = Path(filename).suffix.lower() if filename else ""
        prefix = self.config.key_prefix.strip("/")
        key = f"{uuid.uuid4().hex}{suffix}"
        return f"{prefix}/{key}" if prefix else key

    def secure_url(self, object_key: str) -> str:
        return f"{self.config.public_base_url}/{object_key}"

    @log_execution_time
    def upload(
        self,
        local_path: str,
        content_type: Optional[str] = None,
        filename: Optional[str] = None,
    ) -> UploadResult:
        """
        Upload a staged file and remove it from local disk.

        Provider failures are logged and reported through the returned
        `UploadResult`; they are never raised.

        :param local_path: path of the staged file.
        :param content_type: MIME type of the file; guessed from the filename when omitted.
        :param filename: original client-side filename, used for the key suffix and MIME guess.
        :raises TypeError: if `local_path` is not a non-empty string.
        """
        if not isinstance(local_path, str) or not local_path:
            raise TypeError("Local file path must be a non-empty string")

        name_hint = filename or local_path
        content_type = content_type or mimetypes.guess_type(name_hint)[0] or DEFAULT_CONTENT_TYPE
        object_key = self.build_object_key(name_hint)

        try:
            size_bytes = os.path.getsize(local_path)
            self.s3_client.upload_file(
                Filename=local_path,
                Bucket=self.config.bucket_name,
                Key=object_key,
                ExtraArgs={"ContentType": content_type},
            )
        except Exception as e:
            logger.error(f"Error uploading {local_path} to S3: {str(e)}")
            if self._remove_local_file(local_path):
                logger.error(f"Deleted local file due to error: {local_path}")
            return UploadResult(error=str(e))

        self._remove_local_file(local_path)
        asset = RemoteAsset(
            object_key=object_key,
            secure_url=self.secure_url(object_key),
            content_type=content_type,
            size_bytes=size_bytes,
        )
        logger.info(f"Uploaded {local_path} to s3://{self.config.bucket_name}/{object_key}")
        return UploadResult(asset=asset)

    def delete(self, asset: RemoteAsset) -> bool:
        """Best-effort removal of an uploaded asset. Returns False on failure."""
        try:
            self.s3_client.delete_object(Bucket=self.config.bucket_name, Key=asset.object_key)
            logger.info(f"Deleted s3://{self.config.bucket_name}/{asset.object_key}")
            return True
        except Exception as e:
            logger.error(f"Error deleting {asset.object_key} from S3: {str(e)}")
            return False

    def check_bucket(self) -> None:
        """Raise if the bucket cannot be reached."""
        self.s3_client.head_bucket(Bucket=self.config.bucket_name)

    @staticmethod
    def _remove_local_file(local_path: str) -> bool:
        if not os.path.exists(local_path):
            return False
        try:
            os.remove(local_path)
            return True
        except OSError as e:
            logger.error(f"Error deleting local file {local_path}: {str(e)}")
            return False
