"""
Submission handler for `POST /api/add/v1/addData`.

Validate the shared secret and attachments, stage the attachments on disk,
upload all of them in parallel, then persist a single record holding the
resulting URLs. If any upload fails, or the record cannot be written, the
assets that did reach the bucket are deleted again.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, List, Mapping, Optional

from starlette.datastructures import UploadFile

from product_api.adapters.storage import AssetUploader, RemoteAsset, UploadResult
from product_api.errors import BadRequestError, PersistenceError, ProductApiError, UploadFailedError
from product_api.security import verify_api_key
from product_api.services.database import SubmissionService
from product_api.staging import StagedFile, discard_staged, stage_upload
from product_api.utils.decorators import async_log_execution_time

logger = logging.getLogger(__name__)

# multipart field -> record attribute
ATTACHMENT_FIELDS: Dict[str, str] = {
    "prodImg1": "image1_url",
    "prodImg2": "image2_url",
    "prodImg3": "image3_url",
    "prodImg4": "image4_url",
    "prodVideo": "video_url",
}

MISSING_FILES_MESSAGE = "Bad Request: Missing required files"
ADD_ERROR_MESSAGE = "Error adding data"


@dataclass
class SubmissionForm:
    """Text fields of the submission form."""
    user_name: Optional[str] = None
    user_email: Optional[str] = None
    ingredients: Optional[str] = None
    size: Optional[str] = None
    cost: Optional[str] = None
    server: Optional[str] = None
    description: Optional[str] = None
    api_key: Optional[str] = None

    def record_fields(self) -> Dict[str, Any]:
        return {
            "user_name": self.user_name,
            "user_email": self.user_email,
            "ingredients": self.ingredients,
            "size": self.size,
            "cost": self.cost,
            "server": self.server,
            "description": self.description,
        }


def has_file(upload: Any) -> bool:
    return isinstance(upload, UploadFile) and bool(upload.filename)


class SubmissionHandler:
    """Runs one submission from credential check to stored record."""

    def __init__(
        self,
        api_key: Optional[str],
        uploader: AssetUploader,
        submission_service: SubmissionService,
        upload_dir: str,
    ):
        self.api_key = api_key
        self.uploader = uploader
        self.submission_service = submission_service
        self.upload_dir = upload_dir

    @async_log_execution_time
    async def handle(self, form: SubmissionForm, attachments: Mapping[str, Optional[UploadFile]]) -> Dict[str, Any]:
        """
        Process a submission and return the stored record.

        :raises ProductApiError: for every failure; anything unexpected is
            logged and reported as a generic "Error adding data".
        """
        try:
            return await self._process(form, attachments)
        except ProductApiError:
            raise
        except Exception as e:
            logger.exception(f"Error adding data: {e}")
            raise ProductApiError(ADD_ERROR_MESSAGE) from e

    async def _process(self, form: SubmissionForm, attachments: Mapping[str, Optional[UploadFile]]) -> Dict[str, Any]:
        verify_api_key(form.api_key, self.api_key)

        missing = [name for name in ATTACHMENT_FIELDS if not has_file(attachments.get(name))]
        if missing:
            logger.warning(f"Submission rejected, missing attachments: {missing}")
            raise BadRequestError(MISSING_FILES_MESSAGE)

        staged: List[StagedFile] = []
        try:
            for field_name in ATTACHMENT_FIELDS:
                staged.append(
                    await asyncio.to_thread(stage_upload, attachments[field_name], field_name, self.upload_dir)
                )

            results = await self.upload_all(staged)
            uploaded = [result.asset for result in results.values() if result.ok]

            failed = [name for name, result in results.items() if not result.ok]
            if failed:
                logger.error(f"Upload failed for {failed}; rolling back {len(uploaded)} uploaded asset(s)")
                await self.rollback(uploaded)
                raise UploadFailedError()

            fields = form.record_fields()
            for field_name, attribute in ATTACHMENT_FIELDS.items():
                fields[attribute] = results[field_name].asset.secure_url

            try:
                record = await asyncio.to_thread(self.submission_service.create_submission, fields)
            except Exception:
                await self.rollback(uploaded)
                raise

            if record is None:
                await self.rollback(uploaded)
                raise PersistenceError()

            return record
        finally:
            await asyncio.to_thread(discard_staged, staged)

    async def upload_all(self, staged: List[StagedFile]) -> Dict[str, UploadResult]:
        """Upload every staged file concurrently and wait for all of them."""
        outcomes = await asyncio.gather(
            *(
                asyncio.to_thread(self.uploader.upload, item.path, item.content_type, item.filename)
                for item in staged
            ),
            return_exceptions=True,
        )

        results: Dict[str, UploadResult] = {}
        for item, outcome in zip(staged, outcomes):
            if isinstance(outcome, BaseException):
                logger.error(f"Upload of {item.field_name} raised: {outcome}")
                outcome = UploadResult(error=str(outcome))
            results[item.field_name] = outcome
        return results

    async def rollback(self, assets: List[RemoteAsset]) -> None:
        """Delete assets that were uploaded for a submission that will not be stored."""
        if not assets:
            return
        await asyncio.gather(*(asyncio.to_thread(self.uploader.delete, asset) for asset in assets))
