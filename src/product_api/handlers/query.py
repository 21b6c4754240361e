"""Query handler for `POST /api/get/v1/getdata`."""

import asyncio
import logging
from typing import Any, List, Optional

from product_api.errors import BadRequestError, NotFoundError, ProductApiError
from product_api.schemas import StoredRecord
from product_api.security import verify_api_key
from product_api.services.database import SubmissionService

logger = logging.getLogger(__name__)

GET_ERROR_MESSAGE = "Error in getting Data"


def _present(value: Any) -> bool:
    return isinstance(value, str) and value != ""


class QueryHandler:
    """Looks up the records submitted by one (userName, userEmail) pair."""

    def __init__(self, api_key: Optional[str], submission_service: SubmissionService):
        self.api_key = api_key
        self.submission_service = submission_service

    async def handle(self, user_name: Any, user_email: Any, api_key: Any) -> List[StoredRecord]:
        try:
            if not (_present(user_name) and _present(user_email) and _present(api_key)):
                raise BadRequestError()

            verify_api_key(api_key, self.api_key)

            records = await asyncio.to_thread(self.submission_service.find_submissions, user_name, user_email)
            if not records:
                raise NotFoundError()

            logger.info(f"Found {len(records)} record(s) for {user_email}")
            return [StoredRecord.model_validate(record) for record in records]
        except ProductApiError:
            raise
        except Exception as e:
            logger.exception(f"Error in getting data: {e}")
            raise ProductApiError(GET_ERROR_MESSAGE) from e
