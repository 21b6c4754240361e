"""
Submission service for Product API document operations.
Owns the collection of product submission records.
"""

import logging
from typing import Any, Dict, List, Optional

from pydantic import ValidationError

from database.mongo_adapter import MongoAdapter
from database.schemas import SubmissionRecordSchema, utcnow

logger = logging.getLogger(__name__)

USER_LOOKUP_INDEX = [("userName", 1), ("userEmail", 1)]


class SubmissionService:
    """Service for creating and looking up product submission records"""

    def __init__(self, adapter: MongoAdapter, collection: str = "adddatas"):
        self.adapter = adapter
        self.collection = collection

    def init_collections(self) -> None:
        """Create the (userName, userEmail) lookup index"""
        self.adapter.init_collections({self.collection: [USER_LOOKUP_INDEX]})

    def create_submission(self, fields: Dict[str, Any]) -> Optional[Dict[str, Any]]:
        """
        Create a submission record.

        Schema defaults (productNumber, date, createdAt/updatedAt) are applied
        here. Returns the stored record, or None if the write was not
        acknowledged.

        :raises ValueError: if a required field is missing or empty.
        """
        now = utcnow()
        try:
            record = SubmissionRecordSchema(
                **{"createdAt": now, "updatedAt": now, "date": now, **fields}
            )
        except ValidationError as e:
            logger.error(f"Submission validation failed: {e}")
            raise ValueError(f"Document validation failed: {e}") from e

        document = record.to_document()
        doc_id = self.adapter.create_document(self.collection, document)
        if doc_id is None:
            return None

        logger.info(f"Created submission {doc_id} for {record.user_email}")
        return {"id": doc_id, **document}

    def find_submissions(self, user_name: str, user_email: str) -> List[Dict[str, Any]]:
        """All records for an exact (userName, userEmail) pair, in storage order"""
        return self.adapter.query_documents(
            self.collection,
            {"userName": user_name, "userEmail": user_email},
        )

    def count_submissions(self) -> int:
        return self.adapter.count_documents(self.collection)

    def is_healthy(self) -> bool:
        return self.adapter.ping()
