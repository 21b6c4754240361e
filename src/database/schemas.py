"""
Pydantic schemas for document validation.
Documents are validated here before they are written to MongoDB.
"""

from datetime import datetime, timezone
from typing import Optional

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel


def utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SubmissionRecordSchema(BaseModel):
    """Schema for product submission documents.

    Stored keys are camelCase (`userName`, `image1Url`, ...); attributes are
    snake_case. Either form is accepted on input.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    # Always 1 unless a caller provides a value explicitly
    product_number: int = Field(1, description="Product number")
    user_name: str = Field(..., min_length=1, description="Submitting user's name")
    user_email: str = Field(..., min_length=1, description="Submitting user's email")
    ingredients: str = Field(..., min_length=1, description="Product ingredients")
    size: str = Field(..., min_length=1, description="Product size")
    image1_url: str = Field(..., min_length=1, description="Primary image URL")
    image2_url: Optional[str] = Field(None, description="Second image URL")
    image3_url: Optional[str] = Field(None, description="Third image URL")
    image4_url: Optional[str] = Field(None, description="Fourth image URL")
    video_url: Optional[str] = Field(None, description="Product video URL")
    cost: str = Field(..., min_length=1, description="Product cost, kept as text")
    server: str = Field(..., min_length=1, description="Serving information")
    description: str = Field(..., min_length=1, description="Product description")
    date: datetime = Field(default_factory=utcnow, description="Submission date")
    created_at: datetime = Field(default_factory=utcnow, description="Creation timestamp")
    updated_at: datetime = Field(default_factory=utcnow, description="Last update timestamp")

    def to_document(self) -> dict:
        """Document in its stored (camelCase) shape."""
        return self.model_dump(by_alias=True)
