####################################
# --- Request/response schemas --- #
####################################

from typing import List, Optional

from pydantic import BaseModel, ConfigDict, Field

from database.schemas import SubmissionRecordSchema

HEALTHY_MESSAGE = "server is healthy!!!"


class StoredRecord(SubmissionRecordSchema):
    """A submission record as returned by `POST /api/get/v1/getdata`."""
    id: str = Field(description="Record identifier.")

    model_config = ConfigDict(
        json_schema_extra={
            "example": {
                "id": "6651f0c2a1b2c3d4e5f60718",
                "productNumber": 1,
                "userName": "alice",
                "userEmail": "a@x.com",
                "ingredients": "flour, sugar",
                "size": "large",
                "image1Url": "https://cdn.example.com/products/3f1c.png",
                "image2Url": "https://cdn.example.com/products/9ab2.png",
                "image3Url": "https://cdn.example.com/products/77de.png",
                "image4Url": "https://cdn.example.com/products/0c41.png",
                "videoUrl": "https://cdn.example.com/products/5e0a.mp4",
                "cost": "12.50",
                "server": "4",
                "description": "A cake",
                "date": "2024-05-25T12:00:00Z",
                "createdAt": "2024-05-25T12:00:00Z",
                "updatedAt": "2024-05-25T12:00:00Z",
            }
        }
    )


class MessageResponse(BaseModel):
    """Body of every non-query response, including errors."""
    message: str
    success: bool

    model_config = ConfigDict(
        json_schema_extra={"example": {"message": "Data added successfully", "success": True}}
    )


class GetDataResponse(MessageResponse):
    """Response model for `POST /api/get/v1/getdata`."""
    data: Optional[List[StoredRecord]] = None


class HealthComponents(BaseModel):
    api: str = "ready"
    database: str = "unknown"
    storage: str = "unknown"


class HealthResponse(BaseModel):
    """Response model for `GET /health`."""
    status: str
    components: HealthComponents
    ready: bool
