from typing import Any, Dict, Optional

from fastapi import APIRouter, Depends, File, Form, Request, UploadFile, status

from product_api.dependencies import get_query_handler, get_submission_handler
from product_api.errors import BadRequestError
from product_api.handlers import ATTACHMENT_FIELDS, QueryHandler, SubmissionForm, SubmissionHandler
from product_api.schemas import GetDataResponse, MessageResponse

router = APIRouter()

ERROR_RESPONSES = {
    status.HTTP_400_BAD_REQUEST: {"model": MessageResponse},
    status.HTTP_401_UNAUTHORIZED: {"model": MessageResponse},
    status.HTTP_500_INTERNAL_SERVER_ERROR: {"model": MessageResponse},
}


async def ensure_single_file_per_field(request: Request) -> None:
    """Each attachment slot takes exactly one file."""
    form = await request.form()
    crowded = [name for name in ATTACHMENT_FIELDS if len(form.getlist(name)) > 1]
    if crowded:
        raise BadRequestError(f"Bad Request: Only one file allowed for {', '.join(crowded)}")


async def read_body_fields(request: Request) -> Dict[str, Any]:
    """Fields from a JSON, URL-encoded or multipart body; anything else is empty."""
    content_type = request.headers.get("content-type", "").lower()
    if content_type.startswith("application/json"):
        try:
            payload = await request.json()
        except ValueError:
            raise BadRequestError("Bad Request: Malformed JSON body")
        return payload if isinstance(payload, dict) else {}
    if content_type.startswith(("application/x-www-form-urlencoded", "multipart/form-data")):
        form = await request.form()
        return dict(form)
    return {}


@router.post(
    "/api/add/v1/addData",
    status_code=status.HTTP_201_CREATED,
    response_model=MessageResponse,
    responses=ERROR_RESPONSES,
)
async def add_data(
    request: Request,
    user_name: Optional[str] = Form(None, alias="userName"),
    user_email: Optional[str] = Form(None, alias="userEmail"),
    ingredients: Optional[str] = Form(None),
    size: Optional[str] = Form(None),
    prod_cost: Optional[str] = Form(None, alias="prodCost"),
    prod_server: Optional[str] = Form(None, alias="prodServer"),
    prod_description: Optional[str] = Form(None, alias="prodDescription"),
    api_key: Optional[str] = Form(None, alias="apiKey"),
    prod_img1: Optional[UploadFile] = File(None, alias="prodImg1"),
    prod_img2: Optional[UploadFile] = File(None, alias="prodImg2"),
    prod_img3: Optional[UploadFile] = File(None, alias="prodImg3"),
    prod_img4: Optional[UploadFile] = File(None, alias="prodImg4"),
    prod_video: Optional[UploadFile] = File(None, alias="prodVideo"),
    handler: SubmissionHandler = Depends(get_submission_handler),
) -> MessageResponse:
    """Upload a product's images and video and store the submission."""
    await ensure_single_file_per_field(request)

    form = SubmissionForm(
        user_name=user_name,
        user_email=user_email,
        ingredients=ingredients,
        size=size,
        cost=prod_cost,
        server=prod_server,
        description=prod_description,
        api_key=api_key,
    )
    attachments = {
        "prodImg1": prod_img1,
        "prodImg2": prod_img2,
        "prodImg3": prod_img3,
        "prodImg4": prod_img4,
        "prodVideo": prod_video,
    }
    await handler.handle(form, attachments)
    return MessageResponse(message="Data added successfully", success=True)


@router.post(
    "/api/get/v1/getdata",
    response_model=GetDataResponse,
    responses={
        **ERROR_RESPONSES,
        status.HTTP_404_NOT_FOUND: {"model": MessageResponse},
    },
)
async def get_data(
    request: Request,
    handler: QueryHandler = Depends(get_query_handler),
) -> GetDataResponse:
    """Fetch every submission made by a user."""
    fields = await read_body_fields(request)
    records = await handler.handle(fields.get("userName"), fields.get("userEmail"), fields.get("apiKey"))
    return GetDataResponse(
        message="Data Fetched Successfully",
        success=True,
        data=records,
    )
