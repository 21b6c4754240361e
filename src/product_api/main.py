import logging
from contextlib import asynccontextmanager
from pathlib import Path
from textwrap import dedent

import pydantic
from fastapi import FastAPI
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.routing import APIRoute
from fastapi.staticfiles import StaticFiles

from database.mongo_adapter import MongoAdapter
from product_api.adapters.storage import AssetUploader
from product_api.config.settings import Settings
from product_api.errors import (
    ProductApiError,
    error_response,
    handle_broad_exceptions,
    handle_product_api_errors,
    handle_pydantic_validation_errors,
    handle_request_validation_errors,
)
from product_api.handlers import QueryHandler, SubmissionHandler
from product_api.middleware import BodySizeLimitMiddleware
from product_api.routers.health import router as health_router
from product_api.routers.products import router as products_router
from product_api.services.database import SubmissionService

# Set up logging
logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "DELETE"]


def build_submission_service(settings: Settings) -> SubmissionService:
    """Connect to MongoDB; raises if the server cannot be reached."""
    adapter = MongoAdapter(settings.mongodb_uri, database_name=settings.mongodb_database)
    service = SubmissionService(adapter, collection=settings.submissions_collection)
    service.init_collections()
    return service


@asynccontextmanager
async def lifespan(app: FastAPI):
    yield
    app.state.submission_service.adapter.close()


def create_app(
    settings: Settings | None = None,
    submission_service: SubmissionService | None = None,
    uploader: AssetUploader | None = None,
) -> FastAPI:
    """Create a FastAPI application."""
    settings = settings or Settings()
    submission_service = submission_service or build_submission_service(settings)
    uploader = uploader or AssetUploader(settings.storage_config())

    app = FastAPI(
        title="Product API",
        summary="Store product submissions and their media",
        version="v1",
        description=dedent(
            """\
        Accepts product submissions with four images and a video, stores the media in
        the object store and keeps one record per submission in MongoDB.

        | Endpoint | Notes |
        | --- | --- |
        | `POST /api/add/v1/addData` | multipart form, one file per `prodImg1..4` / `prodVideo` |
        | `POST /api/get/v1/getdata` | JSON or form body with `userName`, `userEmail`, `apiKey` |
        """
        ),
        docs_url="/docs",
        generate_unique_id_function=custom_generate_unique_id,
        lifespan=lifespan,
    )

    app.state.settings = settings
    app.state.submission_service = submission_service
    app.state.uploader = uploader
    app.state.submission_handler = SubmissionHandler(
        api_key=settings.api_key,
        uploader=uploader,
        submission_service=submission_service,
        upload_dir=settings.upload_dir,
    )
    app.state.query_handler = QueryHandler(api_key=settings.api_key, submission_service=submission_service)

    app.include_router(products_router, tags=["products"])
    app.include_router(health_router, tags=["health"])

    # Staged files stay reachable until the uploader removes them
    Path(settings.upload_dir).mkdir(parents=True, exist_ok=True)
    app.mount("/uploads", StaticFiles(directory=settings.upload_dir), name="uploads")

    app.add_exception_handler(ProductApiError, handle_product_api_errors)
    app.add_exception_handler(RequestValidationError, handle_request_validation_errors)
    app.add_exception_handler(
        exc_class_or_status_code=pydantic.ValidationError,
        handler=handle_pydantic_validation_errors,
    )
    app.add_middleware(BodySizeLimitMiddleware, max_body_size=settings.max_body_size)
    app.middleware("http")(handle_broad_exceptions)

    # Added last so that it wraps every response, errors included
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=CORS_METHODS,
        allow_headers=["*"],
    )

    logger.info(f"{settings.app_name} created; staging uploads in {settings.upload_dir}")
    return app


def custom_generate_unique_id(route: APIRoute):
    """
    Generate prettier `operationId`s in the OpenAPI schema.

    These become the function names in generated client SDKs.
    """
    return f"{route.tags[0]}-{route.name}"


if __name__ == "__main__":
    from product_api.cli import cli

    cli(["serve"])
