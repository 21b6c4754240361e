"""FastAPI dependencies: collaborators built in `create_app` live on `app.state`."""

from fastapi import Request

from product_api.config.settings import Settings
from product_api.handlers import QueryHandler, SubmissionHandler


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_submission_handler(request: Request) -> SubmissionHandler:
    return request.app.state.submission_handler


def get_query_handler(request: Request) -> QueryHandler:
    return request.app.state.query_handler
