import boto3
import pytest
from fastapi.testclient import TestClient
from moto import mock_aws

from database.mongo_adapter import MongoAdapter
from product_api.adapters.storage import AssetUploader
from product_api.config.settings import Settings
from product_api.main import create_app
from product_api.services.database import SubmissionService
from tests.consts import TEST_API_KEY, TEST_BUCKET_NAME, TEST_CDN_BASE_URL, TEST_REGION
from tests.fixtures.mongo_fixtures import InMemoryMongoClient


@pytest.fixture
def aws_credentials(monkeypatch):
    """Fake credentials so nothing can reach a real AWS account."""
    monkeypatch.setenv("AWS_ACCESS_KEY_ID", "testing")
    monkeypatch.setenv("AWS_SECRET_ACCESS_KEY", "testing")
    monkeypatch.setenv("AWS_SECURITY_TOKEN", "testing")
    monkeypatch.setenv("AWS_SESSION_TOKEN", "testing")
    monkeypatch.setenv("AWS_DEFAULT_REGION", TEST_REGION)
    monkeypatch.delenv("AWS_ENDPOINT_URL", raising=False)
    monkeypatch.delenv("AWS_PROFILE", raising=False)


@pytest.fixture
def mocked_aws(aws_credentials):
    with mock_aws():
        s3_client = boto3.client("s3", region_name=TEST_REGION)
        s3_client.create_bucket(Bucket=TEST_BUCKET_NAME)
        yield


@pytest.fixture
def settings(tmp_path, aws_credentials) -> Settings:
    return Settings(
        _env_file=None,
        api_key=TEST_API_KEY,
        mongodb_uri="mongodb://localhost:27017/products_test",
        s3_bucket_name=TEST_BUCKET_NAME,
        aws_region=TEST_REGION,
        cdn_base_url=TEST_CDN_BASE_URL,
        upload_dir=str(tmp_path / "uploads"),
    )


@pytest.fixture
def mongo_client() -> InMemoryMongoClient:
    return InMemoryMongoClient()


@pytest.fixture
def submission_service(settings, mongo_client) -> SubmissionService:
    adapter = MongoAdapter(settings.mongodb_uri, database_name=settings.mongodb_database, client=mongo_client)
    service = SubmissionService(adapter, collection=settings.submissions_collection)
    service.init_collections()
    return service


@pytest.fixture
def uploader(mocked_aws, settings) -> AssetUploader:
    return AssetUploader(settings.storage_config())


@pytest.fixture
def client(settings, submission_service, uploader) -> TestClient:
    app = create_app(settings=settings, submission_service=submission_service, uploader=uploader)
    with TestClient(app) as client:
        yield client
