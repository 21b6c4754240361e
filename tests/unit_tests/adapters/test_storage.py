import os

import boto3
import pytest
from botocore.exceptions import ClientError

from product_api.adapters.storage import AssetUploader, RemoteAsset, StorageConfig
from product_api.staging import StagedFile, discard_staged
from tests.consts import TEST_BUCKET_NAME, TEST_CDN_BASE_URL, TEST_PNG_CONTENT, TEST_REGION
from tests.fixtures.storage_fixtures import list_bucket_keys


@pytest.fixture
def staged_png(tmp_path):
    path = tmp_path / "8f14e45fceea167a5a36dedd4bea2543"
    path.write_bytes(TEST_PNG_CONTENT)
    return str(path)


def test_upload__happy_path(uploader: AssetUploader, staged_png: str):
    result = uploader.upload(staged_png, filename="Front.PNG")

    assert result.ok
    assert result.error is None
    asset = result.asset
    assert asset.object_key.startswith("products/")
    assert asset.object_key.endswith(".png")
    assert asset.secure_url == f"{TEST_CDN_BASE_URL}/{asset.object_key}"
    assert asset.content_type == "image/png"
    assert asset.size_bytes == len(TEST_PNG_CONTENT)

    s3_client = boto3.client("s3", region_name=TEST_REGION)
    stored = s3_client.get_object(Bucket=TEST_BUCKET_NAME, Key=asset.object_key)
    assert stored["Body"].read() == TEST_PNG_CONTENT
    assert stored["ContentType"] == "image/png"

    # the staged file is gone once uploaded
    assert not os.path.exists(staged_png)


def test_upload__explicit_content_type_wins(uploader: AssetUploader, staged_png: str):
    result = uploader.upload(staged_png, content_type="image/webp", filename="front.png")

    assert result.asset.content_type == "image/webp"


def test_upload__unknown_type_defaults_to_octet_stream(uploader: AssetUploader, staged_png: str):
    result = uploader.upload(staged_png)

    assert result.ok
    assert result.asset.content_type == "application/octet-stream"


@pytest.mark.parametrize("bad_path", [None, 42, b"/tmp/file", ""])
def test_upload__rejects_non_string_path(uploader: AssetUploader, bad_path, staged_png: str):
    with pytest.raises(TypeError):
        uploader.upload(bad_path)

    # nothing touched
    assert os.path.exists(staged_png)
    assert list_bucket_keys() == []


def test_upload__provider_failure_returns_error_and_removes_file(mocked_aws, staged_png: str):
    uploader = AssetUploader(StorageConfig(bucket_name="bucket-that-does-not-exist", region=TEST_REGION))

    result = uploader.upload(staged_png, filename="front.png")

    assert not result.ok
    assert result.asset is None
    assert result.error
    assert not os.path.exists(staged_png)


def test_upload__missing_local_file_returns_error(uploader: AssetUploader, tmp_path):
    result = uploader.upload(str(tmp_path / "never-staged"))

    assert not result.ok
    assert list_bucket_keys() == []


def test_delete__removes_uploaded_asset(uploader: AssetUploader, staged_png: str):
    asset = uploader.upload(staged_png, filename="front.png").asset
    assert list_bucket_keys() == [asset.object_key]

    assert uploader.delete(asset) is True
    assert list_bucket_keys() == []


def test_delete__failure_is_reported_not_raised(mocked_aws):
    uploader = AssetUploader(StorageConfig(bucket_name="bucket-that-does-not-exist", region=TEST_REGION))
    asset = RemoteAsset(
        object_key="products/abc.png",
        secure_url="https://example.com/products/abc.png",
        content_type="image/png",
        size_bytes=1,
    )

    assert uploader.delete(asset) is False


def test_secure_url__defaults_to_bucket_url(mocked_aws):
    uploader = AssetUploader(StorageConfig(bucket_name=TEST_BUCKET_NAME, region="eu-west-1"))

    assert uploader.secure_url("products/abc.mp4") == (
        f"https://{TEST_BUCKET_NAME}.s3.eu-west-1.amazonaws.com/products/abc.mp4"
    )


def test_build_object_key__keeps_extension_under_prefix(mocked_aws):
    uploader = AssetUploader(StorageConfig(bucket_name=TEST_BUCKET_NAME, key_prefix="/media/"))

    first = uploader.build_object_key("clip.MP4")
    second = uploader.build_object_key("clip.MP4")

    assert first.startswith("media/") and first.endswith(".mp4")
    assert first != second


def test_check_bucket__raises_for_missing_bucket(mocked_aws, uploader: AssetUploader):
    uploader.check_bucket()

    missing = AssetUploader(StorageConfig(bucket_name="bucket-that-does-not-exist", region=TEST_REGION))
    with pytest.raises(ClientError):
        missing.check_bucket()


@pytest.fixture
def locked_local_files(monkeypatch):
    """Local deletes fail as they would on a read-only staging directory."""
    def refuse_remove(path):
        raise PermissionError(f"Permission denied: {path}")

    monkeypatch.setattr(os, "remove", refuse_remove)


def test_upload__local_delete_failure_after_success_is_logged(
    uploader: AssetUploader, staged_png: str, locked_local_files, caplog
):
    result = uploader.upload(staged_png, filename="front.png")

    assert result.ok
    assert list_bucket_keys() == [result.asset.object_key]
    assert os.path.exists(staged_png)
    assert "Error deleting local file" in caplog.text


def test_upload__local_delete_failure_after_provider_error_is_logged(
    mocked_aws, staged_png: str, locked_local_files, caplog
):
    uploader = AssetUploader(StorageConfig(bucket_name="bucket-that-does-not-exist", region=TEST_REGION))

    result = uploader.upload(staged_png, filename="front.png")

    assert not result.ok
    assert result.error
    assert "Error deleting local file" in caplog.text


def test_discard_staged__removes_leftovers(tmp_path):
    leftover = tmp_path / "leftover"
    leftover.write_bytes(TEST_PNG_CONTENT)
    staged = [
        StagedFile(field_name="prodImg1", path=str(leftover), filename="front.png", content_type="image/png"),
        StagedFile(field_name="prodImg2", path=str(tmp_path / "gone"), filename="back.png", content_type=None),
    ]

    discard_staged(staged)

    assert not leftover.exists()


def test_discard_staged__delete_failure_is_logged(tmp_path, locked_local_files, caplog):
    leftover = tmp_path / "leftover"
    leftover.write_bytes(TEST_PNG_CONTENT)

    discard_staged(
        [StagedFile(field_name="prodImg1", path=str(leftover), filename="front.png", content_type="image/png")]
    )

    assert leftover.exists()
    assert "Error deleting staged file" in caplog.text
