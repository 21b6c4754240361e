from fastapi import status
from fastapi.testclient import TestClient

from tests.consts import TEST_API_KEY, TEST_CDN_BASE_URL, TEST_USER_EMAIL, TEST_USER_NAME
from tests.fixtures.storage_fixtures import list_bucket_keys, staged_files
from tests.fixtures.submission_fixtures import form_fields, multipart_files

ADD_DATA_URL = "/api/add/v1/addData"
GET_DATA_URL = "/api/get/v1/getdata"
URL_FIELDS = ("image1Url", "image2Url", "image3Url", "image4Url", "videoUrl")


def query_body(**overrides):
    body = {"userName": TEST_USER_NAME, "userEmail": TEST_USER_EMAIL, "apiKey": TEST_API_KEY}
    body.update(overrides)
    return body


def test_liveness(client: TestClient):
    response = client.get("/")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == "server is healthy!!!"


def test_add_then_get_data(client: TestClient, settings):
    # Submit a product
    response = client.post(ADD_DATA_URL, data=form_fields(), files=multipart_files())
    assert response.status_code == status.HTTP_201_CREATED
    assert response.json() == {"message": "Data added successfully", "success": True}

    # Fetch it back
    response = client.post(GET_DATA_URL, json=query_body())
    assert response.status_code == status.HTTP_200_OK
    body = response.json()
    assert body["message"] == "Data Fetched Successfully"
    assert body["success"] is True
    assert len(body["data"]) == 1

    record = body["data"][0]
    assert record["id"]
    assert record["productNumber"] == 1
    assert record["userName"] == TEST_USER_NAME
    assert record["userEmail"] == TEST_USER_EMAIL
    assert record["ingredients"] == "flour, sugar, eggs"
    assert record["size"] == "large"
    assert record["cost"] == "12.50"
    assert record["server"] == "4"
    assert record["description"] == "A sponge cake"
    assert record["date"] and record["createdAt"] and record["updatedAt"]

    urls = [record[field] for field in URL_FIELDS]
    assert all(url.startswith(f"{TEST_CDN_BASE_URL}/products/") for url in urls)
    assert sorted(url.removeprefix(f"{TEST_CDN_BASE_URL}/") for url in urls) == sorted(list_bucket_keys())

    # Nothing left in the staging directory
    assert staged_files(settings) == []


def test_get_data__form_encoded_body(client: TestClient):
    client.post(ADD_DATA_URL, data=form_fields(), files=multipart_files())

    response = client.post(GET_DATA_URL, data=query_body())

    assert response.status_code == status.HTTP_200_OK
    assert len(response.json()["data"]) == 1


def test_get_data__repeated_queries_return_same_records(client: TestClient):
    client.post(ADD_DATA_URL, data=form_fields(size="small"), files=multipart_files())
    client.post(ADD_DATA_URL, data=form_fields(size="large"), files=multipart_files())
    client.post(ADD_DATA_URL, data=form_fields(userName="bob"), files=multipart_files())

    first = client.post(GET_DATA_URL, json=query_body()).json()["data"]
    second = client.post(GET_DATA_URL, json=query_body()).json()["data"]

    assert len(first) == 2
    assert sorted(record["size"] for record in first) == ["large", "small"]
    assert first == second
    assert len(list_bucket_keys()) == 15


def test_health_check(client: TestClient):
    response = client.get("/health")

    assert response.status_code == status.HTTP_200_OK
    assert response.json() == {
        "status": "ok",
        "components": {"api": "ready", "database": "ready", "storage": "ready"},
        "ready": True,
    }


def test_cors_preflight(client: TestClient):
    response = client.options(
        GET_DATA_URL,
        headers={
            "Origin": "https://shop.example.com",
            "Access-Control-Request-Method": "POST",
            "Access-Control-Request-Headers": "content-type",
        },
    )

    assert response.status_code == status.HTTP_200_OK
    assert response.headers["access-control-allow-origin"] == "https://shop.example.com"
    assert response.headers["access-control-allow-credentials"] == "true"
    assert "POST" in response.headers["access-control-allow-methods"]


def test_cors_headers_on_responses(client: TestClient):
    response = client.get("/", headers={"Origin": "https://shop.example.com"})

    assert response.headers["access-control-allow-origin"] in ("*", "https://shop.example.com")


def test_openapi_operation_ids(client: TestClient):
    schema = client.get("/openapi.json").json()

    assert schema["paths"][ADD_DATA_URL]["post"]["operationId"] == "products-add_data"
    assert schema["paths"][GET_DATA_URL]["post"]["operationId"] == "products-get_data"
