import pytest

from bulkspeed.web.app import create_server_app


@pytest.fixture
def client(config):
    app = create_server_app(config)
    app.config["TESTING"] = True
    return app.test_client()


def test_download_returns_payload(client, config):
    response = client.get("/download")
    assert response.status_code == 200
    assert response.headers["Content-Type"] == "application/octet-stream"
    assert len(response.data) == config.transfer.payload_size_bytes


def test_download_is_not_constant(client):
    data = client.get("/download").data
    assert len(set(data[:4096])) > 1


def test_upload_accepts_body(client):
    response = client.post("/upload", data=b"A" * 5000, content_type="application/octet-stream")
    assert response.status_code == 200


def test_upload_missing_content_length(client):
    response = client.post("/upload")
    assert response.status_code == 400


def test_upload_non_numeric_content_length(client):
    response = client.post("/upload", environ_overrides={"CONTENT_LENGTH": "lots"})
    assert response.status_code == 400


@pytest.mark.parametrize("raw", ["1_0", " 12 ", "+10", "1e3", "0x10"])
def test_upload_non_decimal_content_length(client, raw):
    response = client.post("/upload", data=b"A" * 10, environ_overrides={"CONTENT_LENGTH": raw})
    assert response.status_code == 400


def test_upload_negative_content_length(client):
    response = client.post("/upload", environ_overrides={"CONTENT_LENGTH": "-5"})
    assert response.status_code == 400


def test_upload_over_limit(client, config):
    too_big = str(config.server.max_upload_bytes + 1)
    response = client.post("/upload", environ_overrides={"CONTENT_LENGTH": too_big})
    assert response.status_code == 413


def test_upload_at_limit_is_accepted(client, config):
    response = client.post("/upload", data=b"A" * config.server.max_upload_bytes)
    assert response.status_code == 200


def test_upload_short_body(client):
    response = client.post("/upload", data=b"A" * 10, environ_overrides={"CONTENT_LENGTH": "20"})
    assert response.status_code == 500


def test_wrong_methods(client):
    assert client.get("/upload").status_code == 405
    assert client.post("/download").status_code == 405


def test_health_reports_transfer_constants(client, config):
    body = client.get("/health").get_json()
    assert body["status"] == "ok"
    assert body["payload_size_bytes"] == config.transfer.payload_size_bytes
    assert body["max_upload_bytes"] == config.server.max_upload_bytes
