import pytest
from botocore.exceptions import ClientError, EndpointConnectionError

from bramble.deploy import S3Uploader, guess_content_type
from bramble.errors import UploadError
from bramble.protocols import Uploader


class FakeS3Client:
    def __init__(self, error=None):
        self.error = error
        self.calls = []

    def put_object(self, **kwargs):
        self.calls.append(kwargs)
        if self.error is not None:
            raise self.error


def test_put_writes_public_object():
    client = FakeS3Client()
    uploader = S3Uploader("key", "secret", "my-bucket", client=client)
    assert isinstance(uploader, Uploader)

    uploader.put("css/site.css", b"body{}", "text/css")

    assert client.calls == [
        {
            "Bucket": "my-bucket",
            "Key": "css/site.css",
            "Body": b"body{}",
            "ContentType": "text/css",
            "ACL": "public-read",
        }
    ]


@pytest.mark.parametrize(
    "error",
    [
        ClientError({"Error": {"Code": "AccessDenied", "Message": "denied"}}, "PutObject"),
        EndpointConnectionError(endpoint_url="https://s3.amazonaws.com"),
    ],
)
def test_put_failures_become_upload_errors(error):
    uploader = S3Uploader("key", "secret", "my-bucket", client=FakeS3Client(error))
    with pytest.raises(UploadError) as exc_info:
        uploader.put("index.html", b"<html>", "text/html")
    assert exc_info.value.context == "index.html"
    assert exc_info.value.original_error is error
    assert "my-bucket" in exc_info.value.message


def test_default_client_uses_credentials(monkeypatch):
    seen = {}

    def fake_client(service, **kwargs):
        seen["service"] = service
        seen.update(kwargs)
        return FakeS3Client()

    monkeypatch.setattr("bramble.deploy.boto3.client", fake_client)
    uploader = S3Uploader("key", "secret", "my-bucket", region="eu-west-1")
    assert isinstance(uploader.client, FakeS3Client)
    assert seen == {
        "service": "s3",
        "aws_access_key_id": "key",
        "aws_secret_access_key": "secret",
        "region_name": "eu-west-1",
    }


def test_guess_content_type():
    assert guess_content_type("index.html") == "text/html"
    assert guess_content_type("css/site.css") == "text/css"
    assert guess_content_type("images/logo.png") == "image/png"
    assert guess_content_type("LICENSE") == "application/octet-stream"
