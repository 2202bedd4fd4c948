import pytest
from botocore.exceptions import ClientError

from issue_reporter.clients.s3_uploader import S3Uploader, PRESIGNED_URL_EXPIRY
from issue_reporter.core.exceptions import UploadError


class FakeS3Client:
    def __init__(self, error=None):
        self.error = error
        self.objects = []
        self.presigned = []

    def put_object(self, **kwargs):
        if self.error:
            raise self.error
        self.objects.append(kwargs)

    def generate_presigned_url(self, operation, Params, ExpiresIn):
        self.presigned.append((operation, Params, ExpiresIn))
        return f"https://{Params['Bucket']}.s3.amazonaws.com/{Params['Key']}?X-Amz-Expires={ExpiresIn}"


def test_upload_returns_presigned_url():
    client = FakeS3Client()
    uploader = S3Uploader("shots", "us-east-1", client=client)

    url = uploader.upload(b"png-bytes", "image/png", "Screen Shot.PNG")

    stored = client.objects[0]
    assert stored['Bucket'] == "shots"
    assert stored['Body'] == b"png-bytes"
    assert stored['ContentType'] == "image/png"
    assert stored['Key'].startswith("screenshots/")
    assert stored['Key'].endswith(".png")
    assert client.presigned == [('get_object', {'Bucket': 'shots', 'Key': stored['Key']}, PRESIGNED_URL_EXPIRY)]
    assert PRESIGNED_URL_EXPIRY == 604800
    assert url.endswith(f"{stored['Key']}?X-Amz-Expires=604800")


def test_keys_are_unique():
    client = FakeS3Client()
    uploader = S3Uploader("shots", "us-east-1", client=client)

    uploader.upload(b"a", "image/png")
    uploader.upload(b"b", "image/png")

    assert client.objects[0]['Key'] != client.objects[1]['Key']


def test_client_error_becomes_upload_error():
    error = ClientError({'Error': {'Code': 'AccessDenied', 'Message': 'denied'}}, 'PutObject')
    uploader = S3Uploader("shots", "us-east-1", client=FakeS3Client(error=error))

    with pytest.raises(UploadError) as exc_info:
        uploader.upload(b"a", "image/png")

    assert "shots" in str(exc_info.value)
    assert exc_info.value.__cause__ is error
