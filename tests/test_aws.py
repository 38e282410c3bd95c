import base64
import io
import json
import logging

import boto3
import botocore.exceptions
import moto
import pytest

from lambda_env_vars import aws
from lambda_env_vars import exceptions

from tests.helpers import StubKms
from tests.helpers import StubS3


def encrypt(plaintext):
    kms = boto3.client("kms")
    key_id = kms.create_key()["KeyMetadata"]["KeyId"]
    blob = kms.encrypt(KeyId=key_id, Plaintext=plaintext)["CiphertextBlob"]
    return base64.b64encode(blob).decode("ascii")


@moto.mock_aws
def test_kms_decrypts_base64_ciphertext():
    ciphertext = encrypt(b"secret")
    assert aws.KmsDecrypter().decrypt("FOO", ciphertext) == "secret"


def test_kms_rejects_invalid_base64():
    kms = StubKms()
    with pytest.raises(exceptions.DecryptionFailed):
        aws.KmsDecrypter(client=kms).decrypt("FOO", "%%% not base64 %%%")
    assert kms.calls == []


def test_kms_rejects_non_ascii_plaintext(caplog):
    kms = StubKms(plaintext="pässword".encode("utf8"))
    with caplog.at_level(logging.WARNING, logger="lambda_env_vars.aws"):
        with pytest.raises(exceptions.DecryptionFailed):
            aws.KmsDecrypter(client=kms).decrypt("FOO", base64.b64encode(b"x").decode("ascii"))
    assert "FOO" in caplog.text
    assert "pässword" not in caplog.text


def test_kms_wraps_client_errors():
    error = botocore.exceptions.ClientError(
        {"Error": {"Code": "AccessDeniedException", "Message": "denied"}}, "Decrypt")
    kms = StubKms(error=error)
    with pytest.raises(exceptions.DecryptionFailed) as e:
        aws.KmsDecrypter(client=kms).decrypt("FOO", base64.b64encode(b"x").decode("ascii"))
    assert e.value.__cause__ is error


def put_object(bucket, key, body, region="us-east-1"):
    s3 = boto3.client("s3", region_name=region)
    if region == "us-east-1":
        s3.create_bucket(Bucket=bucket)
    else:
        s3.create_bucket(Bucket=bucket, CreateBucketConfiguration={"LocationConstraint": region})
    s3.put_object(Bucket=bucket, Key=key, Body=body)


@moto.mock_aws
def test_s3_loads_json_document():
    put_object("test-bucket", "f.json", json.dumps({"bar": "baz", "n": 1}).encode("utf8"))
    assert aws.S3DocumentFetcher().load("test-bucket", "us-east-1", "f.json") == {"bar": "baz", "n": 1}


@moto.mock_aws
def test_s3_loads_document_from_bucket_region():
    put_object("test-bucket", "f.json", b'{"bar": "baz"}', region="eu-west-1")
    assert aws.S3DocumentFetcher().load("test-bucket", "eu-west-1", "f.json") == {"bar": "baz"}


@moto.mock_aws
def test_s3_loads_yaml_document():
    put_object("test-bucket", "f.yaml", b"bar: baz\nlist:\n  - 1\n  - 2\n")
    assert aws.S3DocumentFetcher().load("test-bucket", "us-east-1", "f.yaml") == {"bar": "baz", "list": [1, 2]}


@moto.mock_aws
def test_s3_loads_toml_document():
    put_object("test-bucket", "f.toml", b'bar = "baz"\n')
    assert aws.S3DocumentFetcher().load("test-bucket", "us-east-1", "f.toml") == {"bar": "baz"}


@moto.mock_aws
def test_s3_rejects_invalid_json():
    put_object("test-bucket", "f.json", b"{this is not json")
    with pytest.raises(exceptions.MalformedDocument) as e:
        aws.S3DocumentFetcher().load("test-bucket", "us-east-1", "f.json")
    assert e.value.key == "f.json"


@moto.mock_aws
def test_s3_rejects_non_mapping_document():
    put_object("test-bucket", "f.json", b"[1, 2, 3]")
    with pytest.raises(exceptions.MalformedDocument):
        aws.S3DocumentFetcher().load("test-bucket", "us-east-1", "f.json")


@moto.mock_aws
def test_s3_missing_object_passes_through():
    put_object("test-bucket", "other.json", b"{}")
    with pytest.raises(botocore.exceptions.ClientError):
        aws.S3DocumentFetcher().load("test-bucket", "us-east-1", "f.json")


def test_s3_reuses_one_client_per_region():
    made = []

    def factory(region):
        made.append(region)
        return object()

    fetcher = aws.S3DocumentFetcher(client_factory=factory)
    assert fetcher.get_client("r1") is fetcher.get_client("r1")
    fetcher.get_client("r2")
    assert made == ["r1", "r2"]


def test_s3_closes_the_object_body():
    body = io.BytesIO(b'{"bar": "baz"}')

    class BodyS3(StubS3):
        def get_object(self, Bucket, Key):
            self.calls.append((Bucket, Key))
            return {"Body": body}

    fetcher = aws.S3DocumentFetcher(client_factory=lambda region: BodyS3({}))
    assert fetcher.load("test-bucket", "us-east-1", "f.json") == {"bar": "baz"}
    assert body.closed
