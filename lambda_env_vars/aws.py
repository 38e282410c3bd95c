import contextlib
import logging
import threading

import boto3
import botocore.exceptions

from lambda_env_vars import converters
from lambda_env_vars import exceptions
from lambda_env_vars import formats

logger = logging.getLogger(__name__)


class KmsDecrypter:
    """Decrypts base64 encoded ciphertext blobs with AWS KMS.

    Lambda's console encryption helpers store each encrypted variable as
    the base64 text of the KMS ciphertext blob, and the decrypted value
    is expected to be plain ASCII.

    """
    def __init__(self, client=None, encoding="ascii"):
        self._client = client
        self._encoding = encoding
        self._lock = threading.Lock()

    def get_client(self):
        with self._lock:
            if self._client is None:
                self._client = boto3.client("kms")
            return self._client

    def decrypt(self, name, ciphertext):
        try:
            blob = converters.bytes_from_base64(ciphertext)
        except ValueError as e:
            logger.warning("variable %s is not valid base64", name)
            raise exceptions.DecryptionFailed(name) from e
        logger.debug("decrypting variable %s with kms", name)
        try:
            resp = self.get_client().decrypt(CiphertextBlob=blob)
        except (botocore.exceptions.BotoCoreError, botocore.exceptions.ClientError) as e:
            logger.warning("kms could not decrypt variable %s: %s", name, e)
            raise exceptions.DecryptionFailed(name) from e
        try:
            return resp["Plaintext"].decode(self._encoding)
        except (KeyError, UnicodeDecodeError) as e:
            logger.warning("kms plaintext for variable %s is not %s", name, self._encoding)
            raise exceptions.DecryptionFailed(name) from e


class S3DocumentFetcher:
    """Pulls documents out of S3 and parses them.

    One client is kept per region because buckets live in the region named
    by their s3Config.

    """
    def __init__(self, client_factory=None):
        self._client_factory = client_factory or self.default_client
        self._clients = {}
        self._lock = threading.Lock()

    @staticmethod
    def default_client(region):
        return boto3.client("s3", region_name=region)

    def get_client(self, region):
        with self._lock:
            if region not in self._clients:
                self._clients[region] = self._client_factory(region)
            return self._clients[region]

    def fetch(self, bucket_name, bucket_region, file_name) -> bytes:
        logger.debug("fetching s3://%s/%s from %s", bucket_name, file_name, bucket_region)
        resp = self.get_client(bucket_region).get_object(Bucket=bucket_name, Key=file_name)
        with contextlib.closing(resp["Body"]) as body:
            return body.read()

    def load(self, bucket_name, bucket_region, file_name):
        data = self.fetch(bucket_name, bucket_region, file_name)
        parse = formats.parser_for_filename(file_name)
        try:
            document = parse(converters.string_from_bytes(data, encoding='utf8'))
        except exceptions.MalformedDocument as e:
            logger.warning("s3://%s/%s is malformed: %s", bucket_name, file_name, e)
            e.key = file_name
            raise
        if not isinstance(document, dict):
            raise exceptions.MalformedDocument(
                "s3://%s/%s does not contain a mapping" % (bucket_name, file_name),
                key=file_name)
        return document
