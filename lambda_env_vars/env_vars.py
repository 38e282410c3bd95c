"""The high level interface for looking up variables."""

import concurrent.futures
import logging
import os
from typing import Any
from typing import Dict
from typing import Iterable
from typing import Mapping
from typing import Optional

from lambda_env_vars import aws
from lambda_env_vars import caches
from lambda_env_vars import exceptions
from lambda_env_vars import params

logger = logging.getLogger(__name__)


class Absent:
    """Returned when a document doesn't contain the requested variable."""
    pass


class LambdaEnvVars:
    """Reads plain, KMS encrypted, and S3 hosted variables.

    Decrypted values and fetched documents go into process wide caches
    that are shared by every instance, unless other cache objects are
    handed in. Once something is cached it stays for the life of the
    process.

    """
    def __init__(
            self,
            default_params=None,
            environ: Optional[Mapping[str, str]] = None,
            kms_client=None,
            s3_client_factory=None,
            decrypted_cache: Optional[caches.DecryptedVariableCache] = None,
            document_cache: Optional[caches.DocumentCache] = None,
            max_workers: int = 8,
    ):
        defaults = params.DEFAULT_PARAMS.overlay(params.Params.from_obj(default_params))
        self.default_params = defaults._replace(location=params.to_location(defaults.location))
        self.environ = os.environ if environ is None else environ
        self.decrypter = aws.KmsDecrypter(client=kms_client)
        self.fetcher = aws.S3DocumentFetcher(client_factory=s3_client_factory)
        self.decrypted_variables = caches.decrypted_variables if decrypted_cache is None else decrypted_cache
        self.documents = caches.documents if document_cache is None else document_cache
        self.max_workers = max_workers

    def get_plain_value(self, name: str = "") -> str:
        """Returns the environment variable, or an empty string if it isn't set."""
        if not name:
            return ""
        return self.environ.get(name) or ""

    def get_value(self, name: str = "", call_params=None) -> Any:
        """Looks up a variable according to the merged parameters.

        For the lambdaConfig location the variable is an encrypted
        environment variable. The result is the cached plaintext when
        there is one, an empty string when the variable isn't set, and
        otherwise the freshly decrypted plaintext.

        For the s3 location the variable is a key in the configured
        document. The stored value is returned as is, or Absent when the
        document doesn't have the key.

        """
        p = params.build_params(call_params, self.default_params)
        if p.location == params.Location.S3:
            return self.get_s3_value(name, p.s3_config)

        if name in self.decrypted_variables:
            logger.debug("variable %s served from cache", name)
            return self.decrypted_variables.get(name)
        if not name or not self.environ.get(name):
            return ""
        return self.set_cached_value(name, self.decrypt_variable(name))

    def get_value_list(self, names: Optional[Iterable[str]] = None, call_params=None) -> Dict[str, Any]:
        """Looks up every name concurrently.

        The first failure is raised and the partial results are thrown
        away.

        """
        names = list(names or [])
        if not names:
            return {}
        with concurrent.futures.ThreadPoolExecutor(max_workers=self.max_workers) as pool:
            futures = {name: pool.submit(self.get_value, name, call_params) for name in names}
            return {name: f.result() for name, f in futures.items()}

    def set_cached_value(self, name: str, value):
        return self.decrypted_variables.set(name, value)

    def decrypt_variable(self, name: str) -> str:
        return self.decrypter.decrypt(name, self.environ[name])

    def get_s3_value(self, name: str, s3_config) -> Any:
        s3_config = params.S3Config.from_obj(s3_config) or params.S3Config()
        missing = s3_config.missing()
        if missing:
            raise exceptions.MissingS3Config(params.S3Config.REQUIRED, missing)
        key = s3_config.cache_key
        document = self.documents.get(key)
        if document is None:
            document = self.documents.set(key, self.fetcher.load(*key))
        else:
            logger.debug("document s3://%s/%s served from cache", s3_config.bucket_name, s3_config.file_name)
        return document.get(name, Absent)
