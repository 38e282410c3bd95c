"""Environment variable helpers for AWS Lambda."""

from .caches import DecryptedVariableCache
from .caches import DocumentCache
from .env_vars import Absent
from .env_vars import LambdaEnvVars
from .exceptions import DecryptionFailed
from .exceptions import InvalidLocation
from .exceptions import LambdaEnvVarsError
from .exceptions import MalformedDocument
from .exceptions import MissingS3Config
from .formats import Format
from .params import Location
from .params import Params
from .params import S3Config
from .params import build_params
