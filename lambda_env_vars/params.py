"""Lookup parameters and their validation.

Parameters say where a variable lives. They come in two tiers: the
defaults given to LambdaEnvVars when it's built, and the parameters
passed with each lookup. Both can be plain mappings, using either the
camelCase keys of the JSON world ("location", "s3Config", "bucketName",
"bucketRegion", "fileName") or their snake_case equivalents.

The tiers are merged shallowly. A call's s3Config replaces the default
s3Config wholesale, it is never merged field by field.

"""

from typing import Any
from typing import Mapping
from typing import NamedTuple
from typing import Optional
from typing import Tuple

import aenum

from lambda_env_vars import exceptions


@aenum.unique
class Location(aenum.Enum):
    LAMBDA_CONFIG = "lambdaConfig"
    S3 = "s3"


ALLOWED_LOCATIONS = tuple(x.value for x in Location)


class S3Config(NamedTuple):
    bucket_name: Optional[str] = None
    bucket_region: Optional[str] = None
    file_name: Optional[str] = None

    REQUIRED = ("bucketName", "bucketRegion", "fileName")

    @classmethod
    def from_obj(cls, x):
        if x is None:
            return None
        if isinstance(x, S3Config):
            return x
        return cls(
            bucket_name=_pick(x, "bucketName", "bucket_name"),
            bucket_region=_pick(x, "bucketRegion", "bucket_region"),
            file_name=_pick(x, "fileName", "file_name"),
        )

    def missing(self):
        values = (self.bucket_name, self.bucket_region, self.file_name)
        return [name for name, v in zip(self.REQUIRED, values) if not v]

    @property
    def is_complete(self):
        return not self.missing()

    @property
    def cache_key(self) -> Tuple[str, str, str]:
        return (self.bucket_name, self.bucket_region, self.file_name)


class Params(NamedTuple):
    """A set of lookup parameters. None means 'not supplied'."""
    location: Optional[Any] = None
    s3_config: Optional[S3Config] = None

    @classmethod
    def from_obj(cls, x):
        if x is None:
            return cls()
        if isinstance(x, Params):
            return x
        return cls(
            location=_pick(x, "location"),
            s3_config=S3Config.from_obj(_pick(x, "s3Config", "s3_config")),
        )

    def overlay(self, other: "Params") -> "Params":
        """Returns these params with every field supplied by other replaced."""
        return Params(
            location=self.location if other.location is None else other.location,
            s3_config=self.s3_config if other.s3_config is None else other.s3_config,
        )


DEFAULT_PARAMS = Params(location=Location.LAMBDA_CONFIG, s3_config=S3Config())


def _pick(x: Mapping, *names):
    for name in names:
        if name in x:
            return x[name]
    return None


def to_location(location) -> Location:
    if isinstance(location, Location):
        return location
    if location not in ALLOWED_LOCATIONS:
        raise exceptions.InvalidLocation(location, ALLOWED_LOCATIONS)
    return Location(location)


def build_params(call_params=None, default_params=DEFAULT_PARAMS) -> Params:
    """Merges per-call parameters over the defaults and validates the result.

    The location is validated on the merged parameters. The S3 reference is
    validated only when the call itself asks for the s3 location, and then
    only against the s3Config supplied with the call.

    """
    call = Params.from_obj(call_params)
    merged = Params.from_obj(default_params).overlay(call)
    location = to_location(merged.location)

    if call.location is not None and to_location(call.location) == Location.S3:
        s3_config = call.s3_config or S3Config()
        missing = s3_config.missing()
        if missing:
            raise exceptions.MissingS3Config(S3Config.REQUIRED, missing)

    return Params(location=location, s3_config=merged.s3_config or S3Config())
