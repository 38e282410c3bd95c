"""Tools for turning raw bytes into values.

Documents pulled from S3 and ciphertexts read from the environment both
arrive as text or bytes. These helpers decode them, and report failures
as library exceptions. For example, a base64 encoded JSON document
becomes a dict with:

    obj_from_json(
        string_from_bytes(
            bytes_from_base64(x),
            encoding='utf8'
        )
    )

"""

import base64
import binascii
import json
from typing import Any
from typing import AnyStr

import toml

try:
    from yaml import CSafeLoader as Loader
except ImportError:
    from yaml import SafeLoader as Loader

import yaml

from lambda_env_vars.exceptions import MalformedDocument


def obj_from_json(x: AnyStr) -> Any:
    try:
        return json.loads(x)
    except Exception as e:
        raise MalformedDocument("invalid json: %s" % e)


def obj_from_toml(x: AnyStr) -> Any:
    try:
        return toml.loads(x)
    except Exception as e:
        raise MalformedDocument("invalid toml: %s" % e)


def obj_from_yaml(x: AnyStr) -> Any:
    try:
        return yaml.load(x, Loader=Loader)
    except Exception as e:
        raise MalformedDocument("invalid yaml: %s" % e)


def string_from_bytes(x: bytes, encoding='utf8') -> str:
    try:
        return x.decode(encoding)
    except UnicodeDecodeError as e:
        raise MalformedDocument("cannot decode as %s: %s" % (encoding, e))


def bytes_from_base64(x: AnyStr) -> bytes:
    """Strict decode; characters outside the base64 alphabet are errors."""
    try:
        return base64.b64decode(x, validate=True)
    except (binascii.Error, ValueError):
        raise ValueError("characters outside base64")
