import os
from typing import AnyStr
from typing import List

import aenum

from lambda_env_vars import converters


@aenum.unique
class Format(aenum.Enum):
    pass


def register_format(x):
    aenum.extend_enum(Format, x, x.lower())


parser_by_format = {}


def register_parser(format: Format, parser) -> None:
    parser_by_format[format.value] = parser


format_by_suffix = {}


def register_file_formats(format: Format, suffixes: List[AnyStr]) -> None:
    for suffix in suffixes:
        format_by_suffix[suffix] = format


def format_for_filename(filename):
    """Picks a format by suffix, falling back to Json for unknown suffixes."""
    _, suffix = os.path.splitext(filename)
    return format_by_suffix.get(suffix.lower(), Format.Json)


def parser_for_format(format):
    return parser_by_format[format.value]


def parser_for_filename(filename):
    return parser_for_format(format_for_filename(filename))


register_format("Json")
register_parser(Format.Json, converters.obj_from_json)
register_file_formats(Format.Json, [".json"])

register_format("Toml")
register_parser(Format.Toml, converters.obj_from_toml)
register_file_formats(Format.Toml, [".toml"])

register_format("Yaml")
register_parser(Format.Yaml, converters.obj_from_yaml)
register_file_formats(Format.Yaml, [".yaml", ".yml"])
