import argparse
import dataclasses
import os
import sys
import typing
from typing import Any, Dict, Iterator, List, Mapping, Optional, Tuple, Union

if sys.version_info >= (3, 11):
    import tomllib
    from typing import Self
else:
    import tomli as tomllib
    from typing_extensions import Self

from ecs_dispatch.ecs.common import ConfigError

INPUT_ENV_PREFIX = "INPUT_"


def input_name(field_name: str) -> str:
    """``wait_timeout_seconds`` -> ``wait-timeout-seconds``"""
    return field_name.replace("_", "-")


def input_env_name(field_name: str) -> str:
    """Environment variable the GitHub Actions runner uses for an input, e.g. ``INPUT_ECS-CLUSTER``."""
    return f"{INPUT_ENV_PREFIX}{input_name(field_name).upper()}"


class ConfigClass:
    """
    Base class for dataclass configuration sections.

    Every field is an input that can come, from highest to lowest precedence, from a
    command line flag, a GitHub Actions ``INPUT_*`` environment variable, a TOML file
    section, or the field default. Values arrive as strings, are stripped, and a blank
    value counts as not supplied. Fields whose type is itself a ``ConfigClass`` are
    nested sections; their inputs share the same flat namespace.

    Field metadata:
        short: short command line flag
        help: description of the input
        required: fail when the input is not supplied
    """

    _section_name = ""

    @classmethod
    def _typed_fields(cls) -> Iterator[Tuple[dataclasses.Field, Any]]:
        hints = typing.get_type_hints(cls)
        for field in dataclasses.fields(cls):
            yield field, hints[field.name]

    @classmethod
    def input_field_names(cls) -> List[str]:
        names = []
        for field, field_type in cls._typed_fields():
            if _is_config_class(field_type):
                names.extend(field_type.input_field_names())
            else:
                names.append(field.name)
        return names

    @classmethod
    def configure_parser(cls, parser: argparse.ArgumentParser):
        for field, field_type in cls._typed_fields():
            if _is_config_class(field_type):
                field_type.configure_parser(parser)
                continue

            flags = [f"--{input_name(field.name)}"]
            if "short" in field.metadata:
                flags.append(field.metadata["short"])

            parser.add_argument(*flags, dest=field.name, type=str, default=None, help=field.metadata.get("help"))

    @classmethod
    def load(
        cls,
        argv: Optional[List[str]] = None,
        environ: Optional[Mapping[str, str]] = None,
        program_name: Optional[str] = None,
    ) -> Self:
        parser = argparse.ArgumentParser(program_name, description=cls.__doc__)
        parser.add_argument("--config", "-c", type=str, default=None, help="Path to the TOML configuration file.")
        cls.configure_parser(parser)
        args = parser.parse_args(argv)

        return cls.from_sources(vars(args), os.environ if environ is None else environ, args.config)

    @classmethod
    def from_sources(
        cls,
        arguments: Mapping[str, Optional[str]],
        environ: Mapping[str, str],
        config_file: Optional[str] = None,
    ) -> Self:
        values: Dict[str, str] = {}
        if config_file:
            values.update(cls._read_config_file(config_file))

        for name in cls.input_field_names():
            for source in (environ.get(input_env_name(name)), arguments.get(name)):
                if source is not None and source.strip():
                    values[name] = source

        return cls._from_values({name: value.strip() for name, value in values.items() if value.strip()})

    @classmethod
    def _from_values(cls, values: Mapping[str, str]) -> Self:
        kwargs = {}
        for field, field_type in cls._typed_fields():
            if _is_config_class(field_type):
                kwargs[field.name] = field_type._from_values(values)
                continue

            raw = values.get(field.name)
            if raw is None:
                if field.metadata.get("required", False):
                    raise ConfigError(f"Input required and not supplied: {input_name(field.name)}")
                continue

            kwargs[field.name] = _convert(field.name, field_type, raw)

        return cls(**kwargs)

    @classmethod
    def _read_config_file(cls, config_file: str) -> Dict[str, str]:
        try:
            with open(config_file, "rb") as f:
                document = tomllib.load(f)
        except FileNotFoundError:
            raise ConfigError(f"Config file not found: {config_file}")
        except OSError as e:
            raise ConfigError(f"Cannot read config file {config_file}: {e.strerror}")
        except tomllib.TOMLDecodeError as e:
            raise ConfigError(f"Invalid TOML in {config_file}: {e}")

        section = document.get(cls._section_name, {}) if cls._section_name else document
        if not isinstance(section, dict):
            raise ConfigError(f"[{cls._section_name}] in {config_file} must be a table")

        known = set(cls.input_field_names())

        values = {}
        for key, value in section.items():
            name = key.replace("-", "_")
            if name not in known:
                raise ConfigError(f"Unknown key {key!r} in section [{cls._section_name}] of {config_file}")
            values[name] = _toml_value_to_string(value)

        return values


def _is_config_class(field_type: Any) -> bool:
    return isinstance(field_type, type) and issubclass(field_type, ConfigClass)


def _toml_value_to_string(value: Any) -> str:
    if isinstance(value, bool):
        return "true" if value else "false"

    if isinstance(value, (list, tuple)):
        return ",".join(str(item) for item in value)

    return str(value)


def _convert(name: str, field_type: Any, raw: str) -> Any:
    origin = typing.get_origin(field_type)
    args = typing.get_args(field_type)

    if origin is Union and type(None) in args:
        inner = [arg for arg in args if arg is not type(None)]
        return _convert(name, inner[0], raw)

    if field_type is bool:
        return raw.lower() == "true"

    if field_type is int:
        try:
            return int(raw)
        except ValueError:
            raise ConfigError(f"{input_name(name)} must be an integer, got {raw!r}")

    if origin is tuple:
        return tuple(item.strip() for item in raw.split(",") if item.strip())

    return raw
