"""
Enumerations.

Closed CAM vocabularies. Each member's canonical string is its lower-cased
name; that string is what travels over JSON and YAML, while the integer value
is only the declaration order.

Usage:
    from clccam.schemas.enums import InstanceState

    state = InstanceState.from_string("done")
    str(state)                  # "done"
    InstanceState.strings()     # ["processing", "done", "unavailable"]
"""

from enum import IntEnum
from typing import Any, TypeVar

import yaml
from pydantic import GetCoreSchemaHandler
from pydantic_core import core_schema

E = TypeVar("E", bound="CamEnum")


class CamEnum(IntEnum):
    """Base class of the CAM enumerations."""

    def __str__(self) -> str:
        return self.name.lower()

    def __format__(self, format_spec: str) -> str:
        return format(str(self), format_spec)

    @classmethod
    def from_string(cls: type[E], value: str) -> E:
        """
        Look up a member by its canonical string.

        Raises:
            ValueError: If value is not one of the canonical strings
        """
        for member in cls:
            if str(member) == value:
                return member
        raise ValueError(f"invalid {cls.__name__} {value!r}")

    @classmethod
    def strings(cls, *values: "CamEnum") -> list[str]:
        """Return the canonical strings of values, or of all members if none are given."""
        return [str(value) for value in (values or tuple(cls))]

    @classmethod
    def _validate(cls: type[E], value: Any) -> E:
        if isinstance(value, cls):
            return value
        if isinstance(value, str):
            return cls.from_string(value)
        if isinstance(value, int) and not isinstance(value, bool):
            try:
                return cls(value)
            except ValueError:
                raise ValueError(f"invalid {cls.__name__} {value}") from None
        raise ValueError(f"failed to parse {value!r} as {cls.__name__}")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                str, when_used="json"
            ),
        )


class BoxEvent(CamEnum):
    """Box lifecycle events that can carry a script."""

    PRE_CONFIGURE = 0
    CONFIGURE = 1
    PRE_INSTALL = 2
    INSTALL = 3
    PRE_START = 4
    START = 5
    PRE_STOP = 6
    STOP = 7
    PRE_DISPOSE = 8
    DISPOSE = 9


class InstanceEvent(CamEnum):
    """Operations performed on an instance."""

    SHUTDOWN = 0
    POWERON = 1
    REINSTALL = 2
    RECONFIGURE = 3
    TERMINATE = 4
    TERMINATE_SERVICE = 5


class InstanceOp(CamEnum):
    """Last operation recorded on an instance or service."""

    DEPLOY = 0
    SHUTDOWN = 1
    POWERON = 2
    REINSTALL = 3
    RECONFIGURE = 4
    TERMINATE = 5
    TERMINATE_SERVICE = 6
    SNAPSHOT = 7
    IMPORT = 8
    REGISTER = 9


class InstanceState(CamEnum):
    """State of an instance or a machine."""

    PROCESSING = 0
    DONE = 1
    UNAVAILABLE = 2


class Visibility(CamEnum):
    """Audience an entity is visible to."""

    PUBLIC = 0
    ORGANIZATION = 1
    WORKSPACE = 2
    INTERNAL = 3
    PRIVATE = 4


def _represent_enum(dumper: yaml.SafeDumper, value: CamEnum) -> yaml.Node:
    return dumper.represent_str(str(value))


yaml.SafeDumper.add_multi_representer(CamEnum, _represent_enum)
