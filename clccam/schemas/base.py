"""
Base Schemas.

Value types shared by the CAM data models: the CAM timestamp, URIs and the
model base class.
"""

import re
from datetime import datetime
from typing import Any
from urllib.parse import SplitResult, urlsplit

from pydantic import BaseModel, ConfigDict, GetCoreSchemaHandler
from pydantic_core import core_schema

# CAM timestamp format, e.g. "2018-01-26 19:50:49.131726"
TIMESTAMP_FORMAT = "%Y-%m-%d %H:%M:%S"

# Alternative format, e.g. "2019-01-12T00:15:09.026751Z"; fractional seconds are dropped.
TIMESTAMP_FORMAT_ALT = "%Y-%m-%dT%H:%M:%SZ"

_ALT_FRACTION = re.compile(r"\.\d+Z\s*$")


class Timestamp(datetime):
    """
    Date/time as used by the CAM API.

    Values are timezone-naive UTC. The CAM format carries up to microsecond
    precision; the ISO variant also in use is accepted with its fractional
    seconds ignored.
    """

    @classmethod
    def parse(cls, value: str) -> "Timestamp":
        """
        Parse a CAM timestamp string.

        Args:
            value: Timestamp text, optionally enclosed in double quotes

        Returns:
            Parsed Timestamp

        Raises:
            ValueError: If value matches neither accepted format
        """
        text = value.strip('"')
        for fmt in (TIMESTAMP_FORMAT + ".%f", TIMESTAMP_FORMAT):
            try:
                return cls.from_datetime(datetime.strptime(text, fmt))
            except ValueError:
                continue
        try:
            parsed = datetime.strptime(_ALT_FRACTION.sub("Z", text), TIMESTAMP_FORMAT_ALT)
        except ValueError:
            raise ValueError(f"invalid timestamp format {value!r}") from None
        return cls.from_datetime(parsed)

    @classmethod
    def from_datetime(cls, value: datetime) -> "Timestamp":
        return cls(
            value.year, value.month, value.day,
            value.hour, value.minute, value.second, value.microsecond,
            tzinfo=value.tzinfo,
        )

    def format(self) -> str:
        """Render in CAM format; trailing zeros of the fraction are dropped."""
        text = self.strftime(TIMESTAMP_FORMAT)
        if self.microsecond:
            text += f".{self.microsecond:06d}".rstrip("0")
        return text

    def __str__(self) -> str:
        return self.format()

    @classmethod
    def _validate(cls, value: Any) -> "Timestamp":
        if isinstance(value, cls):
            return value
        if isinstance(value, datetime):
            return cls.from_datetime(value)
        if isinstance(value, str):
            return cls.parse(value)
        raise ValueError(f"invalid timestamp {value!r}")

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(
                lambda value: value.format(), when_used="json-unless-none"
            ),
        )


class URI(str):
    """
    URI string as used throughout the CAM API.

    A JSON null decodes to the empty URI, and every URI encodes as a string.
    """

    @property
    def parts(self) -> SplitResult:
        return urlsplit(self)

    def is_zero(self) -> bool:
        """Return True if the URI is unset or empty."""
        return not self

    @classmethod
    def _validate(cls, value: Any) -> "URI":
        if value is None:
            return cls("")
        if not isinstance(value, str):
            raise ValueError(f"invalid URI {value!r}")
        # urlsplit rejects malformed netlocs such as unbalanced IPv6 brackets
        urlsplit(value)
        return cls(value)

    @classmethod
    def __get_pydantic_core_schema__(
        cls, source: Any, handler: GetCoreSchemaHandler
    ) -> core_schema.CoreSchema:
        return core_schema.no_info_plain_validator_function(
            cls._validate,
            serialization=core_schema.plain_serializer_function_ser_schema(str),
        )


class CamModel(BaseModel):
    """Base for CAM resources; fields the model does not declare are ignored."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)
