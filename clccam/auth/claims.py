"""
CAM Token Claims.

Subset of the fields carried in the payload of a CAM bearer token. There are
two kinds of token, each with its own set of fields:

    user    - sub, name, organization
    service - instance, service, machine

A zero expiry marks a permanent token.
"""

from datetime import datetime
from typing import Literal
from uuid import UUID

import pendulum
from pydantic import Field, model_validator

from clccam.schemas.base import CamModel

USER_FIELDS = ("subject", "name", "organization")
SERVICE_FIELDS = ("instance_id", "service_id", "machine_id")


class Claims(CamModel):
    """
    Decoded CAM token payload.

    Attributes:
        type: Token type, "user" or "service"
        exp: Unix expiration time, 0 if the token never expires
        iat: Unix issue time
        jti: Unique token ID
        subject: CAM username (user tokens)
        name: Full name (user tokens)
        organization: Organization name (user tokens)
        instance_id: Instance ID, e.g. "i-z48wub" (service tokens)
        service_id: Service ID, e.g. "eb-1cm83" (service tokens)
        machine_id: Machine name (service tokens)
    """

    type: Literal["user", "service"]
    exp: int = 0
    iat: int = 0
    jti: UUID | None = None

    subject: str = Field(default="", alias="sub")
    name: str = ""
    organization: str = ""

    instance_id: str = Field(default="", alias="instance")
    service_id: str = Field(default="", alias="service")
    machine_id: str = Field(default="", alias="machine")

    @model_validator(mode="after")
    def check_type_fields(self) -> "Claims":
        """Each token type carries its own fields and none of the other type's."""
        if self.type == "user":
            required, foreign = "subject", SERVICE_FIELDS
        else:
            required, foreign = "service_id", USER_FIELDS

        if not getattr(self, required):
            raise ValueError(f"{self.type} token without {self._alias(required)!r} claim")
        present = [self._alias(field) for field in foreign if getattr(self, field)]
        if present:
            raise ValueError(f"{self.type} token with unexpected claims {', '.join(present)}")
        return self

    @classmethod
    def _alias(cls, field: str) -> str:
        return cls.model_fields[field].alias or field

    def is_permanent(self) -> bool:
        """Return True if the token never expires."""
        return self.exp == 0

    def expired(self) -> bool:
        """Return True if the token has a non-zero expiry in the past."""
        return not self.is_permanent() and pendulum.now("UTC").int_timestamp > self.exp

    def expires(self) -> datetime | None:
        """Expiration time (UTC), None for permanent tokens."""
        if self.is_permanent():
            return None
        return pendulum.from_timestamp(self.exp)

    def issued(self) -> datetime:
        """Issue time (UTC)."""
        return pendulum.from_timestamp(self.iat)

    def __str__(self) -> str:
        if self.type == "user":
            text = f'CAM user token for "{self.subject}" ({self.name} at {self.organization})'
        else:
            text = f"CAM token for service {self.service_id} on {self.instance_id}/{self.machine_id}"

        if self.is_permanent():
            return "Permanent " + text
        when = pendulum.from_timestamp(self.exp).diff_for_humans()
        if self.expired():
            return f"{text}, expired {when}"
        return f"{text}, expires {when}"
