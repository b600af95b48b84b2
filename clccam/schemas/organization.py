"""
Organization Schemas.
"""

from typing import Any
from uuid import UUID

from pydantic import Field

from clccam.schemas.base import URI, CamModel


class Theme(CamModel):
    accent: Any = None
    css: URI = URI("")
    logo: URI = URI("")


class Organization(CamModel):
    """Data associated with a CAM organization."""

    name: str
    clc_alias: str = ""
    account_status: str = ""
    account_type: str = ""
    billing_account_number: Any = None
    remedy_account_id: Any = None
    default_costcenter: UUID | None = None
    display_name: str | None = None
    domains: list[str] = []
    federated_to: list[str] = []
    # Release version, e.g. "4.0"
    release: str = ""
    schema_uri: URI = Field(default=URI(""), alias="schema")
    theme: Theme | None = None
    icon: URI = URI("")
    vantive_id: Any = None
