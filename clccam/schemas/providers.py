"""
Provider Schemas.
"""

from typing import Any
from uuid import UUID

from pydantic import Field

from clccam.schemas.base import URI, CamModel, Timestamp


class ProviderLocation(CamModel):
    clusters: list[Any] = []


class ProviderService(CamModel):
    name: str = ""
    locations: list[ProviderLocation] = []


class Provider(CamModel):
    """
    Cloud provider account registered in CAM.

    The type identifies the cloud, e.g. "Amazon Web Services" or "VMware vSphere".
    """

    id: UUID
    name: str = ""
    owner: str = ""
    members: list[Any] = []
    created: Timestamp | None = None
    updated: Timestamp | None = None
    description: str = ""
    credentials: dict[str, Any] = {}
    icon: URI = URI("")
    services: list[ProviderService] = []
    state: str = ""
    type: str = ""
    uri: URI = URI("")
    schema_uri: URI = Field(default=URI(""), alias="schema")
