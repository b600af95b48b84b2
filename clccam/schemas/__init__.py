"""
CAM data models.
"""

from clccam.schemas.base import URI, CamModel, Timestamp
from clccam.schemas.blobs import BlobResponse
from clccam.schemas.boxes import (
    Box,
    BoxBinding,
    BoxVariable,
    BoxVersion,
    Event,
    LifeSpan,
    Profile,
    Service,
)
from clccam.schemas.enums import (
    BoxEvent,
    CamEnum,
    InstanceEvent,
    InstanceOp,
    InstanceState,
    Visibility,
)
from clccam.schemas.instances import (
    Instance,
    InstanceActivity,
    InstanceBinding,
    InstanceOperation,
    InstanceService,
    Machine,
    MachineAddress,
)
from clccam.schemas.organization import Organization
from clccam.schemas.providers import Provider
from clccam.schemas.workspaces import WorkSpace

__all__ = [
    "URI",
    "BlobResponse",
    "Box",
    "BoxBinding",
    "BoxEvent",
    "BoxVariable",
    "BoxVersion",
    "CamEnum",
    "CamModel",
    "Event",
    "Instance",
    "InstanceActivity",
    "InstanceBinding",
    "InstanceEvent",
    "InstanceOp",
    "InstanceOperation",
    "InstanceService",
    "InstanceState",
    "LifeSpan",
    "Machine",
    "MachineAddress",
    "Organization",
    "Profile",
    "Provider",
    "Service",
    "Timestamp",
    "Visibility",
    "WorkSpace",
]
