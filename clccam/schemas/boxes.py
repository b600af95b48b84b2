"""
Box Schemas.

Boxes are the reusable deployment recipes of CAM.
"""

from typing import Any
from uuid import UUID

from pydantic import Field

from clccam.schemas.base import URI, CamModel, Timestamp
from clccam.schemas.blobs import BlobResponse
from clccam.schemas.enums import BoxEvent, Visibility

# A box having this schema identifies itself as a Script Box.
SCRIPT_BOX_SCHEMA = "http://elasticbox.net/schemas/boxes/script"


class Event(BlobResponse):
    """Script attached to a box event."""

    destination_path: str | None = None


class BasicVariable(CamModel):
    """Name/type/value triple, e.g. inside a service box."""

    name: str
    type: str = ""
    value: Any = ""

    def __str__(self) -> str:
        return f'{self.name}="{self.value}"'


class BoxVariable(BasicVariable):
    """Variable declared by a box."""

    options: str | None = None
    required: bool = False
    scope: str | None = None
    visibility: Visibility | None = None
    automatic_updates: str | None = None


class PricingInformation(CamModel):
    estimated_monthly: int = 0
    factor: int = 0
    hourly_price: int = 0
    provider_type: str = ""


class Volume(CamModel):
    delete_on_termination: bool = False
    device: str = ""
    size: int = 0
    type: str = ""


class Profile(CamModel):
    """Cloud-specific deployment details of a box."""

    cloud: str = ""
    elastic_ip: bool = False
    flavor: str = ""
    image: str = ""
    instances: int = 0
    keypair: str = ""
    location: str = ""
    managed_os: bool = False
    placement_group: str = ""
    pricing_info: PricingInformation | None = None
    role: str = ""
    schema_uri: URI = Field(default=URI(""), alias="schema")
    security_groups: list[str] = []
    subnet: str = ""
    volumes: list[Volume] = []


class ServiceBox(CamModel):
    """Box reference inside a service."""

    id: UUID
    latest: bool = False
    variables: list[BasicVariable] = []


class ServicePolicy(CamModel):
    requirements: list[str] = []
    variables: list[Any] = []


class Service(CamModel):
    """Service associated with a box."""

    name: str
    box: ServiceBox
    policy: ServicePolicy | None = None
    automatic_reconfiguration: bool = False
    automatic_updates: str = ""
    tags: list[str] = []


class WorkSpaceMember(CamModel):
    role: str
    workspace: str


class LifeSpan(CamModel):
    operation: str = ""


class IconMetadata(CamModel):
    border: str = ""
    fill: str = ""
    image: URI = URI("")


class ActionButton(CamModel):
    icon: URI = URI("")
    label: str = ""
    ref: URI = URI("")


class VersionNumber(CamModel):
    major: int = 0
    minor: int = 0
    patch: int = 0

    def __str__(self) -> str:
        return f"{self.major}.{self.minor}.{self.patch}"

    def as_tuple(self) -> tuple[int, int, int]:
        return self.major, self.minor, self.patch


class BoxVersion(CamModel):
    """Version record, included in boxes returned by the versions call."""

    box: UUID | None = None
    number: VersionNumber = Field(default_factory=VersionNumber)
    workspace: str = ""
    description: str = ""

    def is_zero(self) -> bool:
        """Return True if the version carries no box and no number."""
        return self.box is None and self.number.as_tuple() == (0, 0, 0)


class Box(CamModel):
    """
    A CAM box.

    Only id, name and visibility are always present; the remaining fields
    depend on the box type and on the call that returned it.
    """

    id: UUID
    friendly_id: str | None = None
    name: str
    visibility: Visibility
    automatic_updates: str | None = None
    categories: list[str] = []
    claims: list[str] = []
    description: str = ""
    requirements: list[str] = []
    variables: list[BoxVariable] = []
    created: Timestamp | None = None
    updated: Timestamp | None = None
    deleted: Timestamp | None = None
    lifespan: LifeSpan | None = None
    uri: URI | None = None
    schema_uri: URI = Field(default=URI(""), alias="schema")
    members: list[WorkSpaceMember] = []
    organization: str = ""
    owner: str = ""
    draft_from: UUID | None = None
    events: dict[BoxEvent, Event] | None = None
    profile: Profile | None = None
    provider_id: UUID | None = None
    services: list[Service] | None = None
    template: BlobResponse | None = None
    type: str | None = None
    box_version: BoxVersion | None = Field(default=None, alias="version")
    readme: BlobResponse | None = None
    icon: str | None = None
    icon_metadata: IconMetadata | None = None
    action_button: ActionButton | None = None

    @property
    def version(self) -> VersionNumber:
        """Version number of the box; 0.0.0 when the box carries none."""
        if self.box_version is None:
            return VersionNumber()
        return self.box_version.number

    def is_script_box(self) -> bool:
        return self.schema_uri == SCRIPT_BOX_SCHEMA


class BoxBinding(CamModel):
    """Binding returned by the box bindings call."""

    id: UUID
    name: str
    icon: URI = URI("")
    uri: URI = URI("")
