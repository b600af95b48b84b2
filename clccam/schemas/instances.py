"""
Instance Schemas.

Instances are deployments of boxes; each instance has one service, which in
turn runs on zero or more machines.
"""

from typing import Any
from uuid import UUID

from pydantic import Field

from clccam.schemas.base import URI, CamModel, Timestamp
from clccam.schemas.boxes import BasicVariable, Box, PricingInformation, Profile
from clccam.schemas.enums import BoxEvent, InstanceOp, InstanceState


class WorkflowAction(CamModel):
    box: str = ""
    event: str = ""
    script: URI = URI("")


class Machine(CamModel):
    """VM within an instance's service."""

    name: str
    state: InstanceState | None = None
    workflow: list[WorkflowAction] = []


class InstanceOperationSummary(CamModel):
    """Last operation performed on an instance."""

    created: Timestamp | None = None
    event: InstanceOp | None = None
    workspace: str = ""


class InstanceServiceSummary(CamModel):
    id: str = ""
    machines: list[Machine] = []
    type: str = ""


class InstanceBindingRef(CamModel):
    instance: str = ""
    name: str = ""


class PricingHistoryEntry(CamModel):
    start: Timestamp | None = Field(default=None, alias="from")
    pricing_info: PricingInformation | None = None


class Instance(CamModel):
    """A deployed instance."""

    id: str
    uri: str = ""
    name: str = ""
    owner: str = ""
    created: Timestamp | None = None
    terminated: Timestamp | None = None
    updated: Timestamp | None = None
    members: list[Any] = []
    operation: InstanceOperationSummary | None = None
    service: InstanceServiceSummary = Field(default_factory=InstanceServiceSummary)
    tags: list[str] = []
    state: InstanceState | None = None
    automatic_reconfiguration: bool = False
    automatic_updates: str = ""
    bindings: list[InstanceBindingRef] = []
    box: UUID | None = None
    boxes: list[Box] = []
    policy_box: Box | None = None
    deleted: Any = None
    description: str = ""
    is_deploy_only: bool = False
    pricing_history: list[PricingHistoryEntry] = []
    schema_uri: URI = Field(default=URI(""), alias="schema")
    variables: list[Any] = []


class MachineAddress(CamModel):
    """IP addresses of a machine."""

    private: str = ""
    public: str | None = None

    def __str__(self) -> str:
        if self.public:
            return f"{self.public} ({self.private})"
        if not self.private:
            return "n/a"
        return self.private


class ServiceMachine(CamModel):
    """Machine details as reported by the instance service call."""

    address: MachineAddress = Field(default_factory=MachineAddress)
    agent_version: str | None = None
    external_id: str = ""
    hostname: str = ""
    last_agent_close: Timestamp | None = None
    last_agent_ping: Timestamp | None = None
    name: str = ""
    schema_uri: str = Field(default="", alias="schema")
    state: InstanceState | None = None
    support_id: str = ""
    token: UUID | None = None


class StateHistoryEntry(CamModel):
    state: str = ""
    started: Timestamp | None = None
    completed: Timestamp | None = None


class InstanceService(CamModel):
    """Service associated with an instance."""

    id: str
    type: str = ""
    clc_alias: str = ""
    organization: str = ""
    provider_id: UUID | None = None
    created: Timestamp | None = None
    updated: Timestamp | None = None
    deleted: Any = None
    operation: InstanceOp | None = None
    state: InstanceState | None = None
    machines: list[ServiceMachine] = []
    state_history: list[StateHistoryEntry] = []
    profile: Profile | None = None
    tags: list[Any] = []
    variables: list[Any] = []
    # JTI of the service token used by the service
    token: UUID | None = None
    schema_uri: URI = Field(default=URI(""), alias="schema")
    icon: str = ""


class InstanceActivity(CamModel):
    """Single activity log entry of an instance."""

    box: str = ""
    created: Timestamp | None = None
    finished: Timestamp | None = None
    event: BoxEvent | None = None
    exit_code: int = 0
    level: str = ""
    machine: str = ""
    request_id: UUID | None = None
    text: str = ""


class BoundBox(CamModel):
    name: str = ""
    version: UUID | None = None


class BindingProfile(CamModel):
    autoscalable: bool = False
    cloud: str = ""
    flavor: str = ""
    image: str = ""
    instances: int = 0
    keypair: str = ""
    location: str = ""
    schema_uri: URI = Field(default=URI(""), alias="schema")
    security_group: str = ""
    subnet: str = ""


class BindingInstance(CamModel):
    bindings: list[Any] = []
    box: BoundBox | None = None
    path: str = ""
    profile: BindingProfile | None = None
    provider: str = ""
    variables: list[BasicVariable] = []


class InstanceBinding(CamModel):
    """Deployment profile returned by the instance bindings call."""

    id: str
    box: BoundBox | None = None
    created: Timestamp | None = None
    default_stamp: float = 0.0
    instances: list[BindingInstance] = []
    members: list[str] = []
    name: str = ""
    owner: str = ""
    schema_uri: URI = Field(default=URI(""), alias="schema")
    updated: Timestamp | None = None
    uri: URI = URI("")


class InstanceOperation(CamModel):
    """Operation recorded for an instance, with its activities."""

    id: str
    activity: list[InstanceActivity] = []
    created: Timestamp | None = None
    deleted: Any = None
    instance: str = ""
    operation: InstanceOp | None = None
    request_id: UUID | None = None
    schema_uri: URI = Field(default=URI(""), alias="schema")
    state: InstanceState | None = None
    instance_state: InstanceState | None = None
    updated: Timestamp | None = None
    username: str = ""
    workspace: str = ""
