"""
Workspace Schemas.

Workspaces are either personal (one user) or team workspaces shared by many
members and organizations.
"""

from typing import Any
from uuid import UUID

from pydantic import Field

from clccam.schemas.base import URI, CamModel, Timestamp

PERSONAL_WORKSPACE_SCHEMA = "http://elasticbox.net/schemas/workspaces/personal"
TEAM_WORKSPACE_SCHEMA = "http://elasticbox.net/schemas/workspaces/team"


class WorkSpace(CamModel):
    id: str
    uri: URI = URI("")
    add_provider: bool = False
    costcenter: UUID | None = None
    created: Timestamp | None = None
    updated: Timestamp | None = None
    last_login: Timestamp | None = None
    deleted: Any = None
    deploy_instance: bool = False
    favorites: list[Any] = []
    group_dns: list[Any] = []
    icon: Any = None
    name: str = ""
    last_name: str = ""
    organization: str = ""
    saml_id: str = ""
    email: str = ""
    email_validated_at: Timestamp | None = None
    schema_uri: URI = Field(default=URI(""), alias="schema")
    support_user_created: bool = False
    take_tour: bool = False
    type: str = ""

    @property
    def is_personal(self) -> bool:
        return self.schema_uri == PERSONAL_WORKSPACE_SCHEMA
