"""
Workspace and Organization Services.
"""

from clccam.schemas.organization import Organization
from clccam.schemas.workspaces import WorkSpace
from clccam.services.base import BaseService


class WorkspaceService(BaseService):
    """Personal and team workspaces."""

    def list_workspaces(self) -> list[WorkSpace]:
        """Return all workspaces accessible to the user."""
        return self._client.get("/services/workspaces", list[WorkSpace])

    def get(self, workspace_id: str) -> WorkSpace:
        return self._client.get(f"/services/workspaces/{workspace_id}", WorkSpace)


class OrganizationService(BaseService):

    def get(self, name: str) -> Organization:
        """Return the organization schema of name."""
        return self._client.get(f"/services/organizations/{name}", Organization)
