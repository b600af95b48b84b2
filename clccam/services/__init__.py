"""
CAM resource services.
"""

from clccam.services.base import BaseService
from clccam.services.blobs import BlobService
from clccam.services.boxes import BoxService
from clccam.services.instances import InstanceService
from clccam.services.providers import ProviderService
from clccam.services.workspaces import OrganizationService, WorkspaceService

__all__ = [
    "BaseService",
    "BlobService",
    "BoxService",
    "InstanceService",
    "OrganizationService",
    "ProviderService",
    "WorkspaceService",
]
