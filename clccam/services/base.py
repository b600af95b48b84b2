"""
Base Service.

Base class for the CAM resource services. A service groups the calls of one
API resource and funnels them through a shared Client.

Usage:
    from clccam.services.base import BaseService

    class ProviderService(BaseService):
        def list_providers(self) -> list[Provider]:
            return self._client.get("/services/providers", list[Provider])
"""

from clccam.client.client import Client
from clccam.core.logging import get_logger


class BaseService:
    """
    Base class for all resource services.

    Subclasses call the engine through self._client and log through
    self._logger.
    """

    def __init__(self, client: Client) -> None:
        """
        Initialize the service with a configured client.

        Args:
            client: CAM client carrying the token and transport options
        """
        self._client = client
        self._logger = get_logger(self.__class__.__module__)

    @property
    def client(self) -> Client:
        """Get the underlying client."""
        return self._client
