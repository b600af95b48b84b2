"""
Provider Service.
"""

from clccam.schemas.providers import Provider
from clccam.services.base import BaseService

PROVIDERS_PATH = "/services/providers"


class ProviderService(BaseService):
    """Cloud provider accounts."""

    def list_providers(self) -> list[Provider]:
        return self._client.get(PROVIDERS_PATH, list[Provider])

    def get(self, provider_id: str) -> Provider:
        return self._client.get(f"{PROVIDERS_PATH}/{provider_id}", Provider)

    def delete(self, provider_id: str) -> None:
        self._client.delete(f"{PROVIDERS_PATH}/{provider_id}")
