"""
Box Service.

Calls of the CAM boxes API.
"""

from typing import Any

from clccam.core.exceptions import APIError, ConfigurationError, DecodeError
from clccam.schemas.boxes import Box, BoxBinding
from clccam.services.base import BaseService

BOXES_PATH = "/services/boxes"
APPLIANCE_BOXES_PATH = "/services/appliance/boxes"


class BoxService(BaseService):
    """Boxes accessible to the token user."""

    def list_boxes(self) -> list[Box]:
        """List all boxes accessible in the personal workspace of the user."""
        return self._client.get(BOXES_PATH, list[Box])

    def get(self, box_id: str) -> Box:
        """
        Return the details of a box.

        The newest version is preferred; boxes without versions are
        fetched directly.
        """
        try:
            versions = self.versions(box_id)
        except (APIError, DecodeError) as e:
            self._logger.debug(
                "Box versions unavailable",
                extra={"box_id": box_id, "error": str(e)},
            )
        else:
            if versions:
                return versions[0]
        return self._client.get(f"{BOXES_PATH}/{box_id}", Box)

    def stack(self, box_id: str) -> list[Box]:
        return self._client.get(f"{BOXES_PATH}/{box_id}/stack", list[Box])

    def bindings(self, box_id: str) -> list[BoxBinding]:
        return self._client.get(f"{BOXES_PATH}/{box_id}/bindings", list[BoxBinding])

    def versions(self, box_id: str) -> list[Box]:
        return self._client.get(f"{BOXES_PATH}/{box_id}/versions", list[Box])

    def diff(self, box_id: str) -> dict[str, Any]:
        """Return the differences of a box as the raw JSON object CAM reports."""
        return self._client.get(f"{BOXES_PATH}/{box_id}/diff", dict[str, Any])

    def upload(self, box: Box, box_id: str | None = None) -> Box:
        """
        Create a box, or replace box_id if given.

        Returns:
            The stored box, with server-side fields filled in
        """
        if box_id:
            return self._client.put(f"{BOXES_PATH}/{box_id}", box, Box)
        return self._client.post(f"{BOXES_PATH}/", box, Box)

    def upload_appliance(self, box: Box, update: bool = False) -> Box:
        """
        Create or update an appliance box, addressed by its own ID.

        Raises:
            ConfigurationError: If the box has a nil ID
        """
        if box.id.int == 0:
            raise ConfigurationError("attempt to upload Appliance Box without ID")
        path = f"{APPLIANCE_BOXES_PATH}/{box.id}"
        if update:
            return self._client.put(path, box, Box)
        return self._client.post(path, box, Box)

    def delete(self, box_id: str) -> None:
        self._client.delete(f"{BOXES_PATH}/{box_id}")
