"""
Instance Service.

Calls of the CAM instances API: queries and lifecycle actions.
"""

from clccam.client.options import query
from clccam.core.exceptions import ConfigurationError
from clccam.schemas.instances import (
    Instance,
    InstanceActivity,
    InstanceBinding,
    InstanceOperation,
    InstanceService as InstanceServiceModel,
)
from clccam.services.base import BaseService

INSTANCES_PATH = "/services/instances"

# Operations accepted by DELETE /services/instances/{id}
DELETE_OPERATIONS = ("terminate", "force_terminate", "delete")


class InstanceService(BaseService):
    """Instances owned by the token user."""

    def list_instances(self) -> list[Instance]:
        return self._client.get(INSTANCES_PATH, list[Instance])

    def get(self, instance_id: str) -> Instance:
        return self._client.get(f"{INSTANCES_PATH}/{instance_id}", Instance)

    def service(self, instance_id: str) -> InstanceServiceModel:
        """Return the service of an instance, with its machines and state history."""
        return self._client.get(f"{INSTANCES_PATH}/{instance_id}/service", InstanceServiceModel)

    def activity(self, instance_id: str, op: str | None = None) -> list[InstanceActivity]:
        """
        Return the activity log of an instance.

        Args:
            instance_id: Instance ID, e.g. "i-z48wub"
            op: Only report activities of this operation
        """
        options = [query({"operation": op})] if op else []
        return self._client.get(
            f"{INSTANCES_PATH}/{instance_id}/activity", list[InstanceActivity], *options
        )

    def machine_logs(self, instance_id: str, machine: str) -> str:
        """Return the log output of one machine of an instance."""
        return self._client.get(
            f"{INSTANCES_PATH}/{instance_id}/machine_logs", str, query({"machine_name": machine})
        )

    def bindings(self, instance_id: str) -> list[InstanceBinding]:
        return self._client.get(f"{INSTANCES_PATH}/{instance_id}/bindings", list[InstanceBinding])

    def operations(self, instance_id: str) -> list[InstanceOperation]:
        """Return the operations recorded for an instance, including their activities."""
        return self._client.get(
            f"{INSTANCES_PATH}/{instance_id}/operations", list[InstanceOperation]
        )

    def _action(self, instance_id: str, action: str, body: object = None, *options) -> None:
        self._client.put(f"{INSTANCES_PATH}/{instance_id}/{action}", body, None, *options)
        self._logger.info(
            "Instance action submitted",
            extra={"instance_id": instance_id, "action": action},
        )

    def deploy(self, instance_id: str) -> None:
        """Re-deploy an existing instance."""
        self._action(instance_id, "deploy")

    def power_on(self, instance_id: str) -> None:
        self._action(instance_id, "poweron")

    def shutdown(self, instance_id: str) -> None:
        self._action(instance_id, "shutdown")

    def reinstall(self, instance_id: str) -> None:
        self._action(instance_id, "reinstall")

    def reconfigure(self, instance_id: str) -> None:
        self._action(instance_id, "reconfigure", {"id": instance_id, "method": "reconfigure"})

    def import_(self, instance_id: str) -> None:
        """Try to (re-)import an unregistered instance."""
        self._action(instance_id, "import")

    def cancel_import(self, instance_id: str) -> None:
        """Cancel a failed import of an unregistered instance."""
        self._action(instance_id, "cancel_import")

    def make_managed(self, instance_id: str) -> None:
        """Delegate management of the instance's OS, accepting the terms."""
        self._action(instance_id, "make_managed_os", None, query({"accept_terms": "true"}))

    def delete(self, instance_id: str, op: str = "delete") -> None:
        """
        Terminate, force-terminate or delete an instance.

        Raises:
            ConfigurationError: If op is not one of DELETE_OPERATIONS
        """
        if op not in DELETE_OPERATIONS:
            raise ConfigurationError(f"invalid operation {op!r}")
        self._client.delete(f"{INSTANCES_PATH}/{instance_id}", None, query({"operation": op}))
        self._logger.info(
            "Instance action submitted",
            extra={"instance_id": instance_id, "action": op},
        )
