"""IAM instance profile deleter."""

from __future__ import annotations

import logging
from typing import Any, Collection

from asgdeleter.deleter.base import ResourceDeleter
from asgdeleter.deleter.pagination import list_all
from asgdeleter.models.resource import ResourceType

logger = logging.getLogger(__name__)


def list_instance_profiles_by_name(iam_client: Any, names: Collection[str]) -> list[dict[str, Any]]:
    """List instance profiles whose name is in names.

    IAM has no describe-by-names call for instance profiles, so the full
    listing is paged through and filtered locally.

    Args:
        iam_client: boto3 IAM client
        names: Wanted instance profile names

    Returns:
        Matching instance profiles in listing order
    """
    if not names:
        return []

    wanted = set(names)
    profiles = list_all(iam_client, "list_instance_profiles", "InstanceProfiles")
    return [p for p in profiles if p.get("InstanceProfileName") in wanted]


class InstanceProfileDeleter(ResourceDeleter):
    """Deleter for IAM instance profiles.

    Roles are detached from a profile before it is deleted, since IAM refuses
    to delete a profile that still holds a role.
    """

    resource_type = ResourceType.INSTANCE_PROFILE
    service_name = "iam"

    def request_resources(self) -> list[dict[str, Any]]:
        return list_instance_profiles_by_name(self.client, self.resource_names)

    def delete_resource(self, name: str) -> None:
        response = self.client.get_instance_profile(InstanceProfileName=name)
        for role in response["InstanceProfile"].get("Roles", []):
            logger.debug(f"Removing role {role['RoleName']} from instance profile {name}")
            self.client.remove_role_from_instance_profile(
                InstanceProfileName=name,
                RoleName=role["RoleName"],
            )

        self.client.delete_instance_profile(InstanceProfileName=name)
