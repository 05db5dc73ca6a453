"""Auto scaling group and launch configuration deleters."""

from __future__ import annotations

import logging
from typing import Any, Optional

from asgdeleter.aws.client import create_boto_client
from asgdeleter.deleter.base import ResourceDeleter
from asgdeleter.deleter.iam import list_instance_profiles_by_name
from asgdeleter.deleter.pagination import describe_by_names
from asgdeleter.deleter.references import normalize_instance_profile_reference
from asgdeleter.models.resource import ResourceType

logger = logging.getLogger(__name__)

# Instances of a force-deleted group keep terminating after the call returns
AUTO_SCALING_GROUP_COOLDOWN = 30.0


class AutoScalingGroupDeleter(ResourceDeleter):
    """Deleter for auto scaling groups.

    Groups are force deleted, terminating their instances, and the batch ends
    with a fixed cooldown so launch configurations can be deleted afterwards.
    """

    resource_type = ResourceType.AUTO_SCALING_GROUP
    service_name = "autoscaling"
    post_delete_cooldown = AUTO_SCALING_GROUP_COOLDOWN

    def request_resources(self) -> list[dict[str, Any]]:
        return describe_by_names(
            self.client,
            "describe_auto_scaling_groups",
            "AutoScalingGroupNames",
            "AutoScalingGroups",
            self.resource_names,
        )

    def delete_resource(self, name: str) -> None:
        self.client.delete_auto_scaling_group(AutoScalingGroupName=name, ForceDelete=True)


class LaunchConfigurationDeleter(ResourceDeleter):
    """Deleter for launch configurations.

    Also resolves the IAM instance profiles referenced by the queued launch
    configurations, which IAM cannot look up by launch configuration.
    """

    resource_type = ResourceType.LAUNCH_CONFIGURATION
    service_name = "autoscaling"

    def __init__(self, *args: Any, iam_client: Optional[Any] = None, **kwargs: Any) -> None:
        super().__init__(*args, **kwargs)
        self._iam_client = iam_client

    @property
    def iam_client(self) -> Any:
        """IAM client used for instance profile lookups, created on first access."""
        if self._iam_client is None:
            self._iam_client = create_boto_client(
                service_name="iam",
                region_name=self.region,
                profile_name=self.profile,
            )
        return self._iam_client

    def request_resources(self) -> list[dict[str, Any]]:
        return describe_by_names(
            self.client,
            "describe_launch_configurations",
            "LaunchConfigurationNames",
            "LaunchConfigurations",
            self.resource_names,
        )

    def delete_resource(self, name: str) -> None:
        self.client.delete_launch_configuration(LaunchConfigurationName=name)

    def request_instance_profile_names(
        self, launch_configurations: Optional[list[dict[str, Any]]] = None
    ) -> set[str]:
        """Collect instance profile names referenced by launch configurations.

        Launch configurations without a profile, or whose profile ARN cannot be
        parsed, are skipped.

        Args:
            launch_configurations: Already described launch configurations
                (default: describe the queued names)

        Raises:
            ClientError: If describing launch configurations fails
        """
        if launch_configurations is None:
            launch_configurations = self.request_resources()

        names: set[str] = set()
        for lc in launch_configurations:
            name = normalize_instance_profile_reference(lc.get("IamInstanceProfile"))
            if name is None:
                if lc.get("IamInstanceProfile"):
                    logger.debug(
                        f"Skipping unparseable instance profile reference "
                        f"{lc['IamInstanceProfile']} on {lc.get('LaunchConfigurationName')}"
                    )
                continue
            names.add(name)
        return names

    def request_instance_profiles(
        self, launch_configurations: Optional[list[dict[str, Any]]] = None
    ) -> list[dict[str, Any]]:
        """Request the instance profiles referenced by the queued launch configurations.

        Args:
            launch_configurations: Already described launch configurations
                (default: describe the queued names)

        Returns:
            Instance profiles in IAM listing order, [] if no names are queued

        Raises:
            ClientError: If describing launch configurations or listing profiles fails
        """
        if not self.resource_names:
            return []

        wanted = self.request_instance_profile_names(launch_configurations)
        return list_instance_profiles_by_name(self.iam_client, wanted)
