"""Resource kinds and name collections."""

from __future__ import annotations

from enum import Enum
from typing import List


class ResourceType(Enum):
    """Resource kinds handled by the deleters."""

    AUTO_SCALING_GROUP = "AWS::AutoScaling::AutoScalingGroup"
    LAUNCH_CONFIGURATION = "AWS::AutoScaling::LaunchConfiguration"
    INSTANCE_PROFILE = "AWS::IAM::InstanceProfile"

    @property
    def display_name(self) -> str:
        """Short name used in progress notices (e.g., "AutoScalingGroup")."""
        return self.value.rsplit("::", 1)[-1]

    def __str__(self) -> str:
        return self.value


# Insertion ordered, duplicates allowed. Only ever appended to.
ResourceNames = List[str]
