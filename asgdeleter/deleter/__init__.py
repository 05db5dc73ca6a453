"""Resource deleters.

Classes:
    AutoScalingGroupDeleter: Enumerates and deletes auto scaling groups
    LaunchConfigurationDeleter: Enumerates and deletes launch configurations,
        and resolves the instance profiles they reference
    InstanceProfileDeleter: Enumerates and deletes IAM instance profiles
    DeleteConfig: Shared per-run deletion settings
    DeleteErrorLog: Error reporter collecting failed deletions
"""

from __future__ import annotations

from asgdeleter.deleter.audit import AuditStorage, DeleteErrorLog
from asgdeleter.deleter.autoscaling import AutoScalingGroupDeleter, LaunchConfigurationDeleter
from asgdeleter.deleter.config import DeleteConfig
from asgdeleter.deleter.iam import InstanceProfileDeleter

__all__ = [
    "AuditStorage",
    "AutoScalingGroupDeleter",
    "DeleteConfig",
    "DeleteErrorLog",
    "InstanceProfileDeleter",
    "LaunchConfigurationDeleter",
]
