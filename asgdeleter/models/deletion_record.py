"""Deletion record model.

A delete call that failed for one named resource.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime
from typing import Any, Optional

from botocore.exceptions import ClientError

from asgdeleter.models.resource import ResourceType


@dataclass
class DeletionRecord:
    """Failed deletion record entity.

    Attributes:
        resource_type: Kind of the resource
        resource_name: Name the delete call was issued for
        timestamp: When deletion was attempted (UTC)
        error_code: AWS error code, or the exception class name
        error_message: Human-readable error (optional)
    """

    resource_type: ResourceType
    resource_name: str
    timestamp: datetime
    error_code: str
    error_message: Optional[str] = None

    @classmethod
    def from_error(cls, resource_type: ResourceType, resource_name: str, error: Exception) -> "DeletionRecord":
        """Build a record from the exception raised by a delete call.

        ClientError responses contribute their AWS error code and message;
        any other exception is recorded under its class name.
        """
        if isinstance(error, ClientError):
            error_code = error.response.get("Error", {}).get("Code", "Unknown")
            error_message = error.response.get("Error", {}).get("Message", str(error))
        else:
            error_code = type(error).__name__
            error_message = str(error)

        return cls(
            resource_type=resource_type,
            resource_name=resource_name,
            timestamp=datetime.utcnow(),
            error_code=error_code,
            error_message=error_message,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialize record for audit storage."""
        return {
            "resource_type": self.resource_type.value,
            "resource_name": self.resource_name,
            "timestamp": self.timestamp.isoformat() + "Z",
            "error_code": self.error_code,
            "error_message": self.error_message,
        }
