"""Instance profile reference parsing."""

from __future__ import annotations

from typing import Optional

ARN_PREFIX = "arn:"
INSTANCE_PROFILE_MARKER = "instance-profile/"


def normalize_instance_profile_reference(reference: Optional[str]) -> Optional[str]:
    """Return the bare instance profile name for a launch configuration reference.

    Launch configurations store IamInstanceProfile as either a name or an ARN
    such as "arn:aws:iam::123456789012:instance-profile/web". Names pass
    through unchanged; ARNs are reduced to the part after "instance-profile/".

    Args:
        reference: IamInstanceProfile value (may be None)

    Returns:
        Instance profile name, or None if the reference is missing or an ARN
        that does not name an instance profile
    """
    if not reference:
        return None

    if not reference.startswith(ARN_PREFIX):
        return reference

    parts = reference.split(INSTANCE_PROFILE_MARKER)
    if len(parts) != 2 or not parts[1]:
        return None

    return parts[1]
