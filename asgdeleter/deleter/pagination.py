"""Paginated describe and list calls.

Both helpers are all-or-nothing: a failed page propagates and pages already
collected are dropped.
"""

from __future__ import annotations

import logging
from typing import Any, Sequence

logger = logging.getLogger(__name__)


def describe_by_names(
    client: Any,
    operation_name: str,
    names_param: str,
    result_key: str,
    names: Sequence[str],
) -> list[dict[str, Any]]:
    """Describe resources by name across every page.

    Args:
        client: boto3 client
        operation_name: Paginated describe operation (e.g., "describe_auto_scaling_groups")
        names_param: Request parameter holding the name list
        result_key: Response key holding the records
        names: Names to describe

    Returns:
        Records from every page in provider order, or [] if names is empty
    """
    if not names:
        return []

    paginator = client.get_paginator(operation_name)

    records: list[dict[str, Any]] = []
    for page in paginator.paginate(**{names_param: list(names)}):
        records.extend(page.get(result_key, []))

    logger.debug(f"{operation_name}: {len(records)} {result_key} for {len(names)} names")
    return records


def list_all(client: Any, operation_name: str, result_key: str) -> list[dict[str, Any]]:
    """List every resource of a kind across every page.

    Args:
        client: boto3 client
        operation_name: Paginated list operation (e.g., "list_instance_profiles")
        result_key: Response key holding the records

    Returns:
        Records from every page in provider order
    """
    paginator = client.get_paginator(operation_name)

    records: list[dict[str, Any]] = []
    for page in paginator.paginate():
        records.extend(page.get(result_key, []))

    logger.debug(f"{operation_name}: {len(records)} {result_key}")
    return records
