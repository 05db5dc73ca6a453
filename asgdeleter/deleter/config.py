"""Shared deletion settings."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Callable

from asgdeleter.deleter.audit import log_delete_error
from asgdeleter.models.resource import ResourceType

# Prefix for progress notices of actions skipped in dry-run mode
DRY_RUN_PREFIX = "(dry-run)"

ErrorReporter = Callable[[ResourceType, str, Exception], None]


@dataclass(frozen=True)
class DeleteConfig:
    """Settings shared by every deleter in one run.

    Attributes:
        dry_run: Print intended deletions without calling AWS
        ignore_errors: Keep going after a failed delete instead of aborting the batch
        backoff_time: Seconds to sleep before every real delete call
        error_reporter: Called with (resource_type, resource_name, error) for each failed delete
    """

    dry_run: bool = False
    ignore_errors: bool = False
    backoff_time: float = 0.0
    error_reporter: ErrorReporter = log_delete_error

    def __post_init__(self) -> None:
        if self.backoff_time < 0:
            raise ValueError("backoff_time cannot be negative")
