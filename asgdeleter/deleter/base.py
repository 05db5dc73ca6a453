"""Base deleter with the shared batch deletion loop."""

from __future__ import annotations

import json
import logging
import time
from abc import ABC, abstractmethod
from typing import Any, Iterable, Optional

from botocore.exceptions import BotoCoreError, ClientError
from rich.console import Console

from asgdeleter.aws.client import create_boto_client
from asgdeleter.deleter.config import DRY_RUN_PREFIX, DeleteConfig
from asgdeleter.models.resource import ResourceNames, ResourceType

logger = logging.getLogger(__name__)


def make_progress_console(quiet: bool = False) -> Console:
    """Console for progress notices.

    Emoji codes and highlighting are off and lines never wrap, so resource
    names print exactly as given.
    """
    return Console(highlight=False, emoji=False, soft_wrap=True, quiet=quiet)


class ResourceDeleter(ABC):
    """Deleter for one resource kind.

    Subclasses name the kind, the boto3 service they talk to, and how a single
    resource is described and deleted. The batch loop in delete_resources() is
    shared so dry-run, backoff and error policy behave the same for every kind.

    Attributes:
        resource_names: Names queued for this deleter, in insertion order
        region: AWS region for the lazily created client (optional)
        profile: AWS profile for the lazily created client (optional)
        console: Progress channel for dry-run and success notices
    """

    resource_type: ResourceType
    service_name: str
    # Seconds to wait after a real batch so AWS can tear down dependents
    post_delete_cooldown: Optional[float] = None

    def __init__(
        self,
        client: Optional[Any] = None,
        region: Optional[str] = None,
        profile: Optional[str] = None,
        console: Optional[Console] = None,
    ) -> None:
        """Initialize deleter.

        Args:
            client: boto3 client to use instead of creating one on first use
            region: AWS region (optional)
            profile: AWS profile name (optional)
            console: Rich console for progress notices (default: stdout)
        """
        self._client = client
        self.region = region
        self.profile = profile
        self.console = console or make_progress_console()
        self.resource_names: ResourceNames = []

    def __str__(self) -> str:
        return json.dumps({"Type": self.resource_type.value, "Names": self.resource_names})

    @property
    def client(self) -> Any:
        """boto3 client, created on first access and reused afterwards."""
        if self._client is None:
            self._client = create_boto_client(
                service_name=self.service_name,
                region_name=self.region,
                profile_name=self.profile,
            )
        return self._client

    def _notify(self, *parts: str) -> None:
        self.console.print(*parts, markup=False, emoji=False, highlight=False, soft_wrap=True)

    def add_resource_names(self, *names: str) -> None:
        """Queue resource names for enumeration and deletion."""
        self.resource_names.extend(names)

    def extend_resource_names(self, names: Iterable[str]) -> None:
        self.resource_names.extend(names)

    @abstractmethod
    def request_resources(self) -> list[dict[str, Any]]:
        """Describe the queued resources.

        Returns:
            Resource records from AWS, [] if no names are queued

        Raises:
            ClientError: If any describe call fails
        """

    @abstractmethod
    def delete_resource(self, name: str) -> None:
        """Issue the delete call(s) for a single resource.

        Raises:
            ClientError: If AWS rejects the deletion
        """

    def delete_resources(self, cfg: DeleteConfig) -> None:
        """Delete every queued resource.

        Names are processed one at a time in insertion order. In dry-run mode
        each deletion is only announced. Otherwise the deleter sleeps
        cfg.backoff_time before every call. A failed call is passed to
        cfg.error_reporter, then either skipped (cfg.ignore_errors) or
        re-raised, leaving the remaining names untouched.

        Args:
            cfg: Settings shared by every deleter in this run

        Raises:
            ClientError: The first failed deletion when cfg.ignore_errors is False
            BotoCoreError: Same, for errors raised below the API layer
        """
        if not self.resource_names:
            return

        fmt_str = f"Deleted {self.resource_type.display_name}"

        for name in self.resource_names:
            if cfg.dry_run:
                self._notify(DRY_RUN_PREFIX, fmt_str, name)
                continue

            # Prevent throttling
            time.sleep(cfg.backoff_time)

            try:
                self.delete_resource(name)
            except (ClientError, BotoCoreError) as e:
                cfg.error_reporter(self.resource_type, name, e)
                if cfg.ignore_errors:
                    continue
                raise

            self._notify(fmt_str, name)

        if not cfg.dry_run and self.post_delete_cooldown:
            logger.debug(f"Waiting {self.post_delete_cooldown}s for {self.resource_type} deletions to settle")
            time.sleep(self.post_delete_cooldown)
