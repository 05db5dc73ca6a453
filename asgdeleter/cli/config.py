"""CLI configuration loading.

Settings come from defaults, then a YAML config file, then environment
variables. Command line options are applied on top by the CLI.
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Optional

import yaml

from asgdeleter.deleter.audit import log_delete_error
from asgdeleter.deleter.config import DeleteConfig, ErrorReporter

logger = logging.getLogger(__name__)

DEFAULT_CONFIG_PATH = Path.home() / ".asgdeleter" / "config.yaml"
CONFIG_PATH_ENV = "ASG_DELETER_CONFIG"


@dataclass
class Config:
    """CLI configuration.

    Attributes:
        aws_profile: AWS profile name
        region: AWS region
        backoff_time: Seconds to sleep before each delete call
        ignore_errors: Continue past failed deletions by default
        log_level: Default log level
        error_log_dir: Directory for YAML deletion error logs (optional)
    """

    aws_profile: Optional[str] = None
    region: Optional[str] = None
    backoff_time: float = 1.0
    ignore_errors: bool = False
    log_level: str = "INFO"
    error_log_dir: Optional[str] = None

    @classmethod
    def load(cls, path: Optional[str] = None) -> "Config":
        """Load configuration from file and environment.

        Args:
            path: Config file path (default: $ASG_DELETER_CONFIG or ~/.asgdeleter/config.yaml)

        Returns:
            Loaded configuration

        Raises:
            ValueError: If the config file is not a YAML mapping or a value is invalid
        """
        config = cls()

        config_path = Path(path or os.environ.get(CONFIG_PATH_ENV) or DEFAULT_CONFIG_PATH)
        if config_path.exists():
            config._apply_file(config_path)

        config._apply_env()
        config._validate()
        return config

    def _apply_file(self, config_path: Path) -> None:
        with open(config_path) as f:
            data = yaml.safe_load(f) or {}

        if not isinstance(data, dict):
            raise ValueError(f"Config file {config_path} must contain a mapping")

        known = {f.name for f in fields(self)}
        for key, value in data.items():
            if key not in known:
                logger.warning(f"Ignoring unknown config key '{key}' in {config_path}")
                continue
            setattr(self, key, value)

        self.backoff_time = float(self.backoff_time)

    def _apply_env(self) -> None:
        if os.environ.get("AWS_PROFILE"):
            self.aws_profile = os.environ["AWS_PROFILE"]

        region = os.environ.get("AWS_REGION") or os.environ.get("AWS_DEFAULT_REGION")
        if region:
            self.region = region

        if os.environ.get("ASG_DELETER_BACKOFF"):
            self.backoff_time = float(os.environ["ASG_DELETER_BACKOFF"])

        if os.environ.get("ASG_DELETER_LOG_LEVEL"):
            self.log_level = os.environ["ASG_DELETER_LOG_LEVEL"]

    def _validate(self) -> None:
        if self.backoff_time < 0:
            raise ValueError(f"backoff_time cannot be negative (got {self.backoff_time})")

    def delete_config(
        self,
        dry_run: bool = False,
        ignore_errors: Optional[bool] = None,
        backoff_time: Optional[float] = None,
        error_reporter: ErrorReporter = log_delete_error,
    ) -> DeleteConfig:
        """Build the DeleteConfig shared by every deleter in a run.

        Args:
            dry_run: Announce deletions without performing them
            ignore_errors: Override the configured ignore_errors
            backoff_time: Override the configured backoff_time
            error_reporter: Receives every failed deletion

        Returns:
            Immutable deletion settings
        """
        return DeleteConfig(
            dry_run=dry_run,
            ignore_errors=self.ignore_errors if ignore_errors is None else ignore_errors,
            backoff_time=self.backoff_time if backoff_time is None else backoff_time,
            error_reporter=error_reporter,
        )
