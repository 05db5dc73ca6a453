"""Error reporting and audit storage for failed deletions.

Failed deletions are logged as they happen and can be written out as a YAML
audit file for troubleshooting.
"""

from __future__ import annotations

import logging
import uuid
from datetime import datetime
from pathlib import Path
from typing import Optional

import yaml

from asgdeleter.models.deletion_record import DeletionRecord
from asgdeleter.models.resource import ResourceType

logger = logging.getLogger(__name__)


def log_delete_error(resource_type: ResourceType, resource_name: str, error: Exception) -> None:
    """Default error reporter: log the failure and nothing else."""
    logger.error(f"Failed to delete {resource_type} {resource_name}: {error}")


class DeleteErrorLog:
    """Error reporter that keeps a record of every failed deletion.

    Instances are callable with the error reporter signature, so one can be
    passed straight to DeleteConfig(error_reporter=...).

    Attributes:
        records: Failed deletion records in the order they were reported
    """

    def __init__(self) -> None:
        self.records: list[DeletionRecord] = []

    def __call__(self, resource_type: ResourceType, resource_name: str, error: Exception) -> None:
        self.records.append(DeletionRecord.from_error(resource_type, resource_name, error))
        log_delete_error(resource_type, resource_name, error)

    @property
    def failed_count(self) -> int:
        return len(self.records)


class AuditStorage:
    """Audit log storage for failed deletions.

    Storage structure:
        ~/.asgdeleter/error-logs/
            2025/
                11/
                    deletion-errors-run_123.yaml

    Attributes:
        storage_dir: Base directory for audit logs
    """

    def __init__(self, storage_dir: Optional[str] = None) -> None:
        """Initialize audit storage.

        Args:
            storage_dir: Base directory for audit logs (default: ~/.asgdeleter/error-logs)
        """
        if storage_dir is None:
            storage_dir = str(Path.home() / ".asgdeleter" / "error-logs")

        self.storage_dir = Path(storage_dir).expanduser()
        self.storage_dir.mkdir(parents=True, exist_ok=True)

    def log_errors(
        self,
        records: list[DeletionRecord],
        run_id: Optional[str] = None,
        dry_run: bool = False,
        timestamp: Optional[datetime] = None,
    ) -> Path:
        """Write failed deletion records to a YAML audit file.

        Args:
            records: Failed deletion records
            run_id: Identifier for this run (generated if omitted)
            dry_run: Whether the run was a dry run
            timestamp: Run time used for the year/month directory (default: now)

        Returns:
            Path of the written audit file
        """
        run_id = run_id or f"run_{uuid.uuid4()}"
        timestamp = timestamp or datetime.utcnow()

        year_month_dir = self.storage_dir / str(timestamp.year) / f"{timestamp.month:02d}"
        year_month_dir.mkdir(parents=True, exist_ok=True)

        audit_data = {
            "metadata": {
                "version": "1.0",
                "log_type": "deletion_errors",
                "created_at": datetime.utcnow().isoformat() + "Z",
            },
            "run": {
                "run_id": run_id,
                "timestamp": timestamp.isoformat() + "Z",
                "dry_run": dry_run,
                "failed_count": len(records),
            },
            "records": [record.to_dict() for record in records],
        }

        audit_file = year_month_dir / f"deletion-errors-{run_id}.yaml"
        with open(audit_file, "w") as f:
            yaml.dump(audit_data, f, default_flow_style=False, sort_keys=False)

        logger.debug(f"Wrote {len(records)} deletion errors to {audit_file}")
        return audit_file

