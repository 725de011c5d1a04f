"""Sources for the active approval configuration.

Stores never cache: an administrator's change is visible to the very
next evaluation.
"""

import os
from pathlib import Path
from typing import Any, Dict

import yaml
from sqlalchemy.orm import Session

from docapproval.core.approval.errors import PolicyConfigurationError
from docapproval.core.approval.policy import ApprovalConfig
from docapproval.db.models import ApprovalConfigRecord


DEFAULT_APPROVAL_CONFIG = ApprovalConfig()


class DatabaseConfigStore:
    """
    Keeps the approval configuration in the single ``approval_configs`` row.

    The row is created with defaults on first read.
    """

    def __init__(self, db: Session):
        self.db = db

    def current_approval_config(self) -> ApprovalConfig:
        """
        Read the active configuration.

        Raises:
            PolicyConfigurationError: If the stored mode or threshold is invalid
        """
        record = self._get_or_create()
        return ApprovalConfig(
            mode=record.mode,
            threshold_value=record.threshold_value,
            comments_required=bool(record.comments_required),
        )

    def update_approval_config(self, config: ApprovalConfig) -> ApprovalConfig:
        """Replace the active configuration (flushed, caller commits)."""
        record = self._get_or_create()
        record.mode = config.mode.value
        record.threshold_value = config.threshold_value
        record.comments_required = config.comments_required
        self.db.flush()
        return config

    def _get_or_create(self) -> ApprovalConfigRecord:
        record = self.db.query(ApprovalConfigRecord).order_by(ApprovalConfigRecord.id.asc()).first()
        if record is None:
            record = ApprovalConfigRecord(
                id=1,
                mode=DEFAULT_APPROVAL_CONFIG.mode.value,
                threshold_value=DEFAULT_APPROVAL_CONFIG.threshold_value,
                comments_required=DEFAULT_APPROVAL_CONFIG.comments_required,
            )
            self.db.add(record)
            self.db.flush()
        return record


class YamlConfigStore:
    """
    Reads the approval configuration from a YAML file on every call.

    Expected layout::

        approval:
          mode: min_percentage
          threshold_value: 60
          comments_required: false

    Environment variables in values are expanded.
    """

    def __init__(self, config_path: str):
        self.config_path = Path(config_path)

    def current_approval_config(self) -> ApprovalConfig:
        """
        Load and parse the file.

        Raises:
            FileNotFoundError: If the file doesn't exist
            yaml.YAMLError: If the file is invalid YAML
            PolicyConfigurationError: If the approval section is malformed
        """
        if not self.config_path.exists():
            raise FileNotFoundError(f"Configuration file not found: {self.config_path}")

        with self.config_path.open("r") as f:
            config = yaml.safe_load(f)

        if config is None:
            config = {}
        if not isinstance(config, dict):
            raise PolicyConfigurationError(
                f"Configuration root must be a mapping, got {type(config).__name__}"
            )

        section = _expand_env_vars(config.get("approval") or {})
        if not isinstance(section, dict):
            raise PolicyConfigurationError("'approval' section must be a mapping")

        return parse_approval_config(section)


def parse_approval_config(section: Dict[str, Any]) -> ApprovalConfig:
    """Build an ApprovalConfig from a plain mapping, applying defaults."""
    try:
        threshold = int(section.get("threshold_value", DEFAULT_APPROVAL_CONFIG.threshold_value))
    except (TypeError, ValueError):
        raise PolicyConfigurationError(
            f"threshold_value must be an integer, got {section.get('threshold_value')!r}"
        )

    return ApprovalConfig(
        mode=section.get("mode", DEFAULT_APPROVAL_CONFIG.mode.value),
        threshold_value=threshold,
        comments_required=_as_bool(section.get("comments_required", False)),
    )


def _as_bool(value: Any) -> bool:
    if isinstance(value, str):
        return value.strip().lower() in ("1", "true", "yes", "on")
    return bool(value)


def _expand_env_vars(obj: Any) -> Any:
    """Recursively expand environment variables in configuration."""
    if isinstance(obj, dict):
        return {key: _expand_env_vars(value) for key, value in obj.items()}
    elif isinstance(obj, list):
        return [_expand_env_vars(item) for item in obj]
    elif isinstance(obj, str):
        return os.path.expandvars(obj)
    else:
        return obj
