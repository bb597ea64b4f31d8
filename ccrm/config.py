"""
Application configuration.

An ``AppConfig`` is built once at start-up and handed to the components that
need it; there is no process-wide instance.
"""

import json
from dataclasses import dataclass, fields
from pathlib import Path
from typing import Any, Mapping, Union

from .core.enums import CreditLimitScope
from .core.exceptions import ConfigurationError

DEFAULT_MAX_CREDITS_PER_SEMESTER = 24


@dataclass(frozen=True)
class AppConfig:
    max_credits_per_semester: int = DEFAULT_MAX_CREDITS_PER_SEMESTER
    credit_limit_scope: CreditLimitScope = CreditLimitScope.GLOBAL
    data_directory: str = "test-data"
    export_directory: str = "exports"
    backup_directory: str = "backups"
    top_students_limit: int = 10

    def __post_init__(self):
        for name in ("max_credits_per_semester", "top_students_limit"):
            value = getattr(self, name)
            if isinstance(value, bool) or not isinstance(value, int) or value <= 0:
                raise ConfigurationError(f"{name} must be a positive integer, got {value!r}")
        if not isinstance(self.credit_limit_scope, CreditLimitScope):
            raise ConfigurationError(f"Unknown credit limit scope: {self.credit_limit_scope!r}")
        for name in ("data_directory", "export_directory", "backup_directory"):
            if not str(getattr(self, name)).strip():
                raise ConfigurationError(f"{name} must not be empty")

    @classmethod
    def from_dict(cls, data: Mapping[str, Any]) -> "AppConfig":
        """Build a config from a mapping, ignoring keys that are not config fields."""
        known = {f.name for f in fields(cls)}
        values = {k: v for k, v in data.items() if k in known}
        scope = values.get("credit_limit_scope")
        if isinstance(scope, str):
            try:
                values["credit_limit_scope"] = CreditLimitScope(scope.lower())
            except ValueError:
                raise ConfigurationError(f"Unknown credit limit scope: {scope!r}")
        return cls(**values)

    @classmethod
    def from_file(cls, path: Union[str, Path]) -> "AppConfig":
        """Load a JSON configuration file."""
        try:
            with open(path, 'r') as f:
                data = json.load(f)
        except (OSError, json.JSONDecodeError) as e:
            raise ConfigurationError(f"Failed to load configuration from {path}: {e}")
        if not isinstance(data, dict):
            raise ConfigurationError(f"Configuration in {path} must be a JSON object")
        return cls.from_dict(data)

    @property
    def data_path(self) -> Path:
        return Path(self.data_directory)

    @property
    def export_path(self) -> Path:
        return Path(self.export_directory)

    @property
    def backup_path(self) -> Path:
        return Path(self.backup_directory)

    def ensure_directories(self) -> None:
        """Create the data, export and backup directories if missing."""
        for path in (self.data_path, self.export_path, self.backup_path):
            path.mkdir(parents=True, exist_ok=True)
