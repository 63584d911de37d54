"""Settings models for planroom."""

from __future__ import annotations

from pathlib import Path
from typing import Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator


class PlanroomBaseModel(BaseModel):
    """Reject unknown keys so typos in config.yaml surface as errors."""

    model_config = ConfigDict(extra="forbid")


class StorageSettings(PlanroomBaseModel):
    """Where project data and client UI state live on disk.

    Attributes:
        store_path: JSON snapshot holding every project's files and folders.
        ui_state_path: JSON document holding expanded folders and view mode.
    """

    store_path: Path = Path("~/.planroom/projects.json")
    ui_state_path: Path = Path("~/.planroom/ui-state.json")


class BrowserSettings(PlanroomBaseModel):
    """Listing defaults for the document browser.

    Attributes:
        default_view_mode: Layout used until the user picks one.
        file_list_limit: Maximum files fetched per refresh; ``None`` disables it.
        sheet_list_limit: Maximum sheets fetched per drawing set.
    """

    default_view_mode: Literal["grid", "list"] = "list"
    file_list_limit: Optional[int] = Field(default=100, ge=1)
    sheet_list_limit: Optional[int] = Field(default=500, ge=1)


class LoggingSettings(PlanroomBaseModel):
    """Runtime logging configuration."""

    level: str = "WARNING"

    @field_validator("level")
    @classmethod
    def _normalize_level(cls, value: str) -> str:
        level = value.strip().upper()
        if level not in {"DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"}:
            raise ValueError(f"Unknown logging level '{value}'.")
        return level


class CLIOptions(PlanroomBaseModel):
    """CLI presentation defaults.

    Attributes:
        quiet_default: Suppress success messages unless errors occur.
        default_project: Project used when ``--project`` is omitted.
    """

    quiet_default: bool = False
    default_project: str = "default"


class PlanroomConfig(PlanroomBaseModel):
    """Top-level settings."""

    storage: StorageSettings = Field(default_factory=StorageSettings)
    browser: BrowserSettings = Field(default_factory=BrowserSettings)
    logging: LoggingSettings = Field(default_factory=LoggingSettings)
    cli: CLIOptions = Field(default_factory=CLIOptions)


__all__ = [
    "BrowserSettings",
    "CLIOptions",
    "LoggingSettings",
    "PlanroomBaseModel",
    "PlanroomConfig",
    "StorageSettings",
]
