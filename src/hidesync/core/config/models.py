"""
Configuration data models for hide-sync.

These models define the structure of .hide-sync.json and
~/.config/hide-sync/config.json files, with validation via Pydantic.
"""

import os
from pathlib import Path

from pydantic import BaseModel, ConfigDict, Field, field_validator


def default_state_path() -> Path:
    """
    Get the default location of the local state file.

    Returns:
        Path to $XDG_DATA_HOME/hide-sync/state.json (~/.local/share by default)
    """
    data_home = os.environ.get("XDG_DATA_HOME")
    base = Path(data_home) if data_home else Path.home() / ".local" / "share"
    return base / "hide-sync" / "state.json"


class HideSyncConfig(BaseModel):
    """
    Top-level hide-sync configuration.

    Every field has a default, so an empty config file (or none at all)
    yields a working configuration against the public GitHub API.

    Example:
        >>> config = HideSyncConfig(board_limit=50)
        >>> config.debounce_seconds
        5.0
    """

    api_base_url: str = Field(
        default="https://api.github.com",
        description="Base URL of the gist API",
    )
    gist_filename: str = Field(
        default="hide-sync.json",
        min_length=1,
        description="Name of the file inside the gist holding the document",
    )
    gist_description: str = Field(
        default="Hide Sync storage",
        description="Description used when provisioning a new gist",
    )
    board_limit: int = Field(
        default=150,
        ge=1,
        description="Maximum hidden threads kept per board (oldest evicted first)",
    )
    debounce_seconds: float = Field(
        default=5.0,
        ge=0.0,
        description="Quiet period before a local change is pushed to the remote",
    )
    request_timeout: float = Field(
        default=30.0,
        gt=0.0,
        description="Timeout in seconds for each remote API request",
    )
    default_profile: str = Field(
        default="default",
        min_length=1,
        description="Name of the single profile used inside the document",
    )
    sentinel_domain: str = Field(
        default="2ch.su",
        description="Domain broadcast to observers after a connection is validated",
    )
    state_path: Path = Field(
        default_factory=default_state_path,
        description="JSON file used for local persistence",
    )

    model_config = ConfigDict(
        extra="ignore",
    )

    @field_validator("api_base_url")
    @classmethod
    def strip_trailing_slash(cls, v: str) -> str:
        """Normalize the base URL so paths can be appended with a leading slash."""
        return v.rstrip("/")

    @field_validator("state_path", mode="before")
    @classmethod
    def expand_user(cls, v: object) -> object:
        """Expand ~ in configured state paths."""
        if isinstance(v, str):
            return Path(v).expanduser()
        return v
