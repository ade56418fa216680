"""
Data models for the sync engine.

Credentials and SyncStatus are persisted with camelCase keys
(``remoteContainerId``, ``syncEnabled``, ...), the same shape the settings
UI reads. Python code uses the snake_case attribute names.
"""

from __future__ import annotations

from datetime import datetime

from pydantic import AliasChoices, BaseModel, ConfigDict, Field


class Credentials(BaseModel):
    """
    Authentication state persisted under the auth key.

    The container id is assigned the first time a push needs a gist and is
    kept for the lifetime of the installation, even across token changes.
    """

    token: str | None = Field(default=None, description="GitHub token with gist scope")
    remote_container_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("remoteContainerId", "gistId", "remote_container_id"),
        serialization_alias="remoteContainerId",
        description="Id of the gist holding the synced document",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_record(self) -> dict[str, object]:
        """Serialize for the key/value store."""
        return self.model_dump(mode="json", by_alias=True)


class SyncStatus(BaseModel):
    """
    User-visible sync status.

    A best-effort projection of the credentials and the last pull/push
    outcome. It is persisted after every change so the last error survives
    a restart.

    Example:
        >>> SyncStatus().to_record()
        {'syncEnabled': False, 'lastSync': None, 'lastError': None, 'remoteContainerId': None}
    """

    sync_enabled: bool = Field(
        default=False,
        validation_alias=AliasChoices("syncEnabled", "sync_enabled"),
        serialization_alias="syncEnabled",
    )
    last_sync: datetime | None = Field(
        default=None,
        validation_alias=AliasChoices("lastSync", "last_sync"),
        serialization_alias="lastSync",
    )
    last_error: str | None = Field(
        default=None,
        validation_alias=AliasChoices("lastError", "last_error"),
        serialization_alias="lastError",
    )
    remote_container_id: str | None = Field(
        default=None,
        validation_alias=AliasChoices("remoteContainerId", "gistId", "remote_container_id"),
        serialization_alias="remoteContainerId",
    )

    model_config = ConfigDict(populate_by_name=True)

    def to_record(self) -> dict[str, object]:
        """Serialize for the key/value store and the command surface."""
        return self.model_dump(mode="json", by_alias=True)


class ValidationResult(BaseModel):
    """Outcome of a successful connection validation."""

    remote_container_id: str | None = Field(
        default=None,
        serialization_alias="remoteContainerId",
    )

    def to_record(self) -> dict[str, object]:
        return self.model_dump(mode="json", by_alias=True)
