"""Changed file data models."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, field_validator


SCHEMA_FILE_SUFFIXES = (".graphql", ".gql")


class FileStatus(str, Enum):
    """Status of a file in a commit."""

    ADDED = "added"
    MODIFIED = "modified"
    REMOVED = "removed"
    RENAMED = "renamed"
    COPIED = "copied"
    CHANGED = "changed"
    UNCHANGED = "unchanged"


class ChangedFile(BaseModel):
    """A file touched by a commit."""

    filename: str
    previous_filename: Optional[str] = None
    status: FileStatus
    changes: int = 0

    @classmethod
    def from_github(cls, data: Dict[str, Any]) -> "ChangedFile":
        return cls(
            filename=data["filename"],
            previous_filename=data.get("previous_filename"),
            status=data.get("status", FileStatus.MODIFIED.value),
            changes=data.get("changes", 0),
        )

    @field_validator("status", mode="before")
    @classmethod
    def _unknown_status_is_changed(cls, value: Any) -> Any:
        if isinstance(value, str) and value not in FileStatus._value2member_map_:
            return FileStatus.CHANGED
        return value

    @property
    def is_schema_file(self) -> bool:
        return self.filename.lower().endswith(SCHEMA_FILE_SUFFIXES)

    @property
    def is_unchanged_rename(self) -> bool:
        return self.status == FileStatus.RENAMED and self.changes == 0

    @property
    def original_filename(self) -> str:
        """Path of this file at the base commit."""
        if self.status == FileStatus.RENAMED and self.previous_filename:
            return self.previous_filename
        return self.filename


class FileContent(BaseModel):
    """File content as returned by the contents API (transport-encoded)."""

    path: str
    ref: str
    content: str
    encoding: str = "base64"
    html_url: Optional[str] = None
