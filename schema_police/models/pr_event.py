"""Pull request webhook event data models."""

from enum import Enum
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, field_validator


class PullRequestAction(str, Enum):
    """Pull request webhook action."""

    OPENED = "opened"
    SYNCHRONIZE = "synchronize"
    OTHER = "other"


class RepoRef(BaseModel):
    """One side (head or base) of a pull request."""

    model_config = ConfigDict(frozen=True)

    owner_login: str
    repo_name: str
    sha: str

    @classmethod
    def from_github(cls, data: Dict[str, Any]) -> "RepoRef":
        return cls(
            owner_login=data["user"]["login"],
            repo_name=data["repo"]["name"],
            sha=data["sha"],
        )

    @property
    def full_name(self) -> str:
        return f"{self.owner_login}/{self.repo_name}"


class PullRequestPayload(BaseModel):
    """The parts of a ``pull_request`` webhook the pipeline consumes."""

    model_config = ConfigDict(frozen=True)

    number: int
    url: str
    html_url: Optional[str] = None
    title: str
    head: RepoRef
    base: RepoRef
    installation_id: str

    @classmethod
    def from_github(cls, data: Dict[str, Any]) -> "PullRequestPayload":
        """
        Build a payload from the webhook JSON body.

        Raises:
            KeyError, TypeError: If required fields are absent
        """
        pull_request = data["pull_request"]
        return cls(
            number=pull_request["number"],
            url=pull_request["url"],
            html_url=pull_request.get("html_url"),
            title=pull_request.get("title") or "",
            head=RepoRef.from_github(pull_request["head"]),
            base=RepoRef.from_github(pull_request["base"]),
            installation_id=str(data["installation"]["id"]),
        )


class WebhookEvent(BaseModel):
    """A received webhook delivery. Immutable once received."""

    model_config = ConfigDict(frozen=True)

    action: PullRequestAction
    delivery_id: Optional[str] = None
    raw_body: bytes
    signature: Optional[str] = None
    payload: Optional[PullRequestPayload] = None

    @field_validator("action", mode="before")
    @classmethod
    def _normalize_action(cls, value: Any) -> Any:
        if isinstance(value, PullRequestAction):
            return value
        try:
            return PullRequestAction(value)
        except ValueError:
            return PullRequestAction.OTHER

    @property
    def is_actionable(self) -> bool:
        return self.action in (PullRequestAction.OPENED, PullRequestAction.SYNCHRONIZE)
