"""Pull request comment data models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel


class BotComment(BaseModel):
    """An existing PR comment authored by this bot."""

    id: int
    author_login: str
    author_id: Optional[int] = None
    body: Optional[str] = None


class CommentAction(str, Enum):
    """Terminal comment mutation."""

    CREATE = "create"
    UPDATE = "update"


class CommentVerdict(BaseModel):
    """Rendered comment body plus the create-or-update decision."""

    action: CommentAction
    body: str
    comment_id: Optional[int] = None
