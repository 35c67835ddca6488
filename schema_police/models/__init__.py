"""Data models for the schema police service."""

from .analysis import (
    BreakingChange,
    CompareFailure,
    ComparisonSuccess,
    ParseFailure,
    SchemaComparison,
    SchemaFileResult,
)
from .api_response import WebhookResponse
from .comment import BotComment, CommentAction, CommentVerdict
from .file_change import ChangedFile, FileContent, FileStatus
from .pipeline import PipelineState, ReconciliationOutcome, TerminationReason
from .pr_event import PullRequestAction, PullRequestPayload, RepoRef, WebhookEvent

__all__ = [
    # Webhook event models
    "PullRequestAction",
    "PullRequestPayload",
    "RepoRef",
    "WebhookEvent",
    # File models
    "ChangedFile",
    "FileContent",
    "FileStatus",
    # Analysis models
    "BreakingChange",
    "ParseFailure",
    "CompareFailure",
    "ComparisonSuccess",
    "SchemaComparison",
    "SchemaFileResult",
    # Comment models
    "BotComment",
    "CommentAction",
    "CommentVerdict",
    # Pipeline models
    "PipelineState",
    "TerminationReason",
    "ReconciliationOutcome",
    # API response models
    "WebhookResponse",
]
