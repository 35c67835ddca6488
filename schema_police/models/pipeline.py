"""Reconciliation pipeline state models."""

from enum import Enum
from typing import Optional

from pydantic import BaseModel

from .comment import CommentVerdict


class PipelineState(str, Enum):
    """Stages a webhook delivery moves through."""

    RECEIVED = "received"
    VERIFIED = "verified"
    GATED = "gated"
    FILES_DISCOVERED = "files_discovered"
    PER_FILE_ANALYZED = "per_file_analyzed"
    COMMENT_ASSEMBLED = "comment_assembled"
    RECONCILED = "reconciled"


class TerminationReason(str, Enum):
    """Why a delivery stopped without touching the PR comment."""

    INVALID_SIGNATURE = "invalid_signature"
    UNSUPPORTED_ACTION = "unsupported_action"
    MERGE_BASE_UNRESOLVED = "merge_base_unresolved"
    NOT_OPTED_IN = "not_opted_in"
    NO_SCHEMA_FILES = "no_schema_files"
    NOTHING_TO_REPORT = "nothing_to_report"
    COMMENT_SCAN_INCOMPLETE = "comment_scan_incomplete"


class ReconciliationOutcome(BaseModel):
    """Where the pipeline stopped and what, if anything, it wrote."""

    state: PipelineState
    reason: Optional[TerminationReason] = None
    verdict: Optional[CommentVerdict] = None

    @property
    def terminated(self) -> bool:
        return self.reason is not None
