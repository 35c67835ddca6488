"""Business logic services package."""

from schema_police.services.comment_store import CommentScanIncomplete, CommentStore
from schema_police.services.github_auth import GitHubAppAuth, InstallationCredentials, get_github_app_auth
from schema_police.services.github_client import GitHubAPIError, GitHubClient, GitHubNotFoundError
from schema_police.services.merge_base import MergeBaseResolver
from schema_police.services.reconciliation import ReconciliationController, create_controller
from schema_police.services.schema_source import FileFetchError, RenamedWithoutChanges, SchemaSource
from schema_police.services.signature import sign_payload, verify_signature

__all__ = [
    'CommentScanIncomplete',
    'CommentStore',
    'GitHubAppAuth',
    'InstallationCredentials',
    'get_github_app_auth',
    'GitHubAPIError',
    'GitHubClient',
    'GitHubNotFoundError',
    'MergeBaseResolver',
    'ReconciliationController',
    'create_controller',
    'FileFetchError',
    'RenamedWithoutChanges',
    'SchemaSource',
    'sign_payload',
    'verify_signature',
]
