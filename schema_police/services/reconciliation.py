"""
Reconciliation Controller.

Drives one webhook delivery through the schema compatibility pipeline:

    received -> verified -> gated -> files_discovered -> per_file_analyzed
             -> comment_assembled -> reconciled

Any stage may stop the delivery without touching the pull request. The
terminal action is exactly one comment create or update.
"""

import asyncio
from typing import List, Optional

from schema_police.analyzers.change_classifier import ChangeClassifier
from schema_police.analyzers.schema_diff import SchemaDiffEngine
from schema_police.models.analysis import SchemaFileResult
from schema_police.models.comment import BotComment, CommentAction, CommentVerdict
from schema_police.models.file_change import ChangedFile
from schema_police.models.pipeline import PipelineState, ReconciliationOutcome, TerminationReason
from schema_police.models.pr_event import PullRequestPayload, RepoRef, WebhookEvent
from schema_police.services.comment_renderer import NO_BREAKING_CHANGES_MESSAGE, render_comment_body
from schema_police.services.comment_store import CommentScanIncomplete, CommentStore
from schema_police.services.github_client import GitHubClient
from schema_police.services.merge_base import MergeBaseResolver
from schema_police.services.schema_source import FileFetchError, RenamedWithoutChanges, SchemaSource
from schema_police.services.signature import verify_signature
from schema_police.utils.logging import ContextLoggerAdapter, get_logger

logger = get_logger(__name__)


def filter_schema_files(files: List[ChangedFile]) -> List[ChangedFile]:
    """Keep files ending in .graphql or .gql (case-insensitive)."""
    return [file for file in files if file.is_schema_file]


class ReconciliationController:
    """Orchestrates analysis of a pull request and reconciles the bot comment."""

    def __init__(
        self,
        webhook_secret: str,
        schema_source: SchemaSource,
        comment_store: CommentStore,
        merge_base_resolver: MergeBaseResolver,
        diff_engine: Optional[SchemaDiffEngine] = None,
        classifier: Optional[ChangeClassifier] = None,
    ):
        self.webhook_secret = webhook_secret
        self.schema_source = schema_source
        self.comment_store = comment_store
        self.merge_base_resolver = merge_base_resolver
        self.diff_engine = diff_engine or SchemaDiffEngine()
        self.classifier = classifier or ChangeClassifier()

    @staticmethod
    def _terminate(
        log: ContextLoggerAdapter,
        state: PipelineState,
        reason: TerminationReason
    ) -> ReconciliationOutcome:
        log.info(f"Pipeline terminated at {state.value}: {reason.value}", extra={"reason": reason.value})
        return ReconciliationOutcome(state=state, reason=reason)

    async def handle(self, event: WebhookEvent) -> ReconciliationOutcome:
        """
        Process a webhook delivery end to end.

        Args:
            event: The received delivery

        Returns:
            Where the pipeline stopped and the comment verdict, if any

        Raises:
            GitHubAPIError, httpx.HTTPError: If a non-file API call fails; no
                comment is written in that case
        """
        log = logger.with_context(delivery_id=event.delivery_id)

        # received -> verified
        if not verify_signature(self.webhook_secret, event.raw_body, event.signature):
            return self._terminate(log, PipelineState.RECEIVED, TerminationReason.INVALID_SIGNATURE)
        if event.payload is None or not event.is_actionable:
            return self._terminate(log, PipelineState.RECEIVED, TerminationReason.UNSUPPORTED_ACTION)

        payload = event.payload
        head = payload.head
        log = log.with_context(pr_number=payload.number, repository=payload.base.full_name)

        # verified -> gated
        merge_base_sha = await self.merge_base_resolver.resolve_base(
            head.owner_login, head.repo_name, payload.number
        )
        if not merge_base_sha:
            return self._terminate(log, PipelineState.VERIFIED, TerminationReason.MERGE_BASE_UNRESOLVED)

        base = payload.base.model_copy(update={"sha": merge_base_sha})
        if not await self.schema_source.has_opt_in_file(base.owner_login, base.repo_name, base.sha):
            return self._terminate(log, PipelineState.VERIFIED, TerminationReason.NOT_OPTED_IN)

        # gated -> files_discovered
        changed_files = await self.schema_source.get_files_from_commit(
            head.owner_login, head.repo_name, head.sha
        )
        schema_files = filter_schema_files(changed_files)
        self._log_processed_payload(log, event, payload, base, changed_files, schema_files)

        if not schema_files:
            log.info(f"No changes to .graphql files found in webhook: {event.delivery_id}")
            return self._terminate(log, PipelineState.FILES_DISCOVERED, TerminationReason.NO_SCHEMA_FILES)

        # files_discovered -> per_file_analyzed
        analyzed = await asyncio.gather(
            *(self._analyze_file(log, file, base, head) for file in schema_files)
        )
        results = [result for result in analyzed if result is not None]

        try:
            bot_comment = await self.comment_store.find_bot_comment(
                base.owner_login, base.repo_name, payload.number
            )
        except CommentScanIncomplete as e:
            # An unseen bot comment may exist; writing could duplicate it
            log.warning(str(e))
            return self._terminate(log, PipelineState.PER_FILE_ANALYZED, TerminationReason.COMMENT_SCAN_INCOMPLETE)

        for result in results:
            self._log_file_result(log, result, bot_comment)

        all_clean = all(result.is_clean for result in results)
        if bot_comment is None and all_clean:
            return self._terminate(log, PipelineState.PER_FILE_ANALYZED, TerminationReason.NOTHING_TO_REPORT)

        # per_file_analyzed -> comment_assembled
        body = render_comment_body(results, self.classifier)
        if bot_comment is not None:
            # The existing comment is never blanked
            verdict = CommentVerdict(
                action=CommentAction.UPDATE,
                body=NO_BREAKING_CHANGES_MESSAGE if all_clean or not body else body,
                comment_id=bot_comment.id,
            )
        else:
            verdict = CommentVerdict(action=CommentAction.CREATE, body=body)

        # comment_assembled -> reconciled
        await self._apply(log, verdict, base, payload)
        return ReconciliationOutcome(state=PipelineState.RECONCILED, verdict=verdict)

    async def _apply(
        self,
        log: ContextLoggerAdapter,
        verdict: CommentVerdict,
        base: RepoRef,
        payload: PullRequestPayload
    ) -> None:
        extra = {"pull_request_url": payload.url, "comment": verdict.body}
        if verdict.action == CommentAction.UPDATE:
            log.info("Updated comment", extra=extra)
            await self.comment_store.update(base.owner_login, base.repo_name, verdict.comment_id, verdict.body)
        else:
            log.info("Created comment", extra=extra)
            await self.comment_store.create(base.owner_login, base.repo_name, payload.number, verdict.body)

    async def _analyze_file(
        self,
        log: ContextLoggerAdapter,
        file: ChangedFile,
        base: RepoRef,
        head: RepoRef
    ) -> Optional[SchemaFileResult]:
        """Analyse one file; failures exclude the file instead of failing the delivery."""
        try:
            if file.is_unchanged_rename:
                raise RenamedWithoutChanges(file.filename)

            original = await self.schema_source.get_file_content(
                base.owner_login, base.repo_name, file.original_filename, base.sha
            )
            changed = await self.schema_source.get_file_content(
                head.owner_login, head.repo_name, file.filename, head.sha
            )
        except RenamedWithoutChanges as e:
            log.debug(str(e), extra={"file": file.filename})
            return None
        except FileFetchError as e:
            if e.not_found:
                log.info(f"Skipping {file.filename}: {e}", extra={"file": file.filename})
            else:
                log.error(f"Failed to fetch {file.filename}: {e}", extra={"file": file.filename})
            return None
        except Exception as e:
            log.error(f"Unexpected error analysing {file.filename}: {e}", extra={"file": file.filename}, exc_info=True)
            return None

        # Schema building is CPU-bound
        comparison = await asyncio.to_thread(
            self.diff_engine.compare, original.content, changed.content, encoding=changed.encoding
        )
        return SchemaFileResult(file=file.filename, content_url=changed.html_url, comparison=comparison)

    @staticmethod
    def _log_processed_payload(
        log: ContextLoggerAdapter,
        event: WebhookEvent,
        payload: PullRequestPayload,
        base: RepoRef,
        changed_files: List[ChangedFile],
        schema_files: List[ChangedFile]
    ) -> None:
        head = payload.head
        log.info(
            "Processed payload",
            extra={
                "pull_request_url": payload.url,
                "pull_request_title": payload.title,
                "head": {"user_login": head.owner_login, "repo_name": head.repo_name, "sha": head.sha},
                "base": {
                    "user_login": base.owner_login,
                    "repo_name": base.repo_name,
                    "updated_sha": base.sha,
                    "payload_sha": payload.base.sha,
                },
                "git_commit_url": (
                    f"https://api.github.com/repos/{head.owner_login}/{head.repo_name}/git/commits/{head.sha}"
                ),
                "changed_files": [file.filename for file in changed_files],
                "changed_schema_files": [file.filename for file in schema_files],
            }
        )

    @staticmethod
    def _log_file_result(
        log: ContextLoggerAdapter,
        result: SchemaFileResult,
        bot_comment: Optional[BotComment]
    ) -> None:
        comparison = result.comparison
        log.info(
            "Performed analysis",
            extra={
                "file": result.file,
                "result": comparison.kind,
                "breaking_changes": (
                    [change.model_dump() for change in comparison.breaking_changes]
                    if comparison.kind == "ok" else []
                ),
                "error": comparison.message if comparison.kind != "ok" else None,
                "previous_bot_comment": bot_comment.id if bot_comment else None,
            }
        )


def create_controller(
    client: GitHubClient,
    bot_login: str,
    webhook_secret: str,
    opt_in_path: str,
    page_size: int = 50,
    max_pages: int = 20,
    strict_classification: bool = False,
) -> ReconciliationController:
    """Wire a controller around one installation-scoped client."""
    return ReconciliationController(
        webhook_secret=webhook_secret,
        schema_source=SchemaSource(client, opt_in_path=opt_in_path),
        comment_store=CommentStore(client, bot_login, page_size=page_size, max_pages=max_pages),
        merge_base_resolver=MergeBaseResolver(client),
        classifier=ChangeClassifier(strict=strict_classification),
    )
