"""
Webhook endpoints for GitHub App deliveries.
"""

import json
from typing import Any, Dict, Optional

from fastapi import APIRouter, BackgroundTasks, Header, HTTPException, Request
from pydantic import ValidationError

from schema_police.config import settings
from schema_police.models.api_response import WebhookResponse
from schema_police.models.pr_event import PullRequestPayload, WebhookEvent
from schema_police.services.github_auth import get_github_app_auth
from schema_police.services.reconciliation import create_controller
from schema_police.services.signature import verify_signature
from schema_police.utils.logging import get_logger, log_error_with_context, log_webhook_event

logger = get_logger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

PULL_REQUEST_EVENT = "pull_request"


async def process_pull_request_event(event: WebhookEvent) -> None:
    """
    Run the schema compatibility pipeline for one delivery.

    Runs after the webhook has been acknowledged, so failures are logged
    rather than surfaced to GitHub.

    Args:
        event: Verified pull request delivery
    """
    try:
        auth = get_github_app_auth()
        bot_login = settings.github_bot_login or await auth.get_bot_login()

        async with auth.installation_client(event.payload.installation_id) as client:
            controller = create_controller(
                client,
                bot_login=bot_login,
                webhook_secret=settings.webhook_secret,
                opt_in_path=settings.opt_in_config_path,
                page_size=settings.comment_page_size,
                max_pages=settings.max_comment_pages,
                strict_classification=settings.strict_classification,
            )
            outcome = await controller.handle(event)

        logger.info(
            f"Delivery {event.delivery_id} finished at {outcome.state.value}",
            extra={
                "delivery_id": event.delivery_id,
                "state": outcome.state.value,
                "reason": outcome.reason.value if outcome.reason else None,
            }
        )
    except Exception as e:
        log_error_with_context(
            logger,
            "Error processing pull request event",
            e,
            delivery_id=event.delivery_id,
        )


def _build_event(
    body: bytes,
    signature: Optional[str],
    delivery_id: Optional[str],
    data: Dict[str, Any]
) -> WebhookEvent:
    payload = None
    if data.get("pull_request"):
        payload = PullRequestPayload.from_github(data)
    return WebhookEvent(
        action=data.get("action", ""),
        delivery_id=delivery_id,
        raw_body=body,
        signature=signature,
        payload=payload,
    )


@router.post("/github", response_model=WebhookResponse)
async def handle_github_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    x_hub_signature: Optional[str] = Header(None, alias="X-Hub-Signature"),
    x_github_event: Optional[str] = Header(None, alias="X-GitHub-Event"),
    x_github_delivery: Optional[str] = Header(None, alias="X-GitHub-Delivery"),
) -> WebhookResponse:
    """
    Receive a GitHub webhook delivery.

    This endpoint:
    1. Validates the ``X-Hub-Signature`` HMAC (500 on mismatch)
    2. Ignores everything but opened/synchronized pull requests
    3. Returns 200 OK immediately and analyses the pull request in the background

    Raises:
        HTTPException: If signature validation fails
    """
    body = await request.body()
    log_webhook_event(logger, x_github_delivery, x_github_event)

    if not verify_signature(settings.webhook_secret, body, x_hub_signature):
        logger.warning("Invalid webhook signature received", extra={"delivery_id": x_github_delivery})
        raise HTTPException(status_code=500, detail="X-Hub-Signature does not match blob signature.")

    if x_github_event != PULL_REQUEST_EVENT:
        return WebhookResponse(status="ignored", message=f"Event type {x_github_event} not processed")

    try:
        data = json.loads(body)
        event = _build_event(body, x_hub_signature, x_github_delivery, data)
    except (ValueError, KeyError, TypeError, AttributeError, ValidationError) as e:
        logger.warning(f"Invalid pull request payload: {e}", extra={"delivery_id": x_github_delivery})
        return WebhookResponse(status="ignored", message="Invalid pull request payload")

    if event.payload is None or not event.is_actionable:
        logger.info(f"Ignoring pull request action: {event.action.value}", extra={"delivery_id": x_github_delivery})
        return WebhookResponse(status="ignored", message=f"Action {data.get('action')} not processed")

    background_tasks.add_task(process_pull_request_event, event)

    return WebhookResponse(
        status="accepted",
        message=f"Pull request #{event.payload.number} accepted for processing"
    )
