"""
Webhook endpoints for Bitbucket Server.
"""

import hashlib
import hmac
import logging
from typing import Optional

from fastapi import APIRouter, BackgroundTasks, Header, HTTPException, Query, Request

from bbhooks.config import settings
from bbhooks.models.api_response import WebhookResponse
from bbhooks.models.refs import BitbucketType, HookEventType
from bbhooks.services.push_processor import get_push_hook_processor

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/webhooks", tags=["webhooks"])

PUSH_EVENTS = (HookEventType.SERVER_REFS_CHANGED, HookEventType.SERVER_MIRROR_REPO_SYNCHRONIZED)

# Initialize push hook processor
push_processor = get_push_hook_processor()


def verify_webhook_signature(payload: bytes, signature: Optional[str], secret: str) -> bool:
    """
    Verify a Bitbucket Server webhook signature.

    Args:
        payload: Raw request payload
        signature: X-Hub-Signature header value ("sha256=<hex>")
        secret: Shared webhook secret

    Returns:
        True if signature is valid, False otherwise
    """
    if not signature:
        return False

    algorithm, _, digest = signature.partition("=")
    if algorithm != "sha256" or not digest:
        return False

    expected_signature = hmac.new(secret.encode(), payload, hashlib.sha256).hexdigest()

    return hmac.compare_digest(digest, expected_signature)


def process_push_event(
    hook_event: HookEventType,
    payload: Optional[str],
    origin: Optional[str],
    server_url: Optional[str],
) -> None:
    """
    Process a push hook after the response was sent.

    Args:
        hook_event: Event key of the delivery
        payload: Raw request body
        origin: Address of the delivering host
        server_url: Bitbucket Server URL the hook was configured for
    """
    try:
        push_processor.process(hook_event, payload, BitbucketType.SERVER, origin, server_url)
    except Exception as e:
        logger.error(f"Error processing push event: {e}", exc_info=True)


@router.post("/bitbucket-server", response_model=WebhookResponse)
async def handle_bitbucket_server_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    server_url: Optional[str] = Query(None),
    x_event_key: Optional[str] = Header(None, alias="X-Event-Key"),
    x_hub_signature: Optional[str] = Header(None, alias="X-Hub-Signature"),
) -> WebhookResponse:
    """
    Receive Bitbucket Server webhook deliveries.

    This endpoint:
    1. Validates the webhook signature when a secret is configured
    2. Answers connection test pings
    3. Returns 200 OK immediately for push events
    4. Processes the push event in the background

    Args:
        request: FastAPI request object
        background_tasks: FastAPI background tasks
        server_url: Bitbucket Server URL the hook was configured for
        x_event_key: Hook event type header
        x_hub_signature: Webhook signature header

    Returns:
        WebhookResponse with status and message

    Raises:
        HTTPException: If signature validation fails
    """
    try:
        payload = await request.body()

        if settings.webhook_secret and not verify_webhook_signature(
            payload, x_hub_signature, settings.webhook_secret
        ):
            logger.warning("Invalid webhook signature received")
            raise HTTPException(status_code=401, detail="Invalid webhook signature")

        hook_event = HookEventType.from_key(x_event_key)

        if hook_event is HookEventType.SERVER_PING:
            return WebhookResponse(status="ok", message="pong")

        if hook_event not in PUSH_EVENTS:
            logger.info(f"Ignoring event type: {x_event_key}")
            return WebhookResponse(
                status="ignored",
                message=f"Event type {x_event_key} not processed"
            )

        origin = request.client.host if request.client else None
        body = payload.decode("utf-8", errors="replace") if payload else None

        background_tasks.add_task(process_push_event, hook_event, body, origin, server_url)

        return WebhookResponse(
            status="accepted",
            message=f"{hook_event.value} event accepted for processing"
        )

    except HTTPException:
        raise
    except Exception as e:
        logger.error(f"Error handling webhook: {e}", exc_info=True)
        raise HTTPException(status_code=500, detail="Internal server error processing webhook")
