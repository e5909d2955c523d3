"""
Superfiliate webhook routes
"""
import json
import logging

from fastapi import APIRouter, Depends, Request, Response, status

from seal_bridge.api.dependencies import get_seal_client
from seal_bridge.core.exceptions import UpstreamError
from seal_bridge.integrations.seal import SealClient
from seal_bridge.schemas.webhook import CustomerUpdatedEvent
from seal_bridge.services.referral_bridge import handle_customer_updated

logger = logging.getLogger(__name__)

router = APIRouter()


async def _read_event(request: Request) -> CustomerUpdatedEvent:
    try:
        payload = await request.json()
    except (json.JSONDecodeError, UnicodeDecodeError):
        logger.warning("Superfiliate webhook body is not valid JSON")
        payload = None
    return CustomerUpdatedEvent.from_payload(payload)


@router.post("/superfiliate/customer_updated")
async def superfiliate_customer_updated(
    request: Request,
    client: SealClient = Depends(get_seal_client),
) -> Response:
    """Superfiliate ``customer_updated`` topic.

    Always 200 so Superfiliate does not redeliver, except when applying the
    code fails unexpectedly (500).
    """
    try:
        event = await _read_event(request)
        logger.info("Superfiliate webhook received", extra={"event": event.model_dump()})
        outcome = await handle_customer_updated(client, event)
        logger.info("Superfiliate webhook handled: %s", outcome.value)
        return Response(status_code=status.HTTP_200_OK)
    except UpstreamError as exc:
        logger.error(
            "Seal error handling Superfiliate customer_updated webhook: %s",
            exc,
            extra={"status": exc.status, "response_body": exc.body},
        )
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
    except Exception:
        logger.exception("Error handling Superfiliate customer_updated webhook")
        return Response(status_code=status.HTTP_500_INTERNAL_SERVER_ERROR)
