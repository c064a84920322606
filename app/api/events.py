"""
Dapr Pub/Sub Subscription Endpoints
Handles customer events pushed by the Dapr sidecar to the observer
"""

from fastapi import APIRouter, Request

from app.core.config import config
from app.core.logger import logger

router = APIRouter(tags=["dapr-pubsub"])

EVENTS_ROUTE = "/customer-events"


@router.get("/dapr/subscribe")
async def get_subscriptions():
    """
    Dapr calls this endpoint to get list of subscriptions.
    Returns the topic the observer wants to receive.
    """
    subscriptions = [
        {
            "pubsubname": config.pubsub_name,
            "topic": config.topic_name,
            "route": EVENTS_ROUTE,
        },
    ]

    logger.info(
        "Dapr subscriptions configured",
        metadata={
            "subscriptionCount": len(subscriptions),
            "topics": [s["topic"] for s in subscriptions],
        },
    )

    return subscriptions


@router.post(EVENTS_ROUTE)
async def handle_customer_event(request: Request):
    """
    Handle a customer event from Dapr pub/sub.
    Always acknowledges so the sidecar never redelivers.
    """
    try:
        body = await request.body()
        request.app.state.observer.receive(body)
    except Exception as e:
        logger.error(
            f"Error handling customer event: {e}",
            metadata={"error": str(e), "event": "customer_event_handler_failed"},
        )

    return {"status": "SUCCESS"}
