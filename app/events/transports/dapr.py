"""
Dapr Pub/Sub transport
Publishes through the Dapr sidecar HTTP API. The pub/sub component configured
on the sidecar decides which broker (RabbitMQ, Azure Service Bus, ...) is used.
"""

from typing import Dict

import httpx

from app.core.logger import logger
from app.events.transports.base import EventTransport, TransportError


class DaprTransport(EventTransport):
    """Transport sending messages to POST /v1.0/publish/{pubsubname}/{topic}"""

    name = "dapr"

    def __init__(self, dapr_url: str, pubsub_name: str, timeout: float = 5.0):
        self.dapr_url = dapr_url.rstrip("/")
        self.pubsub_name = pubsub_name
        self.timeout = timeout

    def publish_url(self, topic: str) -> str:
        return f"{self.dapr_url}/v1.0/publish/{self.pubsub_name}/{topic}"

    async def send(self, topic: str, payload: str, metadata: Dict[str, str]) -> None:
        url = self.publish_url(topic)
        # Dapr reads publish metadata from metadata.<key> query parameters
        params = {f"metadata.{key}": value for key, value in metadata.items()}
        headers = {"Content-Type": "application/json"}
        if metadata.get("correlationId"):
            headers["X-Correlation-ID"] = metadata["correlationId"]

        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.post(url, content=payload, params=params, headers=headers)
        except httpx.TimeoutException as e:
            raise TransportError(f"Timeout publishing to Dapr sidecar at {self.dapr_url}") from e
        except httpx.ConnectError as e:
            raise TransportError(f"Cannot connect to Dapr sidecar at {self.dapr_url}") from e
        except httpx.HTTPError as e:
            raise TransportError(f"HTTP error publishing to Dapr: {e}") from e

        if response.status_code not in (200, 204):
            raise TransportError(
                f"Dapr publish returned {response.status_code}: {response.text}",
                transient=response.status_code >= 500,
            )

        logger.debug(
            "Message handed to Dapr sidecar",
            metadata={"pubsubName": self.pubsub_name, "topic": topic, "daprUrl": url},
        )

    async def is_healthy(self) -> bool:
        try:
            async with httpx.AsyncClient(timeout=self.timeout) as client:
                response = await client.get(f"{self.dapr_url}/v1.0/healthz")
            return response.status_code in (200, 204)
        except httpx.HTTPError:
            return False
