"""
RabbitMQ queue consumer for the observer
Used when the observer runs without a Dapr sidecar: binds a durable queue to
the customer topic exchange and feeds each message to the observer service.
"""

import asyncio
from typing import Optional

import aio_pika

from app.core.logger import logger
from app.observer.service import CustomerObserverService

BINDING_KEY = "customer.*"


class RabbitMQEventConsumer:
    """Consumes customer events from a queue bound to the topic exchange"""

    name = "rabbitmq"

    def __init__(
        self,
        rabbitmq_url: str,
        exchange_name: str,
        queue_name: str,
        observer: CustomerObserverService,
        prefetch_count: int = 10,
    ):
        self.rabbitmq_url = rabbitmq_url
        self.exchange_name = exchange_name
        self.queue_name = queue_name
        self.observer = observer
        self.prefetch_count = prefetch_count
        self.connection: Optional[aio_pika.abc.AbstractRobustConnection] = None
        self.channel: Optional[aio_pika.abc.AbstractChannel] = None
        self.queue: Optional[aio_pika.abc.AbstractQueue] = None
        self._task: Optional[asyncio.Task] = None

    async def connect(self) -> None:
        logger.info("Connecting observer to RabbitMQ...")
        self.connection = await aio_pika.connect_robust(self.rabbitmq_url, heartbeat=600)
        self.channel = await self.connection.channel()
        await self.channel.set_qos(prefetch_count=self.prefetch_count)

        exchange = await self.channel.declare_exchange(
            self.exchange_name, aio_pika.ExchangeType.TOPIC, durable=True
        )
        self.queue = await self.channel.declare_queue(self.queue_name, durable=True)
        await self.queue.bind(exchange, routing_key=BINDING_KEY)

        logger.info(
            "Observer RabbitMQ consumer connected",
            metadata={"exchange": self.exchange_name, "queue": self.queue_name, "bindingKey": BINDING_KEY},
        )

    async def handle_message(self, message: aio_pika.abc.AbstractIncomingMessage) -> None:
        """Acknowledge every message; undecodable ones are dropped by the observer"""
        async with message.process():
            self.observer.receive(message.body)

    async def consume(self) -> None:
        if self.queue is None:
            raise RuntimeError("Queue not initialized. Call connect() first.")

        logger.info(f"Observer listening for events on queue: {self.queue_name}")
        async with self.queue.iterator() as queue_iter:
            async for message in queue_iter:
                await self.handle_message(message)

    async def start(self) -> None:
        await self.connect()
        self._task = asyncio.create_task(self.consume())

    async def is_healthy(self) -> bool:
        return self.connection is not None and not self.connection.is_closed

    async def close(self) -> None:
        if self._task is not None:
            self._task.cancel()
            try:
                await self._task
            except asyncio.CancelledError:
                pass
            self._task = None
        if self.connection is not None:
            await self.connection.close()
            logger.info("Observer RabbitMQ connection closed")
        self.connection = None
        self.channel = None
        self.queue = None
