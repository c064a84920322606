"""
FastAPI Application - Customer Observer
Receives customer events and prints a summary of each one
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api import events, health, home
from app.core.config import config
from app.core.errors import register_exception_handlers
from app.core.logger import logger
from app.core.telemetry import instrument_app
from app.events.transports import DaprTransport
from app.middleware import CorrelationIdMiddleware
from app.observer import CustomerObserverService, RabbitMQEventConsumer

logger.set_service_name(config.observer_service_name)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    logger.info("Starting Customer Observer...")

    consumer = None
    if config.event_transport.lower() == "rabbitmq":
        consumer = RabbitMQEventConsumer(
            rabbitmq_url=config.rabbitmq_url,
            exchange_name=config.topic_name,
            queue_name=config.observer_queue_name,
            observer=app.state.observer,
        )
        await consumer.start()
        app.state.event_transport = consumer
    else:
        app.state.event_transport = DaprTransport(
            dapr_url=config.dapr_url,
            pubsub_name=config.pubsub_name,
            timeout=config.publish_timeout_seconds,
        )

    logger.info(
        f"Customer Observer listening for messages on topic: {config.topic_name}",
        metadata={
            "service_name": config.observer_service_name,
            "pubsub": config.pubsub_name,
            "topic": config.topic_name,
            "event_transport": app.state.event_transport.name,
            "port": config.observer_port,
        },
    )

    yield

    logger.info("Shutting down Customer Observer...")
    await app.state.event_transport.close()


app = FastAPI(
    title="Customer Observer",
    description="Subscriber that reports customer events",
    version=config.service_version,
    lifespan=lifespan,
)
app.state.service_name = config.observer_service_name
app.state.observer = CustomerObserverService()

instrument_app(app)

register_exception_handlers(app)

app.add_middleware(CorrelationIdMiddleware, header_name=config.correlation_id_header)

app.include_router(home.router, tags=["home"])
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(events.router)


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.observer_service_name} on port {config.observer_port}",
        metadata={
            "service_name": config.observer_service_name,
            "environment": config.environment,
            "port": config.observer_port,
        },
    )

    uvicorn.run(
        "observer_main:app",
        host=config.host,
        port=config.observer_port,
        reload=config.environment == "development",
    )
