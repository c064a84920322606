"""
FastAPI Application - Customer Service
Customer CRUD API that publishes a domain event for every change
"""

# Load environment variables from .env file FIRST before any other imports
from dotenv import load_dotenv
load_dotenv()

from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api import customers, health, home
from app.core.config import config
from app.core.errors import register_exception_handlers
from app.core.logger import logger
from app.core.telemetry import instrument_app, instrument_database
from app.db.database import close_database_connection, connect_to_database, db
from app.events import create_event_publisher, create_transport
from app.middleware import CorrelationIdMiddleware


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan events"""
    # Startup
    logger.info("Starting Customer Service...")
    await connect_to_database()
    instrument_database(db.engine)

    transport = create_transport(config)
    app.state.event_transport = transport
    app.state.event_publisher = create_event_publisher(transport, config)

    logger.info(
        "Customer Service started successfully",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port,
            "event_transport": transport.name,
            "topic": config.topic_name,
        },
    )

    yield

    # Shutdown
    logger.info("Shutting down Customer Service...")
    await transport.close()
    await close_database_connection()


# Create FastAPI application with lifespan management
app = FastAPI(
    title="Customer Service",
    description="Customer management API publishing customer events over pub/sub",
    version=config.service_version,
    lifespan=lifespan,
)
app.state.service_name = config.service_name
app.state.uses_database = True

# Instrument app with OpenTelemetry for automatic tracing
instrument_app(app)

# Configure error handlers
register_exception_handlers(app)

app.add_middleware(CorrelationIdMiddleware, header_name=config.correlation_id_header)

# Include API routers
app.include_router(home.router, tags=["home"])
app.include_router(health.router, prefix="/api", tags=["health"])
app.include_router(customers.router, prefix="/api/v1/customers", tags=["customers"])


if __name__ == "__main__":
    import uvicorn

    logger.info(
        f"Starting {config.service_name} on port {config.port}",
        metadata={
            "service_name": config.service_name,
            "version": config.service_version,
            "environment": config.environment,
            "port": config.port,
        },
    )

    uvicorn.run(
        "main:app",
        host=config.host,
        port=config.port,
        reload=config.environment == "development",
    )
