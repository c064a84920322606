"""
OpenTelemetry Instrumentation for FastAPI

Works alongside Dapr for automatic span creation and trace enrichment.
Dapr handles trace context propagation and OTLP export.
"""

from opentelemetry.instrumentation.fastapi import FastAPIInstrumentor
from opentelemetry.instrumentation.httpx import HTTPXClientInstrumentor
from opentelemetry.instrumentation.sqlalchemy import SQLAlchemyInstrumentor

from app.core.logger import logger


def instrument_app(app):
    """
    Instrument a FastAPI application and its outgoing HTTPX calls.

    Args:
        app: FastAPI application instance
    """
    try:
        FastAPIInstrumentor.instrument_app(app)
        HTTPXClientInstrumentor().instrument()
        logger.info("FastAPI and HTTPX instrumented with OpenTelemetry")
    except Exception as e:
        logger.error(f"Failed to instrument application: {e}", error=e)


def instrument_database(engine):
    """Instrument an async SQLAlchemy engine"""
    try:
        SQLAlchemyInstrumentor().instrument(engine=engine.sync_engine)
        logger.info("SQLAlchemy instrumented with OpenTelemetry")
    except Exception as e:
        logger.error(f"Failed to instrument database engine: {e}", error=e)
