"""
Dependency injection for Customer service, repository and publisher
"""

from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession

from app.db.database import get_session
from app.events.publishers.publisher import CustomerEventPublisher
from app.repositories.customer import CustomerRepository
from app.services.customer import CustomerService


async def get_customer_repository(
    session: AsyncSession = Depends(get_session),
) -> CustomerRepository:
    """Get customer repository bound to the request session"""
    return CustomerRepository(session)


def get_event_publisher(request: Request) -> CustomerEventPublisher:
    """Publisher built once at startup and kept on the application state"""
    return request.app.state.event_publisher


async def get_customer_service(
    repository: CustomerRepository = Depends(get_customer_repository),
    publisher: CustomerEventPublisher = Depends(get_event_publisher),
) -> CustomerService:
    """Get customer service instance"""
    return CustomerService(repository, publisher)
