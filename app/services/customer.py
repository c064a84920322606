"""
Customer service containing business logic layer
"""

import math
from typing import Awaitable, List

from app.core.errors import CustomerNotFoundError, DuplicateEmailError, InvalidArgumentError
from app.core.logger import logger
from app.events.publishers.publisher import CustomerEventPublisher, PublishResult
from app.models.customer import Customer
from app.repositories.customer import SORTABLE_FIELDS, CustomerRepository
from app.schemas.customer import CustomerCreate, CustomerPage, CustomerResponse, CustomerUpdate

MAX_PAGE_SIZE = 100


class CustomerService:
    """
    Service layer for customer business logic.

    Every successful mutation attempts exactly one event publish. Publishing
    problems are logged and never change the outcome reported to the caller.
    """

    def __init__(self, repository: CustomerRepository, publisher: CustomerEventPublisher):
        self.repository = repository
        self.publisher = publisher

    async def create_customer(self, data: CustomerCreate) -> CustomerResponse:
        logger.info(
            "Creating customer",
            metadata={"event": "create_customer", "email": data.email},
        )

        if await self.repository.email_exists(data.email):
            logger.warning(
                "Attempt to create customer with duplicate email",
                metadata={"event": "duplicate_email", "email": data.email},
            )
            raise DuplicateEmailError(data.email)

        customer = await self.repository.create(data.name, data.email)

        logger.info(
            f"Created customer {customer.id}",
            metadata={"event": "customer_created", "customer_id": customer.id},
        )

        await self._publish(
            "create",
            customer.id,
            self.publisher.publish_customer_created(customer.id, customer.name, customer.email),
        )
        return CustomerResponse.model_validate(customer)

    async def get_customer(self, customer_id: int) -> CustomerResponse:
        customer = await self._require(customer_id)
        return CustomerResponse.model_validate(customer)

    async def list_customers(
        self,
        page: int = 0,
        size: int = 20,
        sort_by: str = "id",
        sort_dir: str = "asc",
    ) -> CustomerPage:
        """Paginated listing; size is clamped to MAX_PAGE_SIZE"""
        if page < 0:
            raise InvalidArgumentError("Page index must not be negative")
        if size < 1:
            raise InvalidArgumentError("Page size must be at least 1")
        if size > MAX_PAGE_SIZE:
            logger.warning(
                f"Page size limited to {MAX_PAGE_SIZE}",
                metadata={"event": "page_size_clamped", "requested": size},
            )
            size = MAX_PAGE_SIZE
        if sort_by not in SORTABLE_FIELDS:
            raise InvalidArgumentError(
                f"Cannot sort by '{sort_by}'. Must be one of: id, name, email, createdAt, updatedAt"
            )

        descending = sort_dir.lower() == "desc"
        customers, total = await self.repository.list_page(page, size, sort_by, descending)

        logger.info(
            f"Fetched {len(customers)} customers",
            metadata={
                "event": "list_customers",
                "page": page,
                "size": size,
                "sort_by": sort_by,
                "sort_dir": "desc" if descending else "asc",
                "total": total,
            },
        )

        return CustomerPage(
            content=[CustomerResponse.model_validate(c) for c in customers],
            page=page,
            size=size,
            total_elements=total,
            total_pages=math.ceil(total / size) if total else 0,
        )

    async def search_customers(self, name: str) -> List[CustomerResponse]:
        term = (name or "").strip()
        if not term:
            raise InvalidArgumentError("Search name cannot be empty")

        customers = await self.repository.search_by_name(term)

        logger.info(
            f"Found {len(customers)} customers matching name",
            metadata={"event": "search_customers", "name": term, "count": len(customers)},
        )
        return [CustomerResponse.model_validate(c) for c in customers]

    async def update_customer(self, customer_id: int, data: CustomerUpdate) -> CustomerResponse:
        customer = await self._require(customer_id)

        if await self.repository.email_exists(data.email, exclude_id=customer_id):
            logger.warning(
                f"Attempt to update customer {customer_id} with duplicate email",
                metadata={"event": "duplicate_email", "customer_id": customer_id, "email": data.email},
            )
            raise DuplicateEmailError(data.email)

        customer = await self.repository.update(customer, data.name, data.email)

        logger.info(
            f"Updated customer {customer_id}",
            metadata={"event": "customer_updated", "customer_id": customer_id},
        )

        await self._publish(
            "update",
            customer_id,
            self.publisher.publish_customer_updated(customer.id, customer.name, customer.email),
        )
        return CustomerResponse.model_validate(customer)

    async def delete_customer(self, customer_id: int) -> None:
        customer = await self._require(customer_id)
        name = customer.name

        await self.repository.delete(customer)

        logger.info(
            f"Deleted customer {customer_id}",
            metadata={"event": "customer_deleted", "customer_id": customer_id},
        )

        await self._publish(
            "delete",
            customer_id,
            self.publisher.publish_customer_deleted(customer_id, name),
        )

    async def _require(self, customer_id: int) -> Customer:
        customer = await self.repository.get_by_id(customer_id)
        if customer is None:
            logger.warning(
                f"Customer {customer_id} not found",
                metadata={"event": "customer_not_found", "customer_id": customer_id},
            )
            raise CustomerNotFoundError(customer_id)
        return customer

    async def _publish(self, action: str, customer_id: int, publish: Awaitable[PublishResult]) -> None:
        """Await a publish call; failures are logged and swallowed"""
        try:
            result = await publish
        except Exception as e:
            self._log_publish_failure(action, customer_id, str(e))
            return

        if not result.success:
            self._log_publish_failure(action, customer_id, result.error)

    def _log_publish_failure(self, action: str, customer_id: int, error) -> None:
        logger.error(
            f"Failed to publish customer {action} event for id={customer_id}, continuing anyway",
            metadata={
                "event": "customer_event_publish_failed",
                "action": action,
                "customer_id": customer_id,
                "error": error,
            },
        )
