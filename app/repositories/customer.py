"""
Customer repository for data access layer following Repository pattern
"""

from typing import List, Optional, Tuple

from sqlalchemy import func, select
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.ext.asyncio import AsyncSession

from app.core.errors import DatabaseError, DuplicateEmailError
from app.core.logger import logger
from app.models.customer import Customer


# API sort keys mapped to columns; snake_case aliases accepted
SORTABLE_FIELDS = {
    "id": Customer.id,
    "name": Customer.name,
    "email": Customer.email,
    "createdAt": Customer.created_at,
    "created_at": Customer.created_at,
    "updatedAt": Customer.updated_at,
    "updated_at": Customer.updated_at,
}


class CustomerRepository:
    """Repository for customer data access operations"""

    def __init__(self, session: AsyncSession):
        self.session = session

    async def create(self, name: str, email: str) -> Customer:
        """Insert a new customer and commit"""
        customer = Customer(name=name, email=email)
        self.session.add(customer)
        await self._commit(email)
        return customer

    async def get_by_id(self, customer_id: int) -> Optional[Customer]:
        try:
            return await self.session.get(Customer, customer_id)
        except SQLAlchemyError as e:
            logger.error(f"Database error getting customer: {e}", error=e)
            raise DatabaseError("Database error during customer retrieval")

    async def email_exists(self, email: str, exclude_id: Optional[int] = None) -> bool:
        """Case-insensitive email lookup, optionally ignoring one customer"""
        query = select(func.count()).select_from(Customer).where(
            func.lower(Customer.email) == email.lower()
        )
        if exclude_id is not None:
            query = query.where(Customer.id != exclude_id)

        try:
            count = await self.session.scalar(query)
        except SQLAlchemyError as e:
            logger.error(f"Database error checking email: {e}", error=e)
            raise DatabaseError("Database error during email check")
        return bool(count)

    async def update(self, customer: Customer, name: str, email: str) -> Customer:
        customer.name = name
        customer.email = email
        await self._commit(email)
        return customer

    async def delete(self, customer: Customer) -> None:
        await self.session.delete(customer)
        await self._commit()

    async def list_page(
        self,
        page: int,
        size: int,
        sort_field: str = "id",
        descending: bool = False,
    ) -> Tuple[List[Customer], int]:
        """Return one page of customers and the total count"""
        column = SORTABLE_FIELDS[sort_field]
        order = column.desc() if descending else column.asc()
        # Tie-break on id so pages are stable
        query = (
            select(Customer)
            .order_by(order, Customer.id.asc())
            .offset(page * size)
            .limit(size)
        )

        try:
            total = await self.session.scalar(select(func.count()).select_from(Customer))
            result = await self.session.scalars(query)
        except SQLAlchemyError as e:
            logger.error(f"Database error listing customers: {e}", error=e)
            raise DatabaseError("Database error during customer listing")
        return list(result.all()), total or 0

    async def search_by_name(self, name: str) -> List[Customer]:
        """Case-insensitive substring match on name"""
        pattern = f"%{name.lower()}%"
        query = (
            select(Customer)
            .where(func.lower(Customer.name).like(pattern))
            .order_by(Customer.id.asc())
        )

        try:
            result = await self.session.scalars(query)
        except SQLAlchemyError as e:
            logger.error(f"Database error searching customers: {e}", error=e)
            raise DatabaseError("Database error during customer search")
        return list(result.all())

    async def count(self) -> int:
        return await self.session.scalar(select(func.count()).select_from(Customer)) or 0

    async def _commit(self, email: Optional[str] = None) -> None:
        try:
            await self.session.commit()
        except IntegrityError as e:
            await self.session.rollback()
            # The unique email index lost a race with a concurrent writer
            if email is not None:
                raise DuplicateEmailError(email)
            logger.error(f"Integrity error on commit: {e}", error=e)
            raise DatabaseError("Database constraint violation")
        except SQLAlchemyError as e:
            await self.session.rollback()
            logger.error(f"Database error on commit: {e}", error=e)
            raise DatabaseError("Database error during customer write")
