"""
Customer API endpoints following FastAPI best practices
Clean API layer with dependency injection
"""

from typing import List

from fastapi import APIRouter, Depends, Query, Response, status

from app.core.errors import ErrorResponseModel
from app.dependencies.customer import get_customer_service
from app.schemas.customer import CustomerCreate, CustomerPage, CustomerResponse, CustomerUpdate
from app.services.customer import CustomerService

router = APIRouter()


@router.post(
    "",
    response_model=CustomerResponse,
    status_code=status.HTTP_201_CREATED,
    responses={400: {"model": ErrorResponseModel}, 409: {"model": ErrorResponseModel}},
)
async def create_customer(
    customer: CustomerCreate,
    service: CustomerService = Depends(get_customer_service),
):
    """
    Create a new customer. Emails are unique case-insensitively.
    Publishes a CREATE event.
    """
    return await service.create_customer(customer)


@router.get("", response_model=CustomerPage)
async def list_customers(
    page: int = Query(0, ge=0, description="Page number (0-based)"),
    size: int = Query(20, ge=1, description="Page size, capped at 100"),
    sort_by: str = Query("id", alias="sortBy", description="id, name, email, createdAt or updatedAt"),
    sort_dir: str = Query("asc", alias="sortDir", description="asc or desc"),
    service: CustomerService = Depends(get_customer_service),
):
    """
    List customers with pagination and sorting.
    """
    return await service.list_customers(page=page, size=size, sort_by=sort_by, sort_dir=sort_dir)


@router.get(
    "/search",
    response_model=List[CustomerResponse],
    responses={400: {"model": ErrorResponseModel}},
)
async def search_customers(
    name: str = Query(..., description="Case-insensitive partial match on name"),
    service: CustomerService = Depends(get_customer_service),
):
    """
    Search customers by name.
    """
    return await service.search_customers(name)


@router.get(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={404: {"model": ErrorResponseModel}},
)
async def get_customer(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service),
):
    """
    Get a customer by its ID.
    """
    return await service.get_customer(customer_id)


@router.put(
    "/{customer_id}",
    response_model=CustomerResponse,
    responses={
        400: {"model": ErrorResponseModel},
        404: {"model": ErrorResponseModel},
        409: {"model": ErrorResponseModel},
    },
)
async def update_customer(
    customer_id: int,
    customer: CustomerUpdate,
    service: CustomerService = Depends(get_customer_service),
):
    """
    Replace a customer's name and email. Publishes an UPDATE event.
    """
    return await service.update_customer(customer_id, customer)


@router.delete(
    "/{customer_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    responses={404: {"model": ErrorResponseModel}},
)
async def delete_customer(
    customer_id: int,
    service: CustomerService = Depends(get_customer_service),
):
    """
    Delete a customer. Publishes a DELETE event.
    """
    await service.delete_customer(customer_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
