from fastapi import APIRouter, Depends, Response, status
from typing import List
from app.core.dependencies import get_loan_service
from app.core.exceptions import ErrorResponse
from app.modules.loans.schemas import LoanRequest, LoanResponse
from app.modules.loans.services import LoanService

router = APIRouter(prefix="/api/v1/loans", tags=["loans"])

NOT_FOUND_RESPONSE = {404: {"model": ErrorResponse, "description": "Loan or user not found"}}


@router.post(
    "/",
    response_model=LoanResponse,
    status_code=status.HTTP_201_CREATED,
    summary="Create a new loan",
    responses={
        **NOT_FOUND_RESPONSE,
        400: {"model": ErrorResponse, "description": "User rejected or invalid loan terms"},
        500: {"model": ErrorResponse, "description": "User service failure"},
    },
)
async def create_loan(
    loan_in: LoanRequest,
    service: LoanService = Depends(get_loan_service)
):
    """
    Create a loan record.

    - The owning user must exist in the user service
    - The monthly amount is computed from the configured annual interest rate
    """
    return await service.create_loan(loan_in)


@router.get("/", response_model=List[LoanResponse], summary="Get all loans")
async def read_loans(service: LoanService = Depends(get_loan_service)):
    """Get every loan, oldest first"""
    return await service.get_loans()


@router.get("/user/{user_id}", response_model=List[LoanResponse], summary="Get loans by user ID")
async def read_user_loans(
    user_id: int,
    service: LoanService = Depends(get_loan_service)
):
    """Get all loans owned by a user. Empty when the user has none."""
    return await service.get_user_loans(user_id)


@router.get(
    "/{loan_id}",
    response_model=LoanResponse,
    summary="Get loan by ID",
    responses=NOT_FOUND_RESPONSE,
)
async def read_loan(
    loan_id: int,
    service: LoanService = Depends(get_loan_service)
):
    return await service.get_loan(loan_id)


@router.put(
    "/{loan_id}",
    response_model=LoanResponse,
    summary="Update a loan",
    responses={
        **NOT_FOUND_RESPONSE,
        400: {"model": ErrorResponse, "description": "Invalid loan terms"},
    },
)
async def update_loan(
    loan_id: int,
    loan_in: LoanRequest,
    service: LoanService = Depends(get_loan_service)
):
    """Replace the user, amount and duration of an existing loan"""
    return await service.update_loan(loan_id, loan_in)


@router.delete(
    "/{loan_id}",
    status_code=status.HTTP_204_NO_CONTENT,
    response_class=Response,
    summary="Delete a loan",
    responses=NOT_FOUND_RESPONSE,
)
async def delete_loan(
    loan_id: int,
    service: LoanService = Depends(get_loan_service)
):
    await service.delete_loan(loan_id)
    return Response(status_code=status.HTTP_204_NO_CONTENT)
