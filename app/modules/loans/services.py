from sqlalchemy.ext.asyncio import AsyncSession
from sqlalchemy import select, delete
from sqlalchemy.sql import func
from decimal import Decimal
from typing import List
import logging

from app.core.exceptions import NotFoundError, ValidationFailedError, UpstreamServiceError
from app.modules.loans.calculator import calculate_monthly_amount
from app.modules.loans.models import Loan
from app.modules.loans.schemas import LoanRequest, LoanResponse
from app.modules.notifications.services import LoanNotifier, NoOpLoanNotifier
from app.modules.users.client import UserClient, LookupStatus

logger = logging.getLogger(__name__)


class LoanService:
    """
    Loan CRUD on top of the loans table.

    Creation checks the owner against the user service and prices the loan
    with the configured annual interest rate. Each call runs inside the
    caller's session and commits once.
    """

    def __init__(
        self,
        db: AsyncSession,
        user_client: UserClient,
        notifier: LoanNotifier = None,
        annual_interest_rate: Decimal = Decimal("12.00"),
        recompute_on_update: bool = True
    ):
        self.db = db
        self.user_client = user_client
        self.notifier = notifier or NoOpLoanNotifier()
        self.annual_interest_rate = annual_interest_rate
        self.recompute_on_update = recompute_on_update

    async def create_loan(self, loan_in: LoanRequest) -> LoanResponse:
        logger.info(f"Creating loan for user: {loan_in.user_id}")

        # price first so bad terms are rejected without calling the user service
        monthly_amount = calculate_monthly_amount(
            loan_in.amount,
            self.annual_interest_rate,
            loan_in.duration
        )

        await self._ensure_user_exists(loan_in.user_id)

        db_loan = Loan(
            user_id=loan_in.user_id,
            amount=loan_in.amount,
            monthly_amount=monthly_amount,
            duration=loan_in.duration
        )
        self.db.add(db_loan)
        await self.db.commit()
        await self.db.refresh(db_loan)
        logger.info(f"Loan created successfully with id: {db_loan.id}")

        try:
            await self.notifier.notify_loan_created(db_loan)
        except Exception as e:
            logger.error(f"Loan created notification failed for loan {db_loan.id}: {str(e)}")

        return LoanResponse.model_validate(db_loan)

    async def get_loan(self, loan_id: int) -> LoanResponse:
        logger.info(f"Fetching loan with id: {loan_id}")
        db_loan = await self._get_loan_or_404(loan_id)
        return LoanResponse.model_validate(db_loan)

    async def get_loans(self) -> List[LoanResponse]:
        logger.info("Fetching all loans")
        result = await self.db.execute(select(Loan).order_by(Loan.id))
        return [LoanResponse.model_validate(loan) for loan in result.scalars().all()]

    async def get_user_loans(self, user_id: int) -> List[LoanResponse]:
        logger.info(f"Fetching loans for user: {user_id}")
        result = await self.db.execute(
            select(Loan).where(Loan.user_id == user_id).order_by(Loan.id)
        )
        return [LoanResponse.model_validate(loan) for loan in result.scalars().all()]

    async def update_loan(self, loan_id: int, loan_in: LoanRequest) -> LoanResponse:
        logger.info(f"Updating loan with id: {loan_id}")

        db_loan = await self._get_loan_or_404(loan_id, for_update=True)

        # priced even when the result is discarded, so bad terms are always rejected
        monthly_amount = calculate_monthly_amount(
            loan_in.amount,
            self.annual_interest_rate,
            loan_in.duration
        )
        if self.recompute_on_update:
            db_loan.monthly_amount = monthly_amount

        db_loan.user_id = loan_in.user_id
        db_loan.amount = loan_in.amount
        db_loan.duration = loan_in.duration
        db_loan.updated_at = func.now()

        await self.db.commit()
        await self.db.refresh(db_loan)
        logger.info(f"Loan updated successfully with id: {db_loan.id}")
        return LoanResponse.model_validate(db_loan)

    async def delete_loan(self, loan_id: int) -> None:
        logger.info(f"Deleting loan with id: {loan_id}")

        if not await self._loan_exists(loan_id):
            raise NotFoundError(f"Loan not found with id: {loan_id}")

        await self.db.execute(delete(Loan).where(Loan.id == loan_id))
        await self.db.commit()
        logger.info(f"Loan deleted successfully with id: {loan_id}")

    async def _get_loan_or_404(self, loan_id: int, for_update: bool = False) -> Loan:
        query = select(Loan).where(Loan.id == loan_id)
        if for_update:
            query = query.with_for_update()
        result = await self.db.execute(query)
        db_loan = result.scalar_one_or_none()
        if db_loan is None:
            raise NotFoundError(f"Loan not found with id: {loan_id}")
        return db_loan

    async def _loan_exists(self, loan_id: int) -> bool:
        """Row-locking existence check"""
        result = await self.db.execute(
            select(Loan.id).where(Loan.id == loan_id).with_for_update()
        )
        return result.scalar_one_or_none() is not None

    async def _ensure_user_exists(self, user_id: int) -> None:
        lookup = await self.user_client.get_user_by_id(user_id)

        if lookup.status == LookupStatus.FOUND:
            return
        if lookup.status == LookupStatus.NOT_FOUND:
            raise NotFoundError(lookup.message or f"User not found with id: {user_id}", code=lookup.code)
        if lookup.status == LookupStatus.VALIDATION:
            raise ValidationFailedError(lookup.message or f"User {user_id} failed validation", code=lookup.code)
        if lookup.status == LookupStatus.ERROR:
            raise UpstreamServiceError(lookup.message or "User service error")
        raise UpstreamServiceError(f"Unexpected user lookup status: {lookup.status}")
