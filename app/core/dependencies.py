from fastapi import Depends, Request
from sqlalchemy.ext.asyncio import AsyncSession
from app.core.config import settings
from app.core.database import get_db
from app.modules.loans.services import LoanService
from app.modules.notifications.services import LoanNotifier, NoOpLoanNotifier
from app.modules.users.client import UserClient


def get_user_client(request: Request) -> UserClient:
    """User service client opened by the application lifespan"""
    return request.app.state.user_client


def get_notifier() -> LoanNotifier:
    """Notifier invoked after loan creation"""
    return NoOpLoanNotifier()


def get_loan_service(
    db: AsyncSession = Depends(get_db),
    user_client: UserClient = Depends(get_user_client),
    notifier: LoanNotifier = Depends(get_notifier)
) -> LoanService:
    return LoanService(
        db,
        user_client,
        notifier=notifier,
        annual_interest_rate=settings.ANNUAL_INTEREST_RATE,
        recompute_on_update=settings.RECOMPUTE_MONTHLY_AMOUNT_ON_UPDATE
    )
