import logging
from abc import ABC, abstractmethod
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from app.modules.loans.models import Loan

logger = logging.getLogger(__name__)


class LoanNotifier(ABC):
    """
    Hook called after a loan has been created and committed.
    Subclass to deliver email, SMS or push notifications.
    """

    @abstractmethod
    async def notify_loan_created(self, loan: "Loan") -> None:
        ...


class NoOpLoanNotifier(LoanNotifier):
    """Default notifier: delivers nothing"""

    async def notify_loan_created(self, loan: "Loan") -> None:
        logger.debug(f"No notifier configured, skipping notification for loan {loan.id}")
