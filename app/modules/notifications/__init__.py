# Notifications module
from app.modules.notifications.services import LoanNotifier, NoOpLoanNotifier

__all__ = ["LoanNotifier", "NoOpLoanNotifier"]
