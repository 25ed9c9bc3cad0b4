# Loans module
from app.modules.loans.models import Loan
from app.modules.loans.calculator import calculate_monthly_amount
from app.modules.loans.services import LoanService

__all__ = ["Loan", "calculate_monthly_amount", "LoanService"]
