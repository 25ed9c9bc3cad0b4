from pydantic import BaseModel, Field
from datetime import datetime
from decimal import Decimal
from typing import Optional


class LoanRequest(BaseModel):
    """Payload for creating or updating a loan"""
    user_id: int = Field(..., gt=0, description="Owner of the loan in the user service")
    amount: Decimal = Field(..., gt=0, max_digits=16, decimal_places=2, description="Principal")
    # whole-month check happens in calculate_monthly_amount
    duration: Decimal = Field(..., max_digits=8, decimal_places=2, description="Term in months")


class LoanResponse(BaseModel):
    id: int
    user_id: int
    amount: Decimal
    monthly_amount: Optional[Decimal]
    duration: Decimal
    created_at: datetime
    updated_at: Optional[datetime]

    class Config:
        from_attributes = True
