from sqlalchemy import Column, Integer, Numeric, DateTime
from sqlalchemy.sql import func
from app.core.database import Base


class Loan(Base):
    __tablename__ = "loans"
    __table_args__ = {"sqlite_autoincrement": True}  # ids are never reused

    id = Column(Integer, primary_key=True, index=True, autoincrement=True)
    user_id = Column(Integer, nullable=False, index=True)  # owned by the user service, no FK
    amount = Column(Numeric(16, 2), nullable=False)
    monthly_amount = Column(Numeric(18, 2), nullable=True)  # one-month terms exceed the principal
    duration = Column(Numeric(8, 2), nullable=False)  # months
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(DateTime(timezone=True), server_default=func.now(), onupdate=func.now())
