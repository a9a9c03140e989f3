"""
Property ROE Analysis Model

One row per calculator submission. Derived figures are always computed on the
server from the stored inputs; rows are never updated after creation.
"""

from sqlalchemy import Column, Integer, String, Float, Text, DateTime, ForeignKey
from sqlalchemy.orm import relationship

from estateiq.models import Base
from estateiq.utils.dates import utcnow


class PropertyRoeAnalysis(Base):
    """
    Attributes:
        id: Primary key
        user_id: Foreign key to the user who ran the calculation
        annual_rental_income, annual_expenses, current_market_value,
        current_loan_balance, annual_debt_service: Inputs as parsed
        noi: Net operating income (income - expenses)
        equity: Market value - loan balance
        cash_flow: NOI - annual debt service
        unlevered_roe: NOI / equity, in percent
        levered_roe: (NOI - debt service) / equity, in percent
        narrative: Plain-text summary of the result
        created_at: When the analysis was run
    """
    __tablename__ = "property_roe_analyses"

    id = Column(Integer, primary_key=True, index=True)
    user_id = Column(String(36), ForeignKey("users.id", ondelete="CASCADE"), nullable=False, index=True)

    # Inputs
    annual_rental_income = Column(Float, nullable=False, default=0)
    annual_expenses = Column(Float, nullable=False, default=0)
    current_market_value = Column(Float, nullable=False, default=0)
    current_loan_balance = Column(Float, nullable=False, default=0)
    annual_debt_service = Column(Float, nullable=False, default=0)

    # Derived
    noi = Column(Float, nullable=False)
    equity = Column(Float, nullable=False)
    cash_flow = Column(Float, nullable=False)
    unlevered_roe = Column(Float, nullable=False)
    levered_roe = Column(Float, nullable=False)

    narrative = Column(Text, nullable=False, default="")
    created_at = Column(DateTime, default=utcnow, nullable=False)

    user = relationship("User", back_populates="roe_analyses")

    def to_dict(self) -> dict:
        return {
            "id": self.id,
            "userId": self.user_id,
            "annualRentalIncome": self.annual_rental_income,
            "annualExpenses": self.annual_expenses,
            "currentMarketValue": self.current_market_value,
            "currentLoanBalance": self.current_loan_balance,
            "annualDebtService": self.annual_debt_service,
            "noi": self.noi,
            "equity": self.equity,
            "cashFlow": self.cash_flow,
            "unleveredRoe": self.unlevered_roe,
            "leveredRoe": self.levered_roe,
            "narrative": self.narrative,
            "createdAt": self.created_at.isoformat() if self.created_at else None,
        }
