"""
Métricas para los tableros de admin y de mercado.
"""

from dataclasses import asdict, dataclass
from typing import Optional

from pydantic import BaseModel, Field, ValidationError as PydanticValidationError

from habitar.database import InvitationRepository, ListingRepository, SupabaseClient, UserRepository
from habitar.errors import ValidationError

# Cap rate (%) a partir del cual una inversión se considera excelente/buena/aceptable
ROI_BENCHMARKS = {"excellent": 12, "good": 8, "fair": 6}

MORTGAGE_RATE = 6.5
MORTGAGE_YEARS = 30
APPRECIATION_RATE = 0.03


class ROIInputs(BaseModel):
    """Datos de la calculadora de ROI; montos mensuales salvo el precio y el anticipo."""

    purchase_price: float = Field(..., gt=0)
    down_payment: float = Field(..., gt=0)
    monthly_rent: float = Field(..., ge=0)
    property_taxes: float = Field(0, ge=0)
    insurance: float = Field(0, ge=0)
    maintenance: float = Field(0, ge=0)
    vacancy_rate: float = Field(5, ge=0, le=100)
    management_fee: float = Field(8, ge=0, le=100)


def parse_roi_inputs(data: dict) -> ROIInputs:
    """
    Raises:
        ValidationError: Con un mensaje por campo
    """
    try:
        return ROIInputs.model_validate(data)
    except PydanticValidationError as e:
        raise ValidationError.from_pydantic(e, "Parámetros de ROI inválidos") from e


@dataclass
class ROIMetrics:
    monthly_mortgage: float
    monthly_cash_flow: float
    annual_cash_flow: float
    net_operating_income: float
    cap_rate: float
    cash_on_cash_return: float
    total_roi: float
    break_even_rent: float
    months_to_break_even: float

    def to_dict(self) -> dict:
        return asdict(self)


def mortgage_payment(principal: float, rate: float, years: int) -> float:
    """Cuota mensual de un préstamo francés."""
    monthly_rate = rate / 100 / 12
    payments = years * 12
    if monthly_rate == 0:
        return principal / payments
    factor = (1 + monthly_rate) ** payments
    return principal * monthly_rate * factor / (factor - 1)


def calculate_roi(inputs: ROIInputs) -> ROIMetrics:
    loan = inputs.purchase_price - inputs.down_payment
    monthly_mortgage = mortgage_payment(loan, MORTGAGE_RATE, MORTGAGE_YEARS)

    vacancy_loss = inputs.monthly_rent * inputs.vacancy_rate / 100
    management_cost = inputs.monthly_rent * inputs.management_fee / 100
    operating = (
        inputs.property_taxes
        + inputs.insurance
        + inputs.maintenance
        + vacancy_loss
        + management_cost
    )
    monthly_expenses = monthly_mortgage + operating
    monthly_cash_flow = inputs.monthly_rent - monthly_expenses
    annual_cash_flow = monthly_cash_flow * 12
    noi = inputs.monthly_rent * 12 - operating * 12

    return ROIMetrics(
        monthly_mortgage=monthly_mortgage,
        monthly_cash_flow=monthly_cash_flow,
        annual_cash_flow=annual_cash_flow,
        net_operating_income=noi,
        cap_rate=noi / inputs.purchase_price * 100,
        cash_on_cash_return=annual_cash_flow / inputs.down_payment * 100,
        total_roi=(annual_cash_flow + inputs.purchase_price * APPRECIATION_RATE)
        / inputs.down_payment
        * 100,
        break_even_rent=monthly_expenses,
        months_to_break_even=inputs.down_payment / max(monthly_cash_flow, 1),
    )


class AnalyticsService:
    """Conteos y promedios sobre las tablas del backend."""

    def __init__(self, client: Optional[SupabaseClient] = None):
        self.invites = InvitationRepository(client)
        self.listings = ListingRepository(self.invites.client)
        self.users = UserRepository(self.invites.client)

    def invite_stats(self) -> dict:
        stats = {"total": 0, "pending": 0, "accepted": 0, "declined": 0}
        for row in self.invites.get_statuses():
            stats["total"] += 1
            status = row.get("status")
            if status in stats:
                stats[status] += 1
        return stats

    def user_stats(self) -> dict:
        stats = {"total": 0, "tenant": 0, "agent": 0, "landlord": 0, "admin": 0}
        for row in self.users.get_roles():
            stats["total"] += 1
            role = row.get("role")
            if role in stats:
                stats[role] += 1
        return stats

    def market_metrics(self) -> dict:
        prices = self.listings.get_active_prices()
        average_rent = sum(prices) / len(prices) if prices else 0
        return {
            "average_rent": round(average_rent),
            "active_listings": self.listings.count_active(),
            "roi_benchmarks": dict(ROI_BENCHMARKS),
        }
