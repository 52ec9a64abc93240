from dataclasses import dataclass
from typing import Optional, Union

TOXIC_DEBT_TYPES = frozenset({
    "Préstamo Automotriz",
    "Préstamo de Consumo",
    "Tarjeta de Crédito",
    "Préstamo Personal",
})

EMERGENCY_KEYWORDS = ("emergencia", "emergency")


@dataclass(frozen=True)
class Category:
    id: str
    name: str
    budget: float = 0.0
    spent: float = 0.0
    currency: str = "EUR"
    group: str = ""
    type: str = "expense"  # "income" or "expense"


@dataclass(frozen=True)
class Transaction:
    id: str
    date: str        # ISO date, e.g. "2025-09-01" or "2025-09-01T10:00:00"
    amount: float
    currency: str = "EUR"
    category_id: str = ""
    description: str = ""


@dataclass(frozen=True)
class Debt:
    id: str
    name: str
    type: str = ""
    current_balance: float = 0.0
    original_amount: float = 0.0
    interest_rate: float = 0.0
    monthly_payment: float = 0.0
    currency: str = "EUR"
    is_toxic: Optional[bool] = None  # None -> inferred from type


@dataclass(frozen=True)
class SavingsGoal:
    id: str
    name: str
    current_amount: float = 0.0
    target_amount: float = 0.0
    currency: str = "EUR"
    is_emergency_fund: Optional[bool] = None
    linked_platforms: tuple[str, ...] = ()
    linked_platform_id: Optional[str] = None  # legacy single link


@dataclass(frozen=True)
class Holding:
    symbol: str
    quantity: float = 0.0
    current_price: float = 0.0


# A balance-holding account (brokerage, pension fund manager...)
@dataclass(frozen=True)
class Platform:
    id: str
    name: str
    current_balance: float = 0.0
    currency: str = "EUR"
    type: str = ""
    platform: str = ""
    holdings: tuple[Holding, ...] = ()


# A quantity-and-price position (a stock, an ETF, a coin)
@dataclass(frozen=True)
class Asset:
    id: str
    name: str
    quantity: float = 0.0
    purchase_price: float = 0.0
    current_price: float = 0.0
    currency: str = "EUR"
    type: str = ""


Investment = Union[Platform, Asset]


@dataclass(frozen=True)
class YnabConfig:
    monthly_income: float = 0.0
    currency: Optional[str] = None


@dataclass(frozen=True)
class InsuranceConfig:
    has_health_insurance: bool = False
    has_life_insurance: bool = False
    has_catastrophic_insurance: bool = False
    health_insurance_provider: str = ""
    life_insurance_provider: str = ""
    catastrophic_insurance_provider: str = ""

    def any_enabled(self) -> bool:
        return (
            self.has_health_insurance
            or self.has_life_insurance
            or self.has_catastrophic_insurance
        )


# Budget figures the host already computed for the current month
@dataclass(frozen=True)
class BudgetTotals:
    budgeted: float = 0.0
    spent: float = 0.0
    available: float = 0.0


@dataclass(frozen=True)
class FinancialSnapshot:
    categories: tuple[Category, ...] = ()
    transactions: tuple[Transaction, ...] = ()
    debts: tuple[Debt, ...] = ()
    savings_goals: tuple[SavingsGoal, ...] = ()
    investments: tuple[Investment, ...] = ()
    ynab_config: Optional[YnabConfig] = None
    totals: BudgetTotals = BudgetTotals()


def is_toxic(debt: Debt) -> bool:
    if debt.is_toxic is not None:
        return debt.is_toxic
    return debt.type in TOXIC_DEBT_TYPES


def is_emergency_goal(goal: SavingsGoal) -> bool:
    name = (goal.name or "").lower()
    return any(k in name for k in EMERGENCY_KEYWORDS)


def investment_value(inv: Investment) -> float:
    if isinstance(inv, Asset):
        return (inv.quantity or 0) * (inv.current_price or 0)
    return inv.current_balance or 0


def investment_cost(inv: Investment) -> float:
    if isinstance(inv, Asset):
        return (inv.quantity or 0) * (inv.purchase_price or 0)
    return inv.current_balance or 0
