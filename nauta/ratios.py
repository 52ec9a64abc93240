"""Baseline quantities and the small ratio calculators.

Every ratio returns 0 when its denominator is 0.
"""
from typing import Iterable, Optional

from nauta.currency import Converter
from nauta.domain import (
    BudgetTotals,
    Category,
    Debt,
    FinancialSnapshot,
    Investment,
    Platform,
    SavingsGoal,
    YnabConfig,
)
from nauta.functional import find_emergency_fund, find_investment


def safe_div(numerator: float, denominator: float) -> float:
    if not denominator:
        return 0.0
    return numerator / denominator


def monthly_expenses(categories: Iterable[Category], convert: Converter, display_currency: str) -> float:
    return sum(
        convert(c.budget or 0, c.currency or display_currency, display_currency)
        for c in categories
    )


def monthly_income(ynab: Optional[YnabConfig], convert: Converter, display_currency: str) -> float:
    if ynab is None or not ynab.monthly_income:
        return 0.0
    return convert(ynab.monthly_income, ynab.currency or display_currency, display_currency)


def total_debt(debts: Iterable[Debt], convert: Converter, display_currency: str) -> float:
    return sum(
        convert(d.current_balance or 0, d.currency or display_currency, display_currency)
        for d in debts
    )


def total_debt_payments(debts: Iterable[Debt], convert: Converter, display_currency: str) -> float:
    return sum(
        convert(d.monthly_payment or 0, d.currency or display_currency, display_currency)
        for d in debts
    )


def _platform_balance(inv: Investment, convert: Converter, display_currency: str) -> float:
    # only platforms carry a balance a fund can be linked to
    if not isinstance(inv, Platform):
        return 0.0
    return convert(inv.current_balance or 0, inv.currency or display_currency, display_currency)


def emergency_fund_amount(
    goal: SavingsGoal,
    investments: tuple[Investment, ...],
    convert: Converter,
    display_currency: str,
) -> float:
    """Money backing a fund: linked platforms, then the legacy single link,
    then the goal's own amount."""
    if goal.linked_platforms:
        return sum(
            find_investment(investments, pid)
            .map(lambda inv: _platform_balance(inv, convert, display_currency))
            .get_or_else(0.0)
            for pid in goal.linked_platforms
        )
    if goal.linked_platform_id:
        return (
            find_investment(investments, goal.linked_platform_id)
            .map(lambda inv: _platform_balance(inv, convert, display_currency))
            .get_or_else(0.0)
        )
    return convert(goal.current_amount or 0, goal.currency or display_currency, display_currency)


def resolve_emergency_fund(
    savings_goals: Iterable[SavingsGoal],
    investments: Iterable[Investment],
    convert: Converter,
    display_currency: str,
) -> tuple[Optional[SavingsGoal], float]:
    goal = find_emergency_fund(savings_goals).get_or_else(None)
    if goal is None:
        return None, 0.0
    return goal, emergency_fund_amount(goal, tuple(investments), convert, display_currency)


def calculate_debt_to_income_ratio(
    debts: Iterable[Debt],
    monthly_income: float,
    convert: Converter,
    display_currency: str,
    income_currency: Optional[str] = None,
) -> float:
    if not monthly_income:
        return 0.0
    income = convert(monthly_income, income_currency or display_currency, display_currency)
    return safe_div(total_debt(debts, convert, display_currency), income * 12) * 100


def calculate_savings_rate(totals: BudgetTotals, monthly_income: float) -> float:
    return safe_div(totals.available, monthly_income) * 100


def calculate_budget_savings_rate(
    snapshot: FinancialSnapshot, convert: Converter, display_currency: str
) -> float:
    income = monthly_income(snapshot.ynab_config, convert, display_currency)
    expenses = monthly_expenses(snapshot.categories, convert, display_currency)
    return safe_div(income - expenses, income) * 100


def calculate_debt_service_ratio(
    debts: Iterable[Debt],
    monthly_income: float,
    convert: Converter,
    display_currency: str,
    income_currency: Optional[str] = None,
) -> float:
    if not monthly_income:
        return 0.0
    income = convert(monthly_income, income_currency or display_currency, display_currency)
    return safe_div(total_debt_payments(debts, convert, display_currency), income) * 100


def calculate_emergency_fund_months(
    savings_goals: Iterable[SavingsGoal],
    investments: Iterable[Investment],
    categories: Iterable[Category],
    convert: Converter,
    display_currency: str,
) -> float:
    goal, amount = resolve_emergency_fund(savings_goals, investments, convert, display_currency)
    if goal is None:
        return 0.0
    return safe_div(amount, monthly_expenses(categories, convert, display_currency))


def goal_progress(goal: SavingsGoal) -> float:
    return min(safe_div(goal.current_amount, goal.target_amount) * 100, 100.0)
