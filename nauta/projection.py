import logging
from datetime import date
from typing import Any, Dict, Iterable, List, Optional

import numpy as np
import pandas as pd

from nauta.currency import Converter
from nauta.domain import Category, Debt, Transaction, YnabConfig
from nauta.ratios import monthly_expenses, monthly_income, total_debt_payments

logger = logging.getLogger(__name__)

PROJECTION_MONTHS = 12


def in_month(period: pd.Period):
    def _filter(t: Transaction) -> bool:
        ts = pd.to_datetime(t.date, errors="coerce", format="ISO8601")
        if pd.isna(ts):
            return False
        return ts.year == period.year and ts.month == period.month

    return _filter


def _bucket(transactions: Iterable[Transaction], period: pd.Period, convert: Converter,
            display_currency: str) -> Dict[str, Any]:
    selected = list(filter(in_month(period), transactions))
    return {
        "name": period.strftime("%B %Y"),
        "total": sum(
            convert(t.amount or 0, t.currency or display_currency, display_currency) for t in selected
        ),
        "transactions": len(selected),
    }


def compare_with_previous_month(
    transactions: Iterable[Transaction],
    convert: Converter,
    display_currency: str,
    today: Optional[date] = None,
) -> Dict[str, Any]:
    transactions = tuple(transactions)
    current_period = pd.Period(pd.Timestamp(today or date.today()), freq="M")
    previous_period = current_period - 1

    current = _bucket(transactions, current_period, convert, display_currency)
    last = _bucket(transactions, previous_period, convert, display_currency)

    difference = current["total"] - last["total"]
    percentage_change = difference / last["total"] * 100 if last["total"] > 0 else 0.0

    return {
        "current_month": current,
        "last_month": last,
        "difference": difference,
        "percentage_change": percentage_change,
        "trend": "up" if difference > 0 else "down" if difference < 0 else "equal",
        "currency": display_currency,
    }


def project_cashflow(
    categories: Iterable[Category],
    debts: Iterable[Debt],
    ynab_config: Optional[YnabConfig],
    convert: Converter,
    display_currency: str,
    today: Optional[date] = None,
) -> List[Dict[str, Any]]:
    """Twelve monthly entries with constant income, expenses and debt payments.

    Month 0 starts its cumulative balance at income minus expenses, without
    the debt payments; every later month adds the full net cashflow.
    """
    expenses = monthly_expenses(categories, convert, display_currency)
    debt_payments = total_debt_payments(debts, convert, display_currency)
    income = monthly_income(ynab_config, convert, display_currency) or expenses

    net_cashflow = income - expenses - debt_payments
    start = pd.Period(pd.Timestamp(today or date.today()), freq="M")

    projection = []
    cumulative = income - expenses
    for i in range(PROJECTION_MONTHS):
        if i > 0:
            cumulative += net_cashflow
        projection.append({
            "month": (start + i).strftime("%b %Y"),
            "month_index": i,
            "income": income,
            "expenses": expenses,
            "debt_payments": debt_payments,
            "net_cashflow": net_cashflow,
            "cumulative_balance": cumulative,
            "currency": display_currency,
        })

    logger.debug("Projected cashflow: net %.2f per month, final %.2f", net_cashflow, cumulative)
    return projection


def projection_stats(projection: List[Dict[str, Any]]) -> Dict[str, Any]:
    if not projection:
        return {
            "deficit_months": 0,
            "avg_net_cashflow": 0.0,
            "final_balance": 0.0,
            "min_balance": 0.0,
            "is_healthy": False,
        }

    net = np.array([p["net_cashflow"] for p in projection], dtype=float)
    balances = np.array([p["cumulative_balance"] for p in projection], dtype=float)
    deficit_months = int((net < 0).sum())
    final_balance = float(balances[-1])
    return {
        "deficit_months": deficit_months,
        "avg_net_cashflow": float(net.mean()),
        "final_balance": final_balance,
        "min_balance": float(balances.min()),
        "is_healthy": deficit_months == 0 and final_balance > 0,
    }


def projection_frame(projection: List[Dict[str, Any]]) -> pd.DataFrame:
    df = pd.DataFrame(projection)
    if df.empty:
        return df
    return df.set_index("month")
