"""Nauta Index: a 0-100 financial resilience score.

Five components with raw maxima summing to 70:

* emergency fund (20) - months of expenses covered, objective 6
* savings rate (20) - share of income left after budgeted expenses, objective 20%
* toxic debts (10) - 2.5 points lost per consumer debt
* insurance (10) - health 4, catastrophic 3, life 3
* retirement (10) - APV category 5, APV investment 5

The raw total is rescaled linearly to 0-100.
"""
import logging
from typing import Any, Dict, Optional

from nauta.currency import Converter
from nauta.domain import Category, FinancialSnapshot, InsuranceConfig, is_toxic
from nauta.ratios import (
    monthly_expenses,
    monthly_income,
    resolve_emergency_fund,
    safe_div,
    total_debt_payments,
)

logger = logging.getLogger(__name__)

EMERGENCY_FUND_MAX = 20
SAVINGS_RATE_MAX = 20
TOXIC_DEBTS_MAX = 10
INSURANCE_MAX = 10
RETIREMENT_MAX = 10
RAW_MAX = EMERGENCY_FUND_MAX + SAVINGS_RATE_MAX + TOXIC_DEBTS_MAX + INSURANCE_MAX + RETIREMENT_MAX

EMERGENCY_FUND_OBJECTIVE_MONTHS = 6
SAVINGS_RATE_OBJECTIVE = 0.20
TOXIC_DEBT_PENALTY = 2.5

HEALTH_KEYWORDS = ("médico", "salud", "complementario", "isapre")
LIFE_KEYWORDS = ("vida",)
CATASTROPHIC_KEYWORDS = ("catastróf", "ges")
RETIREMENT_CATEGORY_KEYWORDS = ("apv", "previsional", "pensión", "afp")

OVERALL_BANDS = (
    (80, "Excellent", "Your financial situation is very solid. Keep it up!"),
    (60, "Good", "You are on the right track. A few areas can still improve."),
    (40, "Regular", "Your finances need attention. Focus on the critical areas."),
)
CRITICAL = ("Critical", "Time to act. Build your emergency fund first and reduce your debts.")


def _component(max_points: int) -> Dict[str, Any]:
    return {"score": 0.0, "max": max_points, "details": {}}


def _band(value: float, bands: tuple, fallback: str) -> str:
    for threshold, label in bands:
        if value >= threshold:
            return label
    return fallback


def score_emergency_fund(snapshot: FinancialSnapshot, expenses: float, convert: Converter,
                         display_currency: str) -> Dict[str, Any]:
    result = _component(EMERGENCY_FUND_MAX)
    goal, fund_amount = resolve_emergency_fund(
        snapshot.savings_goals, snapshot.investments, convert, display_currency
    )

    details = {
        "goal": goal.name if goal else None,
        "current_amount": fund_amount,
        "months_covered": 0.0,
        "objective": EMERGENCY_FUND_OBJECTIVE_MONTHS,
        "monthly_expenses": expenses,
        "currency": display_currency,
    }
    if goal is None:
        details["status"] = "No emergency fund"
    elif expenses <= 0:
        details["status"] = "No expenses configured"
    else:
        months = fund_amount / expenses
        result["score"] = min(
            (months / EMERGENCY_FUND_OBJECTIVE_MONTHS) * EMERGENCY_FUND_MAX, EMERGENCY_FUND_MAX
        )
        details["months_covered"] = months
        details["status"] = _band(months, ((6, "Excellent"), (3, "Good"), (1, "Regular")), "Insufficient")
    result["details"] = details
    return result


def score_savings_rate(income: float, expenses: float, display_currency: str) -> Dict[str, Any]:
    result = _component(SAVINGS_RATE_MAX)
    if income <= 0:
        result["details"] = {
            "monthly_income": 0.0,
            "monthly_expenses": expenses,
            "savings_amount": 0.0,
            "savings_rate_percent": 0.0,
            "currency": display_currency,
            "objective": SAVINGS_RATE_OBJECTIVE * 100,
            "status": "No income configured",
        }
        return result

    savings_amount = income - expenses
    rate = savings_amount / income
    percent = rate * 100
    result["score"] = min(max(rate, 0) * (SAVINGS_RATE_MAX / SAVINGS_RATE_OBJECTIVE), SAVINGS_RATE_MAX)
    result["details"] = {
        "monthly_income": income,
        "monthly_expenses": expenses,
        "savings_amount": savings_amount,
        "savings_rate_percent": percent,
        "currency": display_currency,
        "objective": SAVINGS_RATE_OBJECTIVE * 100,
        "status": _band(percent, ((20, "Excellent"), (10, "Good"), (5, "Regular")), "Insufficient"),
    }
    return result


def score_toxic_debts(snapshot: FinancialSnapshot, convert: Converter, display_currency: str) -> Dict[str, Any]:
    result = _component(TOXIC_DEBTS_MAX)
    toxic = [d for d in snapshot.debts if is_toxic(d)]
    count = len(toxic)
    types = [
        {
            "name": d.name,
            "type": d.type,
            "balance": convert(d.current_balance or 0, d.currency or display_currency, display_currency),
        }
        for d in toxic
    ]

    if count == 0:
        status = "Excellent"
    elif count <= 2:
        status = "Improvable"
    else:
        status = "Critical"

    result["score"] = max(TOXIC_DEBTS_MAX - count * TOXIC_DEBT_PENALTY, 0)
    result["details"] = {
        "count": count,
        "total_amount": sum(t["balance"] for t in types),
        "currency": display_currency,
        "types": types,
        "status": status,
    }
    return result


def _has_insurance_category(categories: tuple[Category, ...], keywords: tuple[str, ...]) -> bool:
    for c in categories:
        name = (c.name or "").lower()
        if "seguro" in name and any(k in name for k in keywords):
            return True
    return False


def score_insurance(categories: tuple[Category, ...], insurance: Optional[InsuranceConfig]) -> Dict[str, Any]:
    result = _component(INSURANCE_MAX)
    configured = insurance is not None and insurance.any_enabled()

    from_names = {
        "health": _has_insurance_category(categories, HEALTH_KEYWORDS),
        "life": _has_insurance_category(categories, LIFE_KEYWORDS),
        "catastrophic": _has_insurance_category(categories, CATASTROPHIC_KEYWORDS),
    }
    from_config = {
        "health": configured and insurance.has_health_insurance,
        "life": configured and insurance.has_life_insurance,
        "catastrophic": configured and insurance.has_catastrophic_insurance,
    }
    has = {k: bool(from_config[k] or from_names[k]) for k in from_names}

    points = 0
    if has["health"]:
        points += 4
    if has["catastrophic"]:
        points += 3
    if has["life"]:
        points += 3
    points = min(points, INSURANCE_MAX)

    sources = []
    if configured:
        sources.append("config")
    if any(from_names.values()):
        sources.append("categories")

    result["score"] = points
    result["details"] = {
        "has_health_insurance": has["health"],
        "has_life_insurance": has["life"],
        "has_catastrophic_insurance": has["catastrophic"],
        "source": "+".join(sources) or "none",
        "status": _band(points, ((7, "Good protection"), (4, "Basic protection")), "No protection detected"),
    }
    return result


def score_retirement(snapshot: FinancialSnapshot) -> Dict[str, Any]:
    result = _component(RETIREMENT_MAX)
    has_category = any(
        any(k in (c.name or "").lower() for k in RETIREMENT_CATEGORY_KEYWORDS)
        for c in snapshot.categories
    )
    has_investment = any(
        "apv" in (inv.name or "").lower() or (inv.type or "").lower() == "apv"
        for inv in snapshot.investments
    )

    points = min((5 if has_category else 0) + (5 if has_investment else 0), RETIREMENT_MAX)
    result["score"] = points
    result["details"] = {
        "has_apv_category": has_category,
        "has_apv_investment": has_investment,
        "status": "Excellent" if points == RETIREMENT_MAX else "Good" if points >= 5 else "None detected",
    }
    return result


def calculate_nauta_index(
    snapshot: FinancialSnapshot,
    convert: Converter,
    display_currency: str,
    insurance: Optional[InsuranceConfig] = None,
) -> Dict[str, Any]:
    expenses = monthly_expenses(snapshot.categories, convert, display_currency)
    income = monthly_income(snapshot.ynab_config, convert, display_currency)

    breakdown = {
        "emergency_fund": score_emergency_fund(snapshot, expenses, convert, display_currency),
        "savings_rate": score_savings_rate(income, expenses, display_currency),
        "toxic_debts": score_toxic_debts(snapshot, convert, display_currency),
        "insurance": score_insurance(snapshot.categories, insurance),
        "retirement": score_retirement(snapshot),
    }

    total = sum(part["score"] for part in breakdown.values())
    score = total / RAW_MAX * 100

    status, message = CRITICAL
    for threshold, label, text in OVERALL_BANDS:
        if score >= threshold:
            status, message = label, text
            break

    logger.debug("Nauta index %.2f (%s), raw %.2f/%d", score, status, total, RAW_MAX)
    return {
        "score": score,
        "total_score": total,
        "breakdown": breakdown,
        "status": status,
        "message": message,
    }


def calculate_financial_health(snapshot: FinancialSnapshot, convert: Converter, display_currency: str) -> int:
    """Simpler 0-100 health score used by printable reports."""
    income = monthly_income(snapshot.ynab_config, convert, display_currency) or snapshot.totals.budgeted
    score = 0

    debt_ratio = safe_div(total_debt_payments(snapshot.debts, convert, display_currency), income)
    if debt_ratio < 0.2:
        score += 30
    elif debt_ratio < 0.36:
        score += 20
    elif debt_ratio < 0.5:
        score += 10

    savings_rate = safe_div(snapshot.totals.available, income)
    if savings_rate > 0.2:
        score += 25
    elif savings_rate > 0.1:
        score += 15
    elif savings_rate > 0:
        score += 5

    goal, fund_amount = resolve_emergency_fund(
        snapshot.savings_goals, snapshot.investments, convert, display_currency
    )
    if goal is not None and income > 0:
        months = fund_amount / income
        if months >= 6:
            score += 25
        elif months >= 3:
            score += 15
        elif months >= 1:
            score += 5

    count = len(snapshot.investments)
    if count >= 5:
        score += 20
    elif count >= 3:
        score += 15
    elif count >= 1:
        score += 5

    return min(score, 100)
