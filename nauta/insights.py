from typing import Dict, List

from nauta.currency import Converter
from nauta.domain import FinancialSnapshot, is_toxic
from nauta.ratios import monthly_income, safe_div

PRIORITY_ORDER = {"high": 0, "medium": 1, "low": 2}


def _insight(type_: str, icon: str, title: str, message: str, priority: str) -> Dict[str, str]:
    return {"type": type_, "icon": icon, "title": title, "message": message, "priority": priority}


def over_budget_insights(snapshot: FinancialSnapshot) -> List[Dict[str, str]]:
    # categories without a budget have no percentage to report and are skipped
    out = []
    for c in snapshot.categories:
        if not c.budget or c.budget <= 0:
            continue
        percentage = (c.spent or 0) / c.budget * 100
        if percentage > 100:
            out.append(_insight(
                "warning",
                "fa-exclamation-triangle",
                f"Over budget in {c.name}",
                f"You have spent {percentage:.0f}% of the assigned budget.",
                "high",
            ))
    return out


def generate_insights(snapshot: FinancialSnapshot, convert: Converter, display_currency: str) -> List[Dict[str, str]]:
    insights = over_budget_insights(snapshot)

    income = monthly_income(snapshot.ynab_config, convert, display_currency) or snapshot.totals.budgeted
    savings_rate = safe_div(snapshot.totals.available, income) if income > 0 else 0.0
    if savings_rate < 0.1:
        insights.append(_insight(
            "warning",
            "fa-piggy-bank",
            "Low savings rate",
            f"You are saving only {savings_rate * 100:.1f}% of your income. At least 20% is recommended.",
            "high",
        ))
    elif savings_rate > 0.3:
        insights.append(_insight(
            "success",
            "fa-trophy",
            "Excellent savings rate!",
            f"You are saving {savings_rate * 100:.1f}% of your income. Keep it up!",
            "low",
        ))

    toxic_count = sum(1 for d in snapshot.debts if is_toxic(d))
    if toxic_count:
        insights.append(_insight(
            "danger",
            "fa-exclamation-circle",
            "Toxic debts detected",
            f"You have {toxic_count} high-interest consumer debt(s). Prioritise paying them off.",
            "high",
        ))

    # sorted() is stable, equal priorities keep their order
    return sorted(insights, key=lambda i: PRIORITY_ORDER.get(i["priority"], len(PRIORITY_ORDER)))
