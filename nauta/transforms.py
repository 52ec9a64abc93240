import json
import logging
from typing import Any, Mapping, Optional

from nauta.domain import (
    Asset,
    BudgetTotals,
    Category,
    Debt,
    FinancialSnapshot,
    Holding,
    InsuranceConfig,
    Investment,
    Platform,
    SavingsGoal,
    Transaction,
    YnabConfig,
)

logger = logging.getLogger(__name__)


def _num(value: Any) -> float:
    # absent, None or non-numeric -> 0
    if value is None or isinstance(value, bool):
        return 0.0
    try:
        return float(value)
    except (TypeError, ValueError):
        return 0.0


def _get(raw: Mapping[str, Any], camel: str, snake: str, default: Any = None) -> Any:
    if camel in raw:
        return raw[camel]
    return raw.get(snake, default)


def _opt_bool(value: Any) -> Optional[bool]:
    return None if value is None else bool(value)


def category_from_dict(raw: Mapping[str, Any]) -> Category:
    return Category(
        id=str(raw.get("id", "")),
        name=raw.get("name") or "",
        budget=_num(raw.get("budget")),
        spent=_num(raw.get("spent")),
        currency=raw.get("currency") or "EUR",
        group=raw.get("group") or "",
        type=raw.get("type") or "expense",
    )


def transaction_from_dict(raw: Mapping[str, Any]) -> Transaction:
    return Transaction(
        id=str(raw.get("id", "")),
        date=str(raw.get("date") or ""),
        amount=_num(raw.get("amount")),
        currency=raw.get("currency") or "EUR",
        category_id=str(_get(raw, "categoryId", "category_id", "") or ""),
        description=raw.get("description") or "",
    )


def debt_from_dict(raw: Mapping[str, Any]) -> Debt:
    return Debt(
        id=str(raw.get("id", "")),
        name=raw.get("name") or "",
        type=raw.get("type") or "",
        current_balance=_num(_get(raw, "currentBalance", "current_balance")),
        original_amount=_num(_get(raw, "originalAmount", "original_amount")),
        interest_rate=_num(_get(raw, "interestRate", "interest_rate")),
        monthly_payment=_num(_get(raw, "monthlyPayment", "monthly_payment")),
        currency=raw.get("currency") or "EUR",
        is_toxic=_opt_bool(_get(raw, "isToxic", "is_toxic")),
    )


def goal_from_dict(raw: Mapping[str, Any]) -> SavingsGoal:
    linked = _get(raw, "linkedPlatforms", "linked_platforms") or ()
    if isinstance(linked, str):
        linked = (linked,)
    legacy = _get(raw, "linkedPlatformId", "linked_platform_id")
    return SavingsGoal(
        id=str(raw.get("id", "")),
        name=raw.get("name") or "",
        current_amount=_num(_get(raw, "currentAmount", "current_amount")),
        target_amount=_num(_get(raw, "targetAmount", "target_amount")),
        currency=raw.get("currency") or "EUR",
        is_emergency_fund=_opt_bool(_get(raw, "isEmergencyFund", "is_emergency_fund")),
        linked_platforms=tuple(str(p) for p in linked),
        linked_platform_id=str(legacy) if legacy else None,
    )


def classify_investment(raw: Mapping[str, Any]) -> Investment:
    """Turn a raw investment record into a Platform or an Asset.

    A truthy quantity marks an Asset; everything else is treated as a
    Platform whose value is its current balance (0 when absent).
    """
    common = {
        "id": str(raw.get("id", "")),
        "name": raw.get("name") or "",
        "currency": raw.get("currency") or "EUR",
        "type": raw.get("type") or "",
    }
    if raw.get("quantity"):
        return Asset(
            quantity=_num(raw.get("quantity")),
            purchase_price=_num(_get(raw, "purchasePrice", "purchase_price")),
            current_price=_num(_get(raw, "currentPrice", "current_price")),
            **common,
        )

    holdings = tuple(
        Holding(
            symbol=str(h.get("symbol") or h.get("name") or ""),
            quantity=_num(h.get("quantity")),
            current_price=_num(_get(h, "currentPrice", "current_price")),
        )
        for h in raw.get("holdings") or ()
    )
    return Platform(
        current_balance=_num(_get(raw, "currentBalance", "current_balance")),
        platform=str(raw.get("platform") or ""),
        holdings=holdings,
        **common,
    )


def ynab_from_dict(raw: Optional[Mapping[str, Any]]) -> Optional[YnabConfig]:
    if not raw:
        return None
    return YnabConfig(
        monthly_income=_num(_get(raw, "monthlyIncome", "monthly_income")),
        currency=raw.get("currency"),
    )


def insurance_from_dict(raw: Optional[Mapping[str, Any]]) -> Optional[InsuranceConfig]:
    if not raw:
        return None
    return InsuranceConfig(
        has_health_insurance=bool(_get(raw, "hasHealthInsurance", "has_health_insurance", False)),
        has_life_insurance=bool(_get(raw, "hasLifeInsurance", "has_life_insurance", False)),
        has_catastrophic_insurance=bool(
            _get(raw, "hasCatastrophicInsurance", "has_catastrophic_insurance", False)
        ),
        health_insurance_provider=_get(raw, "healthInsuranceProvider", "health_insurance_provider", "") or "",
        life_insurance_provider=_get(raw, "lifeInsuranceProvider", "life_insurance_provider", "") or "",
        catastrophic_insurance_provider=_get(
            raw, "catastrophicInsuranceProvider", "catastrophic_insurance_provider", ""
        ) or "",
    )


def totals_from_categories(categories: tuple[Category, ...]) -> BudgetTotals:
    budgeted = sum(c.budget for c in categories)
    spent = sum(c.spent for c in categories)
    return BudgetTotals(budgeted=budgeted, spent=spent, available=budgeted - spent)


def snapshot_from_dict(data: Mapping[str, Any]) -> FinancialSnapshot:
    categories = tuple(category_from_dict(c) for c in data.get("categories") or ())
    raw_totals = data.get("totals")
    if raw_totals:
        totals = BudgetTotals(
            budgeted=_num(raw_totals.get("budgeted")),
            spent=_num(raw_totals.get("spent")),
            available=_num(raw_totals.get("available")),
        )
    else:
        totals = totals_from_categories(categories)

    snapshot = FinancialSnapshot(
        categories=categories,
        transactions=tuple(transaction_from_dict(t) for t in data.get("transactions") or ()),
        debts=tuple(debt_from_dict(d) for d in data.get("debts") or ()),
        savings_goals=tuple(
            goal_from_dict(g) for g in _get(data, "savingsGoals", "savings_goals") or ()
        ),
        investments=tuple(classify_investment(i) for i in data.get("investments") or ()),
        ynab_config=ynab_from_dict(_get(data, "ynabConfig", "ynab_config")),
        totals=totals,
    )
    logger.debug(
        "Loaded snapshot: %d categories, %d debts, %d goals, %d investments",
        len(snapshot.categories),
        len(snapshot.debts),
        len(snapshot.savings_goals),
        len(snapshot.investments),
    )
    return snapshot


def load_snapshot(path: str) -> FinancialSnapshot:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return snapshot_from_dict(data)


def load_insurance_config(path: str) -> Optional[InsuranceConfig]:
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)
    return insurance_from_dict(_get(data, "insuranceConfig", "insurance_config"))
