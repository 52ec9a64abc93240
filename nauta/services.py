import logging
from datetime import date
from typing import Any, Callable, Dict, Optional, Sequence

from nauta.currency import Converter
from nauta.domain import FinancialSnapshot, InsuranceConfig
from nauta.functional import validate_snapshot
from nauta.insights import generate_insights
from nauta.networth import calculate_net_worth
from nauta.projection import compare_with_previous_month, project_cashflow, projection_stats
from nauta.ratios import (
    calculate_budget_savings_rate,
    calculate_debt_service_ratio,
    calculate_debt_to_income_ratio,
    calculate_emergency_fund_months,
)
from nauta.scoring import calculate_financial_health, calculate_nauta_index

logger = logging.getLogger(__name__)


class AnalysisContext:
    """Everything a calculator needs besides the snapshot."""

    def __init__(self, convert: Converter, display_currency: str,
                 insurance: Optional[InsuranceConfig] = None, today: Optional[date] = None):
        self.convert = convert
        self.display_currency = display_currency
        self.insurance = insurance
        self.today = today


class AnalysisService:
    """Facade running injected validators and calculators over a snapshot.

    validators: functions taking (snapshot) -> Sequence[str]
    calculators: functions taking (snapshot, ctx, acc) -> dict (partial results)
    """

    def __init__(self, validators: Sequence[Callable[..., Sequence[str]]],
                 calculators: Sequence[Callable[..., Dict[str, Any]]]):
        self.validators = validators
        self.calculators = calculators

    def analysis_report(self, snapshot: FinancialSnapshot, ctx: AnalysisContext) -> Dict[str, Any]:
        report = {
            "currency": ctx.display_currency,
            "validation": [],
            "steps": [],
            "result": {},
        }

        for v in self.validators:
            try:
                msgs = v(snapshot)
            except Exception as e:
                logger.exception("Validator %s failed", getattr(v, "__name__", v))
                msgs = [f"validator_error: {e}"]
            report["validation"].append({"validator": getattr(v, "__name__", str(v)), "messages": list(msgs)})

        acc: Dict[str, Any] = {}
        for calc in self.calculators:
            out = calc(snapshot, ctx, acc)
            report["steps"].append({"calculator": getattr(calc, "__name__", str(calc)), "output": out})
            if isinstance(out, dict):
                acc.update(out)

        report["result"] = acc
        return report


def nauta_index_step(snapshot: FinancialSnapshot, ctx: AnalysisContext, acc: dict) -> dict:
    return {"nauta_index": calculate_nauta_index(snapshot, ctx.convert, ctx.display_currency, ctx.insurance)}


def net_worth_step(snapshot: FinancialSnapshot, ctx: AnalysisContext, acc: dict) -> dict:
    return {"net_worth": calculate_net_worth(snapshot, ctx.convert, ctx.display_currency)}


def ratios_step(snapshot: FinancialSnapshot, ctx: AnalysisContext, acc: dict) -> dict:
    ynab = snapshot.ynab_config
    income = ynab.monthly_income if ynab else 0
    income_currency = ynab.currency if ynab else None
    return {
        "ratios": {
            "debt_to_income": calculate_debt_to_income_ratio(
                snapshot.debts, income, ctx.convert, ctx.display_currency, income_currency
            ),
            "savings_rate": calculate_budget_savings_rate(snapshot, ctx.convert, ctx.display_currency),
            "debt_service": calculate_debt_service_ratio(
                snapshot.debts, income, ctx.convert, ctx.display_currency, income_currency
            ),
            "emergency_fund_months": calculate_emergency_fund_months(
                snapshot.savings_goals, snapshot.investments, snapshot.categories,
                ctx.convert, ctx.display_currency,
            ),
        },
        "financial_health": calculate_financial_health(snapshot, ctx.convert, ctx.display_currency),
    }


def insights_step(snapshot: FinancialSnapshot, ctx: AnalysisContext, acc: dict) -> dict:
    return {"insights": generate_insights(snapshot, ctx.convert, ctx.display_currency)}


def cashflow_step(snapshot: FinancialSnapshot, ctx: AnalysisContext, acc: dict) -> dict:
    projection = project_cashflow(
        snapshot.categories, snapshot.debts, snapshot.ynab_config,
        ctx.convert, ctx.display_currency, ctx.today,
    )
    return {
        "projection": projection,
        "projection_stats": projection_stats(projection),
        "month_comparison": compare_with_previous_month(
            snapshot.transactions, ctx.convert, ctx.display_currency, ctx.today
        ),
    }


def default_service() -> AnalysisService:
    return AnalysisService(
        validators=[validate_snapshot],
        calculators=[nauta_index_step, net_worth_step, ratios_step, insights_step, cashflow_step],
    )
