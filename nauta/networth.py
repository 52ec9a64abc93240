import logging
from datetime import date, datetime
from typing import Any, Dict, Optional

from nauta.currency import Converter
from nauta.domain import FinancialSnapshot, investment_value
from nauta.ratios import total_debt
from nauta.storage import KeyValueStore

logger = logging.getLogger(__name__)

NET_WORTH_HISTORY_KEY = "netWorthHistory"


def calculate_net_worth(snapshot: FinancialSnapshot, convert: Converter, display_currency: str) -> float:
    total_savings = sum(
        convert(g.current_amount or 0, g.currency or display_currency, display_currency)
        for g in snapshot.savings_goals
    )
    total_investments = sum(
        convert(investment_value(inv), inv.currency or display_currency, display_currency)
        for inv in snapshot.investments
    )
    return total_savings + total_investments - total_debt(snapshot.debts, convert, display_currency)


class NetWorthHistory:
    """Daily net worth snapshots kept in a key-value store, keyed by ISO date."""

    def __init__(self, store: KeyValueStore, key: str = NET_WORTH_HISTORY_KEY):
        self._store = store
        self._key = key

    def get_history(self) -> Dict[str, Dict[str, Any]]:
        return self._store.load(self._key, {}) or {}

    def needs_snapshot(self, today: Optional[date] = None) -> bool:
        day = (today or date.today()).isoformat()
        return day not in self.get_history()

    def save_snapshot(self, net_worth: float, currency: str, today: Optional[date] = None) -> Dict[str, Any]:
        day = today or date.today()
        entry = {
            "value": net_worth,
            "currency": currency,
            "timestamp": datetime.now().isoformat(),
        }
        history = dict(self.get_history())
        history[day.isoformat()] = entry
        self._store.save(self._key, history)
        logger.info("Saved net worth snapshot for %s: %.2f %s", day.isoformat(), net_worth, currency)
        return entry


def history_change(history: Dict[str, Dict[str, Any]], limit: int = 12) -> Dict[str, Any]:
    entries = sorted(history.items())[-limit:] if limit > 0 else []
    if len(entries) < 2:
        return {"value": 0.0, "percent": 0.0, "trend": "neutral"}

    first = entries[0][1].get("value") or 0
    last = entries[-1][1].get("value") or 0
    diff = last - first
    return {
        "value": diff,
        "percent": diff / abs(first) * 100 if first else 0.0,
        "trend": "up" if diff > 0 else "down" if diff < 0 else "neutral",
    }
