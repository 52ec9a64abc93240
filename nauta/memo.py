import copy
from functools import lru_cache
from typing import Any, Dict, Mapping, Optional

from nauta.currency import EXCHANGE_RATES, rate_converter
from nauta.domain import FinancialSnapshot, InsuranceConfig
from nauta.scoring import calculate_nauta_index


# snapshots are frozen dataclasses of tuples and rates are frozen to sorted pairs,
# so both can key the cache
@lru_cache(maxsize=32)
def _nauta_index(
    snapshot: FinancialSnapshot,
    rates: tuple[tuple[str, float], ...],
    display_currency: str,
    insurance: Optional[InsuranceConfig],
) -> Dict[str, Any]:
    return calculate_nauta_index(snapshot, rate_converter(dict(rates)), display_currency, insurance)


def cached_nauta_index(
    snapshot: FinancialSnapshot,
    display_currency: str,
    rates: Mapping[str, float] = EXCHANGE_RATES,
    insurance: Optional[InsuranceConfig] = None,
) -> Dict[str, Any]:
    """Nauta index converted through ``rates``, memoized per rate table.

    Every caller gets its own copy of the result.
    """
    key = tuple(sorted(rates.items()))
    return copy.deepcopy(_nauta_index(snapshot, key, display_currency, insurance))


cache_info = _nauta_index.cache_info
cache_clear = _nauta_index.cache_clear
