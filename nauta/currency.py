import logging
from typing import Callable, Mapping

logger = logging.getLogger(__name__)

# amount, from_currency, to_currency -> amount
Converter = Callable[[float, str, str], float]

# units of each currency per one EUR
EXCHANGE_RATES = {
    "EUR": 1.0,
    "CLP": 1050.0,
    "USD": 1.09,
    "UF": 1050.0 / 36000.0,  # one UF is about 36000 CLP
}


def identity_converter(amount: float, from_currency: str, to_currency: str) -> float:
    return amount


def rate_converter(rates: Mapping[str, float] = EXCHANGE_RATES) -> Converter:
    """Build a converter that goes through the base currency of ``rates``."""
    table = dict(rates)

    def _rate(code: str) -> float:
        rate = table.get(code)
        if not rate:
            logger.warning("No exchange rate for %s, assuming 1", code)
            return 1.0
        return rate

    def convert(amount: float, from_currency: str, to_currency: str) -> float:
        if from_currency == to_currency:
            return amount
        return amount / _rate(from_currency) * _rate(to_currency)

    return convert
