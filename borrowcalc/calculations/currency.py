"""
Cross-Currency Borrowing Comparison

Compares the inflation-minus-interest advantage of borrowing in one currency
against another, net of exchange-rate risk and conversion costs.
"""

from dataclasses import dataclass, replace
from typing import Dict, List, Optional

CORRELATION = 0.7
RISK_PREMIUM_FACTOR = 0.3
BASE_CONVERSION_COST = 0.25  # Percent
EXCHANGE_SPREAD = 0.005
PPP_ADJUSTMENT = 0.7


@dataclass
class Currency:
    code: str
    name: str
    exchange_rate: float  # Units per USD
    interest_rate: float  # Percent
    inflation_rate: float  # Percent
    volatility: float  # Percent


DEFAULT_CURRENCIES: List[Currency] = [
    Currency("USD", "US Dollar", 1.0, 7.5, 3.2, 1.2),
    Currency("EUR", "Euro", 0.85, 3.2, 2.8, 1.5),
    Currency("GBP", "British Pound", 0.73, 4.8, 3.1, 1.8),
    Currency("JPY", "Japanese Yen", 110.0, 0.5, 0.8, 2.1),
    Currency("CAD", "Canadian Dollar", 1.25, 4.2, 2.9, 1.4),
    Currency("AUD", "Australian Dollar", 1.35, 3.8, 3.2, 1.9),
    Currency("CHF", "Swiss Franc", 0.88, 1.2, 1.5, 1.0),
    Currency("CNY", "Chinese Yuan", 6.8, 3.9, 2.1, 2.3),
]


def build_currency_table(
    usd_inflation: float,
    usd_interest: float,
    exchange_rates: Optional[Dict[str, float]] = None,
) -> Dict[str, Currency]:
    """
    Currency table keyed by code with current USD conditions applied.

    Live exchange rates, when given, replace the defaults for matching codes.
    """
    table = {}
    for currency in DEFAULT_CURRENCIES:
        if currency.code == "USD":
            currency = replace(
                currency, interest_rate=usd_interest, inflation_rate=usd_inflation
            )
        if exchange_rates and currency.code in exchange_rates:
            currency = replace(currency, exchange_rate=exchange_rates[currency.code])
        table[currency.code] = currency
    return table


def compare_currencies(
    base_code: str,
    target_code: str,
    loan_amount: float,
    currencies: Dict[str, Currency],
) -> Dict:
    """
    Compare borrowing in the base currency against the target currency.

    Raises:
        ValueError: If either code is not in the table
    """
    for code in (base_code, target_code):
        if code not in currencies:
            raise ValueError(f"Unknown currency: {code}")

    base = currencies[base_code]
    target = currencies[target_code]

    base_advantage = base.inflation_rate - base.interest_rate
    target_advantage = target.inflation_rate - target.interest_rate

    adjusted_volatility = abs(target.volatility - base.volatility) * (1 - CORRELATION)
    risk_premium = adjusted_volatility * RISK_PREMIUM_FACTOR + BASE_CONVERSION_COST
    adjusted_target_advantage = target_advantage - risk_premium

    effective_exchange_rate = target.exchange_rate * (1 + EXCHANGE_SPREAD)

    # Purchasing power parity drift
    expected_rate_change = (target.inflation_rate - base.inflation_rate) * PPP_ADJUSTMENT
    future_exchange_rate = target.exchange_rate * (1 + expected_rate_change / 100)

    return {
        "base_advantage": base_advantage,
        "target_advantage": target_advantage,
        "adjusted_target_advantage": adjusted_target_advantage,
        "exchange_rate_risk": adjusted_volatility,
        "currency_risk_premium": risk_premium,
        "converted_amount": loan_amount * effective_exchange_rate,
        "future_exchange_rate": future_exchange_rate,
        "expected_rate_change": expected_rate_change,
        "recommendation": (
            target_code if adjusted_target_advantage > base_advantage else base_code
        ),
    }
