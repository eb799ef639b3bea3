"""
Invest vs. Pay Down Debt

Compares putting spare cash toward a loan against investing it.
"""

from typing import Dict, List

# Plausible annual return range (percent) per asset class
INVESTMENT_VARIABILITY: Dict[str, Dict[str, float]] = {
    "savings": {"min": 0.5, "max": 2.0},
    "bonds": {"min": 2.0, "max": 6.0},
    "stocks": {"min": -20.0, "max": 25.0},
    "reits": {"min": -15.0, "max": 20.0},
    "crypto": {"min": -50.0, "max": 100.0},
}


def get_variability(investment_type: str) -> Dict[str, float]:
    return INVESTMENT_VARIABILITY.get(investment_type, INVESTMENT_VARIABILITY["stocks"])


def compare_investment(
    amount: float,
    loan_rate: float,
    expected_return: float,
    years: int,
    investment_type: str = "stocks",
) -> Dict:
    """
    Compare paying down a loan with investing the same amount.

    Interest saved by paying down is simple interest over the horizon; the
    investment compounds annually.

    Args:
        amount: Cash available
        loan_rate: Loan rate in percent
        expected_return: Expected annual return in percent
        years: Horizon in years
        investment_type: Key of INVESTMENT_VARIABILITY

    Returns:
        Dict with "debt_paydown" and "investment" sections and recommendations
    """
    rate = loan_rate / 100
    growth = expected_return / 100
    variability = get_variability(investment_type)

    paydown_benefit = amount * rate * years

    investment_value = amount * (1 + growth) ** years
    investment_gain = investment_value - amount
    conservative_value = amount * (1 + variability["min"] / 100) ** years
    optimistic_value = amount * (1 + variability["max"] / 100) ** years

    net_return = investment_gain - paydown_benefit
    probability_of_success = 0.65 if growth > rate else 0.35

    return {
        "debt_paydown": {
            "value": amount,
            "benefit": paydown_benefit,
            "total_value": amount + paydown_benefit,
            "guaranteed_return": loan_rate,
        },
        "investment": {
            "expected_value": investment_value,
            "expected_gain": investment_gain,
            "conservative_value": conservative_value,
            "optimistic_value": optimistic_value,
            "net_return": net_return,
            "break_even_return": loan_rate,
            "probability_of_success": probability_of_success,
        },
        "recommendation": "invest" if net_return > 0 else "paydown",
        "risk_adjusted": (
            "invest" if net_return > 0 and probability_of_success > 0.6 else "paydown"
        ),
    }


def investment_timeline(
    amount: float,
    loan_rate: float,
    expected_return: float,
    years: int,
    investment_type: str = "stocks",
) -> List[Dict]:
    """Year-by-year values for both strategies."""
    variability = get_variability(investment_type)
    timeline = []
    for year in range(1, years + 1):
        timeline.append(
            {
                "year": year,
                "debt_paydown": amount + amount * loan_rate / 100 * year,
                "expected_investment": amount * (1 + expected_return / 100) ** year,
                "conservative_case": amount * (1 + variability["min"] / 100) ** year,
                "optimistic_case": amount * (1 + variability["max"] / 100) ** year,
            }
        )
    return timeline
