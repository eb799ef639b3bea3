"""
Debt Consolidation Calculations

Compares paying existing debts at their minimum payments against rolling them
into a single amortizing consolidation loan.
"""

import math
from dataclasses import dataclass
from typing import List, Dict

from borrowcalc.calculations.amortization import calculate_payment


@dataclass
class Debt:
    """A single existing debt."""

    name: str
    balance: float
    rate: float  # Annual rate in percent
    min_payment: float  # Monthly


def months_to_payoff(balance: float, annual_rate: float, payment: float) -> float:
    """
    Months needed to retire a balance at a fixed monthly payment.

    Returns:
        Number of months (fractional), or inf if the payment never covers interest
    """
    if balance <= 0:
        return 0.0
    if payment <= 0:
        return math.inf

    monthly_rate = annual_rate / 100 / 12
    if monthly_rate == 0:
        return balance / payment

    # Payment must exceed the first month's interest
    if payment <= balance * monthly_rate:
        return math.inf

    return -math.log(1 - balance * monthly_rate / payment) / math.log(1 + monthly_rate)


def _remaining_balance(balance: float, annual_rate: float, payment: float, months: int) -> float:
    monthly_rate = annual_rate / 100 / 12
    if monthly_rate == 0:
        return max(0.0, balance - payment * months)
    growth = (1 + monthly_rate) ** months
    return max(0.0, balance * growth - payment * (growth - 1) / monthly_rate)


def consolidate_debts(
    debts: List[Debt], consolidation_rate: float, term_years: int
) -> Dict:
    """
    Compare minimum-payment payoff against a consolidation loan.

    Args:
        debts: Existing debts
        consolidation_rate: Consolidation loan rate in percent
        term_years: Consolidation loan term in years

    Returns:
        Dict with "current", "consolidated" and "savings" sections

    Raises:
        ValueError: If there is no balance to consolidate or a debt can never be
            paid off at its minimum payment
    """
    total_balance = sum(debt.balance for debt in debts)
    if total_balance <= 0:
        raise ValueError("At least one debt with a positive balance is required")
    if term_years <= 0:
        raise ValueError("Consolidation term must be positive")

    total_min_payments = sum(debt.min_payment for debt in debts)
    weighted_avg_rate = sum(debt.rate * debt.balance for debt in debts) / total_balance

    current_total_interest = 0.0
    for debt in debts:
        months = months_to_payoff(debt.balance, debt.rate, debt.min_payment)
        if math.isinf(months):
            raise ValueError(
                f"Minimum payment for '{debt.name}' does not cover its interest"
            )
        current_total_interest += debt.min_payment * months - debt.balance

    consolidation_months = term_years * 12
    consolidated_payment = calculate_payment(
        total_balance, consolidation_rate, consolidation_months
    )
    consolidated_total_interest = consolidated_payment * consolidation_months - total_balance

    interest_savings = current_total_interest - consolidated_total_interest
    percentage_savings = (
        interest_savings / current_total_interest * 100 if current_total_interest else 0.0
    )

    return {
        "current": {
            "total_balance": total_balance,
            "total_min_payments": total_min_payments,
            "weighted_avg_rate": weighted_avg_rate,
            "total_interest": current_total_interest,
        },
        "consolidated": {
            "monthly_payment": consolidated_payment,
            "total_interest": consolidated_total_interest,
            "rate": consolidation_rate,
        },
        "savings": {
            "interest_savings": interest_savings,
            "payment_difference": total_min_payments - consolidated_payment,
            "percentage_savings": percentage_savings,
        },
    }


def payoff_timeline(
    debts: List[Debt],
    consolidation_rate: float,
    consolidated_payment: float,
    years: int = 10,
) -> List[Dict]:
    """Remaining balance at each year end under both strategies."""
    total_balance = sum(debt.balance for debt in debts)
    timeline = []
    for year in range(1, years + 1):
        months = year * 12
        current_remaining = sum(
            _remaining_balance(debt.balance, debt.rate, debt.min_payment, months)
            for debt in debts
        )
        consolidated_remaining = _remaining_balance(
            total_balance, consolidation_rate, consolidated_payment, months
        )
        timeline.append(
            {
                "year": year,
                "current_strategy": round(current_remaining, 2),
                "consolidated": round(consolidated_remaining, 2),
            }
        )
    return timeline
