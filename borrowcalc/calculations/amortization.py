"""
Loan Amortization Calculations

Implements loan payment and amortization schedule calculations, including the
inflation-adjusted ("real") view of a loan payment.

Rates are annual percentages (e.g. 7.5 for 7.5%).
"""

import math
from typing import List, Dict, Optional
from datetime import date
from dateutil.relativedelta import relativedelta

from borrowcalc.calculations.rates import calculate_real_rate


def calculate_payment(
    principal: float, annual_rate: float, amortization_months: int
) -> float:
    """
    Calculate monthly loan payment.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate in percent
        amortization_months: Total amortization period in months

    Returns:
        Monthly payment amount (0 for an empty or negative loan)
    """
    if principal <= 0:
        return 0.0
    if amortization_months <= 0:
        return 0.0
    if annual_rate < 0:
        return 0.0

    monthly_rate = annual_rate / 100 / 12

    if monthly_rate == 0:
        return principal / amortization_months

    growth = (1 + monthly_rate) ** amortization_months
    payment = principal * monthly_rate * growth / (growth - 1)

    return payment if math.isfinite(payment) else 0.0


def calculate_monthly_payment(loan_amount: float, annual_rate: float, years: int) -> float:
    """
    Strict variant of calculate_payment for validated inputs.

    Raises:
        ValueError: If the amount or term is not positive or the rate is negative
    """
    if loan_amount <= 0 or annual_rate < 0 or years <= 0:
        raise ValueError("Invalid loan parameters")
    return calculate_payment(loan_amount, annual_rate, years * 12)


def _signed_payment(principal: float, monthly_rate: float, months: int) -> float:
    """Annuity payment that tolerates a negative (real) rate."""
    if monthly_rate == 0:
        return principal / months
    growth = (1 + monthly_rate) ** months
    return principal * monthly_rate * growth / (growth - 1)


def calculate_remaining_balance(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    payments_completed: int,
) -> float:
    """Calculate remaining loan balance after N payments."""
    monthly_rate = annual_rate / 100 / 12
    payment = calculate_payment(principal, annual_rate, amortization_months)

    if monthly_rate == 0:
        return max(0.0, principal - payment * payments_completed)

    balance = principal * ((1 + monthly_rate) ** payments_completed) - payment * (
        ((1 + monthly_rate) ** payments_completed - 1) / monthly_rate
    )

    return max(0.0, balance)


def generate_amortization_schedule(
    principal: float,
    annual_rate: float,
    amortization_months: int,
    total_months: Optional[int] = None,
    start_date: Optional[date] = None,
) -> List[Dict]:
    """
    Generate a full amortization schedule.

    Args:
        principal: Loan principal amount
        annual_rate: Annual interest rate in percent
        amortization_months: Amortization period in months
        total_months: Number of periods to emit (defaults to the full term)
        start_date: Date of first payment

    Returns:
        List of amortization rows
    """
    schedule = []
    balance = principal
    monthly_rate = annual_rate / 100 / 12

    if total_months is None:
        total_months = amortization_months
    if start_date is None:
        start_date = date.today()

    for period in range(1, total_months + 1):
        if balance <= 0:
            break

        period_date = start_date + relativedelta(months=period - 1)
        interest = balance * monthly_rate

        remaining_periods = amortization_months - (period - 1)
        if remaining_periods > 0:
            payment = calculate_payment(balance, annual_rate, remaining_periods)
            principal_pmt = min(payment - interest, balance)
            payment = principal_pmt + interest
        else:
            # Balloon
            principal_pmt = balance
            payment = balance + interest

        ending_balance = balance - principal_pmt

        schedule.append(
            {
                "period": period,
                "date": period_date.isoformat(),
                "beginning_balance": round(balance, 2),
                "payment": round(payment, 2),
                "interest": round(interest, 2),
                "principal": round(principal_pmt, 2),
                "ending_balance": round(max(0, ending_balance), 2),
            }
        )

        # Sub-cent residue counts as paid off
        balance = ending_balance if ending_balance >= 0.005 else 0.0

    return schedule


def calculate_total_interest(schedule: List[Dict]) -> float:
    """Calculate total interest paid over loan term."""
    return sum(row["interest"] for row in schedule)


def calculate_loan_summary(
    loan_amount: float,
    down_payment: float,
    annual_rate: float,
    years: int,
    inflation: float,
) -> Dict[str, float]:
    """
    Summarize a loan in nominal and inflation-adjusted terms.

    The real monthly payment discounts the loan at the Fisher real rate; it
    falls back to the nominal payment when that calculation is not finite.

    Args:
        loan_amount: Purchase price or total amount before the down payment
        down_payment: Cash paid up front
        annual_rate: Nominal annual rate in percent
        years: Loan term in years
        inflation: Annual inflation in percent

    Returns:
        Dict with principal, monthly_payment, total_payment, total_interest,
        real_interest_rate and real_monthly_payment
    """
    principal = loan_amount - down_payment
    months = years * 12

    monthly_payment = calculate_payment(principal, annual_rate, months)
    total_payment = monthly_payment * months
    total_interest = total_payment - principal if principal > 0 else 0.0

    real_rate = calculate_real_rate(annual_rate, inflation)
    real_monthly_payment = 0.0
    if principal > 0 and months > 0:
        try:
            real_monthly_payment = _signed_payment(principal, real_rate / 100 / 12, months)
        except ZeroDivisionError:
            real_monthly_payment = monthly_payment
        if not math.isfinite(real_monthly_payment):
            real_monthly_payment = monthly_payment

    return {
        "principal": principal,
        "monthly_payment": monthly_payment,
        "total_payment": total_payment,
        "total_interest": total_interest,
        "real_interest_rate": real_rate,
        "real_monthly_payment": real_monthly_payment,
    }
