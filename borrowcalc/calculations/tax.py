"""
Tax Implications of Loan Interest

Federal bracket lookup (2024 tables) and the deductible share of loan interest
by loan type.
"""

import math
from typing import Dict, List, Tuple

# (lower bound, upper bound, marginal rate percent)
TAX_BRACKETS: Dict[str, List[Tuple[float, float, float]]] = {
    "single": [
        (0, 11000, 10),
        (11000, 44725, 12),
        (44725, 95375, 22),
        (95375, 182050, 24),
        (182050, 231250, 32),
        (231250, 578125, 35),
        (578125, math.inf, 37),
    ],
    "married": [
        (0, 22000, 10),
        (22000, 89450, 12),
        (89450, 190750, 22),
        (190750, 364200, 24),
        (364200, 462500, 32),
        (462500, 693750, 35),
        (693750, math.inf, 37),
    ],
}

MORTGAGE_INTEREST_CAP = 750_000
INVESTMENT_INCOME_SHARE = 0.05
MAX_STUDENT_DEDUCTION = 2500
STUDENT_PHASE_OUT = {
    "single": (70000, 85000),
    "married": (145000, 175000),
}
STATE_TAX_RATE = 5.0
TOP_RATE = 37


def tax_bracket(income: float, filing_status: str = "single") -> float:
    """Marginal federal rate (percent). Unknown statuses use the single table."""
    brackets = TAX_BRACKETS.get(filing_status, TAX_BRACKETS["single"])
    for lower, upper, rate in brackets:
        if lower <= income < upper:
            return rate
    return TOP_RATE


def deductible_interest(
    annual_interest: float,
    loan_amount: float,
    interest_rate: float,
    loan_type: str,
    income: float,
    filing_status: str,
) -> float:
    """Portion of a year's interest that can be deducted."""
    if loan_type == "mortgage":
        return min(loan_amount, MORTGAGE_INTEREST_CAP) * interest_rate / 100
    if loan_type == "business":
        return annual_interest
    if loan_type == "investment":
        # Limited to net investment income, estimated from salary
        return min(annual_interest, income * INVESTMENT_INCOME_SHARE)
    if loan_type == "student":
        start, end = STUDENT_PHASE_OUT.get(filing_status, STUDENT_PHASE_OUT["single"])
        if income >= end:
            return 0.0
        if income >= start:
            ratio = (end - income) / (end - start)
            return min(annual_interest, MAX_STUDENT_DEDUCTION * ratio)
        return min(annual_interest, MAX_STUDENT_DEDUCTION)
    return 0.0


def calculate_tax_savings(
    income: float,
    filing_status: str,
    loan_amount: float,
    loan_type: str,
    interest_rate: float,
    inflation: float,
    include_state: bool = False,
) -> Dict[str, float]:
    """
    After-tax and inflation-adjusted cost of a loan's interest.

    Args:
        income: Annual income
        filing_status: "single" or "married"
        loan_amount: Outstanding principal
        loan_type: mortgage, business, investment, student or other
        interest_rate: Annual rate in percent
        inflation: Annual inflation in percent
        include_state: Apply a flat 5% state deduction on top of federal

    Returns:
        Dict of interest, deduction, savings and effective rates

    Raises:
        ValueError: If loan_amount is not positive
    """
    if loan_amount <= 0:
        raise ValueError("Loan amount must be positive")

    bracket = tax_bracket(income, filing_status)
    annual_interest = loan_amount * interest_rate / 100
    deductible = deductible_interest(
        annual_interest, loan_amount, interest_rate, loan_type, income, filing_status
    )

    federal_savings = deductible * bracket / 100
    state_savings = deductible * STATE_TAX_RATE / 100 if include_state else 0.0
    total_savings = federal_savings + state_savings

    effective_rate = (annual_interest - total_savings) / loan_amount * 100

    return {
        "tax_bracket": bracket,
        "annual_interest": annual_interest,
        "deductible_interest": deductible,
        "federal_tax_savings": federal_savings,
        "state_tax_savings": state_savings,
        "total_tax_savings": total_savings,
        "after_tax_interest": annual_interest - total_savings,
        "effective_rate": effective_rate,
        "inflation_adjusted_rate": effective_rate - inflation,
    }
