"""
Rate Conversions and Input Validation

Real-rate (Fisher) conversion, compound growth, the borrow-now heuristic and
range checks for user-supplied economic inputs. Rates are annual percentages.
"""

from dataclasses import dataclass, field
from typing import Dict, List, Optional

MIN_INFLATION = -10.0
MAX_INFLATION = 50.0
MAX_INTEREST = 50.0
MAX_LOAN_AMOUNT = 10_000_000
MIN_CREDIT_SCORE = 300
MAX_CREDIT_SCORE = 850


@dataclass
class ValidationResult:
    """Outcome of validate_financial_data."""

    is_valid: bool
    errors: List[str] = field(default_factory=list)


def calculate_real_rate(nominal_rate: float, inflation_rate: float) -> float:
    """
    Calculate the real interest rate with the Fisher equation.

    Args:
        nominal_rate: Nominal annual rate in percent
        inflation_rate: Annual inflation in percent

    Returns:
        Real annual rate in percent
    """
    return ((1 + nominal_rate / 100) / (1 + inflation_rate / 100) - 1) * 100


def calculate_compound_interest(
    principal: float,
    rate: float,
    years: float,
    compounding_frequency: int = 12,
) -> float:
    """
    Future value of a principal under periodic compounding.

    Raises:
        ValueError: For non-positive principal, years or frequency, or a negative rate
    """
    if principal <= 0 or rate < 0 or years <= 0 or compounding_frequency <= 0:
        raise ValueError("Invalid parameters for compound interest calculation")

    periodic_rate = rate / (100 * compounding_frequency)
    total_periods = years * compounding_frequency
    return principal * (1 + periodic_rate) ** total_periods


def validate_financial_data(
    inflation: float,
    interest_rate: float,
    loan_amount: Optional[float] = None,
    credit_score: Optional[float] = None,
) -> ValidationResult:
    """Check economic and loan inputs against realistic ranges."""
    errors = []

    if inflation != inflation:  # NaN
        errors.append("Invalid inflation rate")
    elif inflation < MIN_INFLATION or inflation > MAX_INFLATION:
        errors.append("Inflation rate out of realistic range (-10% to 50%)")

    if interest_rate != interest_rate:
        errors.append("Invalid interest rate")
    elif interest_rate < 0 or interest_rate > MAX_INTEREST:
        errors.append("Interest rate out of realistic range (0% to 50%)")

    if loan_amount is not None:
        if loan_amount != loan_amount:
            errors.append("Invalid loan amount")
        elif loan_amount < 0:
            errors.append("Loan amount cannot be negative")
        elif loan_amount > MAX_LOAN_AMOUNT:
            errors.append("Loan amount exceeds maximum ($10M)")

    if credit_score is not None:
        if credit_score != credit_score:
            errors.append("Invalid credit score")
        elif credit_score < MIN_CREDIT_SCORE or credit_score > MAX_CREDIT_SCORE:
            errors.append("Credit score out of valid range (300-850)")

    return ValidationResult(is_valid=not errors, errors=errors)


def borrowing_decision(inflation_rate: float, loan_rate: float) -> Dict:
    """
    Borrow-now heuristic: borrowing pays when the loan rate does not exceed inflation.

    Returns:
        Dict with difference (loan - inflation), should_borrow,
        recommendation and explanation
    """
    difference = loan_rate - inflation_rate
    should_borrow = difference <= 0

    if should_borrow:
        recommendation = "Yes, consider borrowing now"
        explanation = (
            "Current interest rates are lower than or equal to inflation. "
            "Your borrowed money effectively costs less than the inflation benefit."
        )
    else:
        recommendation = "No, wait for better rates"
        explanation = (
            "Current interest rates are higher than inflation. "
            "Your money costs more than the inflation benefit."
        )

    return {
        "difference": difference,
        "should_borrow": should_borrow,
        "recommendation": recommendation,
        "explanation": explanation,
        "real_rate": calculate_real_rate(loan_rate, inflation_rate),
    }
