"""
Credit Score Heuristics

Estimates how a new loan moves a credit score, maps scores to rate tiers, and
scores the likelihood of loan approval for standard loan products.
"""

from dataclasses import dataclass
from typing import Dict, List, Optional, Tuple

MIN_SCORE = 300
MAX_SCORE = 850
MAX_SCORE_DROP = -50


def credit_score_range(score: float) -> str:
    """Label for a credit score band."""
    if score >= 800:
        return "Excellent"
    if score >= 740:
        return "Very Good"
    if score >= 670:
        return "Good"
    if score >= 580:
        return "Fair"
    return "Poor"


def calculate_score_impact(current_utilization: float, new_loan_amount: float) -> int:
    """
    Estimated score change from opening a new loan.

    Args:
        current_utilization: Credit utilization in percent
        new_loan_amount: Size of the new loan

    Returns:
        Non-positive score change, never below -50
    """
    # Rough proxy: every $1,000 borrowed adds a point of utilization
    new_utilization = current_utilization + new_loan_amount / 1000

    change = -5  # Hard inquiry

    if new_utilization > 30:
        change -= 15
    elif new_utilization > 10:
        change -= 5

    if new_loan_amount > 50000:
        change -= 10

    change -= 3  # New account lowers average age

    return max(change, MAX_SCORE_DROP)


def interest_rate_by_score(score: float, base_rate: float) -> float:
    """Rate offered for a score, relative to the market base rate (percent)."""
    if score >= 800:
        return base_rate - 2
    if score >= 740:
        return base_rate - 1
    if score >= 670:
        return base_rate
    if score >= 580:
        return base_rate + 2
    return base_rate + 5


def credit_score_impact(
    current_score: float,
    credit_utilization: float,
    new_loan_amount: float,
    current_debt: float,
    base_rate: float,
) -> Dict:
    """Full before/after picture of taking a new loan."""
    impact = calculate_score_impact(credit_utilization, new_loan_amount)
    projected_score = max(MIN_SCORE, min(MAX_SCORE, current_score + impact))

    current_rate = interest_rate_by_score(current_score, base_rate)
    projected_rate = interest_rate_by_score(projected_score, base_rate)

    return {
        "score_impact": impact,
        "current_score": current_score,
        "projected_score": projected_score,
        "current_range": credit_score_range(current_score),
        "projected_range": credit_score_range(projected_score),
        "current_rate": current_rate,
        "projected_rate": projected_rate,
        "total_debt": current_debt + new_loan_amount,
        "additional_annual_interest": new_loan_amount * (projected_rate - current_rate) / 100,
    }


@dataclass
class LoanProduct:
    """Underwriting thresholds for one loan product."""

    id: str
    name: str
    min_credit_score: float
    max_debt_to_income: float  # Percent
    min_income: float
    min_employment_years: float
    interest_rate_range: Tuple[float, float]
    max_loan_amount: float
    min_down_payment: Optional[float] = None  # Percent of loan amount
    income_multiplier: float = 0.2


LOAN_PRODUCTS: Dict[str, LoanProduct] = {
    product.id: product
    for product in [
        LoanProduct("mortgage", "Home Mortgage", 620, 43, 40000, 2, (6.5, 8.5), 1_000_000,
                    min_down_payment=3, income_multiplier=4),
        LoanProduct("auto", "Auto Loan", 580, 50, 25000, 1, (4.5, 12.0), 80_000,
                    income_multiplier=0.3),
        LoanProduct("personal", "Personal Loan", 600, 40, 30000, 1, (8.0, 25.0), 50_000),
        LoanProduct("credit_card", "Credit Card", 550, 45, 20000, 0.5, (15.0, 29.0), 25_000),
        LoanProduct("student", "Student Loan", 0, 60, 0, 0, (5.0, 10.0), 200_000),
    ]
}


@dataclass
class LoanCriteria:
    """Applicant profile for loan_approval."""

    income: float
    credit_score: float
    debt_to_income_ratio: float  # Percent
    loan_amount: float
    employment_years: float
    down_payment: float = 0.0


def loan_approval(criteria: LoanCriteria, product: LoanProduct) -> Dict:
    """
    Score an application out of 100 against a product's thresholds.

    Points: credit 30, debt-to-income 25, income 20, employment 15,
    down payment 10.

    Returns:
        Dict with score, status, reasons, estimated_rate and max_approved_amount
    """
    reasons: List[str] = []
    score = 0

    if criteria.credit_score >= product.min_credit_score + 100:
        score += 30
    elif criteria.credit_score >= product.min_credit_score + 50:
        score += 25
        reasons.append("Good credit score")
    elif criteria.credit_score >= product.min_credit_score:
        score += 15
        reasons.append("Minimum credit score met")
    else:
        reasons.append(f"Credit score below minimum ({product.min_credit_score:g})")

    if criteria.debt_to_income_ratio <= product.max_debt_to_income - 10:
        score += 25
    elif criteria.debt_to_income_ratio <= product.max_debt_to_income:
        score += 15
        reasons.append("Debt-to-income at acceptable level")
    else:
        reasons.append(f"Debt-to-income too high (max {product.max_debt_to_income:g}%)")

    if criteria.income >= product.min_income * 2:
        score += 20
    elif criteria.income >= product.min_income:
        score += 15
        reasons.append("Income meets minimum requirement")
    else:
        reasons.append(f"Income below minimum (${product.min_income:,.0f})")

    if criteria.employment_years >= product.min_employment_years + 2:
        score += 15
    elif criteria.employment_years >= product.min_employment_years:
        score += 10
        reasons.append("Employment history adequate")
    else:
        reasons.append(
            f"Employment history too short (min {product.min_employment_years:g} years)"
        )

    if product.min_down_payment:
        if criteria.loan_amount > 0:
            down_payment_percent = criteria.down_payment / criteria.loan_amount * 100
        else:
            down_payment_percent = 0.0
        if down_payment_percent >= 20:
            score += 10
        elif down_payment_percent >= product.min_down_payment:
            score += 5
            reasons.append("Down payment meets minimum")
        else:
            reasons.append(f"Down payment below minimum ({product.min_down_payment:g}%)")
    else:
        score += 10

    if score >= 80:
        status = "approved"
    elif score >= 60:
        status = "likely"
    elif score >= 40:
        status = "unlikely"
    else:
        status = "denied"

    base_rate, max_rate = product.interest_rate_range
    estimated_rate = base_rate + (100 - score) / 100 * (max_rate - base_rate)

    max_approved_amount = min(
        criteria.income * product.income_multiplier,
        product.max_loan_amount,
        criteria.loan_amount * 1.1,
    )

    return {
        "product": product.id,
        "score": score,
        "status": status,
        "reasons": reasons,
        "estimated_rate": estimated_rate,
        "max_approved_amount": max_approved_amount,
    }
