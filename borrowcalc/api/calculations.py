"""
Financial calculator API endpoints.

These endpoints accept inputs and return calculated results. All rates are
annual percentages.
"""

from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException
from pydantic import BaseModel, Field
from sqlalchemy.orm import Session

from borrowcalc.calculations import amortization, credit, currency, debt, investment, rates, tax
from borrowcalc.config import get_settings
from borrowcalc.db.database import get_db
from borrowcalc.services.economic_data import load_latest_exchange_rates

router = APIRouter()
settings = get_settings()


# === Loans ===

class LoanPaymentInput(BaseModel):
    """Input for the loan payment calculator."""

    loan_amount: float = Field(250000, ge=0)
    down_payment: float = Field(50000, ge=0)
    interest_rate: float = Field(settings.fallback_mortgage_rate, ge=0, le=50)
    loan_term_years: int = Field(30, gt=0, le=50)
    inflation: float = Field(
        settings.fallback_inflation, ge=rates.MIN_INFLATION, le=rates.MAX_INFLATION
    )


class LoanPaymentResponse(BaseModel):
    principal: float
    monthly_payment: float
    total_payment: float
    total_interest: float
    real_interest_rate: float
    real_monthly_payment: float


@router.post("/loan-payment", response_model=LoanPaymentResponse)
async def calculate_loan_payment(inputs: LoanPaymentInput):
    """Monthly payment with the inflation-adjusted view of the loan."""
    summary = amortization.calculate_loan_summary(
        loan_amount=inputs.loan_amount,
        down_payment=inputs.down_payment,
        annual_rate=inputs.interest_rate,
        years=inputs.loan_term_years,
        inflation=inputs.inflation,
    )
    return LoanPaymentResponse(**summary)


class AmortizationInput(BaseModel):
    """Input for amortization calculation."""

    principal: float = Field(gt=0)
    annual_rate: float = Field(ge=0, le=50)
    term_years: int = Field(gt=0, le=50)
    total_months: Optional[int] = Field(None, gt=0)


@router.post("/amortization")
async def calculate_amortization(inputs: AmortizationInput):
    """Generate loan amortization schedule."""
    schedule = amortization.generate_amortization_schedule(
        principal=inputs.principal,
        annual_rate=inputs.annual_rate,
        amortization_months=inputs.term_years * 12,
        total_months=inputs.total_months,
    )

    return {
        "schedule": schedule,
        "total_interest": amortization.calculate_total_interest(schedule),
        "total_principal": sum(row["principal"] for row in schedule),
    }


# === Debt consolidation ===

class DebtInput(BaseModel):
    name: str
    balance: float = Field(ge=0)
    rate: float = Field(ge=0, le=100)
    min_payment: float = Field(ge=0)


class DebtConsolidationInput(BaseModel):
    debts: List[DebtInput]
    consolidation_rate: float = Field(settings.fallback_mortgage_rate, ge=0, le=50)
    consolidation_term_years: int = Field(5, gt=0, le=30)
    timeline_years: int = Field(10, gt=0, le=30)


@router.post("/debt-consolidation")
async def calculate_debt_consolidation(inputs: DebtConsolidationInput):
    """Compare current minimum payments with a consolidation loan."""
    debts = [debt.Debt(**item.model_dump()) for item in inputs.debts]
    try:
        scenarios = debt.consolidate_debts(
            debts, inputs.consolidation_rate, inputs.consolidation_term_years
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))

    scenarios["timeline"] = debt.payoff_timeline(
        debts,
        inputs.consolidation_rate,
        scenarios["consolidated"]["monthly_payment"],
        years=inputs.timeline_years,
    )
    return scenarios


# === Credit ===

class CreditScoreImpactInput(BaseModel):
    current_score: float = Field(720, ge=300, le=850)
    credit_utilization: float = Field(25, ge=0, le=100)
    new_loan_amount: float = Field(25000, ge=0)
    current_debt: float = Field(15000, ge=0)
    base_rate: float = settings.fallback_mortgage_rate


@router.post("/credit-score-impact")
async def calculate_credit_score_impact(inputs: CreditScoreImpactInput):
    """Projected score and rate tier after taking a new loan."""
    return credit.credit_score_impact(
        current_score=inputs.current_score,
        credit_utilization=inputs.credit_utilization,
        new_loan_amount=inputs.new_loan_amount,
        current_debt=inputs.current_debt,
        base_rate=inputs.base_rate,
    )


class LoanApprovalInput(BaseModel):
    income: float = Field(ge=0)
    credit_score: float = Field(ge=0, le=850)
    debt_to_income_ratio: float = Field(ge=0)
    loan_amount: float = Field(ge=0)
    employment_years: float = Field(ge=0)
    down_payment: float = Field(0, ge=0)
    loan_type: Optional[str] = None


@router.post("/loan-approval")
async def calculate_loan_approval(inputs: LoanApprovalInput):
    """Approval likelihood for one product, or for every product when none is given."""
    criteria = credit.LoanCriteria(
        **inputs.model_dump(exclude={"loan_type"})
    )

    if inputs.loan_type is not None:
        product = credit.LOAN_PRODUCTS.get(inputs.loan_type)
        if product is None:
            raise HTTPException(
                status_code=400, detail=f"Unknown loan type: {inputs.loan_type}"
            )
        products = [product]
    else:
        products = list(credit.LOAN_PRODUCTS.values())

    return {"results": [credit.loan_approval(criteria, product) for product in products]}


# === Tax ===

class TaxImplicationsInput(BaseModel):
    annual_income: float = Field(75000, ge=0)
    filing_status: str = "single"
    loan_amount: float = Field(300000, gt=0)
    loan_type: str = "mortgage"
    interest_rate: float = Field(settings.fallback_mortgage_rate, ge=0, le=50)
    inflation: float = settings.fallback_inflation
    include_state: bool = False


@router.post("/tax-implications")
async def calculate_tax_implications(inputs: TaxImplicationsInput):
    """After-tax cost of loan interest."""
    return tax.calculate_tax_savings(
        income=inputs.annual_income,
        filing_status=inputs.filing_status,
        loan_amount=inputs.loan_amount,
        loan_type=inputs.loan_type,
        interest_rate=inputs.interest_rate,
        inflation=inputs.inflation,
        include_state=inputs.include_state,
    )


# === Investment ===

class InvestmentComparisonInput(BaseModel):
    amount: float = Field(50000, gt=0)
    loan_rate: float = Field(settings.fallback_mortgage_rate, ge=0, le=50)
    expected_return: float = 8.5
    years: int = Field(10, gt=0, le=50)
    investment_type: str = "stocks"


@router.post("/investment-comparison")
async def calculate_investment_comparison(inputs: InvestmentComparisonInput):
    """Invest spare cash or pay down the loan."""
    result = investment.compare_investment(
        amount=inputs.amount,
        loan_rate=inputs.loan_rate,
        expected_return=inputs.expected_return,
        years=inputs.years,
        investment_type=inputs.investment_type,
    )
    result["timeline"] = investment.investment_timeline(
        amount=inputs.amount,
        loan_rate=inputs.loan_rate,
        expected_return=inputs.expected_return,
        years=inputs.years,
        investment_type=inputs.investment_type,
    )
    return result


# === Currency ===

class CurrencyComparisonInput(BaseModel):
    base_currency: str = "USD"
    target_currency: str = "EUR"
    loan_amount: float = Field(100000, gt=0)
    inflation: float = settings.fallback_inflation
    interest_rate: float = settings.fallback_mortgage_rate


@router.post("/currency-comparison")
async def calculate_currency_comparison(
    inputs: CurrencyComparisonInput, db: Session = Depends(get_db)
):
    """Borrow at home or in another currency, using stored exchange rates when present."""
    table = currency.build_currency_table(
        inputs.inflation, inputs.interest_rate, load_latest_exchange_rates(db)
    )
    try:
        return currency.compare_currencies(
            inputs.base_currency.upper(),
            inputs.target_currency.upper(),
            inputs.loan_amount,
            table,
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))


# === Rates ===

class BorrowingDecisionInput(BaseModel):
    inflation: float = Field(
        settings.fallback_inflation, ge=rates.MIN_INFLATION, le=rates.MAX_INFLATION
    )
    loan_rate: float = Field(5.8, ge=0, le=rates.MAX_INTEREST)


@router.post("/borrowing-decision")
async def calculate_borrowing_decision(inputs: BorrowingDecisionInput):
    """Borrow now if the loan rate does not exceed inflation."""
    return rates.borrowing_decision(inputs.inflation, inputs.loan_rate)


class RealRateInput(BaseModel):
    nominal_rate: float
    inflation: float


@router.post("/real-rate")
async def calculate_real_rate(inputs: RealRateInput):
    """Fisher real interest rate."""
    if inputs.inflation <= -100:
        raise HTTPException(status_code=400, detail="Inflation must be above -100%")
    return {"real_rate": rates.calculate_real_rate(inputs.nominal_rate, inputs.inflation)}


class CompoundInterestInput(BaseModel):
    principal: float = Field(le=rates.MAX_LOAN_AMOUNT)
    rate: float = Field(le=rates.MAX_INTEREST)
    years: float = Field(le=100)
    compounding_frequency: int = Field(12, le=365)


@router.post("/compound-interest")
async def calculate_compound_interest(inputs: CompoundInterestInput):
    """Future value under periodic compounding."""
    try:
        future_value = rates.calculate_compound_interest(
            inputs.principal, inputs.rate, inputs.years, inputs.compounding_frequency
        )
    except ValueError as e:
        raise HTTPException(status_code=400, detail=str(e))
    return {"future_value": future_value, "interest_earned": future_value - inputs.principal}


class ValidateInput(BaseModel):
    inflation: float
    interest_rate: float
    loan_amount: Optional[float] = None
    credit_score: Optional[float] = None


@router.post("/validate")
async def validate_inputs(inputs: ValidateInput):
    """Range-check economic and loan inputs."""
    result = rates.validate_financial_data(
        inputs.inflation, inputs.interest_rate, inputs.loan_amount, inputs.credit_score
    )
    return {"is_valid": result.is_valid, "errors": result.errors}
