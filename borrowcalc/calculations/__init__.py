"""
Financial Calculation Engine

Pure formula modules shared by the calculator endpoints. Rates are annual
percentages throughout.
"""

from borrowcalc.calculations import amortization, credit, currency, debt, investment, rates, tax

__all__ = ["amortization", "credit", "currency", "debt", "investment", "rates", "tax"]
