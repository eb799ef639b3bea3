"""
Borrowing calculators and Monte Carlo simulation service.
"""

__version__ = "0.1.0"
