"""
Investisizer - Portfolio Projection Engine

Year-by-year projections for portfolios of investments and leveraged real
estate:
- Mortgage amortization and property value growth
- Rental income and expense modeling
- Property sales with capital gains tax (federal, state, Section 121)
- Linked cash flows from properties into investments
"""

__version__ = "1.0.0"
__author__ = "Investisizer Contributors"
