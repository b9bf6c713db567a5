"""
SplitEasy - Source Package

Splits an itemized bill between the people who shared it, allocating
tax proportionally and reconciling rounding so that every share adds
up to the bill total to the cent.

DESIGN PRINCIPLES:
1. The calculation engine is pure and deterministic
2. Money is Decimal, never float
3. Bad input is rejected at the boundary, not inside the engine
4. Every rounding correction is explainable
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "SplitEasy Team"
