"""
Tax tables for capital gains on property sales.

Federal long-term capital gains bands (2024) keyed by filing status, and a
simplified per-state capital gains table covering the 50 states plus DC.
State rates are the top marginal (or flat) rate; progressive structures are
flattened and flagged with ``is_simplified``.
"""

import math
from typing import Dict, List, NamedTuple


class CapitalGainsBracket(NamedTuple):
    """Income band [min, max) and the long-term capital gains rate for it."""
    min: float
    max: float
    rate: float


class StateTaxInfo(NamedTuple):
    code: str
    name: str
    has_capital_gains_tax: bool
    rate: float
    notes: str
    is_simplified: bool = False


FEDERAL_CAPITAL_GAINS_BRACKETS_2024: Dict[str, List[CapitalGainsBracket]] = {
    "single": [
        CapitalGainsBracket(0, 47025, 0.00),
        CapitalGainsBracket(47025, 518900, 0.15),
        CapitalGainsBracket(518900, math.inf, 0.20),
    ],
    "married_joint": [
        CapitalGainsBracket(0, 94050, 0.00),
        CapitalGainsBracket(94050, 583750, 0.15),
        CapitalGainsBracket(583750, math.inf, 0.20),
    ],
    "married_separate": [
        CapitalGainsBracket(0, 47025, 0.00),
        CapitalGainsBracket(47025, 291875, 0.15),
        CapitalGainsBracket(291875, math.inf, 0.20),
    ],
    "head_of_household": [
        CapitalGainsBracket(0, 63000, 0.00),
        CapitalGainsBracket(63000, 551350, 0.15),
        CapitalGainsBracket(551350, math.inf, 0.20),
    ],
}

_NO_INCOME_TAX = "No state income tax"

_STATE_ROWS = [
    # No capital gains tax
    StateTaxInfo("AK", "Alaska", False, 0.0, _NO_INCOME_TAX),
    StateTaxInfo("FL", "Florida", False, 0.0, _NO_INCOME_TAX),
    StateTaxInfo("NV", "Nevada", False, 0.0, _NO_INCOME_TAX),
    StateTaxInfo("NH", "New Hampshire", False, 0.0, "No tax on capital gains (interest and dividends are taxed)"),
    StateTaxInfo("SD", "South Dakota", False, 0.0, _NO_INCOME_TAX),
    StateTaxInfo("TN", "Tennessee", False, 0.0, _NO_INCOME_TAX),
    StateTaxInfo("TX", "Texas", False, 0.0, _NO_INCOME_TAX),
    StateTaxInfo("WA", "Washington", True, 0.07, "7% capital gains tax on gains over $250,000 (enacted 2021)"),
    StateTaxInfo("WY", "Wyoming", False, 0.0, _NO_INCOME_TAX),
    # High tax
    StateTaxInfo("CA", "California", True, 0.133, "Highest marginal rate 13.3% (includes 1% Mental Health Tax)", True),
    StateTaxInfo("NY", "New York", True, 0.109, "Highest marginal rate 10.9% (plus local taxes)", True),
    StateTaxInfo("NJ", "New Jersey", True, 0.1075, "Highest marginal rate 10.75%", True),
    StateTaxInfo("HI", "Hawaii", True, 0.11, "Highest marginal rate 11%", True),
    StateTaxInfo("CT", "Connecticut", True, 0.069, "Highest marginal rate 6.9%", True),
    StateTaxInfo("MA", "Massachusetts", True, 0.05, "Flat rate 5% (12% for short-term gains)", True),
    StateTaxInfo("MD", "Maryland", True, 0.0575, "Highest marginal rate 5.75%", True),
    StateTaxInfo("OR", "Oregon", True, 0.099, "Highest marginal rate 9.9%", True),
    StateTaxInfo("MN", "Minnesota", True, 0.0985, "Highest marginal rate 9.85%", True),
    # Flat or moderate
    StateTaxInfo("AZ", "Arizona", True, 0.045, "Flat rate 4.5%", True),
    StateTaxInfo("CO", "Colorado", True, 0.044, "Flat rate 4.4%", True),
    StateTaxInfo("GA", "Georgia", True, 0.0575, "Highest marginal rate 5.75%", True),
    StateTaxInfo("IL", "Illinois", True, 0.045, "Flat rate 4.5%", True),
    StateTaxInfo("IN", "Indiana", True, 0.032, "Flat rate 3.2%", True),
    StateTaxInfo("KY", "Kentucky", True, 0.05, "Flat rate 5%", True),
    StateTaxInfo("MI", "Michigan", True, 0.0425, "Flat rate 4.25%", True),
    StateTaxInfo("NC", "North Carolina", True, 0.0475, "Flat rate 4.75%", True),
    StateTaxInfo("OH", "Ohio", True, 0.0399, "Highest marginal rate 3.99%", True),
    StateTaxInfo("PA", "Pennsylvania", True, 0.0307, "Flat rate 3.07%", True),
    StateTaxInfo("SC", "South Carolina", True, 0.07, "Highest marginal rate 7% (with some exclusions available)", True),
    StateTaxInfo("UT", "Utah", True, 0.0485, "Flat rate 4.85%", True),
    StateTaxInfo("VA", "Virginia", True, 0.0575, "Highest marginal rate 5.75%", True),
    StateTaxInfo("WI", "Wisconsin", True, 0.0765, "Highest marginal rate 7.65%", True),
    StateTaxInfo("AL", "Alabama", True, 0.05, "Highest marginal rate 5%", True),
    StateTaxInfo("AR", "Arkansas", True, 0.055, "Highest marginal rate 5.5%", True),
    StateTaxInfo("DE", "Delaware", True, 0.066, "Highest marginal rate 6.6%", True),
    StateTaxInfo("ID", "Idaho", True, 0.06, "Highest marginal rate 6%", True),
    StateTaxInfo("IA", "Iowa", True, 0.054, "Highest marginal rate 5.4%", True),
    StateTaxInfo("KS", "Kansas", True, 0.057, "Highest marginal rate 5.7%", True),
    StateTaxInfo("LA", "Louisiana", True, 0.06, "Highest marginal rate 6%", True),
    StateTaxInfo("ME", "Maine", True, 0.0715, "Highest marginal rate 7.15%", True),
    StateTaxInfo("MS", "Mississippi", True, 0.05, "Highest marginal rate 5%", True),
    StateTaxInfo("MO", "Missouri", True, 0.054, "Highest marginal rate 5.4%", True),
    StateTaxInfo("MT", "Montana", True, 0.0675, "Highest marginal rate 6.75%", True),
    StateTaxInfo("NE", "Nebraska", True, 0.0684, "Highest marginal rate 6.84%", True),
    StateTaxInfo("NM", "New Mexico", True, 0.059, "Highest marginal rate 5.9%", True),
    StateTaxInfo("ND", "North Dakota", True, 0.0295, "Highest marginal rate 2.95%", True),
    StateTaxInfo("OK", "Oklahoma", True, 0.05, "Highest marginal rate 5%", True),
    StateTaxInfo("RI", "Rhode Island", True, 0.0599, "Highest marginal rate 5.99%", True),
    StateTaxInfo("VT", "Vermont", True, 0.0875, "Highest marginal rate 8.75%", True),
    StateTaxInfo("WV", "West Virginia", True, 0.065, "Highest marginal rate 6.5%", True),
    StateTaxInfo("DC", "District of Columbia", True, 0.0975, "Highest marginal rate 9.75%", True),
]

STATE_TAX_RATES: Dict[str, StateTaxInfo] = {row.code: row for row in _STATE_ROWS}


def get_state_tax_info(state_code: str):
    """Look up a state by its two-letter code (case-insensitive); None if unknown."""
    if not state_code:
        return None
    return STATE_TAX_RATES.get(str(state_code).strip().upper())


def get_no_tax_states() -> List[StateTaxInfo]:
    return [info for info in STATE_TAX_RATES.values() if not info.has_capital_gains_tax]


def get_states_by_tax_rate() -> List[StateTaxInfo]:
    return sorted(STATE_TAX_RATES.values(), key=lambda info: info.rate)


def get_state_choices() -> List[Dict]:
    """Dropdown-ready choices sorted by state name."""
    choices = []
    for info in sorted(STATE_TAX_RATES.values(), key=lambda s: s.name):
        rate_label = f"{info.rate * 100:.1f}%" if info.has_capital_gains_tax else "No Tax"
        choices.append({"value": info.code, "label": f"{info.name} ({rate_label})", "rate": info.rate})
    return choices
