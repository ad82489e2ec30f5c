"""
Capital gains tax calculations for property sales.

Covers the Section 121 primary residence exclusion, Section 1250 depreciation
recapture, the federal long-term capital gains bracket lookup and the state
capital gains lookup. All functions are pure and never raise for bad financial
inputs: lookups that miss return a zero-tax result with an explanatory note.
"""

import logging
from typing import Any, Dict, Iterable, List, Mapping, Optional

from investisizer.core.constants import (
    FilingStatus,
    SECTION_121_MIN_YEARS,
    SECTION_121_EXCLUSION_SINGLE,
    SECTION_121_EXCLUSION_MARRIED_JOINT,
    DEPRECIATION_RECAPTURE_RATE,
    RESIDENTIAL_RECOVERY_YEARS,
    COMMERCIAL_RECOVERY_YEARS,
)
from investisizer.core.tax_tables import (
    CapitalGainsBracket,
    FEDERAL_CAPITAL_GAINS_BRACKETS_2024,
    get_state_tax_info,
)
from investisizer.utils.error_utils import error_handler
from investisizer.utils.rate_utils import parse_bool, parse_number

logger = logging.getLogger(__name__)

STATE_NOT_FOUND_NOTE = "State not found in tax database"
STATE_TAX_DISABLED_NOTE = "State tax disabled or sale not configured"


# ======================
# Federal
# ======================


def get_federal_tax_bracket(annual_income: float, filing_status: Any) -> CapitalGainsBracket:
    """Find the capital gains band the taxpayer's income falls in."""
    status = FilingStatus.from_value(filing_status)
    brackets = FEDERAL_CAPITAL_GAINS_BRACKETS_2024[status.value]
    for bracket in brackets:
        if bracket.min <= annual_income < bracket.max:
            return bracket
    return brackets[-1]


def get_federal_capital_gains_rate(annual_income: float, filing_status: Any) -> float:
    """
    Long-term capital gains rate for an income level and filing status.

    Examples:
        >>> get_federal_capital_gains_rate(40000, "single")
        0.0
        >>> get_federal_capital_gains_rate(120000, "single")
        0.15
        >>> get_federal_capital_gains_rate(600000, "married_joint")
        0.2
    """
    return get_federal_tax_bracket(annual_income, filing_status).rate


def calculate_federal_tax(taxable_gain: float, annual_income: float, filing_status: Any) -> Dict[str, Any]:
    """
    Apply the bracket rate to the whole taxable gain.

    Returns:
        Dict with taxable_gain, tax_rate, tax_amount
    """
    taxable_gain = max(0.0, taxable_gain)
    if taxable_gain == 0:
        return {"taxable_gain": 0.0, "tax_rate": 0.0, "tax_amount": 0.0}
    rate = get_federal_capital_gains_rate(annual_income, filing_status)
    return {"taxable_gain": taxable_gain, "tax_rate": rate, "tax_amount": taxable_gain * rate}


# ======================
# Section 121
# ======================


def get_max_section121_exclusion(filing_status: Any) -> float:
    if FilingStatus.from_value(filing_status) is FilingStatus.MARRIED_JOINT:
        return SECTION_121_EXCLUSION_MARRIED_JOINT
    return SECTION_121_EXCLUSION_SINGLE


def calculate_section121_exclusion(
    capital_gain: float,
    filing_status: Any,
    is_primary_residence: bool,
    years_owned: float,
    years_lived: float,
    has_used_exclusion_in_last_two_years: bool = False,
    enabled: bool = True,
) -> Dict[str, Any]:
    """
    Primary residence exclusion.

    Ineligibility is reported through ``reason``; the gain then passes through
    untouched as ``remaining_gain``.

    Returns:
        Dict with is_eligible, max_exclusion, applied_exclusion, remaining_gain, reason
    """
    reason = None
    if not enabled:
        reason = "Section 121 exclusion disabled"
    elif not is_primary_residence:
        reason = "Property is not a primary residence"
    elif years_owned < SECTION_121_MIN_YEARS:
        reason = (
            f"Ownership requirement not met. Must own for at least {SECTION_121_MIN_YEARS} years "
            f"(owned: {_format_years(years_owned)} years)"
        )
    elif years_lived < SECTION_121_MIN_YEARS:
        reason = (
            f"Use requirement not met. Must live in home for at least {SECTION_121_MIN_YEARS} years "
            f"(lived: {_format_years(years_lived)} years)"
        )
    elif has_used_exclusion_in_last_two_years:
        reason = f"Exclusion already used within the last {SECTION_121_MIN_YEARS} years"

    if reason is not None:
        return {
            "is_eligible": False,
            "max_exclusion": 0.0,
            "applied_exclusion": 0.0,
            "remaining_gain": max(0.0, capital_gain),
            "reason": reason,
        }

    max_exclusion = get_max_section121_exclusion(filing_status)
    applied = min(max(0.0, capital_gain), max_exclusion)
    return {
        "is_eligible": True,
        "max_exclusion": max_exclusion,
        "applied_exclusion": applied,
        "remaining_gain": max(0.0, capital_gain - applied),
        "reason": None,
    }


def _format_years(years: float) -> str:
    return str(int(years)) if float(years).is_integer() else str(years)


# ======================
# Depreciation recapture
# ======================


def calculate_depreciation_recapture(
    remaining_gain: float,
    total_depreciation_taken: float,
    enabled: bool = True,
) -> Dict[str, Any]:
    """
    Section 1250 recapture at a flat 25%, capped at the remaining gain.

    Returns:
        Dict with recapture_amount, recapture_rate, recapture_tax
    """
    if not enabled or total_depreciation_taken <= 0 or remaining_gain <= 0:
        return {"recapture_amount": 0.0, "recapture_rate": 0.0, "recapture_tax": 0.0}
    amount = min(remaining_gain, total_depreciation_taken)
    return {
        "recapture_amount": amount,
        "recapture_rate": DEPRECIATION_RECAPTURE_RATE,
        "recapture_tax": amount * DEPRECIATION_RECAPTURE_RATE,
    }


def calculate_annual_depreciation(
    property_value: float,
    land_value_percentage: float = 20.0,
    is_residential: bool = True,
) -> float:
    """
    Straight-line depreciation on the building portion of a property.

    Residential rental property recovers over 27.5 years, commercial over 39.

    Examples:
        >>> calculate_annual_depreciation(275000, 0)
        10000.0
    """
    building_value = property_value * (1 - land_value_percentage / 100.0)
    period = RESIDENTIAL_RECOVERY_YEARS if is_residential else COMMERCIAL_RECOVERY_YEARS
    return max(0.0, building_value) / period


def calculate_total_depreciation(
    property_value: float,
    land_value_percentage: float,
    years_owned: float,
    is_residential: bool = True,
) -> float:
    """Straight-line depreciation accumulated over ``years_owned`` years."""
    annual = calculate_annual_depreciation(property_value, land_value_percentage, is_residential)
    return annual * max(0.0, years_owned)


# ======================
# State
# ======================


def calculate_state_tax(taxable_gain: float, state_code: Optional[str], enabled: bool = True) -> Dict[str, Any]:
    """
    State capital gains tax at the table rate.

    Returns:
        Dict with state_code, state_name, tax_rate, tax_amount,
        has_capital_gains_tax, notes, is_simplified
    """
    code = (state_code or "").strip().upper()
    if not enabled or not code:
        return _state_result(code, "", 0.0, 0.0, False, STATE_TAX_DISABLED_NOTE, False)

    info = get_state_tax_info(code)
    if info is None:
        logger.debug(f"State code {code!r} not in tax table, applying zero state tax")
        return _state_result(code, "Unknown State", 0.0, 0.0, False, STATE_NOT_FOUND_NOTE, False)

    taxable_gain = max(0.0, taxable_gain)
    if not info.has_capital_gains_tax:
        return _state_result(code, info.name, 0.0, 0.0, False, info.notes, info.is_simplified)
    return _state_result(
        code, info.name, info.rate, taxable_gain * info.rate, True, info.notes, info.is_simplified
    )


def _state_result(code, name, rate, amount, has_tax, notes, is_simplified) -> Dict[str, Any]:
    return {
        "state_code": code,
        "state_name": name,
        "tax_rate": rate,
        "tax_amount": amount,
        "has_capital_gains_tax": has_tax,
        "notes": notes,
        "is_simplified": is_simplified,
    }


def compare_states(taxable_gain: float, state_codes: Iterable[str]) -> List[Dict[str, Any]]:
    """State tax on the same gain across several states, cheapest first."""
    results = [calculate_state_tax(taxable_gain, code) for code in state_codes]
    return sorted(results, key=lambda r: r["tax_amount"])


# ======================
# Combined
# ======================


@error_handler
def calculate_sale_taxes(
    capital_gain: float,
    tax_profile: Mapping[str, Any],
    section121: Optional[Mapping[str, Any]] = None,
    depreciation: Optional[Mapping[str, Any]] = None,
) -> Dict[str, Any]:
    """
    Compute every tax owed on a property sale.

    The three records may be the same flat sale configuration; ``section121``
    and ``depreciation`` default to ``tax_profile``.

    Order of operations:
        1. Section 121 exclusion reduces the gain.
        2. Depreciation recapture is carved out of the remaining gain at 25%.
        3. The rest, plus other gains, minus carryover losses (floored at 0),
           is taxed at the federal bracket rate and the state rate.

    Args:
        capital_gain: Sale price minus selling costs minus adjusted basis
        tax_profile: filing_status, annual_income, state, enable_state_tax,
            other_capital_gains, carryover_losses
        section121: enable_section121, is_primary_residence, years_owned,
            years_lived, has_used_exclusion_in_last_two_years
        depreciation: enable_depreciation_recapture, total_depreciation_taken

    Returns:
        Dict with federal_tax, federal_rate, state_tax, state_rate, state_name,
        state_notes, exclusion, recapture_amount, recapture_tax,
        taxable_gain and total_tax
    """
    section121 = tax_profile if section121 is None else section121
    depreciation = tax_profile if depreciation is None else depreciation

    filing_status = FilingStatus.from_value(tax_profile.get("filing_status"))
    annual_income = parse_number(tax_profile.get("annual_income"))
    other_gains = parse_number(tax_profile.get("other_capital_gains"))
    carryover_losses = abs(parse_number(tax_profile.get("carryover_losses")))

    exclusion = calculate_section121_exclusion(
        capital_gain,
        filing_status,
        is_primary_residence=parse_bool(section121.get("is_primary_residence", False)),
        years_owned=parse_number(section121.get("years_owned")),
        years_lived=parse_number(section121.get("years_lived")),
        has_used_exclusion_in_last_two_years=parse_bool(
            section121.get("has_used_exclusion_in_last_two_years", False)
        ),
        enabled=parse_bool(section121.get("enable_section121", True)),
    )
    remaining_gain = exclusion["remaining_gain"]

    recapture = calculate_depreciation_recapture(
        remaining_gain,
        parse_number(depreciation.get("total_depreciation_taken")),
        enabled=parse_bool(depreciation.get("enable_depreciation_recapture", False)),
    )

    ordinary_base = remaining_gain - recapture["recapture_amount"]
    taxable_gain = max(0.0, ordinary_base + other_gains - carryover_losses)

    federal = calculate_federal_tax(taxable_gain, annual_income, filing_status)
    state = calculate_state_tax(
        taxable_gain,
        tax_profile.get("state"),
        enabled=parse_bool(tax_profile.get("enable_state_tax", True)),
    )

    federal_tax = federal["tax_amount"] + recapture["recapture_tax"]
    return {
        "capital_gain": capital_gain,
        "taxable_gain": taxable_gain,
        "federal_tax": federal_tax,
        "federal_rate": federal["tax_rate"],
        "state_tax": state["tax_amount"],
        "state_rate": state["tax_rate"],
        "state_name": state["state_name"],
        "state_notes": state["notes"],
        "exclusion": exclusion,
        "recapture_amount": recapture["recapture_amount"],
        "recapture_tax": recapture["recapture_tax"],
        "total_tax": federal_tax + state["tax_amount"],
    }
