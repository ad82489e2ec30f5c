"""
Tax API endpoints.

Exposes the state capital gains table, state comparisons and the sale tax
calculation.
"""

from typing import Any, Dict, List

from fastapi import APIRouter, HTTPException, Query, status

from investisizer.api.schemas import (
    SaleTaxRequest,
    SaleTaxResponse,
    StateTaxResponse,
)
from investisizer.core.engine.tax_calculator import calculate_sale_taxes, compare_states
from investisizer.core.tax_tables import (
    STATE_TAX_RATES,
    get_no_tax_states,
    get_state_choices,
    get_state_tax_info,
    get_states_by_tax_rate,
)

router = APIRouter()


@router.get("/states", response_model=List[StateTaxResponse])
def list_states(no_tax_only: bool = False, sort: str = Query("name", pattern="^(name|rate)$")):
    """State table sorted by name or rate; ``no_tax_only`` keeps states without capital gains tax."""
    if no_tax_only:
        states = sorted(get_no_tax_states(), key=lambda info: info.name)
    elif sort == "rate":
        states = get_states_by_tax_rate()
    else:
        states = sorted(STATE_TAX_RATES.values(), key=lambda info: info.name)
    return [info._asdict() for info in states]


@router.get("/states/{state_code}", response_model=StateTaxResponse)
def get_state(state_code: str):
    info = get_state_tax_info(state_code)
    if info is None:
        raise HTTPException(
            status_code=status.HTTP_404_NOT_FOUND,
            detail=f"State {state_code} not found",
        )
    return info._asdict()


@router.get("/choices")
def state_choices() -> List[Dict[str, Any]]:
    """Dropdown-ready ``{value, label, rate}`` entries."""
    return get_state_choices()


@router.get("/compare")
def compare_state_taxes(taxable_gain: float = Query(..., ge=0), states: str = Query(..., min_length=2)):
    """State tax on one gain across comma-separated state codes, cheapest first."""
    codes = [code.strip() for code in states.split(",") if code.strip()]
    return compare_states(taxable_gain, codes)


@router.post("/sale", response_model=SaleTaxResponse)
def sale_taxes(request: SaleTaxRequest):
    return calculate_sale_taxes(request.capital_gain, request.tax_profile)
