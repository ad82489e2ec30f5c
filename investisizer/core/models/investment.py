"""
Investment asset model.

Owns an investment's input record and exposes its projection. The investment
does not know which properties are linked to it; linked cash flows are
supplied by the caller (normally the portfolio aggregator).
"""

import uuid
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from investisizer.core.constants import EAssetType, DEFAULT_INVESTMENT_INPUTS
from investisizer.core.engine.investment_projector import (
    investment_warnings,
    project_investment,
    to_dataframe,
)
from investisizer.core.validation import validate_investment
from investisizer.utils.error_utils import error_handler


class Investment:
    """
    Liquid investment with compounding growth and annual contributions.

    Attributes:
        id: Opaque asset identifier
        name: Display name
        enabled: Disabled assets are left out of portfolio totals
        inputs: initial_amount, rate_of_return, inflation_rate,
            annual_contribution, inflation_adjusted_contributions
    """

    type = EAssetType.INVESTMENT

    @error_handler
    def __init__(
        self,
        name: str = "Investment",
        inputs: Optional[Dict[str, Any]] = None,
        id: Optional[str] = None,
        enabled: bool = True,
    ):
        self.id = id or uuid.uuid4().hex
        self.name = name
        self.enabled = enabled
        self.inputs = dict(DEFAULT_INVESTMENT_INPUTS)
        self.inputs.update(inputs or {})

    def update_input(self, key: str, value: Any):
        self.inputs[key] = value

    def set_enabled(self, enabled: bool):
        self.enabled = bool(enabled)

    def project(self, settings, property_cash_flows: Optional[Sequence[float]] = None) -> List[Dict[str, Any]]:
        """Result rows for years 0..N; ``property_cash_flows[0]`` applies to year 1."""
        return project_investment(self.inputs, settings, property_cash_flows)

    def get_projection(self, settings, property_cash_flows: Optional[Sequence[float]] = None) -> pd.DataFrame:
        return to_dataframe(self.project(settings, property_cash_flows))

    def final_result(self, settings, property_cash_flows: Optional[Sequence[float]] = None) -> Optional[Dict[str, Any]]:
        results = self.project(settings, property_cash_flows)
        return results[-1] if results else None

    def has_results(self, settings) -> bool:
        return len(self.project(settings)) > 0

    def warnings(self, settings, property_cash_flows: Optional[Sequence[float]] = None) -> List[str]:
        rows = self.project(settings, property_cash_flows)
        return investment_warnings(rows, self.inputs, property_cash_flows, settings.years)

    def validate(self):
        return validate_investment(self.inputs)

    @error_handler
    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize investment for persistence.

        Returns:
            Dictionary with id, name, type, enabled and inputs
        """
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "enabled": self.enabled,
            "inputs": dict(self.inputs),
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Dict[str, Any]) -> 'Investment':
        """
        Deserialize investment, filling defaults for keys older records lack.

        Args:
            data: Dictionary representation of the investment

        Returns:
            Investment instance
        """
        return cls(
            name=data.get("name", "Investment"),
            inputs=data.get("inputs", {}),
            id=data.get("id"),
            enabled=data.get("enabled", True),
        )

    def __repr__(self) -> str:
        return f"Investment(id={self.id!r}, name={self.name!r}, enabled={self.enabled})"
