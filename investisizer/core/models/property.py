"""
Property asset model.

Owns a property's input record (rental and sale configuration included),
the setter surface used to edit it, and read-only accessors over its
projection such as the sale's capital gain and taxes.
"""

import copy
import uuid
from typing import Any, Dict, List, Optional

import pandas as pd

from investisizer.core.constants import (
    EAssetType,
    EGrowthModel,
    DEFAULT_PROPERTY_INPUTS,
    DEFAULT_SALE_CONFIG,
    DEFAULT_PROJECTION_YEARS,
)
from investisizer.core.engine.property_projector import PropertyProjection, project_property
from investisizer.core.validation import validate_property
from investisizer.utils.error_utils import error_handler


class Property:
    """
    Leveraged real estate with optional rental income and a planned sale.

    Attributes:
        id: Opaque asset identifier
        name: Display name
        enabled: Disabled assets are left out of portfolio totals
        inputs: Property input record; ``inputs["sale_config"]`` holds the
            sale, tax profile, Section 121 and depreciation settings
    """

    type = EAssetType.PROPERTY

    @error_handler
    def __init__(
        self,
        name: str = "Property",
        inputs: Optional[Dict[str, Any]] = None,
        id: Optional[str] = None,
        enabled: bool = True,
    ):
        self.id = id or uuid.uuid4().hex
        self.name = name
        self.enabled = enabled

        inputs = dict(inputs or {})
        sale_config = dict(DEFAULT_SALE_CONFIG)
        sale_config.update(inputs.pop("sale_config", None) or {})

        self.inputs = dict(DEFAULT_PROPERTY_INPUTS)
        self.inputs.update(inputs)
        if not self.inputs.get("property_growth_model"):
            self.inputs["property_growth_model"] = EGrowthModel.PURCHASE_PRICE
        self.inputs["sale_config"] = sale_config

    @property
    def sale_config(self) -> Dict[str, Any]:
        return self.inputs["sale_config"]

    # ======================
    # Setters
    # ======================

    def update_input(self, key: str, value: Any):
        if key == "sale_config":
            raise ValueError("Use update_sale_config to change the sale configuration")
        self.inputs[key] = value

    def set_enabled(self, enabled: bool):
        self.enabled = bool(enabled)

    def set_sale_enabled(self, enabled: bool, projection_years: int = DEFAULT_PROJECTION_YEARS):
        """
        Turn the planned sale on or off.

        Enabling a sale without a sale year defaults it to the middle of the
        projection (10 years -> year 5).
        """
        self.sale_config["is_planned_for_sale"] = bool(enabled)
        if enabled and not self.sale_config.get("sale_year"):
            self.sale_config["sale_year"] = max(1, int(projection_years) // 2)

    def update_sale_config(self, key: str, value: Any):
        """Set one sale configuration field; reinvesting defaults the target to the linked investment."""
        self.sale_config[key] = value
        if key == "reinvest_proceeds" and value and not self.sale_config.get("target_investment_id"):
            linked = self.inputs.get("linked_investment_id")
            if linked:
                self.sale_config["target_investment_id"] = linked

    # ======================
    # Projection
    # ======================

    @error_handler
    def projection(self, settings) -> PropertyProjection:
        return project_property(self.inputs, settings)

    def project(self, settings) -> List[Dict[str, Any]]:
        """Result rows for years 0..N."""
        return self.projection(settings).results

    def get_projection(self, settings) -> pd.DataFrame:
        return self.projection(settings).to_dataframe()

    def final_result(self, settings) -> Optional[Dict[str, Any]]:
        results = self.project(settings)
        return results[-1] if results else None

    def has_results(self, settings) -> bool:
        return len(self.project(settings)) > 0

    def calculated_principal_interest_payment(self, settings) -> float:
        return round(self.projection(settings).principal_interest_payment, 2)

    # ======================
    # Sale accessors
    # ======================

    def sale_summary(self, settings) -> Optional[Dict[str, Any]]:
        """Disposition breakdown, or None when no sale falls inside the projection."""
        return self.projection(settings).disposition

    def _sale_value(self, settings, key: str) -> float:
        disposition = self.sale_summary(settings)
        return round(disposition[key], 2) if disposition else 0.0

    def capital_gain(self, settings) -> float:
        return self._sale_value(settings, "capital_gain")

    def net_after_tax_proceeds(self, settings) -> float:
        return self._sale_value(settings, "net_after_tax_proceeds")

    def section121_exclusion(self, settings) -> float:
        return self._sale_value(settings, "section121_exclusion")

    def federal_tax_amount(self, settings) -> float:
        return self._sale_value(settings, "federal_tax_amount")

    def state_tax_amount(self, settings) -> float:
        return self._sale_value(settings, "state_tax_amount")

    # ======================
    # Validation and serialization
    # ======================

    def validate(self, projection_years: int = DEFAULT_PROJECTION_YEARS):
        return validate_property(self.inputs, projection_years)

    def validation_errors(self, projection_years: int = DEFAULT_PROJECTION_YEARS) -> List[str]:
        """Errors and warnings as one list of messages."""
        return self.validate(projection_years).messages

    @error_handler
    def to_dict(self) -> Dict[str, Any]:
        """
        Serialize property for persistence.

        Returns:
            Dictionary with id, name, type, enabled and inputs (sale_config nested)
        """
        return {
            "id": self.id,
            "name": self.name,
            "type": self.type,
            "enabled": self.enabled,
            "inputs": copy.deepcopy(self.inputs),
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Dict[str, Any]) -> 'Property':
        """
        Deserialize property.

        Older records may lack the growth model, the sale configuration or
        individual sale keys; those are filled from the defaults.

        Args:
            data: Dictionary representation of the property

        Returns:
            Property instance
        """
        return cls(
            name=data.get("name", "Property"),
            inputs=copy.deepcopy(data.get("inputs", {})),
            id=data.get("id"),
            enabled=data.get("enabled", True),
        )

    def __repr__(self) -> str:
        return f"Property(id={self.id!r}, name={self.name!r}, enabled={self.enabled})"
