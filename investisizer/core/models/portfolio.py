"""
Portfolio model.

Holds the shared settings and the ordered collection of assets, and hands out
fresh PortfolioAggregator snapshots for projections.
"""

import logging
from typing import Any, Dict, List, Optional, Union

from investisizer.core.constants import EAssetType
from investisizer.core.engine.portfolio_aggregator import PortfolioAggregator
from investisizer.core.models.investment import Investment
from investisizer.core.models.property import Property
from investisizer.core.settings import PortfolioSettings
from investisizer.utils.error_utils import error_handler
from investisizer.utils.rate_utils import parse_bool, parse_number

logger = logging.getLogger(__name__)

Asset = Union[Investment, Property]

ASSET_TYPES = {
    EAssetType.INVESTMENT: Investment,
    EAssetType.PROPERTY: Property,
}


@error_handler
def asset_from_dict(data: Dict[str, Any]) -> Asset:
    """Rebuild an asset from its serialized form, dispatching on the type tag."""
    asset_type = data.get("type")
    if asset_type not in ASSET_TYPES:
        raise ValueError(f"Unknown asset type: {asset_type!r}")
    return ASSET_TYPES[asset_type].from_dict(data)


class Portfolio:
    """
    A set of assets projected together.

    Attributes:
        settings: PortfolioSettings shared by every asset
        assets: Assets keyed by id, in insertion order
    """

    def __init__(self, settings: Optional[PortfolioSettings] = None, assets: Optional[List[Asset]] = None):
        self.settings = settings or PortfolioSettings()
        self.assets: Dict[str, Asset] = {}
        for asset in assets or []:
            self.assets[asset.id] = asset

    # ======================
    # Asset bookkeeping
    # ======================

    @property
    def assets_list(self) -> List[Asset]:
        return list(self.assets.values())

    @property
    def enabled_assets(self) -> List[Asset]:
        return [asset for asset in self.assets.values() if asset.enabled]

    @property
    def investments(self) -> List[Investment]:
        return [asset for asset in self.assets.values() if asset.type == EAssetType.INVESTMENT]

    @property
    def properties(self) -> List[Property]:
        return [asset for asset in self.assets.values() if asset.type == EAssetType.PROPERTY]

    def get_asset(self, asset_id: str) -> Optional[Asset]:
        return self.assets.get(asset_id)

    def _add(self, asset_cls, name: Optional[str], inputs: Optional[Dict[str, Any]]) -> str:
        default_name = "Asset" if asset_cls is Investment else "Property"
        merged = {"inflation_rate": str(self.settings.inflation_rate)}
        merged.update(inputs or {})
        asset = asset_cls(name=name or f"{default_name} {len(self.assets) + 1}", inputs=merged)
        self.assets[asset.id] = asset
        return asset.id

    def add_investment(self, name: Optional[str] = None, inputs: Optional[Dict[str, Any]] = None) -> str:
        return self._add(Investment, name, inputs)

    def add_property(self, name: Optional[str] = None, inputs: Optional[Dict[str, Any]] = None) -> str:
        return self._add(Property, name, inputs)

    def add_asset(self, asset: Asset) -> str:
        self.assets[asset.id] = asset
        return asset.id

    def remove_asset(self, asset_id: str) -> bool:
        """Remove an asset and clear property links that pointed at it."""
        if self.assets.pop(asset_id, None) is None:
            return False
        for prop in self.properties:
            if prop.inputs.get("linked_investment_id") == asset_id:
                prop.update_input("linked_investment_id", "")
            if prop.sale_config.get("target_investment_id") == asset_id:
                prop.update_sale_config("target_investment_id", None)
        logger.debug(f"Removed asset {asset_id}")
        return True

    def duplicate_asset(self, asset_id: str) -> Optional[str]:
        source = self.assets.get(asset_id)
        if source is None:
            return None
        data = source.to_dict()
        data.pop("id")
        data["name"] = f"{source.name} (copy)"
        data["inputs"]["inflation_rate"] = str(self.settings.inflation_rate)
        duplicate = asset_from_dict(data)
        self.assets[duplicate.id] = duplicate
        return duplicate.id

    # ======================
    # Settings
    # ======================

    def set_years(self, value: Any):
        self.settings.years = value

    def set_inflation_rate(self, value: Any):
        """Set portfolio inflation and push it into every asset's inputs."""
        self.settings.inflation_rate = parse_number(value)
        for asset in self.assets.values():
            asset.update_input("inflation_rate", str(value))

    def set_starting_year(self, value: Any):
        self.settings.starting_year = int(parse_number(value, self.settings.starting_year))

    # ======================
    # Projections
    # ======================

    def aggregator(self) -> PortfolioAggregator:
        """A fresh aggregator over the current inputs."""
        return PortfolioAggregator(self.assets_list, self.settings)

    def combined_results(self) -> List[Dict[str, Any]]:
        return self.aggregator().combined_results()

    def get_linked_property_cash_flows(self, investment_id: str) -> List[float]:
        return self.aggregator().get_linked_property_cash_flows(investment_id)

    def asset_results(self, asset_id: str) -> List[Dict[str, Any]]:
        asset = self.assets.get(asset_id)
        if asset is None:
            return []
        return self.aggregator().asset_results(asset)

    # ======================
    # Summary figures
    # ======================

    @property
    def total_initial_investment(self) -> float:
        """Initial amounts of investments plus down payments of properties."""
        total = 0.0
        for asset in self.enabled_assets:
            if asset.type == EAssetType.INVESTMENT:
                total += parse_number(asset.inputs.get("initial_amount"))
            else:
                price = parse_number(asset.inputs.get("purchase_price"))
                total += price * parse_number(asset.inputs.get("down_payment_percentage")) / 100.0
        return total

    def _investment_contributions(self, asset: Investment) -> float:
        contribution = parse_number(asset.inputs.get("annual_contribution"))
        inflation = parse_number(asset.inputs.get("inflation_rate"), self.settings.inflation_rate)
        if parse_bool(asset.inputs.get("inflation_adjusted_contributions", False)):
            return sum(contribution * (1 + inflation / 100.0) ** year for year in range(1, self.settings.years + 1))
        return contribution * self.settings.years

    @property
    def total_contributed(self) -> float:
        """Positive investment contributions plus property payments over the projection."""
        total = 0.0
        for asset in self.enabled_assets:
            if asset.type == EAssetType.INVESTMENT:
                total += max(0.0, self._investment_contributions(asset))
            else:
                payment = parse_number(asset.inputs.get("monthly_payment"))
                if payment <= 0:
                    payment = asset.calculated_principal_interest_payment(self.settings)
                total += payment * 12 * self.settings.years
        return total

    @property
    def total_withdrawn(self) -> float:
        return sum(
            -min(0.0, self._investment_contributions(asset))
            for asset in self.enabled_assets
            if asset.type == EAssetType.INVESTMENT
        )

    @property
    def net_contributions(self) -> float:
        return self.total_contributed - self.total_withdrawn

    @property
    def total_return_percentage(self) -> float:
        combined = self.combined_results()
        initial = self.total_initial_investment
        if not combined or initial == 0:
            return 0.0
        return combined[-1]["total_earnings"] / initial * 100.0

    def summary(self) -> Dict[str, Any]:
        return {
            "asset_count": len(self.assets),
            "enabled_asset_count": len(self.enabled_assets),
            "total_initial_investment": round(self.total_initial_investment, 2),
            "total_contributed": round(self.total_contributed, 2),
            "total_withdrawn": round(self.total_withdrawn, 2),
            "net_contributions": round(self.net_contributions, 2),
            "total_return_percentage": round(self.total_return_percentage, 2),
        }

    # ======================
    # Serialization
    # ======================

    @error_handler
    def to_dict(self) -> Dict[str, Any]:
        return {
            "settings": self.settings.to_dict(),
            "assets": [asset.to_dict() for asset in self.assets.values()],
        }

    @classmethod
    @error_handler
    def from_dict(cls, data: Dict[str, Any]) -> 'Portfolio':
        settings = PortfolioSettings.from_dict(data.get("settings"))
        assets = [asset_from_dict(item) for item in data.get("assets", [])]
        return cls(settings=settings, assets=assets)
