"""
Portfolio aggregation and cross-asset cash flow settlement.

The aggregator resolves property -> investment links (ongoing payment links and
sale-proceeds targets), feeds each investment projection the summed linked cash
flow series, and merges every enabled asset's yearly rows into one combined
series with totals and a per-asset breakdown.

An aggregator instance is a snapshot of one computation: the link index and
property projections are built lazily from the inputs it was given and are
never updated afterwards. Build a new one after any input changes.
"""

import logging
from typing import Any, Dict, List, Optional, Sequence

import pandas as pd

from investisizer.core.constants import EAssetType
from investisizer.core.engine.investment_projector import project_investment
from investisizer.core.engine.property_projector import (
    PropertyProjection,
    project_property,
    resolve_sale_config,
)
from investisizer.utils.error_utils import error_handler
from investisizer.utils.rate_utils import parse_bool, round_currency

logger = logging.getLogger(__name__)

TOTAL_COLUMNS = [
    "year",
    "actual_year",
    "total_balance",
    "total_real_balance",
    "total_investment_balance",
    "total_real_investment_balance",
    "total_property_value",
    "total_real_property_value",
    "total_property_equity",
    "total_mortgage_balance",
    "total_net_worth",
    "total_annual_contribution",
    "total_property_cash_flow",
    "total_earnings",
    "total_yearly_gain",
]


class PortfolioAggregator:
    """
    Combines investment and property projections.

    Attributes:
        assets: Asset objects exposing id, name, type, enabled and inputs
        settings: PortfolioSettings shared by every projection
    """

    def __init__(self, assets: Sequence[Any], settings):
        self.assets = list(assets)
        self.settings = settings
        self._property_projections: Dict[str, PropertyProjection] = {}
        self._link_index: Optional[Dict[str, Dict[str, List[Any]]]] = None

    # ======================
    # Lookups
    # ======================

    @property
    def enabled_assets(self) -> List[Any]:
        return [asset for asset in self.assets if asset.enabled]

    @property
    def properties(self) -> List[Any]:
        return [asset for asset in self.assets if asset.type == EAssetType.PROPERTY]

    @property
    def investments(self) -> List[Any]:
        return [asset for asset in self.assets if asset.type == EAssetType.INVESTMENT]

    def get_asset(self, asset_id: str) -> Optional[Any]:
        for asset in self.assets:
            if asset.id == asset_id:
                return asset
        return None

    def _build_link_index(self) -> Dict[str, Dict[str, List[Any]]]:
        """Map investment id -> enabled properties paying into it or selling into it."""
        index: Dict[str, Dict[str, List[Any]]] = {}
        for prop in self.properties:
            if not prop.enabled:
                continue
            linked_id = prop.inputs.get("linked_investment_id")
            if linked_id:
                index.setdefault(linked_id, {"payments": [], "proceeds": []})["payments"].append(prop)

            sale_config = resolve_sale_config(prop.inputs)
            target_id = sale_config.get("target_investment_id")
            if target_id and parse_bool(sale_config.get("reinvest_proceeds", False)):
                index.setdefault(target_id, {"payments": [], "proceeds": []})["proceeds"].append(prop)

        logger.debug(f"Link index built for {len(index)} investment(s)")
        return index

    @property
    def link_index(self) -> Dict[str, Dict[str, List[Any]]]:
        if self._link_index is None:
            self._link_index = self._build_link_index()
        return self._link_index

    # ======================
    # Per-asset projections
    # ======================

    def property_projection(self, prop) -> PropertyProjection:
        if prop.id not in self._property_projections:
            self._property_projections[prop.id] = project_property(prop.inputs, self.settings)
        return self._property_projections[prop.id]

    @error_handler
    def get_linked_property_cash_flows(self, investment_id: str) -> List[float]:
        """
        Net linked property cash flow into an investment, one entry per year 1..N.

        Sums ongoing cash flows of enabled properties linked for payments while
        unsold, plus net after-tax proceeds of enabled properties reinvesting
        into this investment in their sale year. Unknown ids yield zeros.
        """
        years = self.settings.years
        flows = [0.0] * years
        links = self.link_index.get(investment_id)
        if not links:
            return flows

        for prop in links["payments"]:
            for row in self.property_projection(prop).results[1:]:
                if row["is_sale_year"] or row["is_post_sale"]:
                    break
                flows[row["year"] - 1] += row["annual_cash_flow"]

        for prop in links["proceeds"]:
            projection = self.property_projection(prop)
            if projection.disposition is None:
                continue
            sale_row = projection.results[projection.sale_year]
            flows[projection.sale_year - 1] += sale_row["sale_proceeds"]

        return [round_currency(flow) for flow in flows]

    def investment_results(self, investment) -> List[Dict[str, Any]]:
        return project_investment(
            investment.inputs,
            self.settings,
            self.get_linked_property_cash_flows(investment.id),
        )

    def property_results(self, prop) -> List[Dict[str, Any]]:
        return self.property_projection(prop).results

    def asset_results(self, asset) -> List[Dict[str, Any]]:
        """Standalone results for any asset, enabled or not, dispatched on its type tag."""
        if asset.type == EAssetType.INVESTMENT:
            return self.investment_results(asset)
        if asset.type == EAssetType.PROPERTY:
            return self.property_results(asset)
        logger.warning(f"Unknown asset type {asset.type!r} for asset {asset.id}")
        return []

    # ======================
    # Combined results
    # ======================

    @error_handler
    def combined_results(self) -> List[Dict[str, Any]]:
        """
        Portfolio totals per year 0..N with a per-asset breakdown.

        ``total_balance`` adds investment balances and property values;
        ``total_net_worth`` adds investment balances and property equity.
        Sold properties stay in the breakdown with zeroed figures.
        """
        enabled = self.enabled_assets
        if not enabled:
            return []

        results_by_asset = [(asset, self.asset_results(asset)) for asset in enabled]
        combined = []
        for year in range(self.settings.years + 1):
            totals = {column: 0.0 for column in TOTAL_COLUMNS[2:]}
            breakdown = []

            for asset, results in results_by_asset:
                row = results[year]
                if asset.type == EAssetType.INVESTMENT:
                    totals["total_investment_balance"] += row["balance"]
                    totals["total_real_investment_balance"] += row["real_balance"]
                    totals["total_annual_contribution"] += row["annual_contribution"]
                    totals["total_property_cash_flow"] += row["property_cash_flow"]
                    totals["total_earnings"] += row["total_earnings"]
                    totals["total_yearly_gain"] += row["yearly_gain"]
                    breakdown.append(_investment_breakdown(asset, row))
                else:
                    totals["total_property_value"] += row["balance"]
                    totals["total_real_property_value"] += row["real_balance"]
                    totals["total_mortgage_balance"] += row["mortgage_balance"]
                    breakdown.append(_property_breakdown(asset, row))

            totals["total_property_equity"] = totals["total_property_value"] - totals["total_mortgage_balance"]
            totals["total_balance"] = totals["total_investment_balance"] + totals["total_property_value"]
            totals["total_real_balance"] = (
                totals["total_real_investment_balance"] + totals["total_real_property_value"]
            )
            totals["total_net_worth"] = totals["total_investment_balance"] + totals["total_property_equity"]

            entry = {"year": year, "actual_year": self.settings.starting_year + year}
            entry.update({column: round_currency(value) for column, value in totals.items()})
            entry["asset_breakdown"] = breakdown
            combined.append(entry)

        return combined

    def to_dataframe(self) -> pd.DataFrame:
        """Combined totals as a DataFrame (breakdown omitted)."""
        return pd.DataFrame(self.combined_results(), columns=TOTAL_COLUMNS)


def _investment_breakdown(asset, row: Dict[str, Any]) -> Dict[str, Any]:
    return {
        "id": asset.id,
        "name": asset.name,
        "type": EAssetType.INVESTMENT,
        "balance": row["balance"],
        "real_balance": row["real_balance"],
        "annual_contribution": row["annual_contribution"],
        "property_cash_flow": row["property_cash_flow"],
    }


def _property_breakdown(asset, row: Dict[str, Any]) -> Dict[str, Any]:
    # The mortgage is deflated by the same factor as the property value
    real_factor = row["real_balance"] / row["balance"] if row["balance"] else 0.0
    return {
        "id": asset.id,
        "name": asset.name,
        "type": EAssetType.PROPERTY,
        "balance": round_currency(row["balance"] - row["mortgage_balance"]),
        "real_balance": round_currency(row["real_balance"] - row["mortgage_balance"] * real_factor),
        "property_value": row["balance"],
        "mortgage_balance": row["mortgage_balance"],
        "monthly_payment": row["monthly_payment"],
        "principal_interest_payment": row["principal_interest_payment"],
        "other_fees_payment": row["other_fees_payment"],
        "annual_cash_flow": row["annual_cash_flow"],
        "is_sale_year": row["is_sale_year"],
        "is_post_sale": row["is_post_sale"],
        "sale_proceeds": row["sale_proceeds"],
    }
