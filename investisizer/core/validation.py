"""
Input validation for investments and properties.

Validation is advisory: it reads an input record plus portfolio context and
returns human-readable errors and warnings. It never mutates inputs, and the
projection engine behaves the same whether or not validation has run.
"""

from typing import Any, List, Mapping, Optional

from investisizer.core.constants import EGrowthModel
from investisizer.core.engine.property_projector import (
    project_property,
    resolve_sale_config,
)
from investisizer.core.settings import PortfolioSettings
from investisizer.utils.rate_utils import (
    parse_bool,
    parse_int,
    parse_number,
    parse_optional_number,
    validate_rate_range,
)


class ValidationResult:
    """Errors block a sensible projection; warnings flag unusual but legal values."""

    def __init__(self):
        self.errors: List[str] = []
        self.warnings: List[str] = []

    @property
    def is_valid(self) -> bool:
        return not self.errors

    @property
    def messages(self) -> List[str]:
        return self.errors + self.warnings

    def check_range(self, value: Optional[float], min_value: float, max_value: float, label: str):
        """Add a "<label> must be between" error when a present value is out of range."""
        if value is not None and not validate_rate_range(value, min_value, max_value):
            self.errors.append(f"{label} must be between {_fmt(min_value)} and {_fmt(max_value)}")

    def warn_above(self, value: Optional[float], threshold: float, message: str):
        if value is not None and value > threshold:
            self.warnings.append(message)

    def warn_below(self, value: Optional[float], threshold: float, message: str):
        if value is not None and value < threshold:
            self.warnings.append(message)

    def to_dict(self):
        return {"errors": list(self.errors), "warnings": list(self.warnings), "is_valid": self.is_valid}


def _fmt(number: float) -> str:
    return str(int(number)) if float(number).is_integer() else str(number)


def validate_property(inputs: Mapping[str, Any], projection_years: Any = 10) -> ValidationResult:
    """
    Validate a property input record.

    Args:
        inputs: Property input record (sale_config nested)
        projection_years: Portfolio projection length

    Returns:
        ValidationResult with errors and warnings
    """
    result = ValidationResult()
    years = max(1, parse_int(projection_years, 10))

    price = parse_optional_number(inputs.get("purchase_price"))
    if price is not None and price <= 0:
        result.errors.append("Purchase price must be greater than $0")

    down = parse_optional_number(inputs.get("down_payment_percentage"))
    result.check_range(down, 0, 100, "Down payment percentage")
    result.warn_above(down, 50, "Down payment above 50% is unusually high")

    rate = parse_optional_number(inputs.get("interest_rate"))
    result.check_range(rate, 0, 30, "Interest rate")
    result.warn_above(rate, 15, "Mortgage rate above 15% is very high")

    term = parse_optional_number(inputs.get("loan_term"))
    result.check_range(term, 1, 50, "Loan term")

    growth = parse_optional_number(inputs.get("property_growth_rate"))
    result.check_range(growth, -10, 20, "Property growth rate")
    result.warn_above(growth, 15, "Property growth rate above 15% annually is very optimistic")
    result.warn_below(growth, 0, "Zero or negative growth rate may not account for inflation")

    inflation = parse_optional_number(inputs.get("inflation_rate"))
    result.check_range(inflation, 0, 15, "Inflation rate")
    result.warn_above(inflation, 10, "Inflation rate above 10% is historically high")

    years_bought = parse_optional_number(inputs.get("years_bought"))
    if years_bought is not None:
        if years_bought < 0:
            result.errors.append("Years bought cannot be negative")
        elif years_bought > years:
            result.errors.append("Years bought cannot exceed projection years")

    if inputs.get("property_growth_model") == EGrowthModel.CURRENT_VALUE:
        if parse_number(inputs.get("current_estimated_value")) <= 0:
            result.errors.append("Current estimated value must be positive when using current value growth model")

    if parse_bool(inputs.get("is_rental_property", False)):
        _validate_rental(inputs, result)

    sale_config = resolve_sale_config(inputs)
    if parse_bool(sale_config.get("is_planned_for_sale", False)):
        _validate_sale(inputs, sale_config, years, result)

    return result


def _validate_rental(inputs: Mapping[str, Any], result: ValidationResult):
    rent = parse_number(inputs.get("monthly_rent"))
    if rent <= 0:
        result.errors.append("Monthly rent must be greater than $0")
    elif rent > 50000:
        result.errors.append("Monthly rent cannot exceed $50,000")

    _bounded(result, inputs.get("rent_growth_rate"), -10, 20,
             "Rent growth rate cannot be less than -10%", "Rent growth rate cannot exceed 20%")
    result.warn_above(parse_optional_number(inputs.get("rent_growth_rate")), 10,
                      "Rent growth rate above 10% annually is very optimistic")

    _bounded(result, inputs.get("vacancy_rate"), 0, 50,
             "Vacancy rate cannot be negative", "Vacancy rate cannot exceed 50%")
    result.warn_above(parse_optional_number(inputs.get("vacancy_rate")), 20, "Vacancy rate above 20% is very high")

    _bounded(result, inputs.get("maintenance_rate"), 0, 10,
             "Maintenance rate cannot be negative", "Maintenance rate cannot exceed 10% of property value")
    result.warn_above(parse_optional_number(inputs.get("maintenance_rate")), 5,
                      "Maintenance rate above 5% of property value is high")

    if parse_bool(inputs.get("property_management_enabled", False)):
        _bounded(result, inputs.get("listing_fee_rate"), 0, 200,
                 "Listing fee rate cannot be negative", "Listing fee rate cannot exceed 200% of monthly rent")
        result.warn_above(parse_optional_number(inputs.get("listing_fee_rate")), 100,
                          "Listing fee rate above 100% of monthly rent is high")
        _bounded(result, inputs.get("monthly_management_fee_rate"), 0, 50,
                 "Monthly management fee rate cannot be negative",
                 "Monthly management fee rate cannot exceed 50% of rent")
        result.warn_above(parse_optional_number(inputs.get("monthly_management_fee_rate")), 15,
                          "Management fee rate above 15% is high")

    # Compare first-year expenses against income
    projection = project_property(
        {**inputs, "sale_config": {}},
        PortfolioSettings(years=1, inflation_rate=parse_number(inputs.get("inflation_rate"))),
    )
    first_year = projection.results[1]
    income = first_year["annual_rental_income"]
    if income > 0 and first_year["total_rental_expenses"] > income * 0.8:
        result.warnings.append("Warning: Expenses exceed 80% of rental income, which may indicate unrealistic values")


def _bounded(result: ValidationResult, raw: Any, min_value: float, max_value: float, low_message: str, high_message: str):
    value = parse_optional_number(raw)
    if value is None:
        return
    if value < min_value:
        result.errors.append(low_message)
    elif value > max_value:
        result.errors.append(high_message)


def _validate_sale(inputs: Mapping[str, Any], sale_config: Mapping[str, Any], years: int, result: ValidationResult):
    sale_year = parse_int(sale_config.get("sale_year"), 0)
    if sale_year < 1 or sale_year > years:
        result.errors.append("Sale year must be between 1 and projection years")
    elif sale_year <= 3:
        result.warnings.append("Selling shortly after purchase may incur additional costs and limit appreciation")

    sale_month = parse_int(sale_config.get("sale_month"), 6)
    if sale_month < 1 or sale_month > 12:
        result.errors.append("Sale month must be between 1 and 12")

    if not parse_bool(sale_config.get("use_projected_value", True)):
        expected = parse_number(sale_config.get("expected_sale_price"))
        if expected <= 0:
            result.errors.append("Expected sale price must be greater than $0")
        elif expected > 10000000:
            result.errors.append("Expected sale price cannot exceed $10,000,000")

    selling_costs = parse_number(sale_config.get("selling_costs_percentage"))
    if selling_costs < 0 or selling_costs > 20:
        result.errors.append("Selling costs must be between 0% and 20%")
    elif selling_costs > 8:
        result.warnings.append("Selling costs exceed typical range of 6-8%")

    if parse_bool(sale_config.get("reinvest_proceeds", False)) and not sale_config.get("target_investment_id"):
        result.errors.append("Target investment must be selected when reinvesting proceeds")

    if 1 <= sale_year <= years:
        projection = project_property(
            inputs,
            PortfolioSettings(years=years, inflation_rate=parse_number(inputs.get("inflation_rate"))),
        )
        disposition = projection.disposition
        if disposition is not None and disposition["net_sale_proceeds"] < 0:
            result.warnings.append("Property sale will result in a loss after mortgage payoff and selling costs")


def validate_investment(inputs: Mapping[str, Any]) -> ValidationResult:
    """Validate an investment input record."""
    result = ValidationResult()

    initial = parse_optional_number(inputs.get("initial_amount"))
    if initial is not None:
        if initial < 0:
            result.errors.append("Initial amount cannot be negative")
        elif initial > 100000000:
            result.errors.append("Initial amount cannot exceed $100,000,000")

    rate = parse_optional_number(inputs.get("rate_of_return"))
    result.check_range(rate, -50, 50, "Rate of return")
    result.warn_above(rate, 20, "Expected return above 20% annually is very optimistic")
    if rate is not None and rate <= 0:
        result.warnings.append("Zero or negative return may not account for inflation")

    inflation = parse_optional_number(inputs.get("inflation_rate"))
    result.check_range(inflation, 0, 15, "Inflation rate")
    result.warn_above(inflation, 10, "Inflation rate above 10% is historically high")

    contribution = parse_optional_number(inputs.get("annual_contribution"))
    if contribution is not None and abs(contribution) > 1000000:
        result.errors.append("Annual contribution cannot exceed $1,000,000")
    result.warn_above(contribution, 100000, "Annual contribution above $100,000 is very high")

    return result
