"""Classify service line items into a paycheck breakdown.

The calculation service returns a flat list of (name, amount) pairs whose
names come from its rule pack. Classification is driven by
CLASSIFICATION_RULES, an ordered table of name predicates: the first rule
that matches decides the category, so an item is never counted twice.
Items that match no rule are dropped.

Scale conventions:
- grossPerCadence / netPerCadence are per pay period and get annualized.
- Line items are summed as returned, without annualizing.
"""

import logging
from typing import Callable, Dict, List, NamedTuple, Optional

from .schemas import (
    Breakdown,
    CalculationResponse,
    DeductionItem,
    Deductions,
    FicaTaxes,
    GrossPay,
    NetPay,
    TaxBreakdownItem,
    Taxes,
)

logger = logging.getLogger(__name__)


# Periods per year by cadence. Unknown cadences are treated as ANNUAL.
PERIODS_PER_YEAR = {
    "ANNUAL": 1,
    "WEEKLY": 52,
    "BIWEEKLY": 26,
    "MONTHLY": 12,
}

# Categories
FEDERAL = "federal"
STATE = "state"
LOCAL = "local"
SOCIAL_SECURITY = "social_security"
MEDICARE = "medicare"
ADDITIONAL_MEDICARE = "additional_medicare"
PRE_TAX = "pre_tax"
POST_TAX = "post_tax"

TAX_CATEGORIES = (FEDERAL, STATE, LOCAL, SOCIAL_SECURITY, MEDICARE, ADDITIONAL_MEDICARE)
FICA_CATEGORIES = (SOCIAL_SECURITY, MEDICARE, ADDITIONAL_MEDICARE)

# Fixed employee rates (percent), shown for reference only
FICA_RATES = {
    SOCIAL_SECURITY: 6.2,
    MEDICARE: 1.45,
    ADDITIONAL_MEDICARE: 0.9,
}

FICA_LABELS = {
    SOCIAL_SECURITY: "Social Security",
    MEDICARE: "Medicare",
    ADDITIONAL_MEDICARE: "Additional Medicare Tax",
}


class ClassificationRule(NamedTuple):
    """Maps line-item names matching a predicate to a category."""
    category: str
    matches: Callable[[str], bool]


def _contains_any(*needles: str) -> Callable[[str], bool]:
    return lambda name: any(needle in name for needle in needles)


def _contains_all(*needles: str) -> Callable[[str], bool]:
    return lambda name: all(needle in name for needle in needles)


def _contains_excluding(needle: str, excluded: str) -> Callable[[str], bool]:
    return lambda name: needle in name and excluded not in name


# Evaluated in order; first match wins. Matching is case-sensitive.
CLASSIFICATION_RULES = (
    ClassificationRule(FEDERAL, _contains_any("Federal Income Tax")),
    ClassificationRule(STATE, _contains_any("State Income Tax")),
    ClassificationRule(LOCAL, _contains_all("Local", "Tax")),
    ClassificationRule(SOCIAL_SECURITY, _contains_any("Social Security", "FICA (Social Security)")),
    ClassificationRule(MEDICARE, _contains_excluding("Medicare", "Additional")),
    ClassificationRule(ADDITIONAL_MEDICARE, _contains_any("Additional Medicare")),
    ClassificationRule(PRE_TAX, _contains_any("Pre-tax Deductions", "Employee Pension", "HSA")),
    ClassificationRule(POST_TAX, _contains_any("Post-tax Deductions")),
)


def classify_line_item(name: str, rules=CLASSIFICATION_RULES) -> Optional[str]:
    """Return the category of a line-item name, or None if no rule matches."""
    for rule in rules:
        if rule.matches(name):
            return rule.category
    return None


def periods_per_year(cadence: Optional[str]) -> int:
    """Number of pay periods in a year for a cadence (1 if unknown)."""
    return PERIODS_PER_YEAR.get(cadence or "ANNUAL", 1)


def cadence_label(cadence: Optional[str]) -> str:
    """Lower-case display label for a cadence ('annual' if unknown)."""
    if cadence in PERIODS_PER_YEAR:
        return cadence.lower()
    return "annual"


def _annualize(per_cadence: float, cadence: Optional[str], periods: int) -> float:
    if cadence == "ANNUAL":
        return per_cadence
    return per_cadence * periods


def _percent_of(part: float, whole: float) -> float:
    if whole <= 0:
        return 0.0
    return part / whole * 100


def build_breakdown(response: CalculationResponse, cadence: Optional[str]) -> Breakdown:
    """Build a UI-ready breakdown from a service response.

    Args:
        response: Decoded service response
        cadence: Cadence of the originating request ('ANNUAL', 'WEEKLY',
                 'BIWEEKLY', 'MONTHLY'); None or unknown is treated as ANNUAL

    Returns:
        Breakdown with gross pay, taxes, deductions and net pay.
        Categories the service did not report are None (taxes) or empty
        (deductions); percentages are 0 when annual gross is not positive.
    """
    periods = periods_per_year(cadence)
    annual_gross = _annualize(response.gross_per_cadence, cadence, periods)
    annual_net = _annualize(response.net_per_cadence, cadence, periods)

    tax_items: Dict[str, TaxBreakdownItem] = {}
    pre_tax: List[DeductionItem] = []
    post_tax: List[DeductionItem] = []
    total_taxes = 0.0

    for item in response.line_items:
        category = classify_line_item(item.name)

        if category in TAX_CATEGORIES:
            # Duplicates: last one is shown, every one is counted
            tax_items[category] = TaxBreakdownItem(
                amount=item.amount,
                rate=FICA_RATES.get(category),
                label=FICA_LABELS.get(category, item.name),
            )
            total_taxes += item.amount
        elif category == PRE_TAX:
            if item.amount > 0:
                pre_tax.append(DeductionItem(name=item.name, amount=item.amount))
        elif category == POST_TAX:
            if item.amount > 0:
                post_tax.append(DeductionItem(name=item.name, amount=item.amount))
        else:
            logger.debug(f"Dropping unrecognized line item: {item.name!r} ({item.amount})")

    fica_total = sum(
        tax_items[category].amount for category in FICA_CATEGORIES if category in tax_items
    )

    # total_taxes comes from line items as returned; it is scaled by periods
    # the same way the per-cadence gross is.
    effective_tax_rate = _percent_of(total_taxes * periods, annual_gross)
    take_home_percentage = _percent_of(annual_net, annual_gross)

    pre_tax_total = sum(item.amount for item in pre_tax)
    post_tax_total = sum(item.amount for item in post_tax)

    return Breakdown(
        gross_pay=GrossPay(
            annual=annual_gross,
            per_period=response.gross_per_cadence,
            cadence_label=cadence_label(cadence),
        ),
        taxes=Taxes(
            federal=tax_items.get(FEDERAL),
            state=tax_items.get(STATE),
            local=tax_items.get(LOCAL),
            fica=FicaTaxes(
                social_security=tax_items.get(SOCIAL_SECURITY),
                medicare=tax_items.get(MEDICARE),
                additional_medicare=tax_items.get(ADDITIONAL_MEDICARE),
                total=fica_total,
            ),
            total_taxes=total_taxes,
            effective_tax_rate=effective_tax_rate,
        ),
        deductions=Deductions(
            pre_tax_items=pre_tax,
            post_tax_items=post_tax,
            pre_tax_total=pre_tax_total,
            post_tax_total=post_tax_total,
            total=pre_tax_total + post_tax_total,
        ),
        net_pay=NetPay(
            annual=annual_net,
            per_period=response.net_per_cadence,
            take_home_percentage=take_home_percentage,
        ),
    )
