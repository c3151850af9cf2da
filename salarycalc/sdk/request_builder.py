"""Build calculation requests from raw form input.

Form fields arrive as free text ("75,000", "$500", "") or plain numbers.
This module parses them, applies the omit-rather-than-send-zero rule for
every optional field, and resolves the state before anything is sent.
"""

import logging
import math
from typing import Optional, Union

from .errors import InvalidInputError
from .jurisdictions import resolve_state_code
from .schemas import (
    CalculationRequest,
    CountryOptions,
    PostTaxDeductions,
    PreTaxDeductions,
    USOptions,
)

logger = logging.getLogger(__name__)

COUNTRY = "US"
DEFAULT_TAX_YEAR = 2025

# UI pay frequency -> wire cadence. Annual is not offered on the form.
PAY_FREQUENCY_CADENCES = {
    "weekly": "WEEKLY",
    "biweekly": "BIWEEKLY",
    "monthly": "MONTHLY",
}

FILING_STATUSES = {
    "single": "SINGLE",
    "married": "MARRIED",
}

RawNumber = Union[str, int, float, None]


def parse_amount(value: RawNumber) -> Optional[float]:
    """Parse a form value into a number.

    Accepts plain numbers and text like " 75,000.50 " or "$1,200".

    Returns:
        The parsed float, or None if value is blank, non-numeric, NaN or infinite
    """
    if value is None:
        return None
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    else:
        text = str(value).strip().replace(",", "")
        if text.startswith("$"):
            text = text[1:].strip()
        if not text:
            return None
        try:
            number = float(text)
        except ValueError:
            return None
    if math.isnan(number) or math.isinf(number):
        return None
    return number


def _positive_or_none(value: RawNumber) -> Optional[float]:
    """Parse an optional amount; zero, negative or unparseable means unset."""
    number = parse_amount(value)
    if number is None or number <= 0:
        return None
    return number


def to_cadence(pay_frequency: str) -> str:
    """Map a UI pay frequency ('weekly', 'Bi-weekly', ...) to the wire cadence."""
    key = (pay_frequency or "").strip().lower().replace("-", "").replace("_", "")
    cadence = PAY_FREQUENCY_CADENCES.get(key)
    if cadence is None:
        valid = ", ".join(PAY_FREQUENCY_CADENCES)
        raise InvalidInputError(f"Invalid pay frequency '{pay_frequency}'. Expected one of: {valid}")
    return cadence


def to_filing_status(filing_status: str) -> str:
    """Map a UI filing status ('single', 'married') to the wire value."""
    status = FILING_STATUSES.get((filing_status or "").strip().lower())
    if status is None:
        valid = ", ".join(FILING_STATUSES)
        raise InvalidInputError(f"Invalid filing status '{filing_status}'. Expected one of: {valid}")
    return status


def build_calculation_request(
    annual_salary: RawNumber,
    state: Optional[str],
    pay_frequency: str = "biweekly",
    filing_status: str = "single",
    allowances: int = 0,
    pension_percent: RawNumber = None,
    hsa_contribution: RawNumber = None,
    pretax_fixed: RawNumber = None,
    posttax_fixed: RawNumber = None,
    student_loan_plan: Optional[str] = None,
    tax_year: int = DEFAULT_TAX_YEAR,
) -> CalculationRequest:
    """Build a CalculationRequest from form input.

    Args:
        annual_salary: Salary text or number; must be a positive number
        state: State name or 2-letter code from the location service
        pay_frequency: 'weekly', 'biweekly' or 'monthly'
        filing_status: 'single' or 'married'
        allowances: Withholding allowances (omitted from the request when 0)
        pension_percent: Whole-number percent ("5" means 5%), sent as a fraction
        hsa_contribution: Annual HSA contribution
        pretax_fixed: Fixed pre-tax deduction amount
        posttax_fixed: Fixed post-tax deduction amount
        student_loan_plan: Student loan plan identifier
        tax_year: Tax year for the calculation

    Returns:
        Validated, immutable CalculationRequest

    Raises:
        InvalidInputError: Salary missing/non-positive, or another field invalid
        UnresolvedJurisdictionError: State missing or not a known US state
    """
    salary = parse_amount(annual_salary)
    if salary is None or salary <= 0:
        raise InvalidInputError("Annual salary must be a positive number")

    state_code = resolve_state_code(state)
    cadence = to_cadence(pay_frequency)
    status = to_filing_status(filing_status)

    if allowances is None:
        allowances = 0
    if isinstance(allowances, bool) or not isinstance(allowances, int):
        raise InvalidInputError(f"Allowances must be a whole number, got '{allowances}'")
    if allowances < 0:
        raise InvalidInputError("Allowances cannot be negative")

    # Pension is entered as a whole-number percent
    pension_fraction = None
    pension_value = parse_amount(pension_percent)
    if pension_value is not None and pension_value > 0:
        pension_fraction = pension_value / 100.0
        if pension_fraction > 1:
            raise InvalidInputError(f"Pension contribution cannot exceed 100% (got {pension_value}%)")

    hsa = _positive_or_none(hsa_contribution)
    fixed_pretax = _positive_or_none(pretax_fixed)

    pretax = None
    if pension_fraction is not None or hsa is not None or fixed_pretax is not None:
        pretax = PreTaxDeductions(pension_percent=pension_fraction, fixed=fixed_pretax, hsa=hsa)

    fixed_posttax = _positive_or_none(posttax_fixed)
    loan_plan = (student_loan_plan or "").strip() or None

    posttax = None
    if fixed_posttax is not None or loan_plan is not None:
        posttax = PostTaxDeductions(fixed=fixed_posttax, student_loan_plan=loan_plan)

    request = CalculationRequest(
        country=COUNTRY,
        tax_year=tax_year,
        annual_salary=salary,
        cadence=cadence,
        pretax=pretax,
        posttax=posttax,
        country_options=CountryOptions(
            us=USOptions(
                state=state_code,
                filing_status=status,
                allowances=allowances if allowances > 0 else None,
            ),
        ),
    )

    logger.debug(
        f"Built request: salary={salary:.2f} cadence={cadence} state={state_code} "
        f"filing={status} pretax={pretax is not None} posttax={posttax is not None}"
    )
    return request
