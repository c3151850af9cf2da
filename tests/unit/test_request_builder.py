"""Unit tests for building calculation requests from form input."""

import pytest
from pydantic import ValidationError

from salarycalc.sdk.errors import InvalidInputError, UnresolvedJurisdictionError
from salarycalc.sdk.request_builder import (
    DEFAULT_TAX_YEAR,
    build_calculation_request,
    parse_amount,
    to_cadence,
    to_filing_status,
)


def build(**overrides):
    """Build a request with sensible form defaults."""
    fields = {
        "annual_salary": "85000",
        "state": "CA",
        "pay_frequency": "biweekly",
        "filing_status": "single",
    }
    fields.update(overrides)
    return build_calculation_request(**fields)


class TestParseAmount:
    """Test free-text number parsing."""

    @pytest.mark.parametrize("raw,expected", [
        ("85000", 85000.0),
        (" 85000.50 ", 85000.5),
        ("85,000", 85000.0),
        ("$1,200", 1200.0),
        (42, 42.0),
        (3.5, 3.5),
        ("-5", -5.0),
    ])
    def test_parses(self, raw, expected):
        assert parse_amount(raw) == expected

    @pytest.mark.parametrize("raw", [None, "", "   ", "abc", "12abc", "nan", "inf", float("nan"), True])
    def test_unparseable_returns_none(self, raw):
        assert parse_amount(raw) is None


class TestSalary:
    """Salary is mandatory and must be positive."""

    @pytest.mark.parametrize("salary", ["", None, "abc", "0", "-1000", "nan"])
    def test_invalid_salary_raises(self, salary):
        with pytest.raises(InvalidInputError):
            build(annual_salary=salary)

    def test_salary_checked_before_state(self):
        with pytest.raises(InvalidInputError):
            build(annual_salary="", state="")

    def test_salary_parsed(self):
        assert build(annual_salary="$120,000").annual_salary == 120000.0


class TestState:
    """State must resolve to a 2-letter code."""

    def test_code_and_name_resolve_identically(self):
        by_code = build(state="CA")
        by_name = build(state="California")
        assert by_code.country_options.us.state == "CA"
        assert by_code == by_name

    @pytest.mark.parametrize("state", [None, "", "Atlantis", "ZZ"])
    def test_unresolved_state_raises(self, state):
        with pytest.raises(UnresolvedJurisdictionError):
            build(state=state)


class TestMappings:
    """UI selections map to wire codes."""

    @pytest.mark.parametrize("ui,wire", [
        ("weekly", "WEEKLY"),
        ("biweekly", "BIWEEKLY"),
        ("Bi-weekly", "BIWEEKLY"),
        ("MONTHLY", "MONTHLY"),
    ])
    def test_cadence(self, ui, wire):
        assert to_cadence(ui) == wire

    @pytest.mark.parametrize("ui", ["annual", "daily", ""])
    def test_unsupported_cadence_raises(self, ui):
        with pytest.raises(InvalidInputError):
            to_cadence(ui)

    def test_filing_status(self):
        assert to_filing_status("single") == "SINGLE"
        assert to_filing_status("Married") == "MARRIED"
        with pytest.raises(InvalidInputError):
            to_filing_status("head_of_household")

    def test_request_carries_mappings(self):
        request = build(pay_frequency="monthly", filing_status="married")
        assert request.cadence == "MONTHLY"
        assert request.country_options.us.filing_status == "MARRIED"
        assert request.country == "US"
        assert request.tax_year == DEFAULT_TAX_YEAR


class TestOmission:
    """Optional fields are omitted, never sent as zero."""

    def test_minimal_payload(self):
        payload = build().to_payload()
        assert payload == {
            "country": "US",
            "taxYear": 2025,
            "annualSalary": 85000.0,
            "cadence": "BIWEEKLY",
            "countryOptions": {"US": {"state": "CA", "filingStatus": "SINGLE"}},
        }

    @pytest.mark.parametrize("pension,hsa", [("0", "0"), ("", ""), (None, None), ("-3", "-100"), ("abc", "x")])
    def test_zero_pretax_omitted(self, pension, hsa):
        request = build(pension_percent=pension, hsa_contribution=hsa)
        assert request.pretax is None
        assert "pretax" not in request.to_payload()

    def test_pension_converted_to_fraction(self):
        request = build(pension_percent="5")
        assert request.pretax.pension_percent == pytest.approx(0.05)
        assert request.to_payload()["pretax"] == {"pensionPercent": pytest.approx(0.05)}

    def test_hsa_only(self):
        payload = build(pension_percent="0", hsa_contribution="1500").to_payload()
        assert payload["pretax"] == {"hsa": 1500.0}

    def test_pension_and_hsa(self):
        payload = build(pension_percent="6", hsa_contribution="2000", pretax_fixed="250").to_payload()
        assert payload["pretax"] == {"pensionPercent": pytest.approx(0.06), "fixed": 250.0, "hsa": 2000.0}

    def test_pension_over_100_percent_raises(self):
        with pytest.raises(InvalidInputError):
            build(pension_percent="150")

    def test_pension_of_100_percent_allowed(self):
        assert build(pension_percent="100").pretax.pension_percent == 1.0

    def test_allowances_zero_omitted(self):
        payload = build(allowances=0).to_payload()
        assert "allowances" not in payload["countryOptions"]["US"]

    def test_allowances_included(self):
        payload = build(allowances=2).to_payload()
        assert payload["countryOptions"]["US"]["allowances"] == 2

    def test_negative_allowances_raise(self):
        with pytest.raises(InvalidInputError):
            build(allowances=-1)

    def test_posttax(self):
        payload = build(posttax_fixed="75", student_loan_plan="PLAN_2").to_payload()
        assert payload["posttax"] == {"fixed": 75.0, "studentLoanPlan": "PLAN_2"}

    def test_posttax_omitted_when_empty(self):
        request = build(posttax_fixed="0", student_loan_plan="  ")
        assert request.posttax is None


class TestImmutability:
    def test_request_is_frozen(self):
        request = build()
        with pytest.raises(ValidationError):
            request.annual_salary = 1
