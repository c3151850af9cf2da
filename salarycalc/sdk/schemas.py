"""Pydantic schemas for the calculation service contract and breakdown output.

Wire models (request and response) use the service's camelCase names as
aliases; Python code always uses the snake_case field names. Request models
are frozen and reject unknown fields. The response model ignores unknown
fields so new server-side additions don't break decoding.

Optional request fields are None when unset and are dropped from the
payload entirely - the service never sees 0 standing in for "not provided".
"""

from typing import Any, Dict, List, Literal, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from .jurisdictions import STATE_CODE_TO_NAME


Cadence = Literal["ANNUAL", "WEEKLY", "BIWEEKLY", "MONTHLY"]
FilingStatus = Literal["SINGLE", "MARRIED"]


# =============================================================================
# Request - sent to POST /v1/calculate
# =============================================================================


class PreTaxDeductions(BaseModel):
    """Deductions taken before income tax."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    pension_percent: Optional[float] = Field(
        default=None, gt=0, le=1, alias="pensionPercent",
        description="Pension/401(k) contribution as a fraction of salary (0.05 = 5%)",
    )
    fixed: Optional[float] = Field(default=None, gt=0, description="Fixed pre-tax amount")
    hsa: Optional[float] = Field(default=None, gt=0, description="Annual HSA contribution")

    @model_validator(mode="after")
    def check_not_empty(self) -> "PreTaxDeductions":
        if self.pension_percent is None and self.fixed is None and self.hsa is None:
            raise ValueError("pretax requires at least one of pensionPercent, fixed, hsa")
        return self


class PostTaxDeductions(BaseModel):
    """Deductions taken after income tax."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    fixed: Optional[float] = Field(default=None, gt=0, description="Fixed post-tax amount")
    student_loan_plan: Optional[str] = Field(
        default=None, min_length=1, alias="studentLoanPlan",
        description="Student loan repayment plan identifier",
    )

    @model_validator(mode="after")
    def check_not_empty(self) -> "PostTaxDeductions":
        if self.fixed is None and self.student_loan_plan is None:
            raise ValueError("posttax requires at least one of fixed, studentLoanPlan")
        return self


class USOptions(BaseModel):
    """US jurisdiction parameters."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    state: str = Field(..., description="2-letter state code")
    filing_status: FilingStatus = Field(..., alias="filingStatus")
    allowances: Optional[int] = Field(default=None, gt=0, description="Withholding allowances (omitted when 0)")

    @field_validator("state")
    @classmethod
    def check_state(cls, value: str) -> str:
        if value not in STATE_CODE_TO_NAME:
            raise ValueError(f"Unknown state code: '{value}'")
        return value


class UKOptions(BaseModel):
    """UK jurisdiction parameters (accepted by the service, not built by this client)."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    tax_code: Optional[str] = Field(default=None, alias="taxCode")
    scottish_resident: Optional[bool] = Field(default=None, alias="scottishResident")
    ni_category: Optional[str] = Field(default=None, alias="niCategory")


class CountryOptions(BaseModel):
    """Jurisdiction-specific options keyed by country code."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    us: Optional[USOptions] = Field(default=None, alias="US")
    uk: Optional[UKOptions] = Field(default=None, alias="UK")


class CalculationRequest(BaseModel):
    """Normalized calculation request, built once per submission."""

    model_config = ConfigDict(extra="forbid", frozen=True, populate_by_name=True)

    country: Literal["US"] = "US"
    tax_year: int = Field(..., alias="taxYear")
    annual_salary: float = Field(..., gt=0, alias="annualSalary")
    cadence: Cadence = "ANNUAL"
    pretax: Optional[PreTaxDeductions] = None
    posttax: Optional[PostTaxDeductions] = None
    country_options: CountryOptions = Field(..., alias="countryOptions")

    @model_validator(mode="after")
    def check_country_options(self) -> "CalculationRequest":
        if self.country == "US" and self.country_options.us is None:
            raise ValueError("countryOptions.US is required for country 'US'")
        return self

    def to_payload(self) -> Dict[str, Any]:
        """JSON-ready dict using wire names, with unset fields omitted."""
        return self.model_dump(mode="json", by_alias=True, exclude_none=True)


# =============================================================================
# Response - returned by POST /v1/calculate
# =============================================================================


class LineItem(BaseModel):
    """Single named amount from the service's itemized response."""

    model_config = ConfigDict(extra="ignore", allow_inf_nan=False)

    name: str
    amount: float


class ExplanationItem(BaseModel):
    """Human-readable note about how a figure was derived."""

    model_config = ConfigDict(extra="ignore")

    id: str
    text: str


class CalculationResponse(BaseModel):
    """Calculation result as returned by the service.

    Only gross_per_cadence, net_per_cadence and line_items feed the
    breakdown; the remaining fields are carried through for display.
    """

    model_config = ConfigDict(extra="ignore", populate_by_name=True, allow_inf_nan=False)

    calculation_id: str = Field(..., alias="calculationId")
    gross_per_cadence: float = Field(..., alias="grossPerCadence")
    net_per_cadence: float = Field(..., alias="netPerCadence")
    currency: str
    rule_pack_version: str = Field(..., alias="rulePackVersion")
    line_items: List[LineItem] = Field(..., alias="lineItems")
    explanation: List[ExplanationItem] = Field(default_factory=list)


# =============================================================================
# Breakdown - UI-ready output of the classifier
# =============================================================================


class GrossPay(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    annual: float
    per_period: float
    cadence_label: str = Field(..., description="'annual', 'weekly', 'biweekly' or 'monthly'")


class TaxBreakdownItem(BaseModel):
    """One tax line. rate is informational (percent), not derived from amount."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    amount: float
    rate: Optional[float] = None
    label: str


class FicaTaxes(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    social_security: Optional[TaxBreakdownItem] = None
    medicare: Optional[TaxBreakdownItem] = None
    additional_medicare: Optional[TaxBreakdownItem] = None
    total: float = 0


class Taxes(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    federal: Optional[TaxBreakdownItem] = None
    state: Optional[TaxBreakdownItem] = None
    local: Optional[TaxBreakdownItem] = None
    fica: FicaTaxes
    total_taxes: float
    effective_tax_rate: float = Field(..., description="Percent of annual gross")


class DeductionItem(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    name: str
    amount: float


class Deductions(BaseModel):
    """Deductions by tax treatment, in the order the service listed them."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    pre_tax_items: List[DeductionItem] = Field(default_factory=list)
    post_tax_items: List[DeductionItem] = Field(default_factory=list)
    pre_tax_total: float = 0
    post_tax_total: float = 0
    total: float = 0


class NetPay(BaseModel):
    model_config = ConfigDict(extra="forbid", frozen=True)

    annual: float
    per_period: float
    take_home_percentage: float = Field(..., description="Percent of annual gross")


class Breakdown(BaseModel):
    """Complete paycheck breakdown for one calculation."""

    model_config = ConfigDict(extra="forbid", frozen=True)

    gross_pay: GrossPay
    taxes: Taxes
    deductions: Deductions
    net_pay: NetPay
