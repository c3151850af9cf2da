"""Salary Calc SDK - request building, response classification, service client."""

from .config import (
    get_config_dir,
    get_settings_path,
    load_settings,
    save_settings,
    get_setting,
    set_setting,
    unset_setting,
    get_api_url,
    get_timeout,
    get_profile_path,
    load_profile,
    save_profile,
    get_profile_value,
    set_profile_value,
    unset_profile_value,
    validate_profile_key,
    validate_setting_key,
    coerce_profile_value,
    coerce_setting_value,
    ProfileNotFoundError,
    PROFILE_SCHEMA,
    SETTINGS_SCHEMA,
)

from .errors import (
    CalculatorError,
    InvalidInputError,
    UnresolvedJurisdictionError,
    TransportError,
    RemoteServiceError,
    MalformedResponseError,
)

from .jurisdictions import (
    STATE_NAME_TO_CODE,
    STATE_CODE_TO_NAME,
    resolve_state_code,
    get_state_name,
    list_states,
)

from .schemas import (
    CalculationRequest,
    CalculationResponse,
    LineItem,
    Breakdown,
)

from .request_builder import (
    build_calculation_request,
    parse_amount,
    DEFAULT_TAX_YEAR,
)

from .breakdown import (
    build_breakdown,
    classify_line_item,
    periods_per_year,
    CLASSIFICATION_RULES,
)

from .client import SalaryCalculatorClient, parse_response
from .session import CalculatorSession

__all__ = [
    # Config
    "get_config_dir",
    "get_settings_path",
    "load_settings",
    "save_settings",
    "get_setting",
    "set_setting",
    "unset_setting",
    "get_api_url",
    "get_timeout",
    "get_profile_path",
    "load_profile",
    "save_profile",
    "get_profile_value",
    "set_profile_value",
    "unset_profile_value",
    "validate_profile_key",
    "validate_setting_key",
    "coerce_profile_value",
    "coerce_setting_value",
    "ProfileNotFoundError",
    "PROFILE_SCHEMA",
    "SETTINGS_SCHEMA",
    # Errors
    "CalculatorError",
    "InvalidInputError",
    "UnresolvedJurisdictionError",
    "TransportError",
    "RemoteServiceError",
    "MalformedResponseError",
    # Jurisdictions
    "STATE_NAME_TO_CODE",
    "STATE_CODE_TO_NAME",
    "resolve_state_code",
    "get_state_name",
    "list_states",
    # Schemas
    "CalculationRequest",
    "CalculationResponse",
    "LineItem",
    "Breakdown",
    # Request building
    "build_calculation_request",
    "parse_amount",
    "DEFAULT_TAX_YEAR",
    # Classification
    "build_breakdown",
    "classify_line_item",
    "periods_per_year",
    "CLASSIFICATION_RULES",
    # Service
    "SalaryCalculatorClient",
    "parse_response",
    "CalculatorSession",
]
