"""US state lookup tables.

The location service may hand back either a full state name ("California")
or its postal abbreviation ("CA"). The remote calculation service only
accepts the abbreviation, so everything is resolved through these tables
before a request is built.
"""

from typing import List, Optional, Tuple

from .errors import UnresolvedJurisdictionError


STATE_NAME_TO_CODE = {
    "Alabama": "AL", "Alaska": "AK", "Arizona": "AZ", "Arkansas": "AR",
    "California": "CA", "Colorado": "CO", "Connecticut": "CT", "Delaware": "DE",
    "Florida": "FL", "Georgia": "GA", "Hawaii": "HI", "Idaho": "ID",
    "Illinois": "IL", "Indiana": "IN", "Iowa": "IA", "Kansas": "KS",
    "Kentucky": "KY", "Louisiana": "LA", "Maine": "ME", "Maryland": "MD",
    "Massachusetts": "MA", "Michigan": "MI", "Minnesota": "MN", "Mississippi": "MS",
    "Missouri": "MO", "Montana": "MT", "Nebraska": "NE", "Nevada": "NV",
    "New Hampshire": "NH", "New Jersey": "NJ", "New Mexico": "NM", "New York": "NY",
    "North Carolina": "NC", "North Dakota": "ND", "Ohio": "OH", "Oklahoma": "OK",
    "Oregon": "OR", "Pennsylvania": "PA", "Rhode Island": "RI", "South Carolina": "SC",
    "South Dakota": "SD", "Tennessee": "TN", "Texas": "TX", "Utah": "UT",
    "Vermont": "VT", "Virginia": "VA", "Washington": "WA", "West Virginia": "WV",
    "Wisconsin": "WI", "Wyoming": "WY",
}

STATE_CODE_TO_NAME = {code: name for name, code in STATE_NAME_TO_CODE.items()}

# Case-insensitive name index ("new york" -> "NY")
_NAME_INDEX = {name.lower(): code for name, code in STATE_NAME_TO_CODE.items()}


def resolve_state_code(value: Optional[str]) -> str:
    """Resolve a state name or abbreviation to its 2-letter code.

    Args:
        value: Full state name or postal code, any case (e.g., "California", "ca")

    Returns:
        Upper-case 2-letter state code

    Raises:
        UnresolvedJurisdictionError: If value is empty or not a known state
    """
    text = (value or "").strip()
    if not text:
        raise UnresolvedJurisdictionError("Unable to determine state code from location")

    if len(text) == 2 and text.upper() in STATE_CODE_TO_NAME:
        return text.upper()

    code = _NAME_INDEX.get(" ".join(text.split()).lower())
    if code is None:
        raise UnresolvedJurisdictionError(f"Unknown state: '{text}'")
    return code


def get_state_name(value: Optional[str]) -> str:
    """Get the full state name for a code or name.

    Raises:
        UnresolvedJurisdictionError: If value is not a known state
    """
    return STATE_CODE_TO_NAME[resolve_state_code(value)]


def list_states() -> List[Tuple[str, str]]:
    """List (code, name) pairs sorted by state name."""
    return [(code, name) for name, code in sorted(STATE_NAME_TO_CODE.items())]
