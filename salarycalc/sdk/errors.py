"""Error taxonomy for salary calculations.

Every failure that reaches a caller is a CalculatorError subclass, so the CLI
and MCP wrappers can surface the message verbatim without knowing which
layer raised it.
"""

from typing import Optional


class CalculatorError(Exception):
    """Base class for all calculation failures."""
    pass


class InvalidInputError(CalculatorError, ValueError):
    """Raised when user input (salary, frequency, filing status) is unusable."""
    pass


class UnresolvedJurisdictionError(CalculatorError, LookupError):
    """Raised when a state name or code is not in the known table."""
    pass


class TransportError(CalculatorError):
    """Raised when the remote service cannot be reached."""
    pass


class RemoteServiceError(CalculatorError):
    """Raised when the remote service answers with a non-success status.

    The message is the raw response body, which is what the service uses to
    explain rejected requests.
    """

    def __init__(self, message: str, status_code: Optional[int] = None, body: str = ""):
        super().__init__(message)
        self.status_code = status_code
        self.body = body


class MalformedResponseError(CalculatorError):
    """Raised when the response body does not match the expected schema."""
    pass
