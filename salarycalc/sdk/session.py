"""Calculation session state for a single form.

Holds only the latest outcome of a submission: either a Breakdown or an
error message, never both. A new submission or reset() discards it.
"""

import logging
from typing import Optional

from .breakdown import build_breakdown
from .client import SalaryCalculatorClient
from .errors import CalculatorError
from .request_builder import build_calculation_request
from .schemas import Breakdown, CalculationRequest, CalculationResponse

logger = logging.getLogger(__name__)


class CalculatorSession:
    """Latest-result holder used by interactive front ends."""

    def __init__(self, client: Optional[SalaryCalculatorClient] = None) -> None:
        self.client = client or SalaryCalculatorClient()
        self.result: Optional[Breakdown] = None
        self.response: Optional[CalculationResponse] = None
        self.error_message: Optional[str] = None
        self.is_loading = False

    def submit(self, request: CalculationRequest) -> Optional[Breakdown]:
        """Run a calculation, replacing any previous result or error.

        Returns:
            The new Breakdown, or None if the calculation failed
            (see error_message)
        """
        self.reset()
        self.is_loading = True
        try:
            response = self.client.calculate(request)
            self.result = build_breakdown(response, request.cadence)
            self.response = response
        except CalculatorError as e:
            logger.debug(f"Calculation failed: {e}")
            self.error_message = str(e)
        finally:
            self.is_loading = False
        return self.result

    def submit_form(self, **fields) -> Optional[Breakdown]:
        """Build a request from form fields and submit it.

        Accepts the keyword arguments of build_calculation_request. Input
        errors are recorded like service errors and no request is sent.
        """
        try:
            request = build_calculation_request(**fields)
        except CalculatorError as e:
            self.reset()
            self.error_message = str(e)
            return None
        return self.submit(request)

    def reset(self) -> None:
        """Discard the current result, response and error."""
        self.result = None
        self.response = None
        self.error_message = None
        self.is_loading = False
