"""HTTP client for the remote salary calculation service.

Single endpoint: POST {api_url}/v1/calculate with a CalculationRequest as
JSON, answered by a CalculationResponse. All lower-level failures are
wrapped into the CalculatorError taxonomy before they leave this module:

- connection problems, timeouts      -> TransportError
- non-2xx status                     -> RemoteServiceError (body as message)
- body not JSON / wrong shape        -> MalformedResponseError

No retries: a failed submission must be re-submitted by the caller.
"""

import http.client
import json
import logging
import os
import urllib.error
import urllib.parse
import urllib.request
from typing import Optional

from pydantic import ValidationError

from .breakdown import build_breakdown
from .config import get_api_url, get_timeout
from .errors import MalformedResponseError, RemoteServiceError, TransportError
from .schemas import Breakdown, CalculationRequest, CalculationResponse

# Configure logging based on LOG_LEVEL environment variable
_log_level = os.environ.get("LOG_LEVEL", "INFO").upper()
logging.basicConfig(
    level=getattr(logging, _log_level, logging.INFO),
    format="%(asctime)s.%(msecs)03d %(levelname)s: %(message)s",
    datefmt="%H:%M:%S"
)
logger = logging.getLogger(__name__)

CALCULATE_PATH = "/v1/calculate"


class SalaryCalculatorClient:
    """Client for the calculation service.

    Args:
        api_url: Service base URL (default: from configuration)
        timeout: Request timeout in seconds (default: from configuration)
    """

    def __init__(self, api_url: Optional[str] = None, timeout: Optional[float] = None) -> None:
        self.api_url = (api_url or get_api_url()).rstrip("/")
        self.timeout = timeout if timeout is not None else get_timeout()

    @property
    def calculate_url(self) -> str:
        return f"{self.api_url}{CALCULATE_PATH}"

    def _check_url(self) -> None:
        parsed = urllib.parse.urlparse(self.api_url)
        if parsed.scheme not in ("http", "https") or not parsed.netloc:
            raise TransportError(f"Invalid API URL: {self.api_url}")

    def calculate(self, request: CalculationRequest) -> CalculationResponse:
        """Send a calculation request and decode the response.

        Raises:
            TransportError: Invalid URL, connection failure or timeout
            RemoteServiceError: Service returned a non-success status
            MalformedResponseError: Response body is not a valid CalculationResponse
        """
        self._check_url()

        payload = json.dumps(request.to_payload())
        logger.debug(f"Request JSON: {payload}")

        http_request = urllib.request.Request(
            self.calculate_url,
            data=payload.encode("utf-8"),
            headers={"Content-Type": "application/json", "Accept": "application/json"},
            method="POST",
        )

        try:
            with urllib.request.urlopen(http_request, timeout=self.timeout) as resp:
                status = resp.status
                body = resp.read()
        except urllib.error.HTTPError as e:
            text = _decode_body(e.read())
            logger.debug(f"Service returned {e.code}: {text[:500]}")
            raise RemoteServiceError(
                text or f"Server returned status code: {e.code}",
                status_code=e.code,
                body=text,
            ) from e
        except urllib.error.URLError as e:
            raise TransportError(f"Network error: {e.reason}") from e
        except (OSError, http.client.HTTPException) as e:
            raise TransportError(f"Network error: {e}") from e

        logger.debug(f"Service returned {status} ({len(body)} bytes)")

        if not 200 <= status < 300:
            text = _decode_body(body)
            raise RemoteServiceError(
                text or f"Server returned status code: {status}",
                status_code=status,
                body=text,
            )

        return parse_response(body)

    def calculate_breakdown(self, request: CalculationRequest) -> Breakdown:
        """Send a calculation request and classify the response into a Breakdown."""
        response = self.calculate(request)
        return build_breakdown(response, request.cadence)


def _decode_body(body: bytes) -> str:
    return body.decode("utf-8", errors="replace").strip() if body else ""


def parse_response(body) -> CalculationResponse:
    """Decode a response body (bytes, str or already-parsed dict).

    Raises:
        MalformedResponseError: If the body is not JSON or doesn't match the schema
    """
    try:
        data = json.loads(body) if isinstance(body, (bytes, str)) else body
        return CalculationResponse.model_validate(data)
    except (json.JSONDecodeError, UnicodeDecodeError, ValidationError) as e:
        raise MalformedResponseError(f"Failed to decode response: {e}") from e
