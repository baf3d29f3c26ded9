"""
HTTP access to the assessment service.

``ApiClient.request`` performs one call through ``retry_with_backoff``;
``fetch_all_patients`` walks the paginated list endpoint and
``submit_assessment`` posts the categorized result.
"""

import json
import random
import time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional

import requests

from ksense_assessment.logger import get_logger
from ksense_assessment.settings import settings

logger = get_logger(__name__)

RETRYABLE_STATUSES = (429, 500, 503)


class RequestError(Exception):
    """A failed API call, carrying the HTTP status when one was received."""

    def __init__(self, message: str, status: Optional[int] = None, detail: Optional[str] = None):
        super().__init__(message)
        self.status = status
        self.detail = detail

    @property
    def retryable(self) -> bool:
        # no status means the request never got an HTTP answer
        return self.status is None or self.status in RETRYABLE_STATUSES


def backoff_delay(attempt: int, rand: Callable[[], float] = random.random) -> float:
    """Seconds to wait after failed attempt ``attempt`` (0-based): 2^attempt plus up to 0.5s jitter."""
    return 2 ** attempt + rand() * 0.5


def retry_with_backoff(
    call: Callable[[], Any],
    max_attempts: int = 5,
    is_retryable: Callable[[RequestError], bool] = lambda exc: exc.retryable,
    sleep: Callable[[float], None] = time.sleep,
    rand: Callable[[], float] = random.random,
):
    last_error = None
    for attempt in range(max_attempts):
        try:
            return call()
        except RequestError as exc:
            if not is_retryable(exc):
                raise
            last_error = exc
            if attempt + 1 >= max_attempts:
                break
            delay = backoff_delay(attempt, rand)
            reason = f"Status {exc.status}" if exc.status is not None else "Network error"
            logger.warning(
                "[retry] %s, attempt %d/%d, waiting %dms",
                reason,
                attempt + 1,
                max_attempts,
                round(delay * 1000),
            )
            sleep(delay)

    if last_error is not None:
        raise last_error
    raise RequestError("Max retries exceeded")


def _error_detail(resp) -> str:
    try:
        return json.dumps(resp.json(), indent=2)
    except ValueError:
        return resp.reason or ""


class ApiClient:
    def __init__(
        self,
        api_key: Optional[str] = None,
        base_url: Optional[str] = None,
        max_retries: Optional[int] = None,
        timeout: Optional[float] = None,
        session: Optional[requests.Session] = None,
        sleep: Callable[[float], None] = time.sleep,
        rand: Callable[[], float] = random.random,
    ):
        api_key = settings.API_KEY if api_key is None else api_key
        if not api_key:
            raise ValueError("API_KEY is required; set it in the environment or a .env file")

        self.base_url = (base_url or settings.API_BASE_URL).rstrip("/")
        self.max_retries = settings.MAX_RETRIES if max_retries is None else max_retries
        self.timeout = settings.REQUEST_TIMEOUT if timeout is None else timeout
        self.sleep = sleep
        self.rand = rand

        self.session = session or requests.Session()
        self.session.headers.update({
            "x-api-key": api_key,
            "Content-Type": "application/json",
        })

    def _send(self, endpoint: str, method: str, body=None, params=None):
        url = f"{self.base_url}{endpoint}"
        try:
            resp = self.session.request(method, url, params=params, json=body, timeout=self.timeout)
        except requests.RequestException as exc:
            raise RequestError(f"Network error: {exc}") from exc

        if 200 <= resp.status_code < 300:
            try:
                return resp.json()
            except ValueError as exc:
                raise RequestError(f"Invalid JSON from {endpoint}: {exc}") from exc

        if resp.status_code in RETRYABLE_STATUSES:
            raise RequestError(f"HTTP {resp.status_code}", status=resp.status_code)

        detail = _error_detail(resp)
        raise RequestError(f"HTTP {resp.status_code}: {detail}", status=resp.status_code, detail=detail)

    def request(self, endpoint: str, method: str = "GET", body=None, params=None):
        """Call ``endpoint`` and return the decoded JSON body, retrying transient failures."""
        return retry_with_backoff(
            lambda: self._send(endpoint, method, body, params),
            max_attempts=self.max_retries,
            sleep=self.sleep,
            rand=self.rand,
        )

    def get_json(self, endpoint: str, params=None):
        return self.request(endpoint, "GET", params=params)

    def post_json(self, endpoint: str, body):
        return self.request(endpoint, "POST", body=body)


def _page_count(value):
    # JSON may carry the count as 3, 3.0 or "3"
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(float(value))
    except (TypeError, ValueError, OverflowError):
        return None


@dataclass(frozen=True)
class RetrievalState:
    """Position of a page walk: next page to request, last known page count, records so far."""

    page: int = 1
    total_pages: int = 1
    patients: tuple = ()

    @property
    def done(self) -> bool:
        return self.page > self.total_pages

    def advance(self, response) -> "RetrievalState":
        """Fold one page response into the state. Missing or malformed fields are tolerated."""
        if not isinstance(response, dict):
            response = {}
        data = response.get("data")
        if not isinstance(data, list):
            data = []
        pagination = response.get("pagination")
        if not isinstance(pagination, dict):
            pagination = {}

        total_pages = self.total_pages
        declared = _page_count(pagination.get("totalPages"))
        if declared is not None:
            total_pages = declared

        return RetrievalState(
            page=self.page + 1,
            total_pages=total_pages,
            patients=self.patients + tuple(data),
        )


def fetch_all_patients(client: ApiClient, limit: Optional[int] = None) -> List[Dict[str, Any]]:
    limit = limit or settings.PAGE_LIMIT
    state = RetrievalState()

    while not state.done:
        response = client.get_json("/patients", params={"page": state.page, "limit": limit})
        fetched = len(state.patients)
        state = state.advance(response)
        logger.info(
            "[fetch] page %d: %d patients (total so far: %d, totalPages=%d)",
            state.page - 1,
            len(state.patients) - fetched,
            len(state.patients),
            state.total_pages,
        )

    logger.info("[fetch] Total patients fetched: %d", len(state.patients))
    return list(state.patients)


def submit_assessment(client: ApiClient, result) -> Dict[str, Any]:
    """POST the three patient lists; the service response is returned untouched."""
    payload = result.to_payload()
    logger.info(
        "[submit] high_risk=%d fever=%d data_quality=%d",
        len(payload["high_risk_patients"]),
        len(payload["fever_patients"]),
        len(payload["data_quality_issues"]),
    )
    return client.post_json("/submit-assessment", payload)
