import pytest
import requests
from unittest.mock import Mock

from ksense_assessment.client import ApiClient


def make_response(status_code=200, body=None, reason="", json_error=False):
    """A stand-in for requests.Response with just what ApiClient reads."""
    resp = Mock(status_code=status_code, reason=reason)
    if json_error:
        resp.json = Mock(side_effect=ValueError("No JSON object could be decoded"))
    else:
        resp.json = Mock(return_value=body)
    return resp


@pytest.fixture
def session() -> requests.Session:
    """A real Session (real headers) whose transport is replaced by a Mock."""
    s = requests.Session()
    s.request = Mock()
    return s


@pytest.fixture
def sleep() -> Mock:
    return Mock()


@pytest.fixture
def client(session, sleep) -> ApiClient:
    return ApiClient(
        api_key="test-key",
        base_url="https://api.example.test/api/",
        max_retries=5,
        timeout=10,
        session=session,
        sleep=sleep,
        rand=lambda: 0.0,
    )
