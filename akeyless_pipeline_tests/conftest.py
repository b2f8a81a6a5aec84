import json
from unittest.mock import Mock, patch

import pytest
import requests

from akeyless_pipeline.akeyless import AkeylessCredential, TransportConfig

API_URL = "https://akeyless.test"


def _make_response(payload, status_code=200):
    response = Mock()
    response.status_code = status_code
    response.json.return_value = payload
    response.text = json.dumps(payload)
    if status_code >= 400:
        response.raise_for_status.side_effect = requests.HTTPError(
            f"{status_code} Client Error", response=response
        )
    else:
        response.raise_for_status.return_value = None
    return response


@pytest.fixture
def make_response():
    """Factory for mocked requests responses"""
    return _make_response


@pytest.fixture
def mock_post():
    """Patch the only HTTP entry point used by the client"""
    with patch("akeyless_pipeline.akeyless.transport.requests.post") as post:
        yield post


@pytest.fixture
def route_responses(mock_post):
    """Answer each endpoint with its own mocked response.

    Values may be a response or an exception to raise.
    """
    def _route(routes):
        def _post(url, **kwargs):
            for endpoint, outcome in routes.items():
                if url.endswith(endpoint):
                    if isinstance(outcome, Exception):
                        raise outcome
                    return outcome
            raise AssertionError(f"Unexpected POST to {url}")

        mock_post.side_effect = _post
        return mock_post

    return _route


@pytest.fixture
def access_key_credential():
    return AkeylessCredential(url=API_URL, access_id="p-1", access_key="k-1")


@pytest.fixture
def token_credential():
    return AkeylessCredential(url=API_URL, auth_method="token", token="t-direct")


@pytest.fixture
def transport():
    return TransportConfig(base_url=API_URL, timeout_ms=5000)


def posted(mock_post, endpoint):
    """Return the JSON bodies sent to ``endpoint``"""
    return [
        call.kwargs["json"]
        for call in mock_post.call_args_list
        if call.args[0].endswith(endpoint)
    ]


@pytest.fixture
def posted_bodies(mock_post):
    return lambda endpoint: posted(mock_post, endpoint)
