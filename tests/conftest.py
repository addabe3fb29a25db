from unittest.mock import Mock, patch
from urllib.parse import urlparse, parse_qs

import pytest
import requests


def fake_response(text: str, status_code: int = 200) -> Mock:
    resp = Mock()
    resp.text = text
    resp.status_code = status_code
    if status_code >= 400:
        resp.raise_for_status.side_effect = requests.exceptions.HTTPError(f"{status_code} Server Error")
    else:
        resp.raise_for_status.return_value = None
    return resp


def sent_params(call) -> dict:
    """Query parameters of a recorded requests.get call, one value per key"""
    url = call.args[0]
    return {k: v[0] for k, v in parse_qs(urlparse(url).query).items()}


@pytest.fixture
def gateway():
    """Patch requests.get; set gateway.side_effect to a list of response bodies"""
    with patch("clickatell_client.command_executor.requests.get") as mock_get:
        def respond(*bodies):
            mock_get.side_effect = [fake_response(body) for body in bodies]
            return mock_get
        mock_get.respond = respond
        yield mock_get
