"""
Clickatell Client

A Python client library for the Clickatell SMS gateway HTTP API.
"""

from .api import ClickatellAPI, concat_count
from .config import ClickatellConfig
from .errors import ClickatellException, ClickatellError, ClickatellRequestError
from .message_status import describe_status
from .response import parse_response

__all__ = [
    'ClickatellAPI',
    'ClickatellConfig',
    'ClickatellException',
    'ClickatellError',
    'ClickatellRequestError',
    'concat_count',
    'describe_status',
    'parse_response',
]

__version__ = "0.1.0"
