"""Delivery status codes returned by the querymsg command."""

from typing import Optional

STATUS_MAP = {
    1: 'Message unknown',
    2: 'Message queued',
    3: 'Delivered to gateway',
    4: 'Received by recipient',
    5: 'Error with message',
    6: 'User cancelled message delivery',
    7: 'Error delivering message',
    8: 'OK',
    9: 'Routing error',
    10: 'Message expired',
    11: 'Message queued for later delivery',
    12: 'Out of credit',
}


def describe_status(code) -> Optional[str]:
    """Return the description for a status code, accepting "004" or 4"""
    try:
        return STATUS_MAP.get(int(code))
    except (TypeError, ValueError):
        return None
