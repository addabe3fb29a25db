"""Request URL construction for Clickatell commands."""

from typing import Dict, Optional
from urllib.parse import quote_plus

DEFAULT_API_SERVICE_HOST = 'api.clickatell.com'


class Command:
    """A named command on one of the gateway services ("http" or "mms")"""

    def __init__(self, command_name: str, service: str = 'http', secure: bool = False,
                 api_service_host: Optional[str] = None):
        self.command_name = command_name
        self.service = service
        self.secure = secure
        self.api_service_host = api_service_host or DEFAULT_API_SERVICE_HOST

    @property
    def protocol(self) -> str:
        return 'https' if self.secure else 'http'

    @property
    def api_url(self) -> str:
        return f"{self.protocol}://{self.api_service_host}/{self.service}/"

    def with_params(self, params: Dict) -> str:
        """Return the full request URL with a sorted, escaped query string"""
        pairs = sorted(
            f"{quote_plus(str(key))}={quote_plus(str(value))}"
            for key, value in params.items()
            if value is not None
        )
        return f"{self.api_url}{self.command_name}?{'&'.join(pairs)}"
