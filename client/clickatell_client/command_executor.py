"""
Command execution against the Clickatell HTTP API.
"""

import logging
from typing import Dict, List, Optional

import requests

from .command import Command
from .config import ClickatellConfig
from .errors import ClickatellRequestError
from .logging_config import log_sms_event

logger = logging.getLogger(__name__)

# Body returned for every command while in test mode
TEST_MODE_RESPONSE = "OK: session_id"


class CommandExecutor:
    """Sends a single command to the gateway and returns the raw response body"""

    def __init__(self, authentication_params: Dict[str, str], config: Optional[ClickatellConfig] = None):
        self.authentication_params = authentication_params
        self.config = config or ClickatellConfig.from_dict({})
        self.sms_requests: List[Dict] = []

    def execute(self, command_name: str, service: str = 'http', parameters: Optional[Dict] = None) -> str:
        params = dict(parameters or {})
        params.update(self.authentication_params)

        if self.config.test_mode:
            self.sms_requests.append(params)
            logger.debug(f"Test mode: recorded {command_name} request, nothing sent")
            return TEST_MODE_RESPONSE

        request_url = self.command(command_name, service, params)
        if self.config.debug:
            logger.debug(f"[debug] Sending request to {request_url}")

        try:
            response = requests.get(
                request_url,
                timeout=self.config.timeout,
                proxies=self.config.proxies(),
                verify=self.config.verify_ssl,
            )
            response.raise_for_status()
        except requests.exceptions.RequestException as e:
            log_sms_event('command_failed', command=command_name, service=service,
                          to_number=params.get('to'), success=False, error=str(e))
            raise ClickatellRequestError(f"Failed to execute {command_name}: {e}") from e

        log_sms_event('command_sent', command=command_name, service=service,
                      to_number=params.get('to'))
        if self.config.debug:
            logger.debug(f"[debug] Response body: {response.text!r}")
        return response.text

    def command(self, command_name: str, service: str, parameters: Dict) -> str:
        return Command(
            command_name,
            service,
            secure=self.config.secure,
            api_service_host=self.config.api_service_host,
        ).with_params(parameters)
