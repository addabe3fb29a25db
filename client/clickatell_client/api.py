"""
Clickatell API Module

This module provides the facade over the Clickatell HTTP service: session
authentication, message sending and account queries.
"""

import math
import logging
from typing import Dict, List, Optional, Union

from .command_executor import CommandExecutor
from .config import ClickatellConfig
from .message_status import describe_status
from .response import parse_response

logger = logging.getLogger(__name__)

# Messages longer than this are split into concatenated parts
MESSAGE_PART_LENGTH = 160

# Feature flag required by the gateway when a sender id is given
FROM_REQUIRED_FEATURE = '48'

DEFAULT_OTP_TEXT = 'Your password is #OTP#'


class ClickatellAPI:
    """
    Client for the Clickatell HTTP API.

    ``auth_options`` holds either a ``session_id`` or the raw ``api_id``,
    ``username`` and ``password``. Calls that need no authentication (ping
    etc.) work with an empty dict.
    """

    def __init__(self, auth_options: Optional[Dict[str, str]] = None,
                 config: Optional[ClickatellConfig] = None):
        self.auth_options = dict(auth_options or {})
        self.config = config or ClickatellConfig.from_dict({})
        self.sms_requests: List[Dict] = []

    @classmethod
    def authenticate_with(cls, api_id: str, username: str, password: str,
                          config: Optional[ClickatellConfig] = None) -> "ClickatellAPI":
        """Authenticate and return an instance that uses the resulting session id"""
        api = cls({'api_id': api_id, 'username': username, 'password': password}, config)
        api.authenticate()
        return api

    @property
    def session_id(self) -> Optional[str]:
        return self.auth_options.get('session_id')

    def authenticate(self) -> str:
        """Obtain a session id to be used in place of credentials on later calls"""
        response = self.execute_command('auth', 'http', no_session=True)
        self.auth_options['session_id'] = parse_response(response)['OK']
        logger.info("Authenticated with Clickatell, session established")
        return self.auth_options['session_id']

    def clear_session(self):
        """Forget the session id; raw credentials are used again"""
        self.auth_options.pop('session_id', None)

    def ping(self, session_id: str) -> str:
        """Keep the given session alive"""
        return self.execute_command('ping', 'http', {'session_id': session_id})

    def send_message(self, recipient: Union[str, List[str]], message_text: str,
                     from_: Optional[str] = None, set_mobile_originated: bool = False,
                     client_message_id: Optional[str] = None, callback: Optional[str] = None,
                     concat: Optional[int] = None) -> Union[str, List[str]]:
        """
        Send ``message_text`` to one or more recipients.

        Recipient numbers need the international dialing prefix and no
        leading zeros. Messages over 160 characters are split automatically:
        ``concat`` is then computed from the text length and any value passed
        in is ignored.

        Returns:
            The message ID, or a list of IDs when sending to several recipients
        """
        options = {}
        if from_:
            options['from'] = from_
            options['req_feat'] = FROM_REQUIRED_FEATURE
        if set_mobile_originated:
            options['mo'] = '1'
        if client_message_id:
            options['climsgid'] = client_message_id
        if callback is not None:
            options['callback'] = callback
        if concat is not None:
            options['concat'] = concat
        if len(message_text) > MESSAGE_PART_LENGTH:
            options['concat'] = concat_count(message_text)

        if isinstance(recipient, (list, tuple)):
            recipient = ','.join(recipient)

        params = {'to': recipient, 'text': message_text}
        params.update(options)
        response = parse_response(self.execute_command('sendmsg', 'http', params))
        if isinstance(response, list):
            return [record.get('ID') for record in response]
        return response.get('ID')

    def send_wap_push(self, recipient: str, media_url: str, notification_text: str = '',
                      from_: Optional[str] = None) -> str:
        params = {
            'to': recipient,
            'si_url': media_url,
            'si_text': notification_text,
            'si_id': 'foo',
        }
        if from_:
            params['from'] = from_
            params['req_feat'] = FROM_REQUIRED_FEATURE
        response = self.execute_command('si_push', 'mms', params)
        return parse_response(response).get('ID')

    def message_status(self, message_id: str) -> Optional[int]:
        """Return the delivery status code of a message sent earlier, None if absent"""
        response = self.execute_command('querymsg', 'http', {'apimsgid': message_id})
        status = parse_response(response).get('Status')
        if status is None:
            return None
        status = int(status)
        logger.debug(f"Message {message_id} status {status}: {describe_status(status)}")
        return status

    def message_charge(self, message_id: str) -> float:
        response = self.execute_command('getmsgcharge', 'http', {'apimsgid': message_id})
        return float(parse_response(response).get('charge') or 0.0)

    def account_balance(self) -> float:
        """Return the number of credits remaining"""
        response = self.execute_command('getbalance', 'http')
        return float(parse_response(response).get('Credit') or 0.0)

    # NOTE: the OTP API is in beta on the gateway side and requires registration
    def send_otp(self, recipient: str, message_text: Optional[str] = None) -> str:
        """Send a one time password; ``#OTP#`` in the text is replaced by the gateway"""
        params = {'to': recipient, 'text': message_text or DEFAULT_OTP_TEXT}
        response = self.execute_command('sendotp', 'http', params, no_session=True)
        return parse_response(response).get('ID')

    def verify_otp(self, recipient: str, otp: str, message_id: str,
                   activate_sender: bool = False) -> str:
        """Verify a one time password, optionally activating the sender id"""
        params = {
            'to': recipient,
            'otp': otp,
            'apiMsgId': message_id,
            'sender_id': 1 if activate_sender else 0,
        }
        response = self.execute_command('verifyotp', 'http', params, no_session=True)
        return parse_response(response).get('OK')

    def execute_command(self, command_name: str, service: str = 'http',
                        parameters: Optional[Dict] = None, no_session: bool = False) -> str:
        executor = CommandExecutor(self.auth_extra_params(no_session), self.config)
        result = executor.execute(command_name, service, parameters)
        if self.config.test_mode:
            self.sms_requests.extend(executor.sms_requests)
        return result

    def auth_extra_params(self, no_session: bool = False) -> Dict[str, str]:
        credentials = {
            'api_id': self.auth_options.get('api_id'),
            'user': self.auth_options.get('username'),
            'password': self.auth_options.get('password'),
        }

        if no_session:
            return credentials
        if self.auth_options.get('session_id'):
            return {'session_id': self.auth_options['session_id']}
        if self.auth_options.get('api_id'):
            return credentials
        return {}


def concat_count(message_text: str) -> int:
    """Number of 160 character parts needed for ``message_text``"""
    return math.ceil(len(message_text) / MESSAGE_PART_LENGTH)
