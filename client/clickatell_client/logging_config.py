"""
Logging configuration for the Clickatell client

This module provides the logging setup used by the command line utility and
structured event logging for gateway commands.
"""

import logging
import os
import sys
from datetime import datetime, timezone


def setup_logging(debug: bool = False) -> None:
    """
    Configure the root logger for the command line utility.

    ``--debug`` forces DEBUG; otherwise LOG_LEVEL applies (default WARNING).
    Records go to stderr, or to LOG_FILE when set, since stdout carries the
    command output.
    """
    log_level = 'DEBUG' if debug else os.environ.get('LOG_LEVEL', 'WARNING').upper()
    log_file = os.environ.get('LOG_FILE')

    output = {'filename': log_file} if log_file else {'stream': sys.stderr}
    logging.basicConfig(
        level=getattr(logging, log_level, logging.WARNING),
        format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
        force=True,
        **output,
    )


def log_sms_event(event_type, command=None, service=None, to_number=None,
                  message_id=None, success=True, error=None):
    """
    Log a gateway command with structured information.

    Args:
        event_type: Type of event (e.g., 'command_sent', 'command_failed')
        command: Gateway command name (e.g., 'sendmsg')
        service: Gateway service ('http' or 'mms')
        to_number: Recipient phone number(s)
        message_id: Clickatell message ID
        success: Whether the operation was successful
        error: Error message if applicable
    """
    logger = logging.getLogger('sms')

    log_data = {
        'event_type': event_type,
        'success': success,
        'timestamp': datetime.now(timezone.utc).isoformat(),
    }

    if command:
        log_data['command'] = command
    if service:
        log_data['service'] = service
    if to_number:
        log_data['to_number'] = to_number
    if message_id:
        log_data['message_id'] = message_id
    if error:
        log_data['error'] = error

    # Format as key=value pairs for easy parsing
    log_message = ' '.join([f"{k}={v}" for k, v in log_data.items()])

    if success:
        logger.info(f"SMS: {log_message}")
    else:
        logger.error(f"SMS: {log_message}")
