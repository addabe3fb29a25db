import argparse
import os
import sys
import json
import functools

from .api import ClickatellAPI
from .config import ClickatellConfig, get_default_config_dir
from .errors import ClickatellException
from .logging_config import setup_logging
from .message_status import describe_status


def write_file(path: str, data: bytes, mode: int = 0o600) -> None:
    with open(path, 'wb') as f:
        f.write(data)
    try:
        os.chmod(path, mode)
    except OSError:
        # Ignore chmod issues on non-POSIX
        pass


def load_config(args: argparse.Namespace) -> ClickatellConfig:
    """Read the config file and apply command line overrides"""
    config = ClickatellConfig(args.config, required=False)

    if args.api_id:
        config.api_id = args.api_id
    if args.username:
        config.username = args.username
    if args.password:
        config.password = args.password
    if args.secure:
        config.secure = True
    if args.debug:
        config.debug = True
    if args.test:
        config.test_mode = True

    config.require_credentials()
    return config


def connect(args: argparse.Namespace) -> ClickatellAPI:
    config = load_config(args)
    return ClickatellAPI.authenticate_with(config.api_id, config.username, config.password, config)


def run(handler):
    """Wrap a command so gateway and config errors become exit code 1"""
    @functools.wraps(handler)
    def wrapper(args: argparse.Namespace) -> int:
        try:
            return handler(args)
        except (ClickatellException, ValueError, OSError) as e:
            print(f"Error: {e}", file=sys.stderr)
            return 1
    return wrapper


@run
def cmd_send(args: argparse.Namespace) -> int:
    """Send an SMS message"""
    api = connect(args)
    from_ = args.sender or api.config.from_
    recipients = [number.strip() for to in args.to for number in to.split(',') if number.strip()]
    message_ids = api.send_message(
        recipients,
        args.message,
        from_=from_,
        set_mobile_originated=args.mo,
        client_message_id=args.client_message_id,
        callback=args.callback,
        concat=args.concat,
    )
    if not isinstance(message_ids, list):
        message_ids = [message_ids]

    if api.config.test_mode:
        print(f"Test mode: SMS to {', '.join(recipients)} recorded, nothing sent")
    elif args.verbose:
        print(json.dumps(dict(zip(recipients, message_ids)), indent=2))
    else:
        print(f"SMS sent successfully! Message ID: {', '.join(str(m) for m in message_ids)}")
    return 0


@run
def cmd_wap_push(args: argparse.Namespace) -> int:
    """Send a WAP push message"""
    api = connect(args)
    message_id = api.send_wap_push(args.to, args.media_url, args.text, from_=args.sender or api.config.from_)
    print(f"WAP push sent successfully! Message ID: {message_id}")
    return 0


@run
def cmd_status(args: argparse.Namespace) -> int:
    """Show the delivery status of a message"""
    api = connect(args)
    status = api.message_status(args.message_id)
    if status is None:
        print(f"Message {args.message_id} status: unknown (no status returned)")
        return 0
    print(f"Message {args.message_id} status: {status} ({describe_status(status) or 'Unknown status'})")
    return 0


@run
def cmd_charge(args: argparse.Namespace) -> int:
    """Show the charge of a message"""
    api = connect(args)
    print(f"Message {args.message_id} charge: {api.message_charge(args.message_id)}")
    return 0


@run
def cmd_balance(args: argparse.Namespace) -> int:
    """Show the remaining account credit"""
    api = connect(args)
    print(f"Account balance: {api.account_balance()}")
    return 0


@run
def cmd_send_otp(args: argparse.Namespace) -> int:
    """Send a one time password"""
    api = connect(args)
    message_id = api.send_otp(args.to, args.text)
    print(f"OTP sent successfully! Message ID: {message_id}")
    return 0


@run
def cmd_verify_otp(args: argparse.Namespace) -> int:
    """Verify a one time password"""
    api = connect(args)
    result = api.verify_otp(args.to, args.otp, args.message_id, activate_sender=args.activate_sender)
    print(f"OTP verified: {result}")
    return 0


@run
def cmd_ping(args: argparse.Namespace) -> int:
    """Test connection to the Clickatell API"""
    api = connect(args)
    api.ping(api.session_id)
    print(f"Connection successful! Session: {api.session_id[:16]}...")
    return 0


def cmd_init(args: argparse.Namespace) -> int:
    """Initialize the client - creates the config directory and config file"""
    config_dir = args.config_dir or get_default_config_dir()
    config_path = os.path.join(config_dir, "config.json")

    print(f"Initializing Clickatell client in: {config_dir}")

    try:
        os.makedirs(config_dir, exist_ok=True)
    except OSError as e:
        print(f"Failed to create config directory: {e}", file=sys.stderr)
        return 1

    if os.path.exists(config_path) and not args.force:
        print("Files already exist: config.json")
        print("Use --force to overwrite existing files")
        return 1

    config_data = {
        "api_id": args.api_id,
        "username": args.username,
        "password": args.password,
        "from": args.sender,
        "secure": args.secure,
        "api_service_host": args.api_service_host,
    }

    proxy_config = {
        "host": args.proxy_host,
        "port": args.proxy_port,
        "username": args.proxy_user,
        "password": args.proxy_password,
    }
    proxy_config = {k: v for k, v in proxy_config.items() if v is not None}
    if proxy_config:
        config_data["proxy"] = proxy_config

    # Remove None values
    config_data = {k: v for k, v in config_data.items() if v is not None}

    try:
        # Holds the account password
        write_file(config_path, json.dumps(config_data, indent=2).encode("utf-8"), 0o600)
    except OSError as e:
        print(f"Failed to create config file: {e}", file=sys.stderr)
        return 1

    print(f"Created config file: {config_path}")
    print("\nClickatell client initialized successfully!")
    return 0


def add_connection_args(p: argparse.ArgumentParser) -> None:
    p.add_argument("--config", default=None, help="Config file path (default: CLICKATELL_CONFIG or XDG_CONFIG_HOME/clickatell/config.json)")
    p.add_argument("--api-id", help="Clickatell API id (overrides config)")
    p.add_argument("--username", "-u", help="Clickatell username (overrides config)")
    p.add_argument("--password", "-p", help="Clickatell password (overrides config)")
    p.add_argument("--secure", "-s", action="store_true", help="Use HTTPS")
    p.add_argument("--debug", "-d", action="store_true", help="Log requests sent to the gateway")
    p.add_argument("--test", "-t", action="store_true", help="Test mode: record requests without sending them")


def build_parser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(prog="clickatell", description="Clickatell SMS gateway utilities")
    sub = p.add_subparsers(dest="cmd", required=True)

    p_init = sub.add_parser("init", help="Create a config file", description="Create the configuration directory and a config file holding your Clickatell credentials.")
    p_init.add_argument("--config-dir", help="Config directory (default: XDG_CONFIG_HOME/clickatell or ~/.config/clickatell)")
    p_init.add_argument("--api-id", help="Clickatell API id")
    p_init.add_argument("--username", help="Clickatell username")
    p_init.add_argument("--password", help="Clickatell password")
    p_init.add_argument("--from", dest="sender", help="Default sender number or name")
    p_init.add_argument("--secure", action="store_true", default=None, help="Use HTTPS by default")
    p_init.add_argument("--api-service-host", help="Gateway host (default: api.clickatell.com)")
    p_init.add_argument("--force", action="store_true", help="Overwrite existing files")

    proxy_group = p_init.add_argument_group("HTTP proxy options")
    proxy_group.add_argument("--proxy-host", help="HTTP proxy hostname")
    proxy_group.add_argument("--proxy-port", type=int, help="HTTP proxy port")
    proxy_group.add_argument("--proxy-user", help="HTTP proxy username")
    proxy_group.add_argument("--proxy-password", help="HTTP proxy password")
    p_init.set_defaults(func=cmd_init)

    p_send = sub.add_parser("send", help="Send an SMS message", description="Send an SMS message to one or more recipients. Messages over 160 characters are concatenated automatically.")
    p_send.add_argument("message", help="Message to send")
    p_send.add_argument("--to", action="append", required=True, help="Recipient phone number with international prefix (repeat for several)")
    p_send.add_argument("--from", dest="sender", help="Sender number or name (overrides config)")
    p_send.add_argument("--mo", action="store_true", help="Set the mobile originated flag")
    p_send.add_argument("--client-message-id", help="Your own message id for later queries")
    p_send.add_argument("--callback", help="Delivery callback level")
    p_send.add_argument("--concat", type=int, help="Number of concatenated parts allowed")
    p_send.add_argument("--verbose", "-v", action="store_true", help="Verbose output (default: False)")
    add_connection_args(p_send)
    p_send.set_defaults(func=cmd_send)

    p_push = sub.add_parser("wap-push", help="Send a WAP push message", description="Send a WAP push (service indication) pointing at a media URL.")
    p_push.add_argument("to", help="Recipient phone number")
    p_push.add_argument("media_url", help="URL of the media to push")
    p_push.add_argument("--text", default="", help="Notification text")
    p_push.add_argument("--from", dest="sender", help="Sender number or name (overrides config)")
    add_connection_args(p_push)
    p_push.set_defaults(func=cmd_wap_push)

    p_status = sub.add_parser("status", help="Query message status", description="Query the delivery status of a message by its Clickatell message id.")
    p_status.add_argument("message_id", help="Message id returned by send")
    add_connection_args(p_status)
    p_status.set_defaults(func=cmd_status)

    p_charge = sub.add_parser("charge", help="Query message charge", description="Query the charge of a message by its Clickatell message id.")
    p_charge.add_argument("message_id", help="Message id returned by send")
    add_connection_args(p_charge)
    p_charge.set_defaults(func=cmd_charge)

    p_balance = sub.add_parser("balance", help="Show account balance", description="Show the number of credits remaining on the account.")
    add_connection_args(p_balance)
    p_balance.set_defaults(func=cmd_balance)

    p_otp = sub.add_parser("send-otp", help="Send a one time password", description="Send a one time password. The gateway replaces #OTP# in the text.")
    p_otp.add_argument("to", help="Recipient phone number")
    p_otp.add_argument("--text", default=None, help="Message text (default: 'Your password is #OTP#')")
    add_connection_args(p_otp)
    p_otp.set_defaults(func=cmd_send_otp)

    p_verify = sub.add_parser("verify-otp", help="Verify a one time password", description="Verify a one time password previously sent with send-otp.")
    p_verify.add_argument("to", help="Recipient phone number")
    p_verify.add_argument("otp", help="One time password entered by the recipient")
    p_verify.add_argument("message_id", help="Message id returned by send-otp")
    p_verify.add_argument("--activate-sender", action="store_true", help="Activate the recipient number as a sender id")
    add_connection_args(p_verify)
    p_verify.set_defaults(func=cmd_verify_otp)

    p_ping = sub.add_parser("ping", help="Test connection to the Clickatell API", description="Authenticate and ping the resulting session.")
    add_connection_args(p_ping)
    p_ping.set_defaults(func=cmd_ping)

    return p


def main(argv=None) -> int:
    argv = argv if argv is not None else sys.argv[1:]
    parser = build_parser()
    args = parser.parse_args(argv)
    setup_logging(debug=getattr(args, "debug", False))
    return args.func(args)


if __name__ == "__main__":
    raise SystemExit(main())
