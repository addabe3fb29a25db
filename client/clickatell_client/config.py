"""
Configuration for the Clickatell client.

Settings are read from a JSON file, by default
``$XDG_CONFIG_HOME/clickatell/config.json``. The path can be overridden with
the ``CLICKATELL_CONFIG`` environment variable.
"""

import os
import json
from typing import Dict, Optional
from urllib.parse import quote

from .command import DEFAULT_API_SERVICE_HOST

CREDENTIAL_FIELDS = ['api_id', 'username', 'password']


def get_default_config_dir() -> str:
    """Get the default configuration directory following XDG standards"""
    xdg_config_home = os.environ.get("XDG_CONFIG_HOME")
    if xdg_config_home:
        return os.path.join(xdg_config_home, "clickatell")

    home = os.environ.get("HOME")
    if home:
        return os.path.join(home, ".config", "clickatell")

    return os.path.join(os.getcwd(), ".config", "clickatell")


def get_default_config_path() -> str:
    return os.environ.get("CLICKATELL_CONFIG") or os.path.join(get_default_config_dir(), "config.json")


class ClickatellConfig:
    """Credentials and connection settings for the Clickatell API"""

    def __init__(self, config_path: Optional[str] = None, required: bool = True):
        self.config_path = config_path or get_default_config_path()
        self._apply({})
        self._load_config(required)

    @classmethod
    def from_dict(cls, config_data: Dict) -> "ClickatellConfig":
        """Build a config without touching the filesystem"""
        config = cls.__new__(cls)
        config.config_path = None
        config._apply(config_data)
        return config

    def _load_config(self, required: bool):
        """Load configuration from file"""
        if not os.path.exists(self.config_path):
            if required:
                raise FileNotFoundError(f"Config file not found: {self.config_path}")
            return

        with open(self.config_path, 'r') as f:
            config_data = json.load(f)

        if not isinstance(config_data, dict):
            raise ValueError(f"Config file must contain a JSON object: {self.config_path}")
        self._apply(config_data)

    def _apply(self, config_data: Dict):
        self.api_id: Optional[str] = config_data.get('api_id')
        self.username: Optional[str] = config_data.get('username')
        self.password: Optional[str] = config_data.get('password')
        self.from_: Optional[str] = config_data.get('from')

        self.secure: bool = bool(config_data.get('secure', False))
        self.debug: bool = bool(config_data.get('debug', False))
        self.test_mode: bool = bool(config_data.get('test_mode', False))
        self.api_service_host: str = config_data.get('api_service_host') or DEFAULT_API_SERVICE_HOST
        self.timeout: float = float(config_data.get('timeout', 30))
        self.verify_ssl: bool = bool(config_data.get('verify_ssl', True))

        # HTTP proxy configuration (optional)
        proxy_config = config_data.get('proxy') or {}
        self.proxy_host: Optional[str] = proxy_config.get('host')
        self.proxy_port: Optional[int] = proxy_config.get('port')
        self.proxy_username: Optional[str] = proxy_config.get('username')
        self.proxy_password: Optional[str] = proxy_config.get('password')

    def require_credentials(self):
        """Raise ValueError unless api_id, username and password are all set"""
        for field in CREDENTIAL_FIELDS:
            if not getattr(self, field):
                raise ValueError(f"Missing required config field: {field}")

    def auth_options(self) -> Dict[str, str]:
        return {field: getattr(self, field) for field in CREDENTIAL_FIELDS if getattr(self, field)}

    def proxies(self) -> Optional[Dict[str, str]]:
        """Proxy mapping in the form requests expects, or None"""
        if not self.proxy_host:
            return None

        credentials = ""
        if self.proxy_username:
            credentials = quote(self.proxy_username, safe="")
            if self.proxy_password:
                credentials += f":{quote(self.proxy_password, safe='')}"
            credentials += "@"

        proxy_url = f"http://{credentials}{self.proxy_host}"
        if self.proxy_port:
            proxy_url += f":{self.proxy_port}"
        return {"http": proxy_url, "https": proxy_url}
