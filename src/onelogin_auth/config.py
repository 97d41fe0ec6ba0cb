"""Configuration management for the OneLogin authentication client."""

from pathlib import Path
from typing import Any, Optional

import yaml
from dotenv import load_dotenv
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict

from .utils.exceptions import ConfigurationError

load_dotenv()


class OneLoginConfig(BaseSettings):
    """OneLogin API connection configuration."""

    client_id: Optional[str] = Field(None, validation_alias="ONELOGIN_CLIENT_ID")
    client_secret: Optional[str] = Field(None, validation_alias="ONELOGIN_CLIENT_SECRET")
    subdomain: Optional[str] = Field(None, validation_alias="ONELOGIN_SUBDOMAIN")
    # "us" or "eu"; ignored when base_url is set
    region: str = Field(default="us", validation_alias="ONELOGIN_REGION")
    base_url: Optional[str] = Field(None, validation_alias="ONELOGIN_BASE_URL")
    timeout: float = Field(default=30.0, validation_alias="ONELOGIN_TIMEOUT")

    # Logging
    log_level: str = Field(default="INFO", validation_alias="LOG_LEVEL")
    log_file: Optional[Path] = Field(default=None, validation_alias="LOG_FILE")

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        env_parse_none_str="",  # Treat empty string as None
    )

    @property
    def api_url(self) -> str:
        """Base URL of the API for this connection."""
        if self.base_url:
            return self.base_url.rstrip("/")
        return f"https://api.{self.region}.onelogin.com"

    def validate_credentials(self) -> None:
        """
        Check that client credentials are present.

        Raises:
            ConfigurationError: If client id or secret is missing
        """
        if not self.client_id or not self.client_secret:
            raise ConfigurationError(
                "ONELOGIN_CLIENT_ID and ONELOGIN_CLIENT_SECRET are required. "
                "Please set them in your .env file or connection profile."
            )


class ConnectionProfile:
    """Configuration for a single named connection."""

    def __init__(self, name: str, data: dict[str, Any]):
        self.name = name
        self.client_id: Optional[str] = data.get("client_id")
        self.client_secret: Optional[str] = data.get("client_secret")
        self.subdomain: Optional[str] = data.get("subdomain")
        self.region: str = data.get("region") or "us"
        self.base_url: Optional[str] = data.get("base_url")
        self.timeout: float = float(data.get("timeout") or 30.0)


class ConnectionProfiles:
    """Named connection profiles loaded from YAML."""

    def __init__(self, config_path: Path = Path("onelogin.yaml")):
        self.connections: dict[str, ConnectionProfile] = {}
        self.default: Optional[str] = None

        if config_path.exists():
            with open(config_path) as f:
                data = yaml.safe_load(f) or {}

            for name, conn_data in (data.get("connections") or {}).items():
                self.connections[name] = ConnectionProfile(name, conn_data or {})
            self.default = data.get("default")

    @property
    def has_config(self) -> bool:
        return len(self.connections) > 0

    def to_config(self, name: Optional[str] = None) -> OneLoginConfig:
        """
        Build the config for a named connection.

        Args:
            name: Connection name (None for the default connection)

        Returns:
            OneLoginConfig built from the profile only

        Raises:
            ConfigurationError: If the connection is unknown
        """
        name = name or self.default
        if not name or name not in self.connections:
            raise ConfigurationError(f"Unknown connection: {name}")

        profile = self.connections[name]
        # Use model_construct to bypass environment variable loading
        return OneLoginConfig.model_construct(
            client_id=profile.client_id,
            client_secret=profile.client_secret,
            subdomain=profile.subdomain,
            region=profile.region,
            base_url=profile.base_url,
            timeout=profile.timeout,
        )
