# config.py

import os
from dataclasses import dataclass
from typing import Optional

from dotenv import load_dotenv

OUTPUT_FORMATS = ("yaml", "json")
TRANSPORTS = ("stdio", "http")


class ConfigError(Exception):
    pass


@dataclass(frozen=True)
class Settings:
    figma_api_key: Optional[str] = None
    figma_oauth_token: Optional[str] = None
    output_format: str = "yaml"
    transport: str = "stdio"
    port: int = 3333
    log_level: str = "INFO"

    @property
    def use_oauth(self) -> bool:
        return bool(self.figma_oauth_token)


def load_settings(env_file: Optional[str] = None) -> Settings:
    """Read settings from the environment, after loading a .env file if present."""
    load_dotenv(env_file)

    output_format = os.getenv("OUTPUT_FORMAT", "yaml").lower()
    if output_format not in OUTPUT_FORMATS:
        raise ConfigError(f"OUTPUT_FORMAT must be one of {OUTPUT_FORMATS}, got '{output_format}'")

    transport = os.getenv("MCP_TRANSPORT", "stdio").lower()
    if transport not in TRANSPORTS:
        raise ConfigError(f"MCP_TRANSPORT must be one of {TRANSPORTS}, got '{transport}'")

    port = os.getenv("PORT", "3333")
    if not port.isdigit():
        raise ConfigError(f"PORT must be an integer, got '{port}'")

    return Settings(
        figma_api_key=os.getenv("FIGMA_API_KEY") or None,
        figma_oauth_token=os.getenv("FIGMA_OAUTH_TOKEN") or None,
        output_format=output_format,
        transport=transport,
        port=int(port),
        log_level=os.getenv("LOG_LEVEL", "INFO").upper(),
    )


def require_credentials(settings: Settings) -> None:
    if not (settings.figma_api_key or settings.figma_oauth_token):
        raise ConfigError("Missing FIGMA_API_KEY (or FIGMA_OAUTH_TOKEN) in environment or .env")
