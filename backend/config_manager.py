"""
Configuration management for the Wirt API gateway
"""
import os
import shlex
from pathlib import Path
from typing import List, Literal, Mapping, Optional

from pydantic import BaseModel, Field, ValidationError, field_validator

# Configuration paths
WIREGUARD_DIR = Path("/etc/wireguard")
WG_INTERFACE = "server"
WG_CONFIG_FILE = WIREGUARD_DIR / f"{WG_INTERFACE}.conf"
WG_RELOAD_COMMAND = ["systemctl", "restart", f"wg-quick@{WG_INTERFACE}"]

DEFAULT_HOST = "0.0.0.0"
DEFAULT_PORT = 3030
DEFAULT_ORIGIN = "https://wirt.network"


class ConfigError(Exception):
    """Raised when the process cannot start with the given environment"""


class GatewayConfig(BaseModel):
    public_key: str
    host: str = DEFAULT_HOST
    port: int = Field(default=DEFAULT_PORT, ge=1, le=65535)
    config_file: Path = WG_CONFIG_FILE
    reload_command: List[str] = WG_RELOAD_COMMAND
    use_sudo: bool = False
    allowed_origin: str = DEFAULT_ORIGIN
    log_level: Literal["critical", "error", "warning", "info", "debug", "trace"] = "info"

    @field_validator("host")
    @classmethod
    def check_host(cls, value: str) -> str:
        octets = value.split(".")
        if len(octets) != 4:
            raise ValueError("Invalid Hostname specified")
        for octet in octets:
            if not (octet.isascii() and octet.isdigit()) or int(octet) > 255:
                raise ValueError("Invalid Hostname specified")
        return ".".join(str(int(octet)) for octet in octets)

    @field_validator("reload_command")
    @classmethod
    def check_reload_command(cls, value: List[str]) -> List[str]:
        if not value:
            raise ValueError("Reload command cannot be empty")
        return value


def load_config(environ: Optional[Mapping[str, str]] = None) -> GatewayConfig:
    """Build the gateway configuration from environment variables"""
    env = os.environ if environ is None else environ

    public_key = env.get("PUBLIC_KEY")
    if not public_key:
        raise ConfigError("No public key was specified")

    values = {"public_key": public_key}
    if "HOST" in env:
        values["host"] = env["HOST"]
    if "PORT" in env:
        values["port"] = env["PORT"]
    if "WG_CONFIG_FILE" in env:
        values["config_file"] = env["WG_CONFIG_FILE"]
    if "WG_RELOAD_COMMAND" in env:
        values["reload_command"] = shlex.split(env["WG_RELOAD_COMMAND"])
    if "USE_SUDO" in env:
        values["use_sudo"] = env["USE_SUDO"]
    if "CORS_ORIGIN" in env:
        values["allowed_origin"] = env["CORS_ORIGIN"]
    if "LOG_LEVEL" in env:
        values["log_level"] = env["LOG_LEVEL"].lower()

    try:
        return GatewayConfig(**values)
    except ValidationError as e:
        raise ConfigError(str(e)) from e
