"""YAML configuration loader with env var resolution and Pydantic validation.

Loads config from (priority order):
1. --config <path> CLI flag
2. ./floorlink.yaml (working directory)
3. ~/.floorlink/config.yaml (user home)

Environment variables override YAML: FLOORLINK_<SECTION>_<KEY>.
${VAR} references in YAML values resolve from environment at load time.
Odoo settings missing from the file fall back to the ODOO_* variables.
"""

import logging
import os
import re
from pathlib import Path
from typing import Any, Literal

import yaml
from pydantic import BaseModel, ConfigDict, Field

from src.edi.builders import DEFAULT_SELLER
from src.edi.control_numbers import ControlNumberGenerator
from src.edi.models import PostalAddress
from src.edi.x12 import X12Envelope
from src.odoo.client import OdooConfig
from src.transmission.models import Recipient

logger = logging.getLogger(__name__)

_ENV_VAR_PATTERN = re.compile(r"\$\{([^}]+)\}")

ENV_PREFIX = "FLOORLINK_"


def resolve_env_vars(value: str) -> str:
    """Resolve ${VAR} references in a string from environment variables.

    Missing env vars resolve to empty string.
    """
    def _replace(match: re.Match) -> str:
        return os.environ.get(match.group(1), "")

    return _ENV_VAR_PATTERN.sub(_replace, value)


def _resolve_env_vars_recursive(data: Any) -> Any:
    if isinstance(data, str):
        return resolve_env_vars(data)
    elif isinstance(data, dict):
        return {k: _resolve_env_vars_recursive(v) for k, v in data.items()}
    elif isinstance(data, list):
        return [_resolve_env_vars_recursive(item) for item in data]
    return data


class ServerConfig(BaseModel):
    """HTTP server settings for ``floorlink serve``."""

    host: str = "127.0.0.1"
    port: int = 8000
    log_level: str = "info"


class EDIConfig(BaseModel):
    """Interchange envelope and document settings."""

    model_config = ConfigDict(coerce_numbers_to_str=True)

    sender_id: str = "SENDER"
    receiver_id: str = "RECEIVER"
    usage_indicator: Literal["P", "T"] = "P"
    stream: bool = Field(
        default=False, description="Emit a continuous segment stream instead of one segment per line"
    )
    control_number_file: str | None = "~/.floorlink/control_numbers.json"
    strict_totals: bool = False
    seller: PostalAddress = DEFAULT_SELLER

    def envelope_template(self) -> X12Envelope:
        """Envelope carrying the configured parties and framing."""
        return X12Envelope(
            sender_id=self.sender_id,
            receiver_id=self.receiver_id,
            usage_indicator=self.usage_indicator,
            segment_separator="" if self.stream else "\n",
        )

    def control_numbers(self) -> ControlNumberGenerator:
        """Control number source backed by ``control_number_file``."""
        return ControlNumberGenerator(
            store_path=self.control_number_file,
            template=self.envelope_template(),
        )


class TransmissionConfig(BaseModel):
    """Outbound delivery settings."""

    default_recipient: Recipient | None = None
    api_timeout: float = 30.0


class FloorLinkConfig(BaseModel):
    """Top-level FloorLink configuration."""

    server: ServerConfig = ServerConfig()
    odoo: OdooConfig = Field(default_factory=OdooConfig.from_env)
    edi: EDIConfig = EDIConfig()
    transmission: TransmissionConfig = TransmissionConfig()


def _find_config_file() -> Path | None:
    """Search for config file in standard locations."""
    candidates = [
        Path.cwd() / "floorlink.yaml",
        Path.cwd() / "floorlink.yml",
        Path.home() / ".floorlink" / "config.yaml",
        Path.home() / ".floorlink" / "config.yml",
    ]
    for candidate in candidates:
        if candidate.exists():
            return candidate
    return None


def _apply_env_overrides(data: dict[str, Any]) -> dict[str, Any]:
    """Apply FLOORLINK_<SECTION>_<KEY> env var overrides to config data.

    Matches section names by longest prefix, so ``FLOORLINK_EDI_SENDER_ID``
    maps to section ``edi``, field ``sender_id``.

    Args:
        data: Parsed YAML config dict.

    Returns:
        Config dict with env var overrides applied.
    """
    known_sections = sorted(
        FloorLinkConfig.model_fields.keys(), key=len, reverse=True
    )
    for key, value in os.environ.items():
        if not key.startswith(ENV_PREFIX):
            continue
        suffix = key[len(ENV_PREFIX):].lower()
        matched_section = None
        matched_field = None
        for section in known_sections:
            section_prefix = section + "_"
            if suffix.startswith(section_prefix):
                matched_section = section
                matched_field = suffix[len(section_prefix):]
                break
        if matched_section is None or not matched_field:
            continue
        if matched_section not in data or data[matched_section] is None:
            data[matched_section] = {}
        if isinstance(data[matched_section], dict):
            # Coerce to int, bool, or keep as string
            try:
                data[matched_section][matched_field] = int(value)
            except ValueError:
                if value.lower() in ("true", "false"):
                    data[matched_section][matched_field] = value.lower() == "true"
                else:
                    data[matched_section][matched_field] = value
    return data


def _merge_odoo_env_defaults(data: dict[str, Any]) -> dict[str, Any]:
    """Fill Odoo keys absent from the file from ODOO_* variables."""
    section = data.get("odoo") or {}
    data["odoo"] = {**OdooConfig.from_env().model_dump(exclude_none=True), **section}
    return data


def load_config(config_path: str | None = None) -> FloorLinkConfig | None:
    """Load FloorLink configuration from YAML file with env var resolution.

    Args:
        config_path: Explicit path to config file. If None, searches
            standard locations (cwd, then ~/.floorlink/).

    Returns:
        Parsed and validated FloorLinkConfig, or None if no config found.

    Raises:
        FileNotFoundError: If ``config_path`` does not exist.
    """
    if config_path:
        path = Path(config_path)
        if not path.exists():
            raise FileNotFoundError(f"Config file not found: {config_path}")
    else:
        path = _find_config_file()
        if path is None:
            return None

    logger.info("Loading config from %s", path)

    with open(path) as f:
        raw_data = yaml.safe_load(f) or {}

    data = _resolve_env_vars_recursive(raw_data)
    data = _apply_env_overrides(data)
    data = _merge_odoo_env_defaults(data)

    return FloorLinkConfig(**data)


def get_config(config_path: str | None = None) -> FloorLinkConfig:
    """Load config, or build one from defaults and the environment."""
    config = load_config(config_path)
    if config is not None:
        return config
    return FloorLinkConfig(**_merge_odoo_env_defaults(_apply_env_overrides({})))
