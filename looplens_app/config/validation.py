"""Configuration validation utilities."""

import re
from dataclasses import dataclass
from typing import Any
from urllib.parse import urlparse

from .credentials import (
    CONTRACT_ADDRESS_ENV,
    DECISION_API_KEY_ENV,
    PRIVATE_KEY_ENV,
    RPC_URL_ENV,
    Credentials,
)

_PRIVATE_KEY_RE = re.compile(r"^(0x)?[0-9a-fA-F]{64}$")
_ADDRESS_RE = re.compile(r"^0x[0-9a-fA-F]{40}$")


@dataclass(frozen=True)
class ValidationError:
    """Represents a configuration validation error."""
    field: str
    message: str
    value: Any


def _is_number(value: Any) -> bool:
    return isinstance(value, (int, float)) and not isinstance(value, bool)


def _is_url(value: Any, schemes: tuple[str, ...] = ("http", "https")) -> bool:
    if not isinstance(value, str):
        return False
    parsed = urlparse(value)
    return parsed.scheme in schemes and bool(parsed.netloc)


class ConfigValidator:
    """Validates configuration parameters."""

    @staticmethod
    def validate_market_data_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate market data parameters."""
        errors = []

        for url_field in ("prices_url", "trending_url", "fear_greed_url"):
            if url_field in params and not _is_url(params[url_field]):
                errors.append(ValidationError(
                    field=url_field,
                    message="Must be an http(s) URL",
                    value=params[url_field]
                ))

        if "assets" in params:
            value = params["assets"]
            if not isinstance(value, dict) or not value:
                errors.append(ValidationError(
                    field="assets",
                    message="Must be a non-empty mapping of feed id to ticker",
                    value=value
                ))
            elif not all(isinstance(t, str) and t == t.upper() for t in value.values()):
                errors.append(ValidationError(
                    field="assets",
                    message="Tickers must be uppercase strings",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "trending_limit" in params:
            value = params["trending_limit"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(ValidationError(
                    field="trending_limit",
                    message="Must be a positive integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_sentiment_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate sentiment parameters."""
        errors = []

        for positive_field in ("typical_btc_volume", "high_volume_ratio",
                               "strong_move_pct", "mild_move_pct"):
            if positive_field in params:
                value = params[positive_field]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=positive_field,
                        message="Must be a positive number",
                        value=value
                    ))

        if "neutral_fear_greed" in params:
            value = params["neutral_fear_greed"]
            if not isinstance(value, int) or not 0 <= value <= 100:
                errors.append(ValidationError(
                    field="neutral_fear_greed",
                    message="Must be an integer between 0 and 100",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_arbitration_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate decision service parameters."""
        errors = []

        if "base_url" in params and not _is_url(params["base_url"]):
            errors.append(ValidationError(
                field="base_url",
                message="Must be an http(s) URL",
                value=params["base_url"]
            ))

        if "model" in params:
            value = params["model"]
            if not isinstance(value, str) or not value.strip():
                errors.append(ValidationError(
                    field="model",
                    message="Must be a non-empty string",
                    value=value
                ))

        if "temperature" in params:
            value = params["temperature"]
            if not _is_number(value) or not 0 <= value <= 2:
                errors.append(ValidationError(
                    field="temperature",
                    message="Must be a number between 0 and 2",
                    value=value
                ))

        if "max_tokens" in params:
            value = params["max_tokens"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 1:
                errors.append(ValidationError(
                    field="max_tokens",
                    message="Must be a positive integer",
                    value=value
                ))

        if "timeout_seconds" in params:
            value = params["timeout_seconds"]
            if not _is_number(value) or value <= 0:
                errors.append(ValidationError(
                    field="timeout_seconds",
                    message="Must be a positive number",
                    value=value
                ))

        if "max_retries" in params:
            value = params["max_retries"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 0:
                errors.append(ValidationError(
                    field="max_retries",
                    message="Must be a non-negative integer",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_ledger_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate ledger commit parameters."""
        errors = []

        for positive_field in ("confirmation_timeout_seconds", "poll_interval_seconds"):
            if positive_field in params:
                value = params[positive_field]
                if not _is_number(value) or value <= 0:
                    errors.append(ValidationError(
                        field=positive_field,
                        message="Must be a positive number",
                        value=value
                    ))

        if "explorer_tx_url" in params:
            value = params["explorer_tx_url"]
            if not isinstance(value, str) or "{tx_hash}" not in value:
                errors.append(ValidationError(
                    field="explorer_tx_url",
                    message="Must contain a {tx_hash} placeholder",
                    value=value
                ))

        return errors

    @staticmethod
    def validate_schedule_params(params: dict[str, Any]) -> list[ValidationError]:
        """Validate trigger cadence parameters."""
        errors = []

        if "interval_seconds" in params:
            value = params["interval_seconds"]
            if not isinstance(value, int) or isinstance(value, bool) or value < 60:
                errors.append(ValidationError(
                    field="interval_seconds",
                    message="Must be an integer of at least 60",
                    value=value
                ))

        for flag in ("run_on_start", "align_to_clock"):
            if flag in params and not isinstance(params[flag], bool):
                errors.append(ValidationError(
                    field=flag,
                    message="Must be a boolean",
                    value=params[flag]
                ))

        return errors

    @staticmethod
    def validate_credentials(credentials: Credentials) -> list[ValidationError]:
        """Validate presence and shape of the required credentials."""
        errors = []

        if not credentials.decision_api_key:
            errors.append(ValidationError(
                field=DECISION_API_KEY_ENV,
                message="Decision service API key is not set",
                value=None
            ))

        if not credentials.rpc_url:
            errors.append(ValidationError(
                field=RPC_URL_ENV,
                message="Ledger RPC endpoint is not set",
                value=None
            ))
        elif not _is_url(credentials.rpc_url, ("http", "https")):
            errors.append(ValidationError(
                field=RPC_URL_ENV,
                message="Must be an http(s) URL",
                value=credentials.rpc_url
            ))

        # The key itself is never echoed back
        if not credentials.private_key:
            errors.append(ValidationError(
                field=PRIVATE_KEY_ENV,
                message="Signing key is not set",
                value=None
            ))
        elif not _PRIVATE_KEY_RE.match(credentials.private_key):
            errors.append(ValidationError(
                field=PRIVATE_KEY_ENV,
                message="Must be 32 bytes of hex",
                value="<redacted>"
            ))

        if not credentials.contract_address:
            errors.append(ValidationError(
                field=CONTRACT_ADDRESS_ENV,
                message="Market contract address is not set",
                value=None
            ))
        elif not _ADDRESS_RE.match(credentials.contract_address):
            errors.append(ValidationError(
                field=CONTRACT_ADDRESS_ENV,
                message="Must be a 0x-prefixed 20 byte hex address",
                value=credentials.contract_address
            ))

        return errors

    @classmethod
    def validate_config(cls, config: dict[str, Any]) -> list[ValidationError]:
        """Validate a complete merged configuration dictionary."""
        section_validators = {
            "market_data": cls.validate_market_data_params,
            "sentiment": cls.validate_sentiment_params,
            "arbitration": cls.validate_arbitration_params,
            "ledger": cls.validate_ledger_params,
            "schedule": cls.validate_schedule_params,
        }

        errors = []
        for section, validator in section_validators.items():
            params = config.get(section, {})
            if not isinstance(params, dict):
                errors.append(ValidationError(
                    field=section,
                    message="Section must be a mapping",
                    value=params
                ))
                continue
            for error in validator(params):
                errors.append(ValidationError(
                    field=f"{section}.{error.field}",
                    message=error.message,
                    value=error.value
                ))

        return errors
