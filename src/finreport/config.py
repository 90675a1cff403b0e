"""Engine configuration.

The configuration is deployment specific and lives in a TOML file:

    strict = true

    [statement]
    deduction_rate = "0.08"
    tax_rate = "0.25"

    [classification]
    "cat-cogs" = "cost_of_goods"
    "cat-marketing" = "sales_expense"

Rates may be written as strings or numbers; they are converted to Decimal
through their string form. Every section is optional.
"""

from collections.abc import Mapping
from dataclasses import dataclass, field
from decimal import Decimal
from pathlib import Path
from typing import Any

import tomllib

from finreport.domain import errors
from finreport.domain.classification import ClassificationMap
from finreport.domain.errors import ConfigurationError
from finreport.domain.statement import DEFAULT_DEDUCTION_RATE, DEFAULT_TAX_RATE
from finreport.utils.amount_parser import to_decimal

CONFIG_ENV_VAR = "FINREPORT_CONFIG"


@dataclass(frozen=True)
class EngineConfig:
    """Classification map, statement rates and validation mode."""

    classification: ClassificationMap = field(default_factory=ClassificationMap)
    deduction_rate: Decimal = DEFAULT_DEDUCTION_RATE
    tax_rate: Decimal = DEFAULT_TAX_RATE
    strict: bool = False


def _load_toml(path: Path) -> dict[str, Any]:
    """Load a TOML file and return its content as a dictionary.

    Raises:
        FileNotFoundError: if the file does not exist.
        ConfigurationError: if the TOML content cannot be parsed.
    """
    if not path.is_file():
        raise FileNotFoundError(f"Config file not found: {path}")

    try:
        return tomllib.loads(path.read_text(encoding="utf-8"))
    except tomllib.TOMLDecodeError as exc:
        raise ConfigurationError(f"Failed to parse TOML config file: {path}") from exc


def _parse_rate(section: Mapping[str, Any], name: str, default: Decimal) -> Decimal:
    raw = section.get(name)
    if raw is None:
        return default
    try:
        rate = to_decimal(raw)
    except ValueError as exc:
        raise ConfigurationError(f"Invalid {name}: {raw!r}") from exc
    if rate < 0 or rate > 1:
        raise ConfigurationError(errors.rate_out_of_range(name, rate))
    return rate


def parse_config(data: Mapping[str, Any]) -> EngineConfig:
    """Build an EngineConfig from parsed TOML data.

    Raises:
        ConfigurationError: On unknown line roles, invalid rates or
            sections of the wrong type
    """
    statement = data.get("statement") or {}
    classification = data.get("classification") or {}
    if not isinstance(statement, Mapping):
        raise ConfigurationError("[statement] must be a table")
    if not isinstance(classification, Mapping):
        raise ConfigurationError("[classification] must be a table")

    strict = data.get("strict", False)
    if not isinstance(strict, bool):
        raise ConfigurationError(f"strict must be true or false, got {strict!r}")

    return EngineConfig(
        classification=ClassificationMap.from_mapping(classification),
        deduction_rate=_parse_rate(statement, "deduction_rate", DEFAULT_DEDUCTION_RATE),
        tax_rate=_parse_rate(statement, "tax_rate", DEFAULT_TAX_RATE),
        strict=strict,
    )


def load_config(path: str | Path | None) -> EngineConfig:
    """Load configuration from a TOML file, or defaults when path is None."""
    if path is None:
        return EngineConfig()
    return parse_config(_load_toml(Path(path)))
