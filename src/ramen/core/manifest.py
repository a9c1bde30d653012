"""
Compiler configuration for Ramen.

Configuration is optional; every field has a default. A calling tool can pass
the text of a TOML document whose [compiler] table holds it:

    [compiler]
    workers = 4
    report_unrecognized_properties = true
    report_inapplicable_properties = false
"""

import tomllib
from dataclasses import dataclass, fields
from typing import Any

from .errors import ConfigError


@dataclass(frozen=True)
class CompilerConfig:
    """
    Compiler settings.

    Attributes:
        workers: Threads used for reference resolution and property checks (1 = sequential)
        report_unrecognized_properties: Warn about property keys outside the schema
        report_inapplicable_properties: Warn about properties set on the wrong element kind
    """

    workers: int = 1
    report_unrecognized_properties: bool = True
    report_inapplicable_properties: bool = True

    def __post_init__(self) -> None:
        if isinstance(self.workers, bool) or not isinstance(self.workers, int):
            raise ConfigError(f"compiler.workers must be an integer, got {self.workers!r}")
        if self.workers < 1:
            raise ConfigError(f"compiler.workers must be at least 1, got {self.workers}")
        for name in ("report_unrecognized_properties", "report_inapplicable_properties"):
            value = getattr(self, name)
            if not isinstance(value, bool):
                raise ConfigError(f"compiler.{name} must be true or false, got {value!r}")


def config_from_dict(data: dict[str, Any]) -> CompilerConfig:
    """
    Build a CompilerConfig from the contents of a [compiler] table.

    Raises:
        ConfigError: On unknown keys or invalid values
    """
    known = {f.name for f in fields(CompilerConfig)}
    unknown = sorted(set(data) - known)
    if unknown:
        raise ConfigError(
            f"Unknown compiler setting(s): {', '.join(unknown)}. "
            f"Available settings: {', '.join(sorted(known))}"
        )
    return CompilerConfig(**data)


def config_from_toml(text: str) -> CompilerConfig:
    """
    Parse compiler configuration from TOML text.

    Reading the file is left to the calling tool.

    Args:
        text: TOML document, e.g. the contents of a project config file

    Returns:
        CompilerConfig; defaults when the document has no [compiler] table

    Raises:
        ConfigError: If the TOML is invalid or the [compiler] table is malformed
    """
    try:
        data = tomllib.loads(text)
    except tomllib.TOMLDecodeError as e:
        raise ConfigError(f"Invalid TOML: {e}") from e

    section = data.get("compiler", {})
    if not isinstance(section, dict):
        raise ConfigError("[compiler] must be a table")
    return config_from_dict(section)
