"""TOML loading and field coercion shared by rating-system configs."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any, Callable, TypeVar
import tomllib


@dataclass(frozen=True)
class BaseSystemConfig:
    """Identity of one named rating-system configuration."""

    name: str
    description: str | None
    file_path: Path

    def as_config_json(self) -> dict[str, Any]:
        raise NotImplementedError


T = TypeVar("T", bound=BaseSystemConfig)


def read_table(raw: dict[str, Any], key: str, file_path: Path) -> dict[str, Any]:
    """Return ``[key]`` from a parsed TOML document; absent tables read as empty."""
    table = raw.get(key, {})
    if not isinstance(table, dict):
        raise ValueError(f"{file_path}: [{key}] must be a table")
    return table


def read_float(table: dict[str, Any], key: str, default: float, *, section: str, file_path: Path) -> float:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise ValueError(f"{file_path}: [{section}].{key} must be a number, got {value!r}")
    return float(value)


def read_int(table: dict[str, Any], key: str, default: int, *, section: str, file_path: Path) -> int:
    value = table.get(key, default)
    if isinstance(value, bool) or not isinstance(value, int):
        raise ValueError(f"{file_path}: [{section}].{key} must be an integer, got {value!r}")
    return value


def read_system_identity(raw: dict[str, Any], file_path: Path) -> tuple[str, str | None]:
    """Return ``(name, description)`` from the ``[system]`` table."""
    system_raw = read_table(raw, "system", file_path)

    name = str(system_raw.get("name", "")).strip()
    if not name:
        raise ValueError(f"{file_path}: [system].name is required")

    description_value = system_raw.get("description")
    description = None if description_value is None else str(description_value)
    return name, description


def load_system_config(file_path: Path, parser: Callable[[dict[str, Any], Path], T]) -> T:
    """Parse a single TOML config file."""
    if not file_path.is_file():
        raise FileNotFoundError(f"Config file not found: {file_path}")
    with file_path.open("rb") as file:
        raw = tomllib.load(file)
    return parser(raw, file_path)


def load_system_configs(
    config_dir: Path,
    parser: Callable[[dict[str, Any], Path], T],
    *,
    duplicate_name_label: str = "rating",
) -> list[T]:
    """Load all TOML files in a directory, sorted by filename, with duplicate-name validation."""
    if not config_dir.exists():
        raise FileNotFoundError(f"Config directory not found: {config_dir}")
    if not config_dir.is_dir():
        raise NotADirectoryError(f"Config path is not a directory: {config_dir}")

    config_files = sorted(config_dir.glob("*.toml"))
    if not config_files:
        raise ValueError(f"No .toml config files found in: {config_dir}")

    systems = [load_system_config(file_path, parser) for file_path in config_files]

    names = [system.name for system in systems]
    if len(names) != len(set(names)):
        raise ValueError(
            f"Duplicate {duplicate_name_label} system names found in {config_dir}: {names}"
        )

    return systems


__all__ = [
    "BaseSystemConfig",
    "load_system_config",
    "load_system_configs",
    "read_float",
    "read_int",
    "read_system_identity",
    "read_table",
]
