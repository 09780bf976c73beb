"""Load DUPR rating/form system definitions from TOML files."""

from __future__ import annotations

from dataclasses import asdict, dataclass, fields
from pathlib import Path
from typing import Any

from domain.config_base import (
    BaseSystemConfig,
    load_system_config,
    load_system_configs,
    read_float,
    read_int,
    read_system_identity,
    read_table,
)
from domain.form.calculator import FormParameters
from domain.ratings.dupr.calculator import RatingParameters

_CLAMP_BOUNDS = (
    ("margin_min", "margin_max"),
    ("performance_min", "performance_max"),
    ("winner_individual_min", "winner_individual_max"),
    ("winner_combined_min", "winner_combined_max"),
    ("loser_individual_min", "loser_individual_max"),
    ("loser_combined_min", "loser_combined_max"),
)
_NON_NEGATIVE_RATING_FIELDS = (
    "margin_per_point",
    "performance_coefficient",
    "underdog_coefficient",
    "winner_individual_coefficient",
    "individual_coefficient",
)


@dataclass(frozen=True)
class DuprSystemConfig(BaseSystemConfig):
    """Rating and form tuning for one league or club."""

    parameters: RatingParameters
    form: FormParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "rating": asdict(self.parameters),
            "form": asdict(self.form),
        }


def load_dupr_system_configs(config_dir: Path) -> list[DuprSystemConfig]:
    """Load and validate all DUPR system TOML config files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_dupr_system_config,
        duplicate_name_label="dupr",
    )


def load_dupr_system_config(file_path: Path) -> DuprSystemConfig:
    """Load and validate one DUPR system TOML config file."""
    return load_system_config(file_path, _parse_dupr_system_config)


def _parse_dupr_system_config(raw: dict[str, Any], file_path: Path) -> DuprSystemConfig:
    name, description = read_system_identity(raw, file_path)
    rating_raw = read_table(raw, "rating", file_path)
    form_raw = read_table(raw, "form", file_path)

    _reject_unknown_keys(rating_raw, RatingParameters, section="rating", file_path=file_path)
    _reject_unknown_keys(form_raw, FormParameters, section="form", file_path=file_path)

    rating_defaults = RatingParameters()
    parameters = RatingParameters(
        **{
            field.name: read_float(
                rating_raw,
                field.name,
                getattr(rating_defaults, field.name),
                section="rating",
                file_path=file_path,
            )
            for field in fields(RatingParameters)
        }
    )

    form_defaults = FormParameters()
    form_values: dict[str, Any] = {}
    for field in fields(FormParameters):
        default = getattr(form_defaults, field.name)
        if isinstance(default, int):
            form_values[field.name] = read_int(form_raw, field.name, default, section="form", file_path=file_path)
        else:
            form_values[field.name] = read_float(form_raw, field.name, default, section="form", file_path=file_path)
    form = FormParameters(**form_values)

    _validate_rating_parameters(file_path=file_path, parameters=parameters)
    _validate_form_parameters(file_path=file_path, form=form)

    return DuprSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        parameters=parameters,
        form=form,
    )


def _reject_unknown_keys(table: dict[str, Any], params_type: type, *, section: str, file_path: Path) -> None:
    known = {field.name for field in fields(params_type)}
    unknown = sorted(set(table) - known)
    if unknown:
        raise ValueError(f"{file_path}: unknown [{section}] keys: {unknown}")


def _validate_rating_parameters(*, file_path: Path, parameters: RatingParameters) -> None:
    if parameters.min_rating >= parameters.max_rating:
        raise ValueError(f"{file_path}: [rating].min_rating must be < max_rating")
    if not parameters.min_rating <= parameters.default_rating <= parameters.max_rating:
        raise ValueError(f"{file_path}: [rating].default_rating must be between min_rating and max_rating")
    if parameters.k_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].k_factor must be > 0")
    if parameters.scale_factor <= 0.0:
        raise ValueError(f"{file_path}: [rating].scale_factor must be > 0")
    for field_name in _NON_NEGATIVE_RATING_FIELDS:
        if getattr(parameters, field_name) < 0.0:
            raise ValueError(f"{file_path}: [rating].{field_name} must be >= 0")
    for lower_name, upper_name in _CLAMP_BOUNDS:
        if getattr(parameters, lower_name) > getattr(parameters, upper_name):
            raise ValueError(f"{file_path}: [rating].{lower_name} must be <= {upper_name}")


def _validate_form_parameters(*, file_path: Path, form: FormParameters) -> None:
    if form.window_size < 1:
        raise ValueError(f"{file_path}: [form].window_size must be >= 1")
    if form.quality_coefficient < 0.0:
        raise ValueError(f"{file_path}: [form].quality_coefficient must be >= 0")
    if form.quality_min > form.quality_max:
        raise ValueError(f"{file_path}: [form].quality_min must be <= quality_max")
    if form.margin_divisor <= 0.0:
        raise ValueError(f"{file_path}: [form].margin_divisor must be > 0")
    if form.margin_cap < 0.0:
        raise ValueError(f"{file_path}: [form].margin_cap must be >= 0")
    if form.min_score > form.max_score:
        raise ValueError(f"{file_path}: [form].min_score must be <= max_score")
    if form.down_threshold >= form.up_threshold:
        raise ValueError(f"{file_path}: [form].down_threshold must be < up_threshold")
