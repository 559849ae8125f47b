"""Load mix formation settings from TOML files."""

from __future__ import annotations

from dataclasses import dataclass
from pathlib import Path
from typing import Any

from domain.config_base import (
    BaseSystemConfig,
    load_system_config,
    load_system_configs,
    parse_system_section,
)
from domain.mix.balance import DEFAULT_MAX_ITERATIONS, DEFAULT_TARGET_PERCENT
from domain.mix.protocol import RatingType

DEFAULT_CONFIG_DIR = Path(__file__).resolve().parents[3] / "configs" / "mix"


@dataclass(frozen=True)
class FormationParameters:
    max_iterations: int = DEFAULT_MAX_ITERATIONS
    balance_target_percent: float = DEFAULT_TARGET_PERCENT
    min_teams: int = 2


@dataclass(frozen=True)
class FormationSystemConfig(BaseSystemConfig):
    """One named formation preset."""

    team_size: int
    rating_type: RatingType
    parameters: FormationParameters

    def as_config_json(self) -> dict[str, Any]:
        return {
            "team_size": self.team_size,
            "rating_type": self.rating_type.value,
            "max_iterations": self.parameters.max_iterations,
            "balance_target_percent": self.parameters.balance_target_percent,
            "min_teams": self.parameters.min_teams,
        }


def load_formation_configs(config_dir: Path = DEFAULT_CONFIG_DIR) -> list[FormationSystemConfig]:
    """Load and validate all formation TOML files in a directory."""
    return load_system_configs(
        config_dir,
        _parse_formation_config,
        duplicate_name_label="formation",
    )


def load_formation_config(file_path: Path) -> FormationSystemConfig:
    return load_system_config(file_path, _parse_formation_config)


def _parse_formation_config(raw: dict[str, Any], file_path: Path) -> FormationSystemConfig:
    name, description = parse_system_section(raw, file_path)
    formation_raw = raw.get("formation", {})

    rating_type_value = str(formation_raw.get("rating_type", RatingType.FACEIT.value)).strip().lower()
    try:
        rating_type = RatingType(rating_type_value)
    except ValueError as exc:
        allowed = ", ".join(item.value for item in RatingType)
        raise ValueError(
            f"{file_path}: [formation].rating_type must be one of {allowed}, got {rating_type_value!r}"
        ) from exc

    team_size = int(formation_raw.get("team_size", 5))
    parameters = FormationParameters(
        max_iterations=int(formation_raw.get("max_iterations", DEFAULT_MAX_ITERATIONS)),
        balance_target_percent=float(
            formation_raw.get("balance_target_percent", DEFAULT_TARGET_PERCENT)
        ),
        min_teams=int(formation_raw.get("min_teams", 2)),
    )
    _validate(file_path=file_path, team_size=team_size, parameters=parameters)

    return FormationSystemConfig(
        name=name,
        description=description,
        file_path=file_path,
        team_size=team_size,
        rating_type=rating_type,
        parameters=parameters,
    )


def _validate(*, file_path: Path, team_size: int, parameters: FormationParameters) -> None:
    if team_size < 2:
        raise ValueError(f"{file_path}: [formation].team_size must be >= 2")
    if parameters.max_iterations < 1:
        raise ValueError(f"{file_path}: [formation].max_iterations must be >= 1")
    if parameters.balance_target_percent <= 0.0:
        raise ValueError(f"{file_path}: [formation].balance_target_percent must be > 0")
    if parameters.min_teams < 1:
        raise ValueError(f"{file_path}: [formation].min_teams must be >= 1")


__all__ = [
    "DEFAULT_CONFIG_DIR",
    "FormationParameters",
    "FormationSystemConfig",
    "load_formation_config",
    "load_formation_configs",
]
