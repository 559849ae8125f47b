#!/usr/bin/env python3
"""Form balanced mix teams from a participant snapshot and print the result."""

from __future__ import annotations

import json
import random
import sys
from pathlib import Path
from typing import Annotated

import typer

ROOT_DIR = Path(__file__).resolve().parents[1]
SRC_DIR = ROOT_DIR / "src"
if str(SRC_DIR) not in sys.path:
    sys.path.insert(0, str(SRC_DIR))

from db import create_db_engine, create_session_factory, resolve_db_url
from domain.mix.common import Participant, participants_from_json
from domain.mix.config import DEFAULT_CONFIG_DIR, FormationSystemConfig, load_formation_configs
from domain.mix.errors import TeamFormationError
from domain.mix.events import echo_events
from domain.mix.formation import FormationResult, form_teams
from domain.mix.protocol import RatingType
from repositories.participants import (
    fetch_mix_settings,
    fetch_participant_roster,
    fetch_tournament_participants,
)

app = typer.Typer(
    add_completion=False,
    no_args_is_help=True,
    help="Mix-team formation commands.",
)

ConfigDirOption = Annotated[
    Path,
    typer.Option("--config-dir", help="Directory with formation TOML presets."),
]
ConfigNameOption = Annotated[
    str,
    typer.Option("--config-name", help="Preset filename inside --config-dir."),
]
TeamSizeOption = Annotated[
    int | None,
    typer.Option("--team-size", help="Players per team. Overrides the preset."),
]
RatingTypeOption = Annotated[
    RatingType | None,
    typer.Option("--rating-type", help="Rating ladder (faceit, premier). Overrides the preset."),
]
JsonOption = Annotated[
    bool,
    typer.Option("--json", help="Print the full result as JSON."),
]
VerboseOption = Annotated[
    bool,
    typer.Option("--verbose", help="Print rating sources, swaps and captain picks."),
]
ShuffleOption = Annotated[
    bool,
    typer.Option("--shuffle", help="Seed teams from a shuffled pool instead of the rating order."),
]
SeedOption = Annotated[
    int | None,
    typer.Option("--seed", help="Random seed for --shuffle, for repeatable draws."),
]
DbUrlOption = Annotated[
    str | None,
    typer.Option(
        "--db-url",
        help="Database URL. Defaults to DATABASE_URL or the local tournaments postgres instance.",
    ),
]


def _load_preset(config_dir: Path, config_name: str) -> FormationSystemConfig:
    configs = load_formation_configs(config_dir)
    for config in configs:
        if config.file_path.name == config_name:
            return config
    raise typer.BadParameter(
        f"No config named '{config_name}' found in {config_dir}",
        param_hint="--config-name",
    )


def _run_formation(
    participants: list[Participant],
    *,
    preset: FormationSystemConfig,
    team_size: int,
    rating_type: RatingType,
    verbose: bool,
    shuffle: bool,
    seed: int | None,
) -> FormationResult:
    if team_size < 2:
        raise typer.BadParameter("--team-size must be >= 2")
    if seed is not None and not shuffle:
        raise typer.BadParameter("--seed requires --shuffle")

    try:
        return form_teams(
            participants,
            team_size,
            rating_type,
            parameters=preset.parameters,
            on_event=echo_events(typer.echo) if verbose else None,
            rng=random.Random(seed) if shuffle else None,
        )
    except TeamFormationError as exc:
        typer.echo(f"formation failed: {exc}", err=True)
        raise typer.Exit(code=1) from exc


def _print_result(result: FormationResult, *, as_json: bool) -> None:
    if as_json:
        typer.echo(json.dumps(result.as_dict(), indent=2, ensure_ascii=False))
        return

    summary = result.summary
    typer.echo(
        f"algorithm={summary.algorithm.value} "
        f"rating_type={summary.rating_type.value} "
        f"team_size={summary.team_size} "
        f"teams={summary.teams_created} "
        f"placed={summary.participants_in_teams}/{summary.total_participants} "
        f"excluded={summary.participants_not_in_teams}"
        + (" shuffled" if summary.shuffled else "")
    )
    typer.echo(
        f"balance={summary.balance_percent:.2f}% "
        f"(initial={summary.initial_balance_percent:.2f}% "
        f"iterations={summary.balance_iterations} "
        f"balanced={'yes' if summary.is_balanced else 'no'})"
    )
    for index, team in enumerate(result.teams, start=1):
        roster = ", ".join(
            f"{'*' if member.is_captain else ''}{member.participant.name}({member.rating})"
            for member in team.members
        )
        typer.echo(f"{index:2d}. {team.name:<24} avg={team.average_rating:9.2f}  {roster}")

    if result.excluded:
        excluded = ", ".join(participant.name for participant in result.excluded)
        typer.echo(f"not placed: {excluded}")

    stats = summary.captain_stats
    typer.echo(
        f"captains={stats.total} manual={stats.with_manual_rating} "
        f"min={stats.min_rating} avg={stats.avg_rating:.2f} max={stats.max_rating}"
    )


@app.command("from-file")
def from_file(
    participants_file: Annotated[
        Path,
        typer.Argument(help="JSON file with a participant array.", exists=True, dir_okay=False),
    ],
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = "default.toml",
    team_size: TeamSizeOption = None,
    rating_type: RatingTypeOption = None,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
    shuffle: ShuffleOption = False,
    seed: SeedOption = None,
) -> None:
    """Form teams from a JSON participant snapshot."""
    preset = _load_preset(config_dir, config_name)
    try:
        participants = participants_from_json(participants_file.read_text(encoding="utf-8"))
    except ValueError as exc:
        raise typer.BadParameter(str(exc), param_hint="PARTICIPANTS_FILE") from exc

    result = _run_formation(
        participants,
        preset=preset,
        team_size=team_size or preset.team_size,
        rating_type=rating_type or preset.rating_type,
        verbose=verbose,
        shuffle=shuffle,
        seed=seed,
    )
    _print_result(result, as_json=as_json)


@app.command("from-db")
def from_db(
    tournament_id: Annotated[int, typer.Option("--tournament-id", help="Mix tournament id.")],
    db_url: DbUrlOption = None,
    config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR,
    config_name: ConfigNameOption = "default.toml",
    team_size: TeamSizeOption = None,
    rating_type: RatingTypeOption = None,
    as_json: JsonOption = False,
    verbose: VerboseOption = False,
    shuffle: ShuffleOption = False,
    seed: SeedOption = None,
) -> None:
    """Form teams from the current registrations of a mix tournament (nothing is written)."""
    preset = _load_preset(config_dir, config_name)
    engine = create_db_engine(resolve_db_url(db_url))
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        try:
            settings = fetch_mix_settings(session, tournament_id)
        except (LookupError, ValueError) as exc:
            raise typer.BadParameter(str(exc), param_hint="--tournament-id") from exc
        participants = fetch_tournament_participants(session, tournament_id)

    result = _run_formation(
        participants,
        preset=preset,
        team_size=team_size or settings.team_size,
        rating_type=rating_type or settings.rating_type,
        verbose=verbose,
        shuffle=shuffle,
        seed=seed,
    )
    _print_result(result, as_json=as_json)


@app.command()
def roster(
    tournament_id: Annotated[int, typer.Option("--tournament-id", help="Tournament id.")],
    db_url: DbUrlOption = None,
) -> None:
    """Show which registrations already sit in a team."""
    engine = create_db_engine(resolve_db_url(db_url))
    session_factory = create_session_factory(engine)

    with session_factory() as session:
        result = fetch_participant_roster(session, tournament_id)

    typer.echo(
        f"tournament_id={tournament_id} total={len(result.all)} "
        f"in_team={len(result.in_team)} not_in_team={len(result.not_in_team)}"
    )
    for participant in result.not_in_team:
        typer.echo(f"  free: {participant.participant_id:6d} {participant.name}")


@app.command()
def list_configs(config_dir: ConfigDirOption = DEFAULT_CONFIG_DIR) -> None:
    """Print all formation presets."""
    for config in load_formation_configs(config_dir):
        typer.echo(
            f"{config.file_path.name}: name={config.name} "
            + " ".join(f"{key}={value}" for key, value in config.as_config_json().items())
        )


if __name__ == "__main__":
    app()
